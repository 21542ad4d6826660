"""
Greedy removal of redundant points from a priority ordering.

Points are visited in priority order. Each point that has not been covered yet
is kept and covers every point in its neighbor group whose marker intensities
all lie within ``threshold`` of its own. Covered points are skipped when their
turn comes. Coverage is append-only: a point that was already kept stays kept
even if a later point names it as a redundant neighbor.
"""

import logging
from typing import List, Sequence

import numpy as np
from tqdm import tqdm

logger = logging.getLogger(__name__)


def _to_zero_based(
    neighbor_lists: Sequence[Sequence[int]], n_points: int, one_indexed: bool = True
) -> List[np.ndarray]:
    """
    Convert neighbor groups to 0-based integer arrays and bounds-check them.

    Args:
        neighbor_lists: One group of neighbor indices per point
        n_points: Number of points (intensity columns)
        one_indexed: Whether the incoming indices are 1-based

    Returns:
        List of int64 arrays holding 0-based indices

    Raises:
        ValueError: If any converted index falls outside [0, n_points)
    """
    offset = 1 if one_indexed else 0
    converted = []
    for point, group in enumerate(neighbor_lists):
        idx = np.asarray(group, dtype=np.int64).ravel() - offset
        if idx.size and (idx.min() < 0 or idx.max() >= n_points):
            bad = idx[(idx < 0) | (idx >= n_points)][0] + offset
            raise ValueError(
                f"neighbor index {bad} of point {point} is out of range "
                f"for {n_points} points (one_indexed={one_indexed})"
            )
        converted.append(idx)
    return converted


def validate_redundancy_inputs(
    intensities: np.ndarray, ordering: np.ndarray, n_groups: int
) -> None:
    """
    Check that the ordering, the neighbor groups and the intensity matrix agree.

    Raises:
        ValueError: On any shape mismatch or out-of-range ordering entry
    """
    if intensities.ndim != 2:
        raise ValueError(
            f"'intensities' must be a 2D (markers x points) matrix, got {intensities.ndim}D"
        )
    if ordering.size != n_groups:
        raise ValueError(
            f"length of 'ordering' ({ordering.size}) is not equal to "
            f"the number of groups ({n_groups})"
        )
    if n_groups != intensities.shape[1]:
        raise ValueError(
            f"length of 'ordering' ({n_groups}) is not equal to "
            f"the number of columns in 'intensities' ({intensities.shape[1]})"
        )
    if ordering.size and (ordering.min() < 0 or ordering.max() >= n_groups):
        raise ValueError(f"'ordering' contains indices outside [0, {n_groups})")
    counts = np.bincount(ordering, minlength=n_groups)
    if np.any(counts != 1):
        missing = np.flatnonzero(counts == 0)
        raise ValueError(
            f"'ordering' is not a permutation of 0..{n_groups - 1}: "
            f"{missing.size} point(s) never visited, e.g. {missing[:5].tolist()}"
        )


def _as_index_array(ordering) -> np.ndarray:
    """Convert ``ordering`` to int64 without truncating non-integral values."""
    raw = np.asarray(ordering).ravel()
    if raw.size == 0:
        return raw.astype(np.int64)
    if raw.dtype.kind in "iu":
        return raw.astype(np.int64)
    if raw.dtype.kind == "b":
        raise ValueError("'ordering' must hold integer point indices, got booleans")

    try:
        as_float = raw.astype(np.float64)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'ordering' must hold integer point indices: {exc}") from exc
    if not np.all(np.isfinite(as_float)) or np.any(as_float != np.round(as_float)):
        raise ValueError("'ordering' contains non-integral point indices")
    return as_float.astype(np.int64)


def filter_redundant(
    intensities,
    ordering,
    neighbor_lists: Sequence[Sequence[int]],
    threshold: float,
    *,
    one_indexed: bool = True,
    show_progress: bool = False,
) -> np.ndarray:
    """
    Select a non-redundant subset of points by greedy first-come coverage.

    Args:
        intensities: (n_markers, n_points) matrix; column j belongs to point j.
            A 1D vector of length n_points is treated as a single marker.
        ordering: Permutation of 0..n_points-1, highest priority first.
            Non-integral values and repeated or missing points are rejected.
        neighbor_lists: For each point, the indices of points that may be
            redundant with it
        threshold: Largest per-marker absolute difference still counted as redundant
        one_indexed: Whether ``neighbor_lists`` holds 1-based indices (default: True)
        show_progress: Display a tqdm progress bar over the ordering

    Returns:
        Boolean array of length n_points, True for kept points

    Raises:
        ValueError: If the inputs disagree in size or hold out-of-range indices.
            Nothing is computed in that case.
    """
    intensities = np.asarray(intensities, dtype=np.float64)
    if intensities.ndim == 1:
        intensities = intensities[np.newaxis, :]
    ordering = _as_index_array(ordering)
    n_groups = len(neighbor_lists)

    validate_redundancy_inputs(intensities, ordering, n_groups)
    groups = _to_zero_based(neighbor_lists, n_groups, one_indexed=one_indexed)

    # One column per point, contiguous for the per-pair comparisons.
    by_point = np.ascontiguousarray(intensities.T)

    seen = np.zeros(n_groups, dtype=bool)
    kept = np.zeros(n_groups, dtype=bool)

    with tqdm(
        total=n_groups,
        desc="Dropping redundant points",
        unit="point",
        mininterval=1.0,
        dynamic_ncols=True,
        disable=not show_progress,
    ) as pbar:
        for o in ordering:
            pbar.update(1)
            if seen[o]:
                continue

            kept[o] = True
            neighbors = groups[o]
            if neighbors.size == 0:
                continue

            # A neighbor is covered only if every marker is within threshold.
            diffs = np.abs(by_point[neighbors] - by_point[o])
            within = ~np.any(diffs > threshold, axis=1)
            seen[neighbors[within]] = True

    logger.debug(
        f"Redundancy filter kept {int(kept.sum())} of {n_groups} points "
        f"(threshold={threshold})"
    )
    return kept
