"""
Tricube-weighted local density for points with precomputed neighbor distances.
"""

import logging
from typing import Sequence, Union

import numpy as np

logger = logging.getLogger(__name__)

DistanceLists = Union[np.ndarray, Sequence[Sequence[float]]]


def tricube_weights(ratios: np.ndarray) -> np.ndarray:
    """
    Tricube kernel (1 - u^3)^3, evaluated without clamping.

    Ratios above 1 give negative weights.
    """
    inner = 1.0 - ratios * ratios * ratios
    return inner * inner * inner


def _flatten_distance_lists(distance_lists: DistanceLists):
    """Return (flat distances, owning point for each distance, number of points)."""
    if isinstance(distance_lists, np.ndarray) and distance_lists.ndim == 2:
        n_points, n_neighbors = distance_lists.shape
        flat = distance_lists.astype(np.float64, copy=False).ravel()
        owners = np.repeat(np.arange(n_points), n_neighbors)
        return flat, owners, n_points

    arrays = [np.asarray(d, dtype=np.float64).ravel() for d in distance_lists]
    n_points = len(arrays)
    if n_points == 0:
        return np.empty(0, dtype=np.float64), np.empty(0, dtype=np.int64), 0

    lengths = np.fromiter((a.size for a in arrays), dtype=np.int64, count=n_points)
    flat = np.concatenate(arrays) if lengths.sum() > 0 else np.empty(0, dtype=np.float64)
    owners = np.repeat(np.arange(n_points), lengths)
    return flat, owners, n_points


def estimate_density(distance_lists: DistanceLists, radius: float) -> np.ndarray:
    """
    Estimate the local density of each point with a tricube kernel.

    For point i with neighbor distances d_1..d_k the density is
    ``1 + sum_j (1 - (d_j / radius)^3)^3``. The leading 1 accounts for the
    point itself, which is never part of its own distance list.

    Distances beyond the radius are not excluded: their weight is negative and
    lowers the score. A zero radius yields inf/NaN values rather than an error.

    Args:
        distance_lists: One sequence of neighbor distances per point (jagged),
            or a 2D array with one row of distances per point
        radius: Kernel bandwidth

    Returns:
        Float array with one density score per point, in input order
    """
    flat, owners, n_points = _flatten_distance_lists(distance_lists)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        weights = tricube_weights(flat / radius)
        density = 1.0 + np.bincount(owners, weights=weights, minlength=n_points)

    logger.debug(
        f"Computed tricube density for {n_points} points "
        f"({flat.size} neighbor distances, radius={radius})"
    )
    return density.astype(np.float64, copy=False)
