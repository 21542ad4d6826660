"""
Reshaping of tabular inputs into the layouts the kernels consume.
"""

from typing import List, Optional

import numpy as np
import pandas as pd


ID_COLUMNS = ("cell_mask_id", "patch_id", "global_cell_id")


def _strip_identifier_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with identifier columns removed and cell IDs moved to the index."""

    working = df.copy()

    if ID_COLUMNS[0] in working.columns:
        working = working.set_index(ID_COLUMNS[0])

    for col in ID_COLUMNS[1:]:
        if col in working.columns:
            working = working.drop(columns=[col])

    return working


def intensities_to_matrix(df: pd.DataFrame) -> np.ndarray:
    """
    Convert a cell-by-marker table into a markers x points float matrix.

    Args:
        df: DataFrame with one row per point and one column per marker.
            Identifier columns are dropped.

    Returns:
        Array of shape (n_markers, n_points)
    """
    markers = _strip_identifier_columns(df)
    return markers.to_numpy(dtype=np.float64).T


def group_long_table(
    df: pd.DataFrame,
    key_column: str,
    value_column: str,
    n_points: Optional[int] = None,
    dtype=np.float64,
) -> List[np.ndarray]:
    """
    Collect a long-format table into one array of values per point.

    Rows keep their file order within each point. Points without rows get
    an empty array.

    Args:
        df: Long-format DataFrame
        key_column: Column holding the 0-based point index
        value_column: Column holding the per-row value
        n_points: Total number of points (default: largest key + 1)
        dtype: dtype of the returned arrays

    Returns:
        List of length n_points
    """
    missing = [c for c in (key_column, value_column) if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    keys = df[key_column].to_numpy(dtype=np.int64)
    values = df[value_column].to_numpy(dtype=dtype)

    if keys.size and keys.min() < 0:
        raise ValueError(f"Column '{key_column}' contains negative point indices")

    inferred = int(keys.max()) + 1 if keys.size else 0
    if n_points is None:
        n_points = inferred
    elif inferred > n_points:
        raise ValueError(
            f"Column '{key_column}' refers to point {inferred - 1} "
            f"but only {n_points} points are expected"
        )
    if n_points == 0:
        return []

    # Stable sort keeps file order inside each group.
    order = np.argsort(keys, kind="stable")
    counts = np.bincount(keys, minlength=n_points)
    return np.split(values[order], np.cumsum(counts)[:-1])
