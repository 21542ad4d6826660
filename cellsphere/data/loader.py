"""
Data loading functions for precomputed neighbor and intensity tables.
"""

import os
import logging
from typing import List, Optional

import numpy as np
import pandas as pd

from .transforms import group_long_table, intensities_to_matrix


def _read_csv(path: str, descriptor: str) -> pd.DataFrame:
    if not os.path.exists(path):
        raise FileNotFoundError(f"No {descriptor} file found at {path}")
    df = pd.read_csv(path)
    logging.info(f"{descriptor.capitalize()} loaded from {path}. Shape: {df.shape}")
    return df


def load_intensities(path: str) -> np.ndarray:
    """
    Load a cell-by-marker CSV as a markers x points matrix.

    Args:
        path: CSV with one row per point and one column per marker

    Returns:
        Array of shape (n_markers, n_points)
    """
    df = _read_csv(path, "intensity table")
    matrix = intensities_to_matrix(df)
    logging.info(f"Intensity matrix: {matrix.shape[0]} markers x {matrix.shape[1]} points")
    return matrix


def load_distance_lists(path: str, n_points: Optional[int] = None) -> List[np.ndarray]:
    """
    Load a long-format distance table (columns ``point``, ``distance``).

    Args:
        path: CSV path
        n_points: Total number of points, so that trailing points without
            neighbors still get an (empty) entry

    Returns:
        One float array of distances per point
    """
    df = _read_csv(path, "distance table")
    return group_long_table(df, "point", "distance", n_points=n_points)


def load_neighbor_lists(path: str, n_points: Optional[int] = None) -> List[np.ndarray]:
    """
    Load a long-format neighbor table (columns ``point``, ``neighbor``).

    The ``neighbor`` column is returned as stored; its index base is
    interpreted by the redundancy filter.

    Args:
        path: CSV path
        n_points: Total number of points

    Returns:
        One int array of neighbor indices per point
    """
    df = _read_csv(path, "neighbor table")
    return group_long_table(df, "point", "neighbor", n_points=n_points, dtype=np.int64)


def load_ordering(path: str) -> np.ndarray:
    """
    Load a priority ordering (single ``point`` column, highest priority first).

    Args:
        path: CSV path

    Returns:
        Int array of 0-based point indices
    """
    df = _read_csv(path, "ordering")
    if "point" not in df.columns:
        raise ValueError(f"Ordering file {path} must have a 'point' column")
    return df["point"].to_numpy(dtype=np.int64)
