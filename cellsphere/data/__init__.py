"""
Data handling modules for precomputed neighbor and intensity tables.
"""

from .loader import (
    load_intensities,
    load_distance_lists,
    load_neighbor_lists,
    load_ordering,
)

from .transforms import (
    group_long_table,
    intensities_to_matrix,
)

__all__ = [
    "load_intensities",
    "load_distance_lists",
    "load_neighbor_lists",
    "load_ordering",
    "group_long_table",
    "intensities_to_matrix",
]
