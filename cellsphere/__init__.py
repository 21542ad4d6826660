"""
cellsphere: tricube density and redundancy filtering for multi-marker single-cell data.
"""

from .analysis import estimate_density, filter_redundant

__version__ = "0.1"

__all__ = ["estimate_density", "filter_redundant", "__version__"]
