"""
Utility functions for the cellsphere pipeline.
"""

from .helpers import ensure_dir, save_dataframe

__all__ = ["ensure_dir", "save_dataframe"]
