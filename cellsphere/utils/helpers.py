"""
Common helper functions for the cellsphere pipeline.
"""

import logging
import os

import pandas as pd

logger = logging.getLogger(__name__)


def ensure_dir(directory: str) -> str:
    """
    Ensure that a directory exists, creating it if necessary.

    Args:
        directory: Path to directory

    Returns:
        The directory path (for chaining)
    """
    os.makedirs(directory, exist_ok=True)
    return directory


def save_dataframe(df: pd.DataFrame, output_path: str, index: bool = False) -> None:
    """
    Save a DataFrame to CSV, creating the parent directory if needed.

    Args:
        df: DataFrame to save
        output_path: Path to save the CSV file
        index: Whether to include the index in the CSV (default: False)
    """
    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    df.to_csv(output_path, index=index)
    logger.info(f"Saved DataFrame to {output_path}")
