"""
Downstream pipeline: load precomputed neighbor tables, run the density and
redundancy kernels, and export the per-point results.
"""

import logging
import os
import shutil
from typing import Dict, Optional

import numpy as np
import pandas as pd

from cellsphere.analysis import estimate_density, filter_redundant
from cellsphere.data import (
    load_distance_lists,
    load_intensities,
    load_neighbor_lists,
    load_ordering,
)
from cellsphere.utils import ensure_dir, save_dataframe


LOGGER = logging.getLogger(__name__)

DENSITY_OUTPUT = "sphere_density.csv"
REDUNDANCY_OUTPUT = "nonredundant_points.csv"


def _resolve_n_points(args, intensities: Optional[np.ndarray], ordering: Optional[np.ndarray]):
    """Number of points, from the intensity table, the ordering, or ``args.n_points``."""
    if intensities is not None:
        return intensities.shape[1]
    if ordering is not None:
        return ordering.size
    return getattr(args, "n_points", None)


def _run_density(args, n_points) -> pd.DataFrame:
    distance_lists = load_distance_lists(args.distances_path, n_points=n_points)
    logging.info(
        f"Estimating tricube density for {len(distance_lists)} points (radius={args.radius})..."
    )
    density = estimate_density(distance_lists, args.radius)

    n_nonfinite = int(np.count_nonzero(~np.isfinite(density)))
    if n_nonfinite:
        LOGGER.warning("%d density values are not finite; check the radius.", n_nonfinite)

    return pd.DataFrame({"point": np.arange(density.size), "density": density})


def _run_redundancy(args, intensities: np.ndarray, ordering: np.ndarray) -> pd.DataFrame:
    n_points = intensities.shape[1]
    neighbor_lists = load_neighbor_lists(args.neighbors_path, n_points=n_points)

    logging.info(
        f"Filtering redundant points (threshold={args.threshold}, "
        f"one_indexed={args.one_indexed})..."
    )
    keep = filter_redundant(
        intensities,
        ordering,
        neighbor_lists,
        args.threshold,
        one_indexed=args.one_indexed,
        show_progress=args.show_progress,
    )
    logging.info(f"Kept {int(keep.sum())} of {keep.size} points.")

    return pd.DataFrame({"point": np.arange(keep.size), "keep": keep})


def run_analysis(config, args) -> Dict[str, pd.DataFrame]:
    """
    Density and redundancy analysis of precomputed neighbor tables.

    Both kernels run before anything is written, so an input error in either
    stage leaves the output directory untouched.

    Args:
        config (dict): Configuration parameters loaded from a YAML file.
        args (Namespace): Command-line arguments with resolved input paths
            (``distances_path``, ``intensities_path``, ``neighbors_path``,
            ``ordering_path``; any may be None) and kernel parameters.
            ``n_points`` (optional) sets the point count when neither an
            intensity table nor an ordering is configured.

    Returns:
        dict: Result frames keyed by ``"density"`` and/or ``"redundancy"``
    """
    logging.info(
        "----- Running cellsphere analysis with provided configuration and arguments."
    )

    results: Dict[str, pd.DataFrame] = {}

    # ================= 1. DATA LOADING =================
    intensities = None
    if args.intensities_path:
        intensities = load_intensities(args.intensities_path)
    ordering = None
    if args.ordering_path:
        ordering = load_ordering(args.ordering_path)
    n_points = _resolve_n_points(args, intensities, ordering)
    logging.info(f"Number of points: {n_points}")

    # ================= 2. DENSITY =================
    if args.distances_path:
        results["density"] = _run_density(args, n_points)
    else:
        logging.info("Skipping density estimation: no distance table configured.")

    # ================= 3. REDUNDANCY =================
    if intensities is not None and args.neighbors_path and ordering is not None:
        results["redundancy"] = _run_redundancy(args, intensities, ordering)
    else:
        logging.info(
            "Skipping redundancy filter: intensities, neighbor groups and ordering are all required."
        )

    # ================= 4. EXPORT =================
    output_dir = ensure_dir(args.output_dir)
    logging.info(f"Output will be saved to: {output_dir}")

    config_file = getattr(args, "config_file", None)
    if config_file and os.path.isfile(config_file):
        shutil.copy(config_file, os.path.join(output_dir, "copied_config.yaml"))

    if "density" in results:
        save_dataframe(results["density"], os.path.join(output_dir, DENSITY_OUTPUT))
    if "redundancy" in results:
        save_dataframe(results["redundancy"], os.path.join(output_dir, REDUNDANCY_OUTPUT))

    logging.info("Analysis complete. Results saved to: %s", output_dir)
    return results
