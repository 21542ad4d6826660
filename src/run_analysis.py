#!/usr/bin/env python3

import argparse
import yaml
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from cellsphere.analysis_handler import run_analysis


def setup_logging():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Run tricube density and redundancy filtering on precomputed neighbor tables."
    )
    parser.add_argument(
        "--config_file",
        type=str,
        required=True,
        help="Path to the YAML configuration file.",
    )
    # Values given here override the YAML
    parser.add_argument(
        "--data_dir",
        type=str,
        default="",
        help="Root directory containing the experiment folders.",
    )
    parser.add_argument(
        "--output_dir",
        type=str,
        default="./output",
        help="Directory to save output files.",
    )
    parser.add_argument(
        "--radius",
        type=float,
        default=None,
        help="Kernel bandwidth for density estimation.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Largest per-marker difference counted as redundant.",
    )
    parser.add_argument(
        "--show_progress",
        action="store_true",
        help="Show a progress bar during redundancy filtering.",
    )
    return parser.parse_args(argv)


def load_config(config_file):
    logging.info(f"Loading configuration from {config_file}")
    with open(config_file, "r") as f:
        config = yaml.safe_load(f)
    logging.info("Configuration loaded successfully.")
    return config or {}


def _optional_path(experiment_dir: str, filename: Optional[str]) -> Optional[str]:
    return os.path.join(experiment_dir, filename) if filename else None


def _resolve_analysis_paths(config: Dict[str, Any], args: argparse.Namespace) -> None:
    """Augment CLI args with paths/settings derived from the analysis config."""

    analysis_cfg: Dict[str, Any] = config.get("analysis", {}) or {}

    if not args.data_dir:
        raise ValueError("--data_dir must point to the root of the experiment outputs.")

    rel_exp_dir = analysis_cfg.get("data_dir")
    if not rel_exp_dir:
        raise ValueError("analysis.data_dir is required in the configuration")

    experiment_dir = os.path.join(args.data_dir, rel_exp_dir)
    if not os.path.isdir(experiment_dir):
        raise FileNotFoundError(f"Data directory does not exist: {experiment_dir}")
    args.experiment_dir = experiment_dir

    args.intensities_path = _optional_path(experiment_dir, analysis_cfg.get("intensities_file"))
    args.distances_path = _optional_path(experiment_dir, analysis_cfg.get("distances_file"))
    args.neighbors_path = _optional_path(experiment_dir, analysis_cfg.get("neighbors_file"))
    args.ordering_path = _optional_path(experiment_dir, analysis_cfg.get("ordering_file"))

    output_subdir = analysis_cfg.get("output_subdir")
    if output_subdir:
        args.output_dir = os.path.join(args.output_dir, output_subdir)

    # CLI flags take precedence over the YAML
    if args.radius is None:
        args.radius = float(analysis_cfg.get("radius", 0.5))
    if args.threshold is None:
        args.threshold = float(analysis_cfg.get("threshold", 0.5))
    args.show_progress = args.show_progress or bool(analysis_cfg.get("show_progress", False))
    args.one_indexed = bool(analysis_cfg.get("one_indexed", True))
    n_points = analysis_cfg.get("n_points")
    args.n_points = int(n_points) if n_points is not None else None

    if args.radius <= 0:
        raise ValueError(f"radius must be positive, got {args.radius}")
    if args.threshold < 0:
        raise ValueError(f"threshold must be non-negative, got {args.threshold}")

    logging.info("Resolved experiment directory: %s", args.experiment_dir)
    for name in ("intensities_path", "distances_path", "neighbors_path", "ordering_path"):
        logging.info("%s: %s", name, getattr(args, name))
    logging.info("Radius: %s, threshold: %s", args.radius, args.threshold)
    logging.info("Analysis outputs will be written to: %s", Path(args.output_dir))


def main(argv=None):
    setup_logging()
    logging.info("Starting cellsphere analysis.")
    args = parse_args(argv)

    config = load_config(args.config_file)
    logging.info(f"Config: {config}")
    _resolve_analysis_paths(config, args)

    run_analysis(config, args)
    logging.info("Analysis pipeline execution completed.")


if __name__ == "__main__":
    main()
