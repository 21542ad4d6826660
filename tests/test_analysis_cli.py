import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import yaml

from src import run_analysis


class TestAnalysisCLI(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.root = Path(self.tmp.name)
        (self.root / "exp1").mkdir()

    def _write_analysis_config(self, **extra) -> Path:
        cfg = {
            "analysis": {
                "data_dir": "exp1",
                "intensities_file": "cell_by_marker.csv",
                "distances_file": "neighbor_distances.csv",
                "neighbors_file": "neighbor_groups.csv",
                "ordering_file": "ordering.csv",
                "radius": 0.8,
                "threshold": 0.25,
                "output_subdir": "spheres",
                **extra,
            }
        }
        cfg_path = self.root / "analysis_config.yaml"
        cfg_path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
        return cfg_path

    def _argv(self, cfg_path, *extra):
        return [
            "prog",
            "--config_file",
            str(cfg_path),
            "--data_dir",
            str(self.root),
            "--output_dir",
            str(self.root / "out"),
            *extra,
        ]

    @patch("src.run_analysis.run_analysis")
    def test_resolves_paths_and_invokes_handler(self, mock_run):
        """CLI should resolve paths from config and call run_analysis with args."""
        cfg_path = self._write_analysis_config()

        with patch.object(sys, "argv", self._argv(cfg_path)):
            run_analysis.main()

        self.assertTrue(mock_run.called)
        called_args = mock_run.call_args[0][1]
        self.assertTrue(called_args.intensities_path.endswith("cell_by_marker.csv"))
        self.assertTrue(called_args.neighbors_path.endswith("neighbor_groups.csv"))
        self.assertIn("exp1", called_args.distances_path)
        self.assertTrue(called_args.output_dir.endswith("spheres"))
        self.assertEqual(called_args.radius, 0.8)
        self.assertEqual(called_args.threshold, 0.25)
        self.assertTrue(called_args.one_indexed)
        self.assertFalse(called_args.show_progress)

    @patch("src.run_analysis.run_analysis")
    def test_command_line_overrides_config(self, mock_run):
        cfg_path = self._write_analysis_config(one_indexed=False)

        argv = self._argv(cfg_path, "--radius", "2.5", "--threshold", "0", "--show_progress")
        with patch.object(sys, "argv", argv):
            run_analysis.main()

        called_args = mock_run.call_args[0][1]
        self.assertEqual(called_args.radius, 2.5)
        self.assertEqual(called_args.threshold, 0.0)
        self.assertTrue(called_args.show_progress)
        self.assertFalse(called_args.one_indexed)

    @patch("src.run_analysis.run_analysis")
    def test_absent_files_resolve_to_none(self, mock_run):
        cfg_path = self.root / "analysis_config.yaml"
        cfg_path.write_text(
            yaml.safe_dump({"analysis": {"data_dir": "exp1", "distances_file": "d.csv"}}),
            encoding="utf-8",
        )

        with patch.object(sys, "argv", self._argv(cfg_path)):
            run_analysis.main()

        called_args = mock_run.call_args[0][1]
        self.assertIsNone(called_args.intensities_path)
        self.assertIsNone(called_args.ordering_path)
        self.assertTrue(called_args.distances_path.endswith("d.csv"))

    @patch("src.run_analysis.run_analysis")
    def test_missing_data_dir_in_config(self, mock_run):
        cfg_path = self.root / "analysis_config.yaml"
        cfg_path.write_text(yaml.safe_dump({"analysis": {}}), encoding="utf-8")

        with patch.object(sys, "argv", self._argv(cfg_path)):
            with self.assertRaises(ValueError):
                run_analysis.main()
        mock_run.assert_not_called()

    @patch("src.run_analysis.run_analysis")
    def test_non_positive_radius_rejected(self, mock_run):
        cfg_path = self._write_analysis_config(radius=0)

        with patch.object(sys, "argv", self._argv(cfg_path)):
            with self.assertRaises(ValueError):
                run_analysis.main()
        mock_run.assert_not_called()

    @patch("src.run_analysis.run_analysis")
    def test_negative_threshold_rejected(self, mock_run):
        cfg_path = self._write_analysis_config(threshold=-1)

        with patch.object(sys, "argv", self._argv(cfg_path)):
            with self.assertRaises(ValueError):
                run_analysis.main()
        mock_run.assert_not_called()

    @patch("src.run_analysis.run_analysis")
    def test_n_points_forwarded(self, mock_run):
        cfg_path = self._write_analysis_config(n_points=12)

        with patch.object(sys, "argv", self._argv(cfg_path)):
            run_analysis.main()

        self.assertEqual(mock_run.call_args[0][1].n_points, 12)


if __name__ == "__main__":
    unittest.main()
