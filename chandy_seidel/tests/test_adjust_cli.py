from __future__ import annotations

import csv
import math
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

from chandy_seidel.adjustment.batch_adjust import run_batch
from chandy_seidel.adjustment.chandy_seidel_adjust import build_arg_parser
from chandy_seidel.experiments.gap_share_sensitivity import SWEEP_COLUMNS, run_gap_share_sweep
from chandy_seidel.helpers.data.loader import DistributionLoader
from chandy_seidel.helpers.pareto.adjustment import (
    REASON_INVALID_TOP_DECILE,
    REASON_NO_GAP,
)
from chandy_seidel.tests.dataset_fixtures import (
    SAMPLE_NAS_MEAN,
    SAMPLE_SURVEY_MEAN,
    sample_points,
    write_dataset,
)


class TestChandySeidelAdjustCli(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.repo_root = Path(__file__).resolve().parents[2]
        cls.module_name = "chandy_seidel.adjustment.chandy_seidel_adjust"

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_root = write_dataset(Path(self._tmp.name) / "data")
        self.output_dir = Path(self._tmp.name) / "out"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run_script(self, module_name: str, *args: str) -> subprocess.CompletedProcess[str]:
        command = [sys.executable, "-m", module_name, *args]
        return subprocess.run(
            command,
            cwd=self.repo_root,
            text=True,
            capture_output=True,
            check=False,
        )

    def test_parser_defaults(self) -> None:
        args = build_arg_parser().parse_args(["BRA", "2019"])
        self.assertEqual(args.country, "BRA")
        self.assertEqual(args.year, 2019)
        self.assertEqual(args.gap_share, 0.5)
        self.assertEqual(args.top_decile_cutoff, 0.9)
        self.assertEqual(args.nas_source, "hfce")
        self.assertFalse(args.export)

    def test_parser_rejects_out_of_range_values(self) -> None:
        parser = build_arg_parser()
        for bad in (["--gap-share", "1.5"], ["--top-decile-cutoff", "1.0"], ["--nas-source", "gni"]):
            with self.subTest(args=bad):
                with self.assertRaises(SystemExit):
                    parser.parse_args(["BRA", "2019", *bad])

    def test_adjusted_run_prints_parameters(self) -> None:
        result = self._run_script(self.module_name, "BRA", "2019", "--data-root", str(self.data_root))
        self.assertEqual(result.returncode, 0, msg=result.stderr)
        self.assertIn("Chandy-Seidel adjustment for BRA 2019", result.stdout)
        self.assertIn("Adjustment applied:", result.stdout)
        self.assertIn("RATIO = 0.8", result.stdout)
        self.assertIn("ADJUSTED_MEAN = 50", result.stdout)
        self.assertIn("PARETO_ALPHA = ", result.stdout)
        self.assertIn("Gini (adjusted): ", result.stdout)

    def test_export_and_plot_write_files(self) -> None:
        result = self._run_script(
            self.module_name,
            "BRA",
            "2019",
            "--data-root",
            str(self.data_root),
            "--output-dir",
            str(self.output_dir),
            "--export",
            "--plot",
        )
        self.assertEqual(result.returncode, 0, msg=result.stderr)
        written = sorted(path.name for path in self.output_dir.iterdir())
        self.assertEqual(
            written,
            [
                "chandy_seidel_BRA_2019_distribution.csv",
                "chandy_seidel_BRA_2019_summary.csv",
                "lorenz_curves_BRA_2019.csv",
                "lorenz_curves_BRA_2019.png",
            ],
        )
        self.assertEqual(result.stdout.count("Wrote "), 4)

    def test_no_gap_is_reported_not_raised(self) -> None:
        result = self._run_script(
            self.module_name,
            "BRA",
            "2020",
            "--data-root",
            str(self.data_root),
            "--output-dir",
            str(self.output_dir),
            "--export",
        )
        self.assertEqual(result.returncode, 0, msg=result.stderr)
        self.assertIn(f"No adjustment: {REASON_NO_GAP}", result.stdout)
        self.assertNotIn("PARETO_ALPHA", result.stdout)
        self.assertFalse((self.output_dir / "chandy_seidel_BRA_2020_distribution.csv").exists())
        self.assertTrue((self.output_dir / "chandy_seidel_BRA_2020_summary.csv").exists())

    def test_missing_year_fails(self) -> None:
        result = self._run_script(self.module_name, "BRA", "2005", "--data-root", str(self.data_root))
        self.assertNotEqual(result.returncode, 0)
        self.assertIn("No data available for BRA in 2005", result.stderr)

    def test_missing_data_root_fails(self) -> None:
        missing = Path(self._tmp.name) / "missing"
        result = self._run_script(self.module_name, "BRA", "2019", "--data-root", str(missing))
        self.assertEqual(result.returncode, 2)
        self.assertIn("Missing data root", result.stderr)


class TestBatchAdjust(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_root = write_dataset(Path(self._tmp.name) / "data")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_run_batch_counts_outcomes(self) -> None:
        entries, outcomes, failures = run_batch(DistributionLoader(self.data_root), 0.5, 0.9, "hfce")
        self.assertEqual([(entry.country_code, entry.year) for entry in entries], [
            ("BRA", 2019),
            ("BRA", 2020),
            ("ARG", 2019),
        ])
        self.assertEqual(outcomes["adjusted"], 1)
        self.assertEqual(outcomes[REASON_NO_GAP], 1)
        self.assertEqual(outcomes[REASON_INVALID_TOP_DECILE], 1)
        self.assertEqual(len(failures), 1)
        self.assertTrue(failures[0].startswith("VNM 2019"))
        self.assertIsNotNone(entries[0].adjusted_gini)
        self.assertIsNone(entries[1].adjusted_gini)

    def test_cli_writes_combined_summary(self) -> None:
        output_dir = Path(self._tmp.name) / "out"
        result = subprocess.run(
            [
                sys.executable,
                "-m",
                "chandy_seidel.adjustment.batch_adjust",
                "--data-root",
                str(self.data_root),
                "--output-dir",
                str(output_dir),
            ],
            cwd=Path(__file__).resolve().parents[2],
            text=True,
            capture_output=True,
            check=False,
        )
        self.assertEqual(result.returncode, 0, msg=result.stderr)
        self.assertIn("Country-years processed: 3", result.stdout)
        self.assertIn("Adjusted: 1", result.stdout)
        self.assertIn("Warning: skipped VNM 2019", result.stderr)

        summaries = list(output_dir.glob("chandy_seidel_summary_*.csv"))
        self.assertEqual(len(summaries), 1)
        with summaries[0].open(newline="", encoding="utf-8") as handle:
            rows = list(csv.DictReader(handle))
        self.assertEqual([row["country"] for row in rows], ["BRA", "BRA", "ARG"])


class TestGapShareSweep(unittest.TestCase):
    def test_sweep_table(self) -> None:
        table = run_gap_share_sweep(
            sample_points(), SAMPLE_SURVEY_MEAN, SAMPLE_NAS_MEAN, [0.0, 0.5, 1.0], 0.9
        )
        self.assertEqual(list(table.columns), SWEEP_COLUMNS)
        self.assertEqual(list(table["adjusted"]), [False, True, True])
        self.assertTrue(table["reason"].iloc[0].startswith("Invalid Pareto alpha"))
        self.assertTrue(math.isnan(table["gini_adjusted"].iloc[0]))

        survey_gini = table["gini_survey"].iloc[0]
        half, full = table["gini_adjusted"].iloc[1], table["gini_adjusted"].iloc[2]
        self.assertGreater(half, survey_gini)
        self.assertGreater(full, half)
        self.assertAlmostEqual(table["adjusted_mean"].iloc[1], 50.0)
        self.assertAlmostEqual(table["adjusted_mean"].iloc[2], SAMPLE_NAS_MEAN)
        self.assertGreater(table["area_between_curves"].iloc[1], 0.0)


if __name__ == "__main__":
    unittest.main()
