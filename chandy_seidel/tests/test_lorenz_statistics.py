from __future__ import annotations

import math
import unittest

import pandas as pd

from chandy_seidel.helpers.lorenz.curves import (
    LorenzPoint,
    as_lorenz_points,
    calculate_mean,
    equality_line,
    interpolate_lorenz,
    top_share,
)
from chandy_seidel.helpers.lorenz.statistics import (
    calculate_area_between_curves,
    calculate_gini,
    calculate_income_shares,
    calculate_statistics,
    format_gini,
    format_percent,
)
from chandy_seidel.tests.dataset_fixtures import SAMPLE_L, SAMPLE_P, sample_points


class TestLorenzCurves(unittest.TestCase):
    def test_coerces_mappings_and_frames(self) -> None:
        from_dicts = as_lorenz_points([{"p": 0.5, "l": 0.2, "w": 3}, {"p": 1, "l": 1}])
        self.assertEqual(from_dicts[0], LorenzPoint(p=0.5, l=0.2, w=3.0))
        self.assertIsNone(from_dicts[1].w)

        frame = pd.DataFrame({"p": [0.5, 1.0], "l": [0.2, 1.0]})
        self.assertEqual(as_lorenz_points(frame), (LorenzPoint(0.5, 0.2), LorenzPoint(1.0, 1.0)))

    def test_rejects_non_sequence_input(self) -> None:
        for bad in (5, "0.1,0.2", {"p": 0.1, "l": 0.1}):
            with self.subTest(bad=bad):
                with self.assertRaises(TypeError):
                    as_lorenz_points(bad)
        with self.assertRaises(TypeError):
            as_lorenz_points([{"p": 0.5}])
        with self.assertRaises(TypeError):
            calculate_gini(42)

    def test_interpolation_returns_curve_points(self) -> None:
        points = sample_points()
        for p, l in zip(SAMPLE_P, SAMPLE_L):
            with self.subTest(p=p):
                self.assertAlmostEqual(interpolate_lorenz(points, p), l, places=12)

    def test_interpolation_bounds_and_short_curves(self) -> None:
        points = sample_points()
        self.assertEqual(interpolate_lorenz(points, 0.0), 0.0)
        self.assertEqual(interpolate_lorenz(points, -0.3), 0.0)
        self.assertEqual(interpolate_lorenz(points, 1.0), 1.0)
        self.assertEqual(interpolate_lorenz(points, 1.7), 1.0)
        self.assertIsNone(interpolate_lorenz([LorenzPoint(0.5, 0.3)], 0.5))
        self.assertIsNone(interpolate_lorenz(None, 0.5))

    def test_interpolation_is_linear_between_points(self) -> None:
        points = sample_points()
        self.assertAlmostEqual(interpolate_lorenz(points, 0.15), 0.075, places=12)
        self.assertAlmostEqual(interpolate_lorenz(points, 0.97), 0.86, places=12)

    def test_interpolation_past_last_point_returns_last_share(self) -> None:
        curve = [LorenzPoint(0.0, 0.0), LorenzPoint(0.5, 0.3)]
        self.assertEqual(interpolate_lorenz(curve, 0.8), 0.3)

    def test_equality_line(self) -> None:
        line = equality_line(4)
        self.assertEqual(len(line), 5)
        self.assertEqual(line[0], LorenzPoint(0.0, 0.0))
        self.assertEqual(line[-1], LorenzPoint(1.0, 1.0))

    def test_mean_skips_first_point_and_empty_bins(self) -> None:
        curve = [
            LorenzPoint(0.0, 0.0, w=5.0),
            LorenzPoint(0.5, 0.25, w=10.0),
            LorenzPoint(0.5, 0.25, w=99.0),
            LorenzPoint(1.0, 1.0, w=30.0),
        ]
        self.assertAlmostEqual(calculate_mean(curve), 20.0)
        self.assertIsNone(calculate_mean([LorenzPoint(0.5, 0.5, w=1.0)]))
        self.assertIsNone(calculate_mean([LorenzPoint(0.5, 0.5), LorenzPoint(1.0, 1.0)]))

    def test_top_share(self) -> None:
        self.assertAlmostEqual(top_share(sample_points(), 0.9), 0.26, places=12)
        self.assertAlmostEqual(top_share(equality_line(), 0.9), 0.1, places=12)
        self.assertIsNone(top_share([LorenzPoint(1.0, 1.0)]))


class TestGini(unittest.TestCase):
    def test_equality_line_has_zero_gini(self) -> None:
        self.assertEqual(calculate_gini([LorenzPoint(0, 0), LorenzPoint(1, 1)]), 0.0)
        self.assertAlmostEqual(calculate_gini(equality_line()), 0.0, places=12)

    def test_complete_inequality(self) -> None:
        self.assertEqual(calculate_gini([LorenzPoint(0, 0), LorenzPoint(1, 0)]), 1.0)

    def test_prepends_origin_and_sorts(self) -> None:
        curve = [LorenzPoint(1.0, 1.0), LorenzPoint(0.5, 0.25)]
        self.assertAlmostEqual(calculate_gini(curve), 0.25, places=12)

    def test_clamps_to_unit_interval(self) -> None:
        curve = [LorenzPoint(0, 0), LorenzPoint(0.5, 1.5), LorenzPoint(1.0, 1.0)]
        self.assertEqual(calculate_gini(curve), 0.0)
        for curve in (sample_points(), equality_line(7)):
            gini = calculate_gini(curve)
            self.assertGreaterEqual(gini, 0.0)
            self.assertLessEqual(gini, 1.0)

    def test_sample_gini_matches_trapezoid_area(self) -> None:
        p = [0.0, *SAMPLE_P]
        l = [0.0, *SAMPLE_L]
        area = sum((p[i] - p[i - 1]) * (l[i] + l[i - 1]) / 2 for i in range(1, len(p)))
        self.assertAlmostEqual(calculate_gini(sample_points()), 1 - 2 * area, places=12)

    def test_short_curves(self) -> None:
        self.assertIsNone(calculate_gini([LorenzPoint(0.5, 0.5)]))
        self.assertIsNone(calculate_gini([]))
        self.assertIsNone(calculate_gini(None))


class TestIncomeShares(unittest.TestCase):
    def test_equality_deciles(self) -> None:
        shares = calculate_income_shares(equality_line(), 10)
        self.assertEqual(len(shares), 10)
        self.assertEqual(shares[0].group, 1)
        self.assertEqual(shares[0].p_low, 0.0)
        self.assertAlmostEqual(shares[-1].p_high, 1.0)
        for share in shares:
            self.assertAlmostEqual(share.share, 0.1, places=12)

    def test_shares_sum_to_one(self) -> None:
        shares = calculate_income_shares(sample_points(), 5)
        self.assertAlmostEqual(sum(share.share for share in shares), 1.0, places=12)

    def test_invalid_arguments(self) -> None:
        self.assertIsNone(calculate_income_shares([LorenzPoint(1.0, 1.0)], 10))
        with self.assertRaises(ValueError):
            calculate_income_shares(sample_points(), 0)


class TestStatistics(unittest.TestCase):
    def test_sample_statistics(self) -> None:
        stats = calculate_statistics(sample_points())
        self.assertAlmostEqual(stats.bottom10, 0.05, places=12)
        self.assertAlmostEqual(stats.bottom50, 0.31, places=12)
        self.assertAlmostEqual(stats.top10, 0.26, places=12)
        self.assertAlmostEqual(stats.top1, 0.08, places=12)
        self.assertAlmostEqual(stats.palma, 0.26 / 0.23, places=10)
        self.assertEqual(len(stats.deciles), 10)
        self.assertEqual(len(stats.quintiles), 5)
        self.assertEqual(stats.gini, calculate_gini(sample_points()))

    def test_zero_bottom_share_has_no_palma(self) -> None:
        curve = [LorenzPoint(0.0, 0.0), LorenzPoint(0.5, 0.0), LorenzPoint(1.0, 1.0)]
        self.assertIsNone(calculate_statistics(curve).palma)

    def test_short_curve(self) -> None:
        self.assertIsNone(calculate_statistics([LorenzPoint(1.0, 1.0)]))


class TestAreaBetweenCurves(unittest.TestCase):
    def test_identical_curves(self) -> None:
        self.assertAlmostEqual(
            calculate_area_between_curves(sample_points(), sample_points()), 0.0, places=15
        )

    def test_sign_follows_inequality(self) -> None:
        area = calculate_area_between_curves(equality_line(), sample_points())
        self.assertGreater(area, 0.0)
        self.assertAlmostEqual(
            calculate_area_between_curves(sample_points(), equality_line()), -area, places=12
        )
        # Half the Gini of the sample, up to sampling on a 1% grid.
        self.assertAlmostEqual(area, calculate_gini(sample_points()) / 2, places=2)

    def test_short_curve_raises(self) -> None:
        with self.assertRaises(ValueError):
            calculate_area_between_curves([LorenzPoint(1.0, 1.0)], sample_points())


class TestFormatting(unittest.TestCase):
    def test_format_gini(self) -> None:
        self.assertEqual(format_gini(0.41234), "0.412")
        self.assertEqual(format_gini(None), "N/A")
        self.assertEqual(format_gini(math.nan), "N/A")

    def test_format_percent(self) -> None:
        self.assertEqual(format_percent(0.2612), "26.1%")
        self.assertEqual(format_percent(math.inf), "N/A")


if __name__ == "__main__":
    unittest.main()
