"""
Inequality statistics computed from Lorenz curves.

Gini = 1 - 2 * B, where B is the trapezoidal area under the Lorenz curve.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from chandy_seidel.helpers.lorenz.curves import (
    LorenzPoint,
    as_lorenz_points,
    interpolate_sorted,
)

AREA_SAMPLE_POINTS = 100


@dataclass(frozen=True)
class IncomeShare:
    group: int
    p_low: float
    p_high: float
    share: float


@dataclass(frozen=True)
class LorenzStatistics:
    gini: float | None
    bottom10: float
    bottom50: float
    top10: float
    top1: float
    palma: float | None
    deciles: tuple[IncomeShare, ...]
    quintiles: tuple[IncomeShare, ...]


def calculate_gini(curve: Any) -> float | None:
    """Gini coefficient from a Lorenz curve, clamped to [0, 1]."""
    if curve is None:
        return None
    points = list(as_lorenz_points(curve))
    if len(points) < 2:
        return None

    if points[0].p > 0.001 or points[0].l > 0.001:
        points.insert(0, LorenzPoint(p=0.0, l=0.0))
    points.sort(key=lambda point: point.p)

    p_values = np.asarray([point.p for point in points], dtype=float)
    l_values = np.asarray([point.l for point in points], dtype=float)
    area = float(np.sum(np.diff(p_values) * (l_values[1:] + l_values[:-1]) / 2.0))
    gini = 1.0 - 2.0 * area
    return float(np.clip(gini, 0.0, 1.0))


def calculate_income_shares(curve: Any, num_groups: int = 10) -> tuple[IncomeShare, ...] | None:
    """Income share of each of num_groups equal-width population bands."""
    if num_groups < 1:
        raise ValueError(f"num_groups must be positive, got {num_groups}")
    if curve is None:
        return None
    points = sorted(as_lorenz_points(curve), key=lambda point: point.p)
    if len(points) < 2:
        return None

    group_size = 1 / num_groups
    shares = []
    for i in range(num_groups):
        p_low = i * group_size
        p_high = (i + 1) * group_size
        l_low = interpolate_sorted(points, p_low)
        l_high = interpolate_sorted(points, p_high)
        shares.append(IncomeShare(group=i + 1, p_low=p_low, p_high=p_high, share=l_high - l_low))
    return tuple(shares)


def calculate_statistics(curve: Any) -> LorenzStatistics | None:
    """Gini plus decile/quintile shares, top 1%, and the Palma ratio."""
    if curve is None:
        return None
    points = as_lorenz_points(curve)
    if len(points) < 2:
        return None

    deciles = calculate_income_shares(points, 10)
    quintiles = calculate_income_shares(points, 5)

    bottom10 = deciles[0].share
    bottom50 = sum(item.share for item in deciles[:5])
    top10 = deciles[9].share
    top1 = interpolate_sorted(points, 1) - interpolate_sorted(points, 0.99)

    # Palma ratio: top 10% over bottom 40%.
    bottom40 = sum(item.share for item in deciles[:4])
    palma = top10 / bottom40 if bottom40 > 0 else None

    return LorenzStatistics(
        gini=calculate_gini(points),
        bottom10=bottom10,
        bottom50=bottom50,
        top10=top10,
        top1=top1,
        palma=palma,
        deciles=deciles,
        quintiles=quintiles,
    )


def calculate_area_between_curves(curve1: Any, curve2: Any) -> float:
    """
    Signed area between two Lorenz curves, sampled at 100 population steps.

    Positive when curve2 lies below curve1, i.e. curve2 is more unequal.
    """
    first = as_lorenz_points(curve1)
    second = as_lorenz_points(curve2)
    if len(first) < 2 or len(second) < 2:
        raise ValueError("Both curves need at least 2 points to compare.")

    grid = np.arange(AREA_SAMPLE_POINTS + 1) / AREA_SAMPLE_POINTS
    diff = np.asarray(
        [interpolate_sorted(first, p) - interpolate_sorted(second, p) for p in grid],
        dtype=float,
    )
    return float(np.sum(np.diff(grid) * (diff[1:] + diff[:-1]) / 2.0))


def format_gini(value: float | None, decimals: int = 3) -> str:
    if value is None or not math.isfinite(value):
        return "N/A"
    return f"{value:.{decimals}f}"


def format_percent(value: float | None, decimals: int = 1) -> str:
    """Format a share in [0, 1] as a percentage string."""
    if value is None or not math.isfinite(value):
        return "N/A"
    return f"{value * 100:.{decimals}f}%"
