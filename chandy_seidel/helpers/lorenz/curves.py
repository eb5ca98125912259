"""
Lorenz curve representation and point-wise helpers.

A curve is an ordered sequence of LorenzPoint values, where ``p`` is the cumulative
population share and ``l`` the cumulative income (welfare) share, both in [0, 1].
Curves are trusted to be sorted ascending by ``p`` unless a function says otherwise.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class LorenzPoint:
    p: float
    l: float
    w: float | None = None
    is_pareto: bool = False
    original_p: float | None = None
    original_l: float | None = None
    p_pareto: float | None = None
    l_pareto: float | None = None


Curve = Sequence[LorenzPoint]


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    converted = float(value)
    if converted != converted:
        return None
    return converted


def _to_point(item: Any) -> LorenzPoint:
    if isinstance(item, LorenzPoint):
        return item
    if isinstance(item, Mapping):
        if "p" not in item or "l" not in item:
            raise TypeError(f"Lorenz point needs 'p' and 'l' keys, got {sorted(item)!r}")
        return LorenzPoint(
            p=float(item["p"]),
            l=float(item["l"]),
            w=_optional_float(item.get("w")),
            is_pareto=bool(item.get("is_pareto", False)),
        )
    raise TypeError(f"Cannot interpret {type(item).__name__} as a Lorenz point.")


def as_lorenz_points(data: Any) -> tuple[LorenzPoint, ...]:
    """Coerce LorenzPoints, {p, l, w} mappings or a p/l[/w] DataFrame into a curve."""
    if isinstance(data, pd.DataFrame):
        missing = [column for column in ("p", "l") if column not in data.columns]
        if missing:
            raise TypeError(f"Distribution frame is missing columns: {', '.join(missing)}")
        weights = data["w"] if "w" in data.columns else [None] * len(data)
        return tuple(
            LorenzPoint(p=float(p), l=float(l), w=_optional_float(w))
            for p, l, w in zip(data["p"], data["l"], weights)
        )
    if isinstance(data, (str, bytes, Mapping)) or not isinstance(data, Sequence):
        raise TypeError(
            f"Expected a sequence of Lorenz points, got {type(data).__name__}."
        )
    return tuple(_to_point(item) for item in data)


def curve_arrays(curve: Curve) -> tuple[list[float], list[float]]:
    """Split a curve into parallel p and l lists (for plotting and tables)."""
    return [point.p for point in curve], [point.l for point in curve]


def interpolate_sorted(curve: Curve, p: float) -> float | None:
    """
    Linear interpolation of l at p on an already coerced curve.

    Scans forward while the next point's p is strictly below the query, so a query
    equal to a point's p lands on the segment ending at that point. Queries beyond
    the last point return the last point's l.
    """
    if p <= 0:
        return 0.0
    if p >= 1:
        return 1.0
    if len(curve) < 2:
        return None

    i = 0
    while i < len(curve) - 1 and curve[i + 1].p < p:
        i += 1

    if i >= len(curve) - 1:
        return curve[-1].l

    p1 = curve[i].p
    p2 = curve[i + 1].p
    l1 = curve[i].l
    l2 = curve[i + 1].l
    t = (p - p1) / (p2 - p1)
    return l1 + t * (l2 - l1)


def interpolate_lorenz(curve: Any, p: float) -> float | None:
    """Interpolate the Lorenz curve at population share p."""
    if curve is None:
        return interpolate_sorted((), p)
    return interpolate_sorted(as_lorenz_points(curve), p)


def equality_line(num_points: int = 100) -> tuple[LorenzPoint, ...]:
    """Perfect-equality (45 degree) line sampled at num_points + 1 points."""
    return tuple(LorenzPoint(p=i / num_points, l=i / num_points) for i in range(num_points + 1))


def calculate_mean(distribution: Any) -> float | None:
    """Population-weighted mean welfare from per-bin welfare values."""
    if distribution is None:
        return None
    points = as_lorenz_points(distribution)
    if len(points) < 2:
        return None

    total_income = 0.0
    total_pop = 0.0
    for prev, curr in zip(points[:-1], points[1:]):
        pop_share = curr.p - prev.p
        welfare = curr.w or 0.0
        if pop_share > 0 and welfare > 0:
            total_income += welfare * pop_share
            total_pop += pop_share
    return total_income / total_pop if total_pop > 0 else None


def top_share(curve: Any, cutoff: float = 0.9) -> float | None:
    """Income share held above the cutoff population share, i.e. 1 - L(cutoff)."""
    if curve is None:
        return None
    points = as_lorenz_points(curve)
    if len(points) < 2:
        return None

    level = None
    for left, right in zip(points[:-1], points[1:]):
        if left.p <= cutoff <= right.p:
            if right.p == left.p:
                level = left.l
            else:
                t = (cutoff - left.p) / (right.p - left.p)
                level = left.l + t * (right.l - left.l)
            break

    if level is None:
        closest = min(points, key=lambda point: abs(point.p - cutoff))
        level = closest.l
    return 1.0 - level
