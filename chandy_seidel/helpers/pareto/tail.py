"""
Pareto-tail synthesis and merging for the elongated distribution.

The tail points are NEW observations for the top incomes the survey missed:
  l_pareto = 1 - (1 - p_pareto)^(1 - 1/alpha)
  p_adj = p_pareto * (1 - top_decile_p) * survey_pct
          + (1 - survey_pct_top * (1 - top_decile_p)) * survey_pct
  l_adj = ratio * top_decile_l + l_pareto * (1 - ratio * top_decile_l)
"""

from __future__ import annotations

import dataclasses
import math
from typing import Sequence

import numpy as np

from chandy_seidel.helpers.lorenz.curves import LorenzPoint

ORIGIN_TOLERANCE = 0.001


def pareto_tail_bin_count(survey_pct_top: float) -> int:
    """One bin per percentage point of unobserved Pareto population, plus one."""
    return max(1, math.floor(100 * (1 - survey_pct_top)) + 1)


def rescale_distribution(
    distribution: Sequence[LorenzPoint],
    survey_pct: float,
    ratio: float,
) -> tuple[LorenzPoint, ...]:
    """Map every survey point (p, l) to (p * survey_pct, l * ratio)."""
    return tuple(
        LorenzPoint(
            p=point.p * survey_pct,
            l=point.l * ratio,
            w=point.w,
            is_pareto=False,
            original_p=point.p,
            original_l=point.l,
        )
        for point in distribution
    )


def generate_pareto_tail(
    alpha: float,
    survey_pct_top: float,
    ratio: float,
    top_decile_l: float,
    top_decile_p: float,
    survey_pct: float,
) -> tuple[LorenzPoint, ...]:
    """Synthesize tail points spanning the Pareto population above survey_pct_top."""
    num_bins = pareto_tail_bin_count(survey_pct_top)
    steps = np.arange(1, num_bins + 1, dtype=float) / num_bins
    p_pareto = survey_pct_top + (1 - survey_pct_top) * steps
    # 1 - p_pareto can round to a tiny negative at the last step.
    l_pareto = 1 - np.power(np.clip(1 - p_pareto, 0.0, None), 1 - 1 / alpha)

    p_adj = (
        p_pareto * (1 - top_decile_p) * survey_pct
        + (1 - survey_pct_top * (1 - top_decile_p)) * survey_pct
    )
    l_adj = ratio * top_decile_l + l_pareto * (1 - ratio * top_decile_l)

    return tuple(
        LorenzPoint(
            p=float(p),
            l=float(l),
            is_pareto=True,
            p_pareto=float(pp),
            l_pareto=float(lp),
        )
        for p, l, pp, lp in zip(p_adj, l_adj, p_pareto, l_pareto)
    )


def anchor_endpoints(points: list[LorenzPoint]) -> list[LorenzPoint]:
    """
    Final normalization of a merged, sorted curve.

    Prepends the origin when the curve starts above p = 0.001 and forces the last
    point to exactly (1, 1). Must run after the final sort.
    """
    if not points or points[0].p > ORIGIN_TOLERANCE:
        points.insert(0, LorenzPoint(p=0.0, l=0.0, is_pareto=False))
    points[-1] = dataclasses.replace(points[-1], p=1.0, l=1.0)
    return points


def combine_distributions(
    rescaled: Sequence[LorenzPoint],
    pareto_tail: Sequence[LorenzPoint],
) -> tuple[LorenzPoint, ...]:
    """Merge rescaled survey points with the Pareto tail into one sorted curve."""
    combined = sorted([*rescaled, *pareto_tail], key=lambda point: point.p)
    return tuple(anchor_endpoints(combined))
