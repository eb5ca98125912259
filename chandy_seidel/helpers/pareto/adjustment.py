"""
Chandy-Seidel Pareto elongation of a survey Lorenz curve.

Implements the adjustment from Chandy & Seidel (2017), "How much do we really know
about inequality within countries around the world? Adjusting Gini coefficients for
missing top incomes": part of the gap between the survey mean and the national
accounts (NAS) mean is attributed to top incomes the survey missed, a Pareto tail is
fitted to the survey's top decile, and the survey curve is elongated with that tail.

Data problems never raise; they come back as AdjustmentRejected with a reason.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, NamedTuple, Sequence, Union

from chandy_seidel.helpers.lorenz.curves import LorenzPoint, as_lorenz_points
from chandy_seidel.helpers.pareto.tail import (
    combine_distributions,
    generate_pareto_tail,
    rescale_distribution,
)

MIN_DISTRIBUTION_POINTS = 10
DEFAULT_GAP_SHARE = 0.5
DEFAULT_TOP_DECILE_CUTOFF = 0.9

REASON_INVALID_DISTRIBUTION = "Invalid distribution data"
REASON_INVALID_SURVEY_MEAN = "Invalid survey mean"
REASON_NO_NAS = "No NAS data available"
REASON_NO_GAP = "NAS <= Survey mean (no adjustment needed)"
REASON_NO_TOP_DECILE = "Could not identify top decile"
REASON_TOO_FEW_TOP_BINS = "Not enough bins in top decile"
REASON_INVALID_TOP_DECILE = "Invalid income distribution in top decile"
REASON_IDENTICAL_TOP_INCOMES = "Cannot calculate alpha (identical incomes in top decile)"


def invalid_alpha_reason(alpha: float) -> str:
    return f"Invalid Pareto alpha ({alpha:.3f} <= 1)"


@dataclass(frozen=True)
class AdjustmentRejected:
    reason: str
    survey_mean: float | None = None
    nas_mean: float | None = None
    gap: float | None = None
    gap_percent: float | None = None
    adjusted: bool = field(default=False, init=False)


@dataclass(frozen=True)
class AdjustmentAccepted:
    survey_mean: float
    nas_mean: float
    adjusted_mean: float
    gap: float
    gap_percent: float
    gap_share: float
    top_decile_cutoff: float
    # Pareto parameters
    alpha: float
    ratio: float
    ratio2: float
    survey_pct: float
    survey_pct_top: float
    top_decile_p: float
    top_decile_l: float
    min_y: float
    max_y: float
    # Distributions
    original_dist: tuple[LorenzPoint, ...]
    adjusted_dist: tuple[LorenzPoint, ...]
    pareto_tail_bins: int
    adjusted: bool = field(default=True, init=False)
    reason: None = field(default=None, init=False)

    @property
    def pareto_points(self) -> tuple[LorenzPoint, ...]:
        return tuple(point for point in self.adjusted_dist if point.is_pareto)


AdjustmentResult = Union[AdjustmentAccepted, AdjustmentRejected]


@dataclass(frozen=True)
class _Inputs:
    points: tuple[LorenzPoint, ...]
    survey_mean: float | None
    nas_mean: float | None


class _Validator(NamedTuple):
    reason: str
    fails: Callable[[_Inputs], bool]
    reports_means: bool = False


def _is_missing_or_non_positive(value: float | None) -> bool:
    return value is None or not value > 0


# Evaluated in order; the first failing check decides the reason.
VALIDATORS: tuple[_Validator, ...] = (
    _Validator(
        REASON_INVALID_DISTRIBUTION,
        lambda inputs: len(inputs.points) < MIN_DISTRIBUTION_POINTS,
    ),
    _Validator(
        REASON_INVALID_SURVEY_MEAN,
        lambda inputs: _is_missing_or_non_positive(inputs.survey_mean),
    ),
    _Validator(
        REASON_NO_NAS,
        lambda inputs: _is_missing_or_non_positive(inputs.nas_mean),
    ),
    _Validator(
        REASON_NO_GAP,
        lambda inputs: inputs.nas_mean <= inputs.survey_mean,
        reports_means=True,
    ),
)


def validate_inputs(inputs: _Inputs) -> AdjustmentRejected | None:
    for validator in VALIDATORS:
        if not validator.fails(inputs):
            continue
        if validator.reports_means:
            return AdjustmentRejected(
                reason=validator.reason,
                survey_mean=inputs.survey_mean,
                nas_mean=inputs.nas_mean,
                gap=0.0,
                gap_percent=0.0,
            )
        return AdjustmentRejected(reason=validator.reason)
    return None


def find_top_decile_index(points: Sequence[LorenzPoint], cutoff: float) -> int | None:
    """Index of the first point with p >= cutoff."""
    for index, point in enumerate(points):
        if point.p >= cutoff:
            return index
    return None


def top_decile_densities(points: Sequence[LorenzPoint]) -> list[float]:
    """Relative incomes dl/dp of consecutive bins, skipping zero-width bins."""
    densities = []
    for prev, curr in zip(points[:-1], points[1:]):
        p_diff = curr.p - prev.p
        if p_diff > 0:
            densities.append((curr.l - prev.l) / p_diff)
    return densities


def _safe_log(value: float) -> float:
    if value > 0:
        return math.log(value)
    if value == 0:
        return -math.inf
    return math.nan


def calculate_chandy_seidel(
    distribution: Any,
    survey_mean: float | None,
    nas_mean: float | None,
    gap_share: float = DEFAULT_GAP_SHARE,
    top_decile_cutoff: float = DEFAULT_TOP_DECILE_CUTOFF,
) -> AdjustmentResult:
    """
    Elongate a survey Lorenz curve with a Pareto tail for missing top incomes.

    distribution is a sorted sequence of {p, l, w} points (or LorenzPoints, or a
    p/l[/w] DataFrame); survey_mean and nas_mean are in the same welfare units.
    """
    points = as_lorenz_points(distribution) if distribution is not None else ()
    rejected = validate_inputs(_Inputs(points, survey_mean, nas_mean))
    if rejected is not None:
        return rejected

    gap = nas_mean - survey_mean
    gap_percent = gap / survey_mean * 100

    # 1. Top decile: first bin at or above the cutoff.
    top_index = find_top_decile_index(points, top_decile_cutoff)
    if top_index is None:
        return AdjustmentRejected(reason=REASON_NO_TOP_DECILE)
    top_decile_p = points[top_index].p
    top_decile_l = points[top_index].l

    # 2. Relative income of each top-decile bin.
    densities = top_decile_densities(points[top_index:])
    if len(densities) < 2:
        return AdjustmentRejected(reason=REASON_TOO_FEW_TOP_BINS)
    min_y = min(densities)
    max_y = max(densities)
    if min_y <= 0 or max_y <= 0 or min_y >= max_y:
        return AdjustmentRejected(reason=REASON_INVALID_TOP_DECILE)

    # 3. Share of adjusted income captured by the survey, overall and in the top decile.
    na_ratio = nas_mean / survey_mean
    ratio = 1 / (1 + gap_share * (na_ratio - 1))
    top_decile_share = 1 - top_decile_l
    ratio2 = top_decile_share / (top_decile_share + gap_share * (na_ratio - 1))

    # 4. Pareto shape parameter.
    log_ratio = math.log(min_y / max_y)
    if log_ratio == 0:
        return AdjustmentRejected(reason=REASON_IDENTICAL_TOP_INCOMES)
    alpha = _safe_log(1 - ratio2) / log_ratio + 1
    if not math.isfinite(alpha) or alpha <= 1:
        return AdjustmentRejected(
            reason=invalid_alpha_reason(alpha),
            survey_mean=survey_mean,
            nas_mean=nas_mean,
            gap=gap,
            gap_percent=gap_percent,
        )

    # 5. Survey share of the Pareto section (Pareto CDF) and of the adjusted population.
    survey_pct_top = 1 - (min_y / max_y) ** alpha
    survey_pct = 1 / (1 + (1 - top_decile_p) * (1 - survey_pct_top))

    # 6. Rescale survey points, add the tail, then merge and anchor at (0, 0) and (1, 1).
    rescaled = rescale_distribution(points, survey_pct, ratio)
    pareto_tail = generate_pareto_tail(
        alpha,
        survey_pct_top,
        ratio,
        top_decile_l,
        top_decile_p,
        survey_pct,
    )
    adjusted_dist = combine_distributions(rescaled, pareto_tail)

    return AdjustmentAccepted(
        survey_mean=survey_mean,
        nas_mean=nas_mean,
        adjusted_mean=survey_mean / ratio,
        gap=gap,
        gap_percent=gap_percent,
        gap_share=gap_share,
        top_decile_cutoff=top_decile_cutoff,
        alpha=alpha,
        ratio=ratio,
        ratio2=ratio2,
        survey_pct=survey_pct,
        survey_pct_top=survey_pct_top,
        top_decile_p=top_decile_p,
        top_decile_l=top_decile_l,
        min_y=min_y,
        max_y=max_y,
        original_dist=points,
        adjusted_dist=adjusted_dist,
        pareto_tail_bins=len(pareto_tail),
    )
