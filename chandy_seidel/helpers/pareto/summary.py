"""
Human-readable summaries and survey-versus-adjusted comparisons.
"""

from __future__ import annotations

from dataclasses import dataclass

from chandy_seidel.helpers.common.cli import format_signed_percent
from chandy_seidel.helpers.lorenz.curves import top_share
from chandy_seidel.helpers.lorenz.statistics import calculate_gini
from chandy_seidel.helpers.pareto.adjustment import AdjustmentResult


@dataclass(frozen=True)
class DistributionComparison:
    survey_gini: float | None
    adjusted_gini: float | None
    gini_change: float | None
    gini_change_percent: float | None
    survey_mean: float | None
    adjusted_mean: float | None
    mean_change_percent: float | None
    survey_top10: float | None
    adjusted_top10: float | None
    top10_change_percent: float | None


def percent_change(new_value: float | None, old_value: float | None) -> float | None:
    """Return percent change from old_value to new_value, or None if undefined."""
    if new_value is None or not old_value:
        return None
    return (new_value - old_value) / old_value * 100.0


def adjustment_summary(result: AdjustmentResult) -> str:
    if not result.adjusted:
        return f"No adjustment: {result.reason}"
    return "\n".join(
        [
            "Adjustment applied:",
            f"- Survey mean: ${result.survey_mean:.2f}/day",
            f"- NAS mean: ${result.nas_mean:.2f}/day",
            f"- Gap: {result.gap_percent:.1f}%",
            f"- Gap share used: {result.gap_share * 100:.0f}%",
            f"- Pareto alpha: {result.alpha:.3f}",
            f"- Survey coverage: {result.survey_pct * 100:.1f}% of adjusted population",
            f"- New Pareto bins: {result.pareto_tail_bins}",
        ]
    )


def compare_distributions(
    survey_curve,
    result: AdjustmentResult,
    survey_mean: float | None = None,
) -> DistributionComparison:
    """Compare Gini, mean and top-10% share of the survey and adjusted curves."""
    survey_gini = calculate_gini(survey_curve)
    survey_top10 = top_share(survey_curve, 0.9)
    if survey_mean is None:
        survey_mean = result.survey_mean

    if result.adjusted:
        adjusted_gini = calculate_gini(result.adjusted_dist)
        adjusted_mean = result.adjusted_mean
        adjusted_top10 = top_share(result.adjusted_dist, 0.9)
    else:
        adjusted_gini = None
        adjusted_mean = None
        adjusted_top10 = None

    gini_change = (
        adjusted_gini - survey_gini
        if adjusted_gini is not None and survey_gini is not None
        else None
    )
    return DistributionComparison(
        survey_gini=survey_gini,
        adjusted_gini=adjusted_gini,
        gini_change=gini_change,
        gini_change_percent=percent_change(adjusted_gini, survey_gini),
        survey_mean=survey_mean,
        adjusted_mean=adjusted_mean,
        mean_change_percent=percent_change(adjusted_mean, survey_mean),
        survey_top10=survey_top10,
        adjusted_top10=adjusted_top10,
        top10_change_percent=percent_change(adjusted_top10, survey_top10),
    )


def comparison_lines(comparison: DistributionComparison) -> list[str]:
    """Console lines for a comparison, matching the adjustment summary style."""
    lines = []
    if comparison.survey_gini is not None:
        lines.append(f"Gini (survey): {comparison.survey_gini:.4f}")
    if comparison.adjusted_gini is not None and comparison.gini_change is not None:
        sign = "+" if comparison.gini_change > 0 else ""
        lines.append(
            f"Gini (adjusted): {comparison.adjusted_gini:.4f} "
            f"({sign}{comparison.gini_change:.4f}, "
            f"{format_signed_percent(comparison.gini_change_percent)})"
        )
    if comparison.adjusted_mean is not None:
        lines.append(
            f"Mean (adjusted): {comparison.adjusted_mean:.2f} "
            f"({format_signed_percent(comparison.mean_change_percent)})"
        )
    if comparison.survey_top10 is not None:
        lines.append(f"Top 10% share (survey): {comparison.survey_top10 * 100:.1f}%")
    if comparison.adjusted_top10 is not None:
        lines.append(
            f"Top 10% share (adjusted): {comparison.adjusted_top10 * 100:.1f}% "
            f"({format_signed_percent(comparison.top10_change_percent)})"
        )
    return lines
