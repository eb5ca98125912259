"""Pareto elongation helper library for the Chandy-Seidel adjustment."""

from chandy_seidel.helpers.pareto.adjustment import (
    AdjustmentAccepted,
    AdjustmentRejected,
    AdjustmentResult,
    DEFAULT_GAP_SHARE,
    DEFAULT_TOP_DECILE_CUTOFF,
    calculate_chandy_seidel,
)
from chandy_seidel.helpers.pareto.summary import (
    DistributionComparison,
    adjustment_summary,
    compare_distributions,
)
from chandy_seidel.helpers.pareto.tail import (
    combine_distributions,
    generate_pareto_tail,
    pareto_tail_bin_count,
)

__all__ = [
    "AdjustmentAccepted",
    "AdjustmentRejected",
    "AdjustmentResult",
    "DEFAULT_GAP_SHARE",
    "DEFAULT_TOP_DECILE_CUTOFF",
    "DistributionComparison",
    "adjustment_summary",
    "calculate_chandy_seidel",
    "combine_distributions",
    "compare_distributions",
    "generate_pareto_tail",
    "pareto_tail_bin_count",
]
