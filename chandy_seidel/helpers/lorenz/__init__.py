"""Lorenz curve helper library for inequality statistics."""

from chandy_seidel.helpers.lorenz.curves import (
    LorenzPoint,
    as_lorenz_points,
    calculate_mean,
    equality_line,
    interpolate_lorenz,
    top_share,
)
from chandy_seidel.helpers.lorenz.statistics import (
    IncomeShare,
    LorenzStatistics,
    calculate_area_between_curves,
    calculate_gini,
    calculate_income_shares,
    calculate_statistics,
    format_gini,
    format_percent,
)

__all__ = [
    "IncomeShare",
    "LorenzPoint",
    "LorenzStatistics",
    "as_lorenz_points",
    "calculate_area_between_curves",
    "calculate_gini",
    "calculate_income_shares",
    "calculate_mean",
    "calculate_statistics",
    "equality_line",
    "format_gini",
    "format_percent",
    "interpolate_lorenz",
    "top_share",
]
