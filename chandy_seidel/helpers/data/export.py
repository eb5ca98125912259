"""
CSV export of adjusted distributions, summary statistics and Lorenz curves.

Numbers are written at fixed precision; undefined values become empty cells.
"""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import Any, Iterable

import pandas as pd

from chandy_seidel.helpers.common.paths import country_year_file_name, resolve_output_path
from chandy_seidel.helpers.lorenz.curves import as_lorenz_points, interpolate_sorted
from chandy_seidel.helpers.pareto.adjustment import AdjustmentResult
from chandy_seidel.helpers.pareto.summary import percent_change

FILE_PREFIX = "chandy_seidel"
MATCH_TOLERANCE = 0.0001

DISTRIBUTION_COLUMNS = [
    "country",
    "year",
    "quantile",
    "p_survey",
    "l_survey",
    "welfare_survey",
    "p_adjusted",
    "l_adjusted",
    "is_pareto_tail",
]

SUMMARY_COLUMNS = [
    "country",
    "year",
    "survey_mean",
    "nas_mean",
    "adjusted_mean",
    "gap_percent",
    "gap_share_used",
    "pareto_alpha",
    "survey_pct",
    "pareto_bins_added",
    "gini_survey",
    "gini_adjusted",
    "gini_change",
    "gini_change_percent",
]

LORENZ_COLUMNS = ["p", "l_survey", "l_adjusted", "l_equality"]


@dataclass(frozen=True)
class SummaryEntry:
    country_code: str
    year: int
    result: AdjustmentResult
    survey_gini: float | None = None
    adjusted_gini: float | None = None


def format_for_csv(value: float | None, decimals: int = 4) -> str:
    """Fixed-precision string, or '' when the value is missing or non-finite."""
    if value is None or not math.isfinite(value):
        return ""
    return f"{value:.{decimals}f}"


def distribution_table(result: AdjustmentResult, country_code: str, year: int) -> pd.DataFrame:
    """One row per survey point with its rescaled position, then one per Pareto point."""
    if not result.adjusted:
        raise ValueError("No adjusted distribution to export.")

    rescaled = [
        point
        for point in result.adjusted_dist
        if not point.is_pareto and point.original_p is not None
    ]
    rows = []
    for index, point in enumerate(result.original_dist):
        match = next(
            (item for item in rescaled if abs(item.original_p - point.p) < MATCH_TOLERANCE),
            None,
        )
        rows.append(
            [
                country_code,
                year,
                index + 1,
                format_for_csv(point.p, 6),
                format_for_csv(point.l, 6),
                format_for_csv(point.w, 2),
                format_for_csv(match.p, 6) if match else "",
                format_for_csv(match.l, 6) if match else "",
                0,
            ]
        )

    offset = len(result.original_dist)
    for index, point in enumerate(result.pareto_points):
        rows.append(
            [
                country_code,
                year,
                offset + index + 1,
                "",
                "",
                "",
                format_for_csv(point.p, 6),
                format_for_csv(point.l, 6),
                1,
            ]
        )
    return pd.DataFrame(rows, columns=DISTRIBUTION_COLUMNS)


def summary_row(entry: SummaryEntry) -> list[Any]:
    result = entry.result
    gini_change = (
        entry.adjusted_gini - entry.survey_gini
        if entry.survey_gini is not None and entry.adjusted_gini is not None
        else None
    )
    return [
        entry.country_code,
        entry.year,
        format_for_csv(result.survey_mean, 4),
        format_for_csv(result.nas_mean, 4),
        format_for_csv(getattr(result, "adjusted_mean", None), 4),
        format_for_csv(result.gap_percent, 2),
        format_for_csv(getattr(result, "gap_share", None), 2),
        format_for_csv(getattr(result, "alpha", None), 4),
        format_for_csv(getattr(result, "survey_pct", None), 4),
        getattr(result, "pareto_tail_bins", 0),
        format_for_csv(entry.survey_gini, 4),
        format_for_csv(entry.adjusted_gini, 4),
        format_for_csv(gini_change, 4),
        format_for_csv(percent_change(entry.adjusted_gini, entry.survey_gini), 2),
    ]


def summary_table(entries: Iterable[SummaryEntry]) -> pd.DataFrame:
    return pd.DataFrame([summary_row(entry) for entry in entries], columns=SUMMARY_COLUMNS)


def lorenz_table(survey: Any, adjusted: Any = None) -> pd.DataFrame:
    """Survey and adjusted curves evaluated on the union of their p values."""
    survey_points = as_lorenz_points(survey) if survey is not None else ()
    adjusted_points = as_lorenz_points(adjusted) if adjusted is not None else ()
    p_values = sorted({point.p for point in survey_points} | {point.p for point in adjusted_points})

    def _evaluate(points, p: float) -> str:
        if len(points) < 2:
            return ""
        return format_for_csv(interpolate_sorted(points, p), 6)

    rows = [
        [
            format_for_csv(p, 6),
            _evaluate(survey_points, p),
            _evaluate(adjusted_points, p),
            format_for_csv(p, 6),
        ]
        for p in p_values
    ]
    return pd.DataFrame(rows, columns=LORENZ_COLUMNS)


def write_table(table: pd.DataFrame, file_name: str, output_dir: str | None = None) -> str:
    path = resolve_output_path(file_name, output_dir)
    table.to_csv(path, index=False)
    return path


def export_distribution_csv(
    result: AdjustmentResult,
    country_code: str,
    year: int,
    output_dir: str | None = None,
) -> str:
    file_name = country_year_file_name(FILE_PREFIX, country_code, year, "distribution")
    return write_table(distribution_table(result, country_code, year), file_name, output_dir)


def export_summary_csv(entry: SummaryEntry, output_dir: str | None = None) -> str:
    file_name = country_year_file_name(FILE_PREFIX, entry.country_code, entry.year, "summary")
    return write_table(summary_table([entry]), file_name, output_dir)


def export_multiple_summary_csv(
    entries: Iterable[SummaryEntry],
    output_dir: str | None = None,
    date: dt.date | None = None,
) -> str:
    stamp = (date or dt.date.today()).isoformat()
    return write_table(summary_table(entries), f"{FILE_PREFIX}_summary_{stamp}.csv", output_dir)


def export_lorenz_csv(
    survey: Any,
    adjusted: Any,
    country_code: str,
    year: int,
    output_dir: str | None = None,
) -> str:
    file_name = country_year_file_name("lorenz_curves", country_code, year)
    return write_table(lorenz_table(survey, adjusted), file_name, output_dir)
