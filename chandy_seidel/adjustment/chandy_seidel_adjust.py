#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Apply the Chandy-Seidel Pareto elongation to one country-year survey distribution.

Inputs (under --data-root):
  countries.json, nas_data.json, distributions/<CODE>.json

Outputs:
  PARETO_ALPHA, SURVEY_PCT, SURVEY_PCT_TOP, RATIO, RATIO2 and ADJUSTED_MEAN,
  plus Gini and top-10% share of the survey and adjusted distributions.
  With --export, distribution/summary/Lorenz CSV files; with --plot, a Lorenz chart.
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from chandy_seidel.helpers.common import config
from chandy_seidel.helpers.common.cli import format_float
from chandy_seidel.helpers.common.paths import country_year_file_name, ensure_output_dir
from chandy_seidel.helpers.data.export import (
    SummaryEntry,
    export_distribution_csv,
    export_lorenz_csv,
    export_summary_csv,
)
from chandy_seidel.helpers.data.loader import DataLoadError, DistributionLoader, nas_mean
from chandy_seidel.helpers.lorenz.plotting import plot_lorenz_comparison
from chandy_seidel.helpers.pareto.adjustment import calculate_chandy_seidel
from chandy_seidel.helpers.pareto.summary import (
    adjustment_summary,
    compare_distributions,
    comparison_lines,
)


def gap_share_arg(raw: str) -> float:
    value = float(raw)
    if not 0.0 <= value <= 1.0:
        raise argparse.ArgumentTypeError(f"gap share must be in [0, 1], got {raw}")
    return value


def cutoff_arg(raw: str) -> float:
    value = float(raw)
    if not 0.0 < value < 1.0:
        raise argparse.ArgumentTypeError(f"top decile cutoff must be in (0, 1), got {raw}")
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Apply the Chandy-Seidel Pareto adjustment to a country-year distribution.",
    )
    parser.add_argument("country", help="ISO3 country code, e.g. BRA.")
    parser.add_argument("year", type=int, help="Survey year.")
    parser.add_argument(
        "--data-root",
        default=config.CS_DATA_ROOT,
        help="Directory with countries.json, nas_data.json and distributions/ (default: CS_DATA_ROOT).",
    )
    parser.add_argument(
        "--gap-share",
        type=gap_share_arg,
        default=config.CS_GAP_SHARE,
        help="Fraction of the survey/NAS gap attributed to missing top incomes (default: 0.5).",
    )
    parser.add_argument(
        "--top-decile-cutoff",
        type=cutoff_arg,
        default=config.CS_TOP_DECILE_CUTOFF,
        help="Population share above which incomes are treated as Pareto (default: 0.9).",
    )
    parser.add_argument(
        "--nas-source",
        default=config.CS_NAS_SOURCE,
        choices=list(config.NAS_SOURCES),
        help="National accounts mean to target (default: hfce).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Optional output directory for exported CSVs and plots.",
    )
    parser.add_argument(
        "--export",
        action="store_true",
        help="Write distribution, summary and Lorenz CSV files.",
    )
    parser.add_argument(
        "--plot",
        action="store_true",
        default=config.CS_PLOTS,
        help="Save a Lorenz curve comparison chart (default: CS_PLOTS).",
    )
    return parser


def save_lorenz_plot(survey, result, country: str, year: int, output_dir: str | None) -> str:
    fig, ax = plt.subplots(figsize=(7, 6))
    plot_lorenz_comparison(
        survey,
        result.adjusted_dist if result.adjusted else None,
        ax=ax,
        title=f"{country} {year}",
    )
    fig.tight_layout()
    path = ensure_output_dir(output_dir) / country_year_file_name(
        "lorenz_curves", country, year, extension=".png"
    )
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return str(path)


def main() -> None:
    parser = build_arg_parser()
    args = parser.parse_args()

    if not os.path.isdir(args.data_root):
        parser.error(f"Missing data root: {args.data_root}")

    loader = DistributionLoader(Path(args.data_root))
    try:
        dist = loader.get_distribution(args.country, args.year)
        nas = loader.get_nas(args.country, args.year)
    except DataLoadError as exc:
        raise SystemExit(str(exc)) from exc

    target_mean = nas_mean(nas, args.nas_source)
    result = calculate_chandy_seidel(
        dist.distribution,
        dist.survey_mean,
        target_mean,
        args.gap_share,
        args.top_decile_cutoff,
    )
    comparison = compare_distributions(dist.distribution, result, dist.survey_mean)

    print(f"Chandy-Seidel adjustment for {args.country} {args.year}")
    print(f"Distribution bins: {len(dist.distribution)}")
    print(f"NAS source: {args.nas_source}")
    print(adjustment_summary(result))
    print()
    if result.adjusted:
        print(f"PARETO_ALPHA = {format_float(result.alpha)}")
        print(f"RATIO = {format_float(result.ratio)}")
        print(f"RATIO2 = {format_float(result.ratio2)}")
        print(f"SURVEY_PCT = {format_float(result.survey_pct)}")
        print(f"SURVEY_PCT_TOP = {format_float(result.survey_pct_top)}")
        print(f"ADJUSTED_MEAN = {format_float(result.adjusted_mean)}")
        print()
    for line in comparison_lines(comparison):
        print(line)

    if args.export:
        entry = SummaryEntry(
            country_code=args.country,
            year=args.year,
            result=result,
            survey_gini=comparison.survey_gini,
            adjusted_gini=comparison.adjusted_gini,
        )
        written = [export_summary_csv(entry, args.output_dir)]
        if result.adjusted:
            written.append(export_distribution_csv(result, args.country, args.year, args.output_dir))
        written.append(
            export_lorenz_csv(
                dist.distribution,
                result.adjusted_dist if result.adjusted else None,
                args.country,
                args.year,
                args.output_dir,
            )
        )
        for path in written:
            print(f"Wrote {path}")

    if args.plot:
        path = save_lorenz_plot(dist.distribution, result, args.country, args.year, args.output_dir)
        print(f"Wrote {path}")


if __name__ == "__main__":
    main()
