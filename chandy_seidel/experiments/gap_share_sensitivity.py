#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Sweep the gap share for one country-year and report how the Pareto fit and the
adjusted inequality statistics respond.
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from chandy_seidel.adjustment.chandy_seidel_adjust import cutoff_arg
from chandy_seidel.helpers.common import config
from chandy_seidel.helpers.common.cli import parse_float_list
from chandy_seidel.helpers.common.paths import country_year_file_name, resolve_output_path
from chandy_seidel.helpers.data.loader import DataLoadError, DistributionLoader, nas_mean
from chandy_seidel.helpers.lorenz.curves import LorenzPoint
from chandy_seidel.helpers.lorenz.statistics import (
    calculate_area_between_curves,
    calculate_gini,
    calculate_statistics,
)
from chandy_seidel.helpers.pareto.adjustment import calculate_chandy_seidel

DEFAULT_GAP_SHARES = "0.1,0.2,0.3,0.4,0.5,0.6,0.7,0.8,0.9,1.0"

SWEEP_COLUMNS = [
    "gap_share",
    "adjusted",
    "reason",
    "alpha",
    "survey_pct",
    "survey_pct_top",
    "adjusted_mean",
    "pareto_bins",
    "gini_survey",
    "gini_adjusted",
    "top10_adjusted",
    "palma_adjusted",
    "area_between_curves",
]


def run_gap_share_sweep(
    distribution: Sequence[LorenzPoint],
    survey_mean: float | None,
    target_mean: float | None,
    gap_shares: Sequence[float],
    top_decile_cutoff: float,
) -> pd.DataFrame:
    survey_gini = calculate_gini(distribution)
    rows = []
    for gap_share in gap_shares:
        result = calculate_chandy_seidel(
            distribution,
            survey_mean,
            target_mean,
            gap_share,
            top_decile_cutoff,
        )
        row = {column: np.nan for column in SWEEP_COLUMNS}
        row.update(
            {
                "gap_share": gap_share,
                "adjusted": result.adjusted,
                "reason": result.reason or "",
                "gini_survey": survey_gini if survey_gini is not None else np.nan,
            }
        )
        if result.adjusted:
            stats = calculate_statistics(result.adjusted_dist)
            row.update(
                {
                    "alpha": result.alpha,
                    "survey_pct": result.survey_pct,
                    "survey_pct_top": result.survey_pct_top,
                    "adjusted_mean": result.adjusted_mean,
                    "pareto_bins": result.pareto_tail_bins,
                    "gini_adjusted": stats.gini,
                    "top10_adjusted": stats.top10,
                    "palma_adjusted": stats.palma if stats.palma is not None else np.nan,
                    "area_between_curves": calculate_area_between_curves(
                        distribution, result.adjusted_dist
                    ),
                }
            )
        rows.append(row)
    return pd.DataFrame(rows, columns=SWEEP_COLUMNS)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sweep gap shares for the Chandy-Seidel adjustment of one country-year.",
    )
    parser.add_argument("country", help="ISO3 country code.")
    parser.add_argument("year", type=int, help="Survey year.")
    parser.add_argument("--data-root", default=config.CS_DATA_ROOT)
    parser.add_argument(
        "--gap-shares",
        default=DEFAULT_GAP_SHARES,
        help=f"Comma-separated gap shares in [0, 1] (default: {DEFAULT_GAP_SHARES}).",
    )
    parser.add_argument("--top-decile-cutoff", type=cutoff_arg, default=config.CS_TOP_DECILE_CUTOFF)
    parser.add_argument(
        "--nas-source",
        default=config.CS_NAS_SOURCE,
        choices=list(config.NAS_SOURCES),
    )
    parser.add_argument("--output-dir", default=None)
    parser.add_argument("--plot", action="store_true", default=config.CS_PLOTS)
    return parser


def main() -> None:
    parser = build_arg_parser()
    args = parser.parse_args()

    try:
        gap_shares = parse_float_list(args.gap_shares)
    except ValueError as exc:
        parser.error(str(exc))
    out_of_range = [value for value in gap_shares if not 0.0 <= value <= 1.0]
    if out_of_range:
        parser.error(f"Gap shares must be in [0, 1]: {out_of_range}")
    if not os.path.isdir(args.data_root):
        parser.error(f"Missing data root: {args.data_root}")

    loader = DistributionLoader(Path(args.data_root))
    try:
        dist = loader.get_distribution(args.country, args.year)
        nas = loader.get_nas(args.country, args.year)
    except DataLoadError as exc:
        raise SystemExit(str(exc)) from exc

    table = run_gap_share_sweep(
        dist.distribution,
        dist.survey_mean,
        nas_mean(nas, args.nas_source),
        gap_shares,
        args.top_decile_cutoff,
    )

    print(f"Gap share sweep for {args.country} {args.year} (NAS source: {args.nas_source})")
    print(table.to_string(index=False, float_format=lambda value: f"{value:.4f}"))

    stem = country_year_file_name("gap_share_sensitivity", args.country, args.year, extension="")
    csv_path = resolve_output_path(f"{stem}.csv", args.output_dir)
    table.to_csv(csv_path, index=False)
    print(f"Wrote {csv_path}")

    if args.plot:
        fig, ax = plt.subplots(figsize=(8, 5))
        accepted = table[table["adjusted"]]
        ax.plot(accepted["gap_share"], accepted["gini_adjusted"], "o-", color="r", label="Adjusted")
        ax.axhline(table["gini_survey"].iloc[0], color="b", ls="--", label="Survey")
        ax.set_xlabel("Gap share attributed to missing top incomes")
        ax.set_ylabel("Gini coefficient")
        ax.grid(alpha=0.3)
        ax.legend()
        fig.tight_layout()
        png_path = resolve_output_path(f"{stem}.png", args.output_dir)
        fig.savefig(png_path, dpi=150)
        plt.close(fig)
        print(f"Wrote {png_path}")


if __name__ == "__main__":
    main()
