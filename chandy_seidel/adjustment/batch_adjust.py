#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Apply the Chandy-Seidel adjustment to every country-year listed in countries.json
and write one combined summary CSV.
"""

from __future__ import annotations

import argparse
import os
import sys
from collections import Counter
from pathlib import Path

from chandy_seidel.adjustment.chandy_seidel_adjust import cutoff_arg, gap_share_arg
from chandy_seidel.helpers.common import config
from chandy_seidel.helpers.data.export import SummaryEntry, export_multiple_summary_csv
from chandy_seidel.helpers.data.loader import DataLoadError, DistributionLoader, nas_mean
from chandy_seidel.helpers.lorenz.statistics import calculate_gini
from chandy_seidel.helpers.pareto.adjustment import calculate_chandy_seidel


def run_batch(
    loader: DistributionLoader,
    gap_share: float,
    top_decile_cutoff: float,
    nas_source: str,
) -> tuple[list[SummaryEntry], Counter, list[str]]:
    """Adjust all country-years; returns entries, reason counts and load failures."""
    entries: list[SummaryEntry] = []
    outcomes: Counter = Counter()
    failures: list[str] = []
    for country_code, year in loader.country_years():
        try:
            dist = loader.get_distribution(country_code, year)
        except DataLoadError as exc:
            failures.append(f"{country_code} {year}: {exc}")
            continue
        nas = loader.get_nas(country_code, year)
        result = calculate_chandy_seidel(
            dist.distribution,
            dist.survey_mean,
            nas_mean(nas, nas_source),
            gap_share,
            top_decile_cutoff,
        )
        outcomes["adjusted" if result.adjusted else result.reason] += 1
        entries.append(
            SummaryEntry(
                country_code=country_code,
                year=year,
                result=result,
                survey_gini=calculate_gini(dist.distribution),
                adjusted_gini=calculate_gini(result.adjusted_dist) if result.adjusted else None,
            )
        )
    return entries, outcomes, failures


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Apply the Chandy-Seidel adjustment to all country-years in a dataset.",
    )
    parser.add_argument(
        "--data-root",
        default=config.CS_DATA_ROOT,
        help="Directory with countries.json, nas_data.json and distributions/ (default: CS_DATA_ROOT).",
    )
    parser.add_argument("--gap-share", type=gap_share_arg, default=config.CS_GAP_SHARE)
    parser.add_argument("--top-decile-cutoff", type=cutoff_arg, default=config.CS_TOP_DECILE_CUTOFF)
    parser.add_argument(
        "--nas-source",
        default=config.CS_NAS_SOURCE,
        choices=list(config.NAS_SOURCES),
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Optional output directory for the combined summary CSV.",
    )
    return parser


def main() -> None:
    parser = build_arg_parser()
    args = parser.parse_args()

    if not os.path.isdir(args.data_root):
        parser.error(f"Missing data root: {args.data_root}")

    loader = DistributionLoader(Path(args.data_root))
    try:
        entries, outcomes, failures = run_batch(
            loader,
            args.gap_share,
            args.top_decile_cutoff,
            args.nas_source,
        )
    except DataLoadError as exc:
        raise SystemExit(str(exc)) from exc

    for failure in failures:
        print(f"Warning: skipped {failure}", file=sys.stderr)
    if not entries:
        raise SystemExit("No country-years could be loaded.")

    print(f"Country-years processed: {len(entries)}")
    print(f"Adjusted: {outcomes.get('adjusted', 0)}")
    for reason, count in sorted(outcomes.items()):
        if reason != "adjusted":
            print(f"Not adjusted ({reason}): {count}")

    path = export_multiple_summary_csv(entries, args.output_dir)
    print(f"Wrote {path}")


if __name__ == "__main__":
    main()
