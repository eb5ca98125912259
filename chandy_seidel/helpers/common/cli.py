"""Common CLI formatting helpers."""

from __future__ import annotations

import math


def format_float(value: float, decimals: int = 10) -> str:
    """Format floats consistently for CLI output."""
    return f"{value:.{decimals}f}".rstrip("0").rstrip(".")


def format_optional(value: float | None, decimals: int = 4, missing: str = "--") -> str:
    """Format an optional float, using a placeholder for missing or non-finite values."""
    if value is None or not math.isfinite(value):
        return missing
    return f"{value:.{decimals}f}"


def format_signed_percent(value: float | None, decimals: int = 1) -> str:
    """Format a percent change with an explicit sign, e.g. +12.3%."""
    if value is None or not math.isfinite(value):
        return "--"
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def parse_float_list(raw: str) -> list[float]:
    """Parse a comma-separated list of floats such as '0.1,0.5,0.9'."""
    values: list[float] = []
    for token in raw.split(","):
        stripped = token.strip()
        if not stripped:
            continue
        values.append(float(stripped))
    if not values:
        raise ValueError(f"No values found in {raw!r}")
    return values
