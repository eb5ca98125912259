"""
Runtime configuration for dataset access and adjustment defaults.

Values are read from the environment once, at import time.
"""

from __future__ import annotations

import os


def _parse_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(
        f"{name} must be one of 1/0, true/false, yes/no, on/off; got {value!r}"
    )


def _parse_float_env(name: str, default: float, low: float, high: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number; got {value!r}") from None
    if not low <= parsed <= high:
        raise ValueError(f"{name} must be in [{low}, {high}]; got {value!r}")
    return parsed


# National accounts mean sources.
NAS_SOURCE_HFCE = "hfce"  # Household final consumption expenditure per capita.
NAS_SOURCE_GDP = "gdp"  # GDP per capita.
NAS_SOURCES = (NAS_SOURCE_HFCE, NAS_SOURCE_GDP)

# Root directory holding countries.json, nas_data.json and distributions/.
CS_DATA_ROOT = os.getenv("CS_DATA_ROOT", "data")

# Share of the survey/national-accounts gap attributed to missing top incomes.
CS_GAP_SHARE = _parse_float_env("CS_GAP_SHARE", 0.5, 0.0, 1.0)

# Population share above which the survey distribution is treated as Pareto.
CS_TOP_DECILE_CUTOFF = _parse_float_env("CS_TOP_DECILE_CUTOFF", 0.9, 0.0, 1.0)
if CS_TOP_DECILE_CUTOFF in (0.0, 1.0):
    raise ValueError(
        "CS_TOP_DECILE_CUTOFF must be strictly between 0 and 1, got {!r}".format(
            CS_TOP_DECILE_CUTOFF
        )
    )

CS_NAS_SOURCE = os.getenv("CS_NAS_SOURCE", NAS_SOURCE_HFCE).strip().lower()
if CS_NAS_SOURCE not in NAS_SOURCES:
    raise ValueError(
        "CS_NAS_SOURCE must be one of {}, got {!r}".format(", ".join(NAS_SOURCES), CS_NAS_SOURCE)
    )

# Toggle Lorenz chart output (matplotlib) in the command-line scripts.
CS_PLOTS = _parse_bool_env("CS_PLOTS", False)
