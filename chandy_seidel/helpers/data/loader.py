"""
Loading and caching of country distribution and national accounts data.

Expected layout under the data root:
  countries.json               [{code, name, region, years}]
  nas_data.json                {code: {year: {hfce, gdp}}}
  distributions/<CODE>.json    {years: {year: {survey_mean, bins: [{p, l, w, q, new}]}}}
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from chandy_seidel.helpers.common.config import NAS_SOURCE_GDP, NAS_SOURCE_HFCE
from chandy_seidel.helpers.lorenz.curves import LorenzPoint, calculate_mean

COUNTRIES_FILENAME = "countries.json"
NAS_FILENAME = "nas_data.json"
DISTRIBUTIONS_DIRNAME = "distributions"

REGION_NAMES = {
    "EAP": "East Asia & Pacific",
    "ECA": "Europe & Central Asia",
    "LAC": "Latin America & Caribbean",
    "MNA": "Middle East & North Africa",
    "NAC": "North America",
    "SAS": "South Asia",
    "SSA": "Sub-Saharan Africa",
    "OHI": "Other High Income",
}


class DataLoadError(ValueError):
    """Raised when a dataset file is missing, malformed, or lacks a country-year."""


@dataclass(frozen=True)
class CountryDistribution:
    country_code: str
    year: int
    distribution: tuple[LorenzPoint, ...]
    survey_mean: float | None
    quantiles: tuple[int | None, ...] = ()
    new_bins: tuple[bool, ...] = ()


@dataclass(frozen=True)
class NasRecord:
    hfce: float | None = None
    gdp: float | None = None


@dataclass
class DataCache:
    """Per-session cache of parsed dataset files."""

    countries: list[dict[str, Any]] | None = None
    nas: dict[str, Any] | None = None
    country_data: dict[str, dict[str, Any]] = field(default_factory=dict)

    def clear(self) -> None:
        self.countries = None
        self.nas = None
        self.country_data.clear()


def _read_json(path: Path, description: str) -> Any:
    if not path.exists():
        raise DataLoadError(f"Could not load {description}: missing file {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Could not load {description}: {path} is not valid JSON ({exc})") from exc


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def nas_mean(record: NasRecord, source: str) -> float | None:
    """Pick the national accounts mean for the configured source."""
    if source == NAS_SOURCE_HFCE:
        return record.hfce
    if source == NAS_SOURCE_GDP:
        return record.gdp
    raise ValueError(f"Unsupported NAS source: {source}")


class DistributionLoader:
    def __init__(self, data_root: str | Path, cache: DataCache | None = None) -> None:
        self.data_root = Path(data_root)
        self.cache = cache if cache is not None else DataCache()

    def load_countries(self) -> list[dict[str, Any]]:
        if self.cache.countries is None:
            countries = _read_json(self.data_root / COUNTRIES_FILENAME, "country list")
            if not isinstance(countries, list):
                raise DataLoadError(f"{COUNTRIES_FILENAME} must hold a list of countries.")
            self.cache.countries = countries
        return self.cache.countries

    def load_nas_data(self) -> dict[str, Any]:
        if self.cache.nas is None:
            nas = _read_json(self.data_root / NAS_FILENAME, "national accounts data")
            if not isinstance(nas, dict):
                raise DataLoadError(f"{NAS_FILENAME} must hold an object keyed by country code.")
            self.cache.nas = nas
        return self.cache.nas

    def load_country_data(self, country_code: str) -> dict[str, Any]:
        if not country_code:
            raise ValueError("Country code is required")
        if country_code not in self.cache.country_data:
            path = self.data_root / DISTRIBUTIONS_DIRNAME / f"{country_code}.json"
            self.cache.country_data[country_code] = _read_json(
                path, f"distribution data for {country_code}"
            )
        return self.cache.country_data[country_code]

    def get_distribution(self, country_code: str, year: int) -> CountryDistribution:
        country_data = self.load_country_data(country_code)
        year_data = (country_data.get("years") or {}).get(str(year))
        if not year_data:
            raise DataLoadError(f"No data available for {country_code} in {year}")

        try:
            bins = year_data["bins"]
            distribution = tuple(
                LorenzPoint(p=float(item["p"]), l=float(item["l"]), w=_optional_float(item.get("w")))
                for item in bins
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise DataLoadError(
                f"Malformed bins for {country_code} in {year}: {exc}"
            ) from exc

        survey_mean = _optional_float(year_data.get("survey_mean")) or calculate_mean(distribution)
        return CountryDistribution(
            country_code=country_code,
            year=int(year),
            distribution=distribution,
            survey_mean=survey_mean,
            quantiles=tuple(item.get("q") for item in bins),
            new_bins=tuple(item.get("new") == 1 for item in bins),
        )

    def get_nas(self, country_code: str, year: int) -> NasRecord:
        record = (self.load_nas_data().get(country_code) or {}).get(str(year))
        if not record:
            return NasRecord()
        return NasRecord(
            hfce=_optional_float(record.get("hfce")),
            gdp=_optional_float(record.get("gdp")),
        )

    def available_years(self, country_code: str) -> list[int]:
        for country in self.load_countries():
            if country.get("code") == country_code:
                return [int(year) for year in country.get("years") or []]
        return []

    def search_countries(self, query: str) -> list[dict[str, Any]]:
        lower_query = query.lower()
        return [
            country
            for country in self.load_countries()
            if lower_query in country.get("code", "").lower()
            or lower_query in country.get("name", "").lower()
        ]

    def countries_by_region(self) -> dict[str, dict[str, Any]]:
        grouped: dict[str, dict[str, Any]] = {}
        for country in self.load_countries():
            region = country.get("region") or "Other"
            if region not in grouped:
                grouped[region] = {"name": REGION_NAMES.get(region, region), "countries": []}
            grouped[region]["countries"].append(country)
        for region in grouped.values():
            region["countries"].sort(key=lambda country: country.get("name", ""))
        return grouped

    def country_years(self) -> list[tuple[str, int]]:
        """All (country code, year) pairs listed in the country metadata."""
        return [
            (country["code"], int(year))
            for country in self.load_countries()
            for year in country.get("years") or []
        ]

    def preload(self, country_codes: Iterable[str]) -> list[str]:
        """Load several countries, warning about and skipping failures."""
        loaded = []
        for code in country_codes:
            try:
                self.load_country_data(code)
            except DataLoadError as exc:
                print(f"Warning: could not preload {code}: {exc}", file=sys.stderr)
                continue
            loaded.append(code)
        return loaded

    def load_status(self) -> dict[str, Any]:
        return {
            "countries_loaded": self.cache.countries is not None,
            "nas_loaded": self.cache.nas is not None,
            "cached_countries": list(self.cache.country_data),
        }

    def clear_cache(self) -> None:
        self.cache.clear()
