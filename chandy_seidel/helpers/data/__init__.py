"""Dataset loading and CSV export for country-year distributions."""

from chandy_seidel.helpers.data.export import (
    SummaryEntry,
    distribution_table,
    export_distribution_csv,
    export_lorenz_csv,
    export_multiple_summary_csv,
    export_summary_csv,
    format_for_csv,
    lorenz_table,
    summary_table,
)
from chandy_seidel.helpers.data.loader import (
    CountryDistribution,
    DataCache,
    DataLoadError,
    DistributionLoader,
    NasRecord,
    nas_mean,
)

__all__ = [
    "CountryDistribution",
    "DataCache",
    "DataLoadError",
    "DistributionLoader",
    "NasRecord",
    "SummaryEntry",
    "distribution_table",
    "export_distribution_csv",
    "export_lorenz_csv",
    "export_multiple_summary_csv",
    "export_summary_csv",
    "format_for_csv",
    "lorenz_table",
    "nas_mean",
    "summary_table",
]
