"""Fetch, normalize and summarize economic time series."""

from macroseries.analysis.summary import SeriesSummary, summarize
from macroseries.domain.models import (
    Periodicity,
    Source,
    TimeSeries,
    TimeSeriesPoint,
    TimeSeriesRequest,
)
from macroseries.errors import (
    ConfigError,
    InvalidRequest,
    NotFound,
    ProviderError,
    ProviderUnreachable,
    RangeUnavailable,
    SeriesError,
    UnsupportedPeriodicity,
)
from macroseries.fetcher import SeriesFetcher

__all__ = [
    "ConfigError",
    "InvalidRequest",
    "NotFound",
    "Periodicity",
    "ProviderError",
    "ProviderUnreachable",
    "RangeUnavailable",
    "SeriesError",
    "SeriesFetcher",
    "SeriesSummary",
    "Source",
    "TimeSeries",
    "TimeSeriesPoint",
    "TimeSeriesRequest",
    "UnsupportedPeriodicity",
    "summarize",
]
