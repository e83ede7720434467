"""Series provider implementations."""

from .base import SeriesProvider
from .csv_data import CsvSeriesProvider, write_series_csv
from .fred import FredSeriesProvider
from .normalize import conform_periodicity, normalize_observations
from .yfinance_data import YFinanceSeriesProvider

__all__ = [
    "SeriesProvider",
    "CsvSeriesProvider",
    "FredSeriesProvider",
    "YFinanceSeriesProvider",
    "conform_periodicity",
    "normalize_observations",
    "write_series_csv",
]
