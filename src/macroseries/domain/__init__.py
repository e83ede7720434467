"""Domain models for time-series requests and results."""

from .models import Periodicity, Source, TimeSeries, TimeSeriesPoint, TimeSeriesRequest

__all__ = [
    "Periodicity",
    "Source",
    "TimeSeries",
    "TimeSeriesPoint",
    "TimeSeriesRequest",
]
