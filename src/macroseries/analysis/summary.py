"""Descriptive statistics over a fetched series."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

import pandas as pd

from macroseries.domain.models import TimeSeries, TimeSeriesPoint
from macroseries.errors import RangeUnavailable


@dataclass(frozen=True)
class SeriesSummary:
    """Headline statistics for one series."""

    symbol: str
    count: int
    start: date
    end: date
    first: float
    last: float
    mean: float
    median: float
    std: float
    minimum: TimeSeriesPoint
    maximum: TimeSeriesPoint

    @property
    def change(self) -> float:
        """Difference between the last and first observation."""
        return self.last - self.first

    def to_record(self) -> dict[str, Any]:
        """Convert summary to a serializable dict."""
        return {
            "symbol": self.symbol,
            "count": self.count,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "first": self.first,
            "last": self.last,
            "mean": self.mean,
            "median": self.median,
            "std": self.std,
            "min": self.minimum.value,
            "min_period": self.minimum.timestamp.isoformat(),
            "max": self.maximum.value,
            "max_period": self.maximum.timestamp.isoformat(),
            "change": self.change,
        }


def summarize(series: TimeSeries) -> SeriesSummary:
    """Compute count, location, spread and extremes of ``series``."""
    if series.is_empty:
        raise RangeUnavailable(f"{series.symbol}: cannot summarize an empty series")
    values = pd.Series(series.values, dtype="float64")
    # Sample standard deviation is undefined for a single observation.
    std = float(values.std(ddof=1)) if len(values) > 1 else 0.0
    first = series.points[0]
    last = series.points[-1]
    return SeriesSummary(
        symbol=series.symbol,
        count=len(series),
        start=first.timestamp,
        end=last.timestamp,
        first=first.value,
        last=last.value,
        mean=float(values.mean()),
        median=float(values.median()),
        std=std,
        minimum=series.minimum,
        maximum=series.maximum,
    )
