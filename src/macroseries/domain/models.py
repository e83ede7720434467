"""Core time-series domain models."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Self

import pandas as pd

from macroseries.errors import InvalidRequest


class Periodicity(StrEnum):
    """Supported sampling granularities."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ANNUAL = "annual"

    @property
    def nominal_days(self) -> int:
        """Upper bound on the spacing between two observations, in days."""
        return _NOMINAL_DAYS[self]

    @classmethod
    def parse(cls, value: str | Periodicity) -> Periodicity:
        """Parse a periodicity from common aliases."""
        if isinstance(value, Periodicity):
            return value
        mapping = {
            "d": cls.DAILY,
            "1d": cls.DAILY,
            "day": cls.DAILY,
            "daily": cls.DAILY,
            "w": cls.WEEKLY,
            "1wk": cls.WEEKLY,
            "week": cls.WEEKLY,
            "weekly": cls.WEEKLY,
            "m": cls.MONTHLY,
            "1mo": cls.MONTHLY,
            "month": cls.MONTHLY,
            "monthly": cls.MONTHLY,
            "a": cls.ANNUAL,
            "y": cls.ANNUAL,
            "year": cls.ANNUAL,
            "yearly": cls.ANNUAL,
            "annual": cls.ANNUAL,
        }
        normalized = str(value).strip().lower()
        if normalized not in mapping:
            supported = ", ".join(member.value for member in cls)
            raise InvalidRequest(f"Unknown periodicity '{value}'. Supported: {supported}")
        return mapping[normalized]


_NOMINAL_DAYS = {
    Periodicity.DAILY: 1,
    Periodicity.WEEKLY: 7,
    Periodicity.MONTHLY: 31,
    Periodicity.ANNUAL: 366,
}


def _as_calendar_date(value: object) -> object:
    """Truncate datetimes (including pandas Timestamps) to their calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


class Source(StrEnum):
    """Supported data providers."""

    FRED = "fred"
    YAHOO = "yahoo"
    CSV = "csv"

    @classmethod
    def parse(cls, value: str | Source) -> Source:
        """Parse a provider name case-insensitively."""
        if isinstance(value, Source):
            return value
        normalized = str(value).strip().lower()
        aliases = {"yfinance": cls.YAHOO, "local": cls.CSV}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            raise InvalidRequest(f"Unknown source '{value}'. Supported: {supported}") from exc


@dataclass(frozen=True)
class TimeSeriesRequest:
    """Symbol, provider and window for a single fetch."""

    symbol: str
    source: Source
    start_date: date
    end_date: date
    periodicity: Periodicity = Periodicity.MONTHLY

    def __post_init__(self) -> None:
        symbol = str(self.symbol or "").strip().upper()
        object.__setattr__(self, "symbol", symbol)
        object.__setattr__(self, "source", Source.parse(self.source))
        object.__setattr__(self, "periodicity", Periodicity.parse(self.periodicity))
        object.__setattr__(self, "start_date", _as_calendar_date(self.start_date))
        object.__setattr__(self, "end_date", _as_calendar_date(self.end_date))
        self.validate()

    def validate(self) -> Self:
        """Validate request fields."""
        if not self.symbol:
            raise InvalidRequest("symbol must be non-empty")
        if not isinstance(self.start_date, date) or not isinstance(self.end_date, date):
            raise InvalidRequest("start_date and end_date must be dates")
        if self.start_date > self.end_date:
            raise InvalidRequest(
                f"start_date {self.start_date.isoformat()} is after "
                f"end_date {self.end_date.isoformat()}"
            )
        return self

    def contains(self, when: date) -> bool:
        """Return whether a date lies inside the requested window."""
        return self.start_date <= when <= self.end_date


@dataclass(frozen=True)
class TimeSeriesPoint:
    """Single observation."""

    timestamp: date
    value: float


@dataclass(frozen=True)
class TimeSeries:
    """Ordered observations tagged with the request that produced them."""

    request: TimeSeriesRequest
    points: tuple[TimeSeriesPoint, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        points = tuple(self.points)
        object.__setattr__(self, "points", points)
        for previous, current in zip(points, points[1:]):
            if current.timestamp <= previous.timestamp:
                raise ValueError(
                    f"{self.request.symbol}: timestamps must be strictly ascending "
                    f"({previous.timestamp} then {current.timestamp})"
                )

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[TimeSeriesPoint]:
        return iter(self.points)

    @property
    def symbol(self) -> str:
        return self.request.symbol

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def periods(self) -> list[date]:
        return [point.timestamp for point in self.points]

    @property
    def values(self) -> list[float]:
        return [point.value for point in self.points]

    @property
    def first(self) -> TimeSeriesPoint | None:
        return self.points[0] if self.points else None

    @property
    def last(self) -> TimeSeriesPoint | None:
        return self.points[-1] if self.points else None

    @property
    def minimum(self) -> TimeSeriesPoint | None:
        """Lowest observation; the earliest one wins ties."""
        if not self.points:
            return None
        return min(self.points, key=lambda point: point.value)

    @property
    def maximum(self) -> TimeSeriesPoint | None:
        """Highest observation; the earliest one wins ties."""
        if not self.points:
            return None
        return max(self.points, key=lambda point: point.value)

    def window(self, start: date, end: date) -> TimeSeries:
        """Return a derived series restricted to ``[start, end]``."""
        return TimeSeries(
            request=self.request,
            points=tuple(point for point in self.points if start <= point.timestamp <= end),
        )

    def to_frame(self) -> pd.DataFrame:
        """Return a two-column ``period``/``value`` frame."""
        return pd.DataFrame(
            {
                "period": pd.to_datetime(pd.Series(self.periods, dtype="object")),
                "value": pd.Series(self.values, dtype="float64"),
            },
            columns=["period", "value"],
        )
