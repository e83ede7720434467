"""Provider-agnostic conversion of raw observations into series points."""

from __future__ import annotations

import pandas as pd

from macroseries.domain.models import Periodicity, TimeSeriesPoint, TimeSeriesRequest
from macroseries.errors import ProviderError, RangeUnavailable, UnsupportedPeriodicity

# Labels follow FRED: weeks end on Friday, months and years are dated by their first day.
RESAMPLE_RULES = {
    Periodicity.WEEKLY: "W-FRI",
    Periodicity.MONTHLY: "MS",
    Periodicity.ANNUAL: "YS",
}

SPACING_TOLERANCE = 1.5


def normalize_observations(
    frame: pd.DataFrame | None,
    request: TimeSeriesRequest,
) -> tuple[TimeSeriesPoint, ...]:
    """Convert a raw ``date``/``value`` frame into ordered, unique, in-window points.

    Missing values are dropped, duplicate dates keep the last observation and
    anything outside ``[request.start_date, request.end_date]`` is discarded.
    """
    cleaned = clean_observations(frame, request.symbol)
    start = pd.Timestamp(request.start_date)
    end = pd.Timestamp(request.end_date)
    cleaned = cleaned[(cleaned["date"] >= start) & (cleaned["date"] <= end)]
    if cleaned.empty:
        raise RangeUnavailable(
            f"{request.symbol}: no observations between "
            f"{request.start_date.isoformat()} and {request.end_date.isoformat()}"
        )
    return tuple(
        TimeSeriesPoint(timestamp=timestamp.date(), value=float(value))
        for timestamp, value in zip(cleaned["date"], cleaned["value"])
    )


def clean_observations(frame: pd.DataFrame | None, symbol: str) -> pd.DataFrame:
    """Return a sorted, de-duplicated ``date``/``value`` frame without gaps."""
    if frame is None or frame.empty:
        raise RangeUnavailable(f"{symbol}: provider returned no observations")
    missing = [column for column in ("date", "value") if column not in frame.columns]
    if missing:
        raise ProviderError(f"{symbol}: payload missing column(s) {', '.join(missing)}")

    cleaned = pd.DataFrame(
        {
            "date": to_calendar_dates(frame["date"]),
            "value": pd.to_numeric(frame["value"], errors="coerce").reset_index(drop=True),
        }
    )
    cleaned["value"] = cleaned["value"].replace([float("inf"), float("-inf")], float("nan"))
    cleaned = cleaned.dropna(subset=["date", "value"])
    cleaned = cleaned.sort_values("date", kind="mergesort")
    cleaned = cleaned.drop_duplicates(subset=["date"], keep="last")
    return cleaned.reset_index(drop=True)


def to_calendar_dates(values: pd.Series | pd.Index) -> pd.Series:
    """Parse timestamps, drop any timezone keeping wall time, and truncate to midnight."""
    parsed = pd.to_datetime(pd.Series(values).reset_index(drop=True), errors="coerce")
    if isinstance(parsed.dtype, pd.DatetimeTZDtype):
        parsed = parsed.dt.tz_localize(None)
    return parsed.dt.normalize()


def conform_periodicity(
    frame: pd.DataFrame,
    periodicity: Periodicity,
    symbol: str,
) -> pd.DataFrame:
    """Downsample native observations to ``periodicity`` by period mean.

    Raises ``UnsupportedPeriodicity`` when the data is coarser than requested.
    """
    cleaned = clean_observations(frame, symbol)
    if periodicity is Periodicity.DAILY:
        if len(cleaned) >= 2:
            _check_spacing(cleaned, periodicity, symbol)
        return cleaned

    # A single observation carries no spacing; it is still relabelled to its period.
    if len(cleaned) >= 2:
        spacing = _check_spacing(cleaned, periodicity, symbol)
        if spacing * SPACING_TOLERANCE >= periodicity.nominal_days:
            return cleaned

    resampled = (
        cleaned.set_index("date")["value"]
        .resample(RESAMPLE_RULES[periodicity])
        .mean()
        .dropna()
    )
    return resampled.rename_axis("date").reset_index(name="value")


def _check_spacing(cleaned: pd.DataFrame, periodicity: Periodicity, symbol: str) -> float:
    spacing = float(cleaned["date"].diff().dt.days.median())
    if spacing > periodicity.nominal_days * SPACING_TOLERANCE:
        raise UnsupportedPeriodicity(
            f"{symbol}: observations are spaced ~{spacing:.0f} days apart; "
            f"cannot supply {periodicity.value} data"
        )
    return spacing
