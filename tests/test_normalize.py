from __future__ import annotations

from datetime import date, datetime

import pandas as pd
import pytest

from macroseries.data.normalize import conform_periodicity, normalize_observations
from macroseries.domain.models import Periodicity, Source, TimeSeriesPoint, TimeSeriesRequest
from macroseries.errors import ProviderError, RangeUnavailable, UnsupportedPeriodicity


def _request(start: date, end: date) -> TimeSeriesRequest:
    return TimeSeriesRequest(
        symbol="CPI",
        source=Source.CSV,
        start_date=start,
        end_date=end,
        periodicity=Periodicity.MONTHLY,
    )


def test_normalize_sorts_dedupes_and_drops_missing_markers() -> None:
    raw = pd.DataFrame(
        {
            "date": ["2012-03-01", "2012-01-01", "2012-02-01", "2012-02-01", "2012-04-01"],
            "value": ["2.7", "2.9", "2.8", "2.85", "."],
            "realtime_start": ["2024-03-12"] * 5,
        }
    )

    points = normalize_observations(raw, _request(date(2012, 1, 1), date(2012, 12, 1)))

    assert points == (
        TimeSeriesPoint(date(2012, 1, 1), 2.9),
        TimeSeriesPoint(date(2012, 2, 1), 2.85),
        TimeSeriesPoint(date(2012, 3, 1), 2.7),
    )


def test_normalize_discards_rows_outside_window() -> None:
    raw = pd.DataFrame(
        {
            "date": ["2011-12-01", "2012-01-01", "2012-02-01", "2012-03-01"],
            "value": [1.0, 2.0, 3.0, 4.0],
        }
    )

    points = normalize_observations(raw, _request(date(2012, 1, 1), date(2012, 2, 15)))

    assert [point.timestamp for point in points] == [date(2012, 1, 1), date(2012, 2, 1)]


def test_normalize_raises_range_unavailable_when_window_is_empty() -> None:
    raw = pd.DataFrame({"date": ["2012-01-01"], "value": [1.0]})

    with pytest.raises(RangeUnavailable):
        normalize_observations(raw, _request(date(2020, 1, 1), date(2020, 12, 1)))
    with pytest.raises(RangeUnavailable):
        normalize_observations(pd.DataFrame(), _request(date(2020, 1, 1), date(2020, 12, 1)))


def test_normalize_requires_date_and_value_columns() -> None:
    raw = pd.DataFrame({"date": ["2012-01-01"], "close": [1.0]})

    with pytest.raises(ProviderError, match="value"):
        normalize_observations(raw, _request(date(2012, 1, 1), date(2012, 12, 1)))


def test_normalize_keeps_wall_date_of_timezone_aware_timestamps() -> None:
    raw = pd.DataFrame(
        {
            "date": pd.to_datetime(["2025-01-02 00:00", "2025-01-03 00:00"]).tz_localize(
                "America/New_York"
            ),
            "value": [10.5, 11.5],
        }
    )

    points = normalize_observations(raw, _request(date(2025, 1, 1), date(2025, 1, 31)))

    assert [point.timestamp for point in points] == [date(2025, 1, 2), date(2025, 1, 3)]


def test_conform_downsamples_daily_to_monthly_mean() -> None:
    dates = pd.date_range("2024-01-01", "2024-02-29", freq="D")
    values = [1.0 if stamp.month == 1 else 3.0 for stamp in dates]
    raw = pd.DataFrame({"date": dates, "value": values})

    conformed = conform_periodicity(raw, Periodicity.MONTHLY, "DAILY_SERIES")

    assert conformed["date"].tolist() == [pd.Timestamp("2024-01-01"), pd.Timestamp("2024-02-01")]
    assert conformed["value"].tolist() == [1.0, 3.0]


def test_conform_downsamples_daily_to_weeks_ending_friday() -> None:
    dates = pd.date_range("2024-01-01", "2024-01-12", freq="D")
    raw = pd.DataFrame({"date": dates, "value": [float(day) for day in range(1, 13)]})

    conformed = conform_periodicity(raw, Periodicity.WEEKLY, "DAILY_SERIES")

    assert conformed["date"].tolist() == [pd.Timestamp("2024-01-05"), pd.Timestamp("2024-01-12")]
    assert conformed["value"].tolist() == [3.0, 9.0]


def test_conform_downsamples_monthly_to_annual() -> None:
    dates = pd.date_range("2020-01-01", "2021-12-01", freq="MS")
    values = [1.0 if stamp.year == 2020 else 2.0 for stamp in dates]
    raw = pd.DataFrame({"date": dates, "value": values})

    conformed = conform_periodicity(raw, Periodicity.ANNUAL, "MONTHLY_SERIES")

    assert conformed["date"].tolist() == [pd.Timestamp("2020-01-01"), pd.Timestamp("2021-01-01")]
    assert conformed["value"].tolist() == [1.0, 2.0]


def test_conform_keeps_native_monthly_data() -> None:
    dates = pd.date_range("2020-01-01", "2020-12-01", freq="MS")
    raw = pd.DataFrame({"date": dates, "value": range(12)})

    conformed = conform_periodicity(raw, Periodicity.MONTHLY, "MONTHLY_SERIES")

    assert len(conformed) == 12
    assert conformed["value"].tolist() == [float(value) for value in range(12)]


def test_conform_rejects_finer_granularity_than_available() -> None:
    dates = pd.date_range("2020-01-01", "2020-12-01", freq="MS")
    raw = pd.DataFrame({"date": dates, "value": range(12)})

    with pytest.raises(UnsupportedPeriodicity, match="weekly"):
        conform_periodicity(raw, Periodicity.WEEKLY, "MONTHLY_SERIES")

    quarterly = pd.DataFrame(
        {"date": pd.date_range("2020-01-01", "2021-10-01", freq="QS"), "value": range(8)}
    )
    with pytest.raises(UnsupportedPeriodicity):
        conform_periodicity(quarterly, Periodicity.MONTHLY, "QUARTERLY_SERIES")


def test_normalize_keeps_first_day_when_window_starts_midday() -> None:
    raw = pd.DataFrame({"date": ["2012-01-01", "2012-02-01"], "value": [2.9, 2.8]})
    request = TimeSeriesRequest(
        symbol="CPI",
        source=Source.CSV,
        start_date=datetime(2012, 1, 1, 12, 0),
        end_date=date(2012, 2, 1),
    )

    points = normalize_observations(raw, request)

    assert [point.timestamp for point in points] == [date(2012, 1, 1), date(2012, 2, 1)]


def test_conform_relabels_single_observation_to_its_period() -> None:
    raw = pd.DataFrame({"date": ["2024-03-15"], "value": [1.0]})

    annual = conform_periodicity(raw, Periodicity.ANNUAL, "ONE_ROW")
    monthly = conform_periodicity(raw, Periodicity.MONTHLY, "ONE_ROW")
    daily = conform_periodicity(raw, Periodicity.DAILY, "ONE_ROW")

    assert annual["date"].tolist() == [pd.Timestamp("2024-01-01")]
    assert annual["value"].tolist() == [1.0]
    assert monthly["date"].tolist() == [pd.Timestamp("2024-03-01")]
    assert daily["date"].tolist() == [pd.Timestamp("2024-03-15")]
