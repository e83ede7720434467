from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from macroseries.domain.models import Periodicity, Source, TimeSeriesRequest
from macroseries.errors import InvalidRequest, NotFound, ProviderUnreachable
from macroseries.fetcher import SeriesFetcher

CPI = "USACPALTT01CTGYM"


class StubProvider:
    """Serves a fixed raw frame and counts calls."""

    source = Source.FRED

    def __init__(self, frame: pd.DataFrame | None = None, error: Exception | None = None) -> None:
        self.frame = frame
        self.error = error
        self.calls: list[TimeSeriesRequest] = []

    def get_observations(self, request: TimeSeriesRequest) -> pd.DataFrame:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        assert self.frame is not None
        return self.frame.copy()


def _cpi_like_frame() -> pd.DataFrame:
    """Monthly growth rates 2011-06..2024-03 with a gap and a 2020-05 trough."""
    periods = pd.date_range("2011-06-01", "2024-03-01", freq="MS")
    values: list[object] = [round(2.0 + (index % 12) / 10.0, 2) for index in range(len(periods))]
    frame = pd.DataFrame(
        {"date": periods.strftime("%Y-%m-%d"), "value": pd.Series(values, dtype="object")}
    )
    frame.loc[frame["date"] == "2020-05-01", "value"] = 0.1
    frame.loc[frame["date"] == "2024-02-01", "value"] = 3.1
    frame.loc[frame["date"] == "2016-07-01", "value"] = "."
    # Provider output arrives unordered.
    return frame.sample(frac=1.0, random_state=7).reset_index(drop=True)


def _request(**overrides: object) -> TimeSeriesRequest:
    fields: dict[str, object] = {
        "symbol": CPI,
        "source": Source.FRED,
        "start_date": date(2012, 1, 1),
        "end_date": date(2024, 2, 1),
        "periodicity": Periodicity.MONTHLY,
    }
    fields.update(overrides)
    return TimeSeriesRequest(**fields)


def test_fetch_returns_sorted_unique_points_inside_window() -> None:
    fetcher = SeriesFetcher({Source.FRED: StubProvider(_cpi_like_frame())})
    request = _request()

    series = fetcher.fetch(request)

    periods = series.periods
    assert periods == sorted(periods)
    assert len(set(periods)) == len(periods)
    assert all(request.start_date <= period <= request.end_date for period in periods)
    assert periods[0] == date(2012, 1, 1)
    assert periods[-1] == date(2024, 2, 1)
    assert date(2016, 7, 1) not in periods
    assert series.request == request


def test_reference_cpi_request_shape() -> None:
    fetcher = SeriesFetcher({"FRED": StubProvider(_cpi_like_frame())})

    series = fetcher.fetch(_request())

    assert series.last is not None
    assert series.last.value == pytest.approx(3.1)
    assert series.minimum is not None
    assert series.minimum.timestamp == date(2020, 5, 1)
    assert list(series.to_frame().columns) == ["period", "value"]


def test_fetch_is_idempotent() -> None:
    fetcher = SeriesFetcher({Source.FRED: StubProvider(_cpi_like_frame())})

    assert fetcher.fetch(_request()) == fetcher.fetch(_request())


def test_provider_errors_propagate_unchanged() -> None:
    error = NotFound("NOPE: series not found at FRED")
    fetcher = SeriesFetcher({Source.FRED: StubProvider(error=error)})

    with pytest.raises(NotFound) as excinfo:
        fetcher.fetch(_request(symbol="NOPE"))
    assert excinfo.value is error

    fetcher = SeriesFetcher({Source.FRED: StubProvider(error=ProviderUnreachable("down"))})
    with pytest.raises(ProviderUnreachable):
        fetcher.fetch(_request())


def test_unconfigured_source_is_rejected_before_provider_call() -> None:
    provider = StubProvider(_cpi_like_frame())
    fetcher = SeriesFetcher({Source.FRED: provider})

    with pytest.raises(InvalidRequest, match="yahoo"):
        fetcher.fetch(_request(source=Source.YAHOO))
    assert provider.calls == []


def test_inverted_range_is_rejected_before_provider_call() -> None:
    provider = StubProvider(_cpi_like_frame())
    fetcher = SeriesFetcher({Source.FRED: provider})

    with pytest.raises(InvalidRequest):
        fetcher.fetch(_request(start_date=date(2024, 2, 1), end_date=date(2012, 1, 1)))
    assert provider.calls == []


def test_fetch_many_preserves_request_order() -> None:
    fetcher = SeriesFetcher({Source.FRED: StubProvider(_cpi_like_frame())})
    requests = [
        _request(start_date=date(2020, 1, 1), end_date=date(2020, 12, 1)),
        _request(start_date=date(2012, 1, 1), end_date=date(2012, 6, 1)),
    ]

    results = fetcher.fetch_many(requests)

    assert [len(series) for series in results] == [12, 6]
    assert [series.request for series in results] == requests
