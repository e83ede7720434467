"""FRED (Federal Reserve Economic Data) series provider."""

from __future__ import annotations

import io
import logging
from time import sleep
from typing import Any

import pandas as pd
import requests

from macroseries.data.normalize import conform_periodicity
from macroseries.domain.models import Periodicity, Source, TimeSeriesRequest
from macroseries.errors import (
    NotFound,
    ProviderError,
    ProviderUnreachable,
    RangeUnavailable,
    UnsupportedPeriodicity,
)

logger = logging.getLogger("macroseries.data.fred")

DEFAULT_API_URL = "https://api.stlouisfed.org/fred"
DEFAULT_GRAPH_URL = "https://fred.stlouisfed.org/graph/fredgraph.csv"

FREQUENCY_CODES = {
    Periodicity.DAILY: "D",
    Periodicity.WEEKLY: "W",
    Periodicity.MONTHLY: "M",
    Periodicity.ANNUAL: "A",
}

NATIVE_FREQUENCY_DAYS = {
    "D": 1,
    "W": 7,
    "BW": 14,
    "M": 31,
    "Q": 92,
    "SA": 183,
    "A": 366,
}


class FredSeriesProvider:
    """Fetch observations from FRED.

    With an API key the JSON API is used, which exposes series metadata and
    server-side frequency aggregation. Without one the public ``fredgraph.csv``
    export is downloaded and aggregated locally.
    """

    source = Source.FRED

    def __init__(
        self,
        api_key: str = "",
        api_url: str = DEFAULT_API_URL,
        graph_url: str = DEFAULT_GRAPH_URL,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_seconds: float = 1.0,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key.strip()
        self.api_url = api_url.rstrip("/")
        self.graph_url = graph_url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.backoff_seconds = backoff_seconds
        self.session = session or requests.Session()

    def get_observations(self, request: TimeSeriesRequest) -> pd.DataFrame:
        if self.api_key:
            return self._fetch_from_api(request)
        return self._fetch_from_graph(request)

    def _fetch_from_api(self, request: TimeSeriesRequest) -> pd.DataFrame:
        metadata = self._series_metadata(request.symbol)
        native_code = str(metadata.get("frequency_short", "")).strip().upper()
        native_days = NATIVE_FREQUENCY_DAYS.get(native_code)
        if native_days is not None and request.periodicity.nominal_days < native_days:
            raise UnsupportedPeriodicity(
                f"{request.symbol}: FRED publishes {metadata.get('frequency', native_code)} "
                f"data; cannot supply {request.periodicity.value}"
            )
        self._check_history(metadata, request)

        params = {
            "series_id": request.symbol,
            "observation_start": request.start_date.isoformat(),
            "observation_end": request.end_date.isoformat(),
            "sort_order": "asc",
        }
        requested_code = FREQUENCY_CODES[request.periodicity]
        if requested_code != native_code:
            params["frequency"] = requested_code.lower()
            params["aggregation_method"] = "avg"
        payload = self._get_json("/series/observations", params, request.symbol)
        observations = payload.get("observations")
        if not isinstance(observations, list):
            raise ProviderError(f"{request.symbol}: FRED response has no observations")
        if not observations:
            raise RangeUnavailable(
                f"{request.symbol}: FRED returned no observations between "
                f"{request.start_date.isoformat()} and {request.end_date.isoformat()}"
            )
        frame = pd.DataFrame(observations)
        if "date" not in frame.columns or "value" not in frame.columns:
            raise ProviderError(f"{request.symbol}: FRED observations missing date/value fields")
        return frame[["date", "value"]].copy()

    def _series_metadata(self, symbol: str) -> dict[str, Any]:
        payload = self._get_json("/series", {"series_id": symbol}, symbol)
        series = payload.get("seriess")
        if not isinstance(series, list) or not series:
            raise NotFound(f"{symbol}: series not found at FRED")
        first = series[0]
        return first if isinstance(first, dict) else {}

    @staticmethod
    def _check_history(metadata: dict[str, Any], request: TimeSeriesRequest) -> None:
        available_start = pd.to_datetime(metadata.get("observation_start"), errors="coerce")
        available_end = pd.to_datetime(metadata.get("observation_end"), errors="coerce")
        if pd.isna(available_start) or pd.isna(available_end):
            return
        if (
            pd.Timestamp(request.end_date) < available_start
            or pd.Timestamp(request.start_date) > available_end
        ):
            raise RangeUnavailable(
                f"{request.symbol}: FRED history covers "
                f"{available_start.date().isoformat()} to {available_end.date().isoformat()}"
            )

    def _get_json(self, path: str, params: dict[str, str], symbol: str) -> dict[str, Any]:
        query = {**params, "api_key": self.api_key, "file_type": "json"}
        response = self._request_with_retry(f"{self.api_url}{path}", query, symbol)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError(f"{symbol}: FRED returned malformed JSON") from exc
        if not isinstance(payload, dict):
            raise ProviderError(f"{symbol}: FRED returned an unexpected payload")
        return payload

    def _fetch_from_graph(self, request: TimeSeriesRequest) -> pd.DataFrame:
        params = {
            "id": request.symbol,
            "cosd": request.start_date.isoformat(),
            "coed": request.end_date.isoformat(),
        }
        response = self._request_with_retry(self.graph_url, params, request.symbol)
        try:
            raw = pd.read_csv(io.StringIO(response.text))
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise ProviderError(f"{request.symbol}: FRED returned unreadable CSV") from exc
        frame = self._graph_frame(raw, request.symbol)
        return conform_periodicity(frame, request.periodicity, request.symbol)

    @staticmethod
    def _graph_frame(raw: pd.DataFrame, symbol: str) -> pd.DataFrame:
        lower_to_original = {str(column).strip().lower(): column for column in raw.columns}
        date_column = lower_to_original.get("observation_date") or lower_to_original.get("date")
        if date_column is None:
            raise ProviderError(f"{symbol}: FRED CSV missing date column")
        value_column = lower_to_original.get(symbol.lower())
        if value_column is None:
            others = [column for column in raw.columns if column != date_column]
            if len(others) != 1:
                raise ProviderError(f"{symbol}: FRED CSV missing value column")
            value_column = others[0]
        return pd.DataFrame({"date": raw[date_column], "value": raw[value_column]})

    def _request_with_retry(
        self,
        url: str,
        params: dict[str, str],
        symbol: str,
    ) -> requests.Response:
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
            except requests.RequestException as exc:
                if attempt == self.max_retries:
                    raise ProviderUnreachable(f"FRED request failed for {symbol}: {exc}") from exc
                self._wait(attempt, symbol, str(exc))
                continue
            if response.status_code == 429:
                if attempt == self.max_retries:
                    raise ProviderUnreachable("FRED rate limit exceeded")
                self._wait(attempt, symbol, "rate limited")
                continue
            if response.status_code >= 500:
                if attempt == self.max_retries:
                    raise ProviderUnreachable(f"FRED server error: {response.status_code}")
                self._wait(attempt, symbol, f"server error {response.status_code}")
                continue
            if response.status_code >= 400:
                self._raise_client_error(response, symbol)
            return response
        raise ProviderUnreachable("FRED request exhausted retries")

    def _wait(self, attempt: int, symbol: str, reason: str) -> None:
        delay = attempt * self.backoff_seconds
        logger.warning(
            "retry | %s | attempt %d/%d | %s | sleeping %.1fs",
            symbol,
            attempt,
            self.max_retries,
            reason,
            delay,
        )
        sleep(delay)

    @staticmethod
    def _raise_client_error(response: requests.Response, symbol: str) -> None:
        detail = ""
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            detail = str(payload.get("error_message", "")).strip()
        if not detail:
            detail = response.text.strip()[:200] or "No response body"
        lowered = detail.lower()
        if response.status_code == 404 or "does not exist" in lowered:
            raise NotFound(f"{symbol}: series not found at FRED ({detail})")
        if "frequency" in lowered:
            raise UnsupportedPeriodicity(f"{symbol}: {detail}")
        raise ProviderError(f"FRED error {response.status_code} for {symbol}: {detail}")
