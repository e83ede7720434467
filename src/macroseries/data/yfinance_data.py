"""Yahoo Finance series provider."""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Any

import pandas as pd

from macroseries.domain.models import Periodicity, Source, TimeSeriesRequest
from macroseries.errors import (
    NotFound,
    ProviderError,
    ProviderUnreachable,
    RangeUnavailable,
    UnsupportedPeriodicity,
)


class YFinanceSeriesProvider:
    """Fetch close prices from Yahoo Finance via yfinance."""

    source = Source.YAHOO

    intervals = {
        Periodicity.DAILY: "1d",
        Periodicity.WEEKLY: "1wk",
        Periodicity.MONTHLY: "1mo",
    }

    def get_observations(self, request: TimeSeriesRequest) -> pd.DataFrame:
        interval = self.intervals.get(request.periodicity)
        if interval is None:
            raise UnsupportedPeriodicity(
                f"{request.symbol}: Yahoo Finance has no {request.periodicity.value} interval"
            )
        history = self._history(
            request.symbol,
            start=request.start_date.isoformat(),
            # yfinance treats the end bound as exclusive.
            end=(request.end_date + timedelta(days=1)).isoformat(),
            interval=interval,
        )
        if history is None or pd.DataFrame(history).empty:
            full_history = self._history(request.symbol, period="max", interval="1mo")
            if full_history is None or pd.DataFrame(full_history).empty:
                raise NotFound(f"{request.symbol}: symbol not found at Yahoo Finance")
            raise RangeUnavailable(
                f"{request.symbol}: Yahoo Finance has no rows between "
                f"{request.start_date.isoformat()} and {request.end_date.isoformat()}"
            )
        return self._normalize_history(history, request.symbol)

    @staticmethod
    def _history(symbol: str, **kwargs: str) -> Any:
        try:
            import yfinance as yf
        except ImportError as exc:
            raise ProviderError(
                "yfinance is required for the yahoo source. Install it with `pip install yfinance`."
            ) from exc
        try:
            return yf.Ticker(symbol).history(auto_adjust=False, actions=False, **kwargs)
        except Exception as exc:
            raise ProviderUnreachable(f"yfinance request failed for {symbol}: {exc}") from exc

    @staticmethod
    def _normalize_history(history: Any, symbol: str) -> pd.DataFrame:
        frame = pd.DataFrame(history).copy()
        close_column = YFinanceSeriesProvider._pick_column(frame, "close")
        if close_column is None:
            close_column = YFinanceSeriesProvider._pick_column(frame, "adj_close")
        if close_column is None:
            raise ProviderError(f"yfinance payload missing close column for {symbol}")

        index = pd.DatetimeIndex(pd.to_datetime(frame.index))
        if index.tz is not None:
            index = index.tz_localize(None)
        return pd.DataFrame(
            {
                "date": index,
                "value": pd.to_numeric(frame[close_column], errors="coerce").to_numpy(),
            }
        )

    @staticmethod
    def _pick_column(frame: pd.DataFrame, field: str) -> Any | None:
        for column in frame.columns:
            key = YFinanceSeriesProvider._column_key(column)
            if key == field or key.startswith(f"{field}_"):
                return column
        return None

    @staticmethod
    def _column_key(value: Any) -> str:
        if isinstance(value, tuple):
            text = "_".join(str(part) for part in value if part is not None)
        else:
            text = str(value)
        return re.sub(r"[^a-zA-Z0-9]+", "_", text).strip("_").lower()
