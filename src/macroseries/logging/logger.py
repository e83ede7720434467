"""Concise human-readable fetch logger."""

from __future__ import annotations

import logging

from macroseries.analysis.summary import SeriesSummary
from macroseries.domain.models import TimeSeries, TimeSeriesRequest


class HumanLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO") -> None:
        self._logger = logging.getLogger("macroseries")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s | %(message)s", "%Y-%m-%d %H:%M:%S")
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def fetch_started(self, request: TimeSeriesRequest) -> None:
        self._logger.info(
            "fetch | %s | %s | %s | %s to %s",
            request.symbol,
            request.source.value,
            request.periodicity.value,
            request.start_date.isoformat(),
            request.end_date.isoformat(),
        )

    def fetch_completed(self, series: TimeSeries) -> None:
        first = series.first
        last = series.last
        if first is None or last is None:
            self._logger.info("fetched | %s | 0 points", series.symbol)
            return
        self._logger.info(
            "fetched | %s | %d points | %s to %s | last %s",
            series.symbol,
            len(series),
            first.timestamp.isoformat(),
            last.timestamp.isoformat(),
            self._format_value(last.value),
        )

    def summary(self, summary: SeriesSummary) -> None:
        self._logger.info(
            "summary | %s | mean %s | median %s | std %s | min %s (%s) | max %s (%s) | change %s",
            summary.symbol,
            self._format_value(summary.mean),
            self._format_value(summary.median),
            self._format_value(summary.std),
            self._format_value(summary.minimum.value),
            summary.minimum.timestamp.isoformat(),
            self._format_value(summary.maximum.value),
            summary.maximum.timestamp.isoformat(),
            self._format_value(summary.change, signed=True),
        )

    def saved(self, symbol: str, path: str) -> None:
        self._logger.info("saved | %s | %s", symbol, path)

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)

    @staticmethod
    def _format_value(value: float, signed: bool = False, precision: int = 4) -> str:
        normalized = 0.0 if abs(float(value)) < 1e-12 else float(value)
        text = f"{normalized:+.{precision}f}" if signed else f"{normalized:.{precision}f}"
        text = text.rstrip("0").rstrip(".")
        if text in {"", "+", "-"}:
            return "0"
        return text
