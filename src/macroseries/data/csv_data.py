"""CSV-backed series provider and export helper."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from macroseries.data.normalize import conform_periodicity
from macroseries.domain.models import Source, TimeSeries, TimeSeriesRequest
from macroseries.errors import NotFound, ProviderError


class CsvSeriesProvider:
    """Load observations from ``<data_dir>/<SYMBOL>.csv`` files."""

    source = Source.CSV

    date_column_candidates = ("period", "date", "observation_date", "datetime", "timestamp")

    def __init__(self, data_dir: str) -> None:
        self.data_dir = Path(data_dir)

    def get_observations(self, request: TimeSeriesRequest) -> pd.DataFrame:
        path = self._resolve_path(request.symbol)
        if path is None:
            raise NotFound(f"No CSV found for {request.symbol} under {self.data_dir}")
        try:
            raw = pd.read_csv(path)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise ProviderError(f"{request.symbol}: unreadable CSV at {path}") from exc
        frame = self._normalize_csv(raw, request.symbol)
        return conform_periodicity(frame, request.periodicity, request.symbol)

    def _resolve_path(self, symbol: str) -> Path | None:
        candidates = [
            self.data_dir / f"{symbol.upper()}.csv",
            self.data_dir / f"{symbol.lower()}.csv",
            self.data_dir / f"{symbol}.csv",
        ]
        for candidate in candidates:
            if candidate.exists():
                return candidate
        return None

    def _normalize_csv(self, frame: pd.DataFrame, symbol: str) -> pd.DataFrame:
        lower_to_original = {str(column).strip().lower(): column for column in frame.columns}
        date_column = self._pick_date_column(lower_to_original)
        value_column = lower_to_original.get("value") or lower_to_original.get(symbol.lower())
        if value_column is None:
            others = [column for column in frame.columns if column != date_column]
            if len(others) != 1:
                raise ProviderError(
                    f"{symbol}: CSV needs a 'value' column, a '{symbol}' column, "
                    "or exactly one data column"
                )
            value_column = others[0]
        return pd.DataFrame({"date": frame[date_column], "value": frame[value_column]})

    def _pick_date_column(self, lower_to_original: dict[str, str]) -> str:
        for candidate in self.date_column_candidates:
            if candidate in lower_to_original:
                return lower_to_original[candidate]
        candidates = ", ".join(self.date_column_candidates)
        raise ProviderError(f"CSV missing date column. Expected one of: {candidates}")


def write_series_csv(series: TimeSeries, path: str | Path) -> Path:
    """Write a series as ``period,value`` rows readable by ``CsvSeriesProvider``."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    frame = series.to_frame()
    frame["period"] = frame["period"].dt.strftime("%Y-%m-%d")
    frame.to_csv(output, index=False)
    return output
