"""Runtime wiring for a single fetch run."""

from __future__ import annotations

from macroseries.analysis.summary import summarize
from macroseries.config import Settings
from macroseries.data.base import SeriesProvider
from macroseries.data.csv_data import CsvSeriesProvider, write_series_csv
from macroseries.data.fred import FredSeriesProvider
from macroseries.data.yfinance_data import YFinanceSeriesProvider
from macroseries.domain.models import Source, TimeSeries, TimeSeriesRequest
from macroseries.errors import ConfigError, InvalidRequest, ProviderError
from macroseries.fetcher import SeriesFetcher
from macroseries.logging.logger import HumanLogger


def run(
    settings: Settings,
    request: TimeSeriesRequest,
    output_path: str | None = None,
    show_summary: bool = False,
) -> int:
    """Fetch one series, optionally summarize and export it, and return an exit code."""
    human_logger = HumanLogger(level=settings.log_level)
    fetcher = build_fetcher(settings)
    human_logger.fetch_started(request)
    try:
        series = fetcher.fetch(request)
    except (InvalidRequest, ConfigError) as exc:
        human_logger.error(str(exc))
        return 2
    except ProviderError as exc:
        human_logger.error(f"{type(exc).__name__}: {exc}")
        return 1

    human_logger.fetch_completed(series)
    if show_summary:
        human_logger.summary(summarize(series))
    if output_path:
        export(series, output_path, human_logger)
    return 0


def export(series: TimeSeries, output_path: str, human_logger: HumanLogger) -> None:
    written = write_series_csv(series, output_path)
    human_logger.saved(series.symbol, str(written))


def build_fetcher(settings: Settings) -> SeriesFetcher:
    """Register one provider per supported source."""
    return SeriesFetcher({source: build_provider(settings, source) for source in Source})


def build_provider(settings: Settings, source: Source) -> SeriesProvider:
    """Select provider implementation from source."""
    if source is Source.CSV:
        return CsvSeriesProvider(data_dir=settings.historical_data_dir)
    if source is Source.YAHOO:
        return YFinanceSeriesProvider()
    return FredSeriesProvider(
        api_key=settings.fred_api_key,
        api_url=settings.fred_api_url,
        graph_url=settings.fred_graph_url,
        timeout=settings.request_timeout_seconds,
        max_retries=settings.max_retries,
        backoff_seconds=settings.retry_backoff_seconds,
    )
