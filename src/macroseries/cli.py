"""Command-line interface for macroseries."""

from __future__ import annotations

import argparse
import sys
from datetime import date

from macroseries.config import Settings
from macroseries.domain.models import Periodicity, Source, TimeSeriesRequest
from macroseries.runtime import run

DEFAULT_START_DATE = date(2012, 1, 1)


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(description="Fetch and normalize an economic time series")
    parser.add_argument("symbol", type=str, help="Series identifier, e.g. USACPALTT01CTGYM")
    parser.add_argument(
        "--source",
        choices=[source.value for source in Source],
        help="Data provider",
    )
    parser.add_argument("--start", type=date.fromisoformat, help="First date (YYYY-MM-DD)")
    parser.add_argument("--end", type=date.fromisoformat, help="Last date (YYYY-MM-DD)")
    parser.add_argument(
        "--periodicity",
        choices=[periodicity.value for periodicity in Periodicity],
        help="Sampling granularity",
    )
    parser.add_argument("--historical-dir", type=str, help="CSV data directory for --source csv")
    parser.add_argument("--output", type=str, help="Write the series to this CSV path")
    parser.add_argument("--summary", action="store_true", help="Log descriptive statistics")
    parser.add_argument("--log-level", type=str, help="Logging level")
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.source:
        overrides["data_source"] = args.source
    if args.periodicity:
        overrides["periodicity"] = args.periodicity
    if args.historical_dir:
        overrides["historical_data_dir"] = args.historical_dir
    if args.log_level:
        overrides["log_level"] = args.log_level.strip().upper()
    return settings.with_overrides(**overrides)


def build_request(
    settings: Settings,
    args: argparse.Namespace,
    today: date | None = None,
) -> TimeSeriesRequest:
    """Assemble the fetch request from CLI arguments and settings defaults."""
    return TimeSeriesRequest(
        symbol=args.symbol,
        source=settings.source(),
        start_date=args.start or DEFAULT_START_DATE,
        end_date=args.end or today or date.today(),
        periodicity=settings.default_periodicity(),
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
        request = build_request(settings, args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    return run(settings, request, output_path=args.output, show_summary=args.summary)


if __name__ == "__main__":
    sys.exit(main())
