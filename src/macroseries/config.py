"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from macroseries.data.fred import DEFAULT_API_URL, DEFAULT_GRAPH_URL
from macroseries.domain.models import Periodicity, Source
from macroseries.errors import ConfigError, InvalidRequest


def parse_positive_int(value: str | None, default: int, *, field_name: str) -> int:
    """Parse positive integer values from env strings."""
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be an integer") from exc
    if parsed <= 0:
        raise ConfigError(f"{field_name} must be positive")
    return parsed


def parse_non_negative_float(value: str | None, default: float, *, field_name: str) -> float:
    """Parse non-negative float values from env strings."""
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value.strip())
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be a number") from exc
    if parsed < 0:
        raise ConfigError(f"{field_name} must not be negative")
    return parsed


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    data_source: str = "fred"
    periodicity: str = "monthly"
    historical_data_dir: str = "historical_data"
    log_level: str = "INFO"
    fred_api_key: str = ""
    fred_api_url: str = DEFAULT_API_URL
    fred_graph_url: str = DEFAULT_GRAPH_URL
    request_timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_backoff_seconds: float = 1.0

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        raw = cls(
            data_source=str(os.getenv("DATA_SOURCE", "fred")).strip().lower(),
            periodicity=str(os.getenv("PERIODICITY", "monthly")).strip().lower(),
            historical_data_dir=str(os.getenv("HISTORICAL_DATA_DIR", "historical_data")).strip(),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
            fred_api_key=str(os.getenv("FRED_API_KEY", "")).strip(),
            fred_api_url=str(os.getenv("FRED_API_URL", DEFAULT_API_URL)).strip(),
            fred_graph_url=str(os.getenv("FRED_GRAPH_URL", DEFAULT_GRAPH_URL)).strip(),
            request_timeout_seconds=parse_non_negative_float(
                os.getenv("REQUEST_TIMEOUT_SECONDS"),
                30.0,
                field_name="request_timeout_seconds",
            ),
            max_retries=parse_positive_int(
                os.getenv("MAX_RETRIES"),
                3,
                field_name="max_retries",
            ),
            retry_backoff_seconds=parse_non_negative_float(
                os.getenv("RETRY_BACKOFF_SECONDS"),
                1.0,
                field_name="retry_backoff_seconds",
            ),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        updated = replace(self, **kwargs)
        return updated.validate()

    def source(self) -> Source:
        return Source.parse(self.data_source)

    def default_periodicity(self) -> Periodicity:
        return Periodicity.parse(self.periodicity)

    def validate(self) -> Self:
        """Validate settings fields."""
        try:
            Source.parse(self.data_source)
            Periodicity.parse(self.periodicity)
        except InvalidRequest as exc:
            raise ConfigError(str(exc)) from exc
        if self.request_timeout_seconds <= 0:
            raise ConfigError("request_timeout_seconds must be positive")
        if self.max_retries <= 0:
            raise ConfigError("max_retries must be positive")
        if self.retry_backoff_seconds < 0:
            raise ConfigError("retry_backoff_seconds must not be negative")
        if not self.historical_data_dir.strip():
            raise ConfigError("historical_data_dir must be non-empty")
        return self
