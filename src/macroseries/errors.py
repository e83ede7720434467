"""Custom exceptions for series retrieval failures."""


class SeriesError(Exception):
    """Base exception for all macroseries errors."""


class InvalidRequest(SeriesError, ValueError):
    """Raised when a request is rejected before reaching any provider."""


class ConfigError(SeriesError, ValueError):
    """Raised when environment or CLI configuration is invalid."""


class ProviderError(SeriesError):
    """Raised when a data provider reports a failure."""


class NotFound(ProviderError):
    """Raised when the symbol does not exist at the provider."""


class RangeUnavailable(ProviderError):
    """Raised when the provider has no observations in the requested window."""


class UnsupportedPeriodicity(ProviderError):
    """Raised when the provider cannot supply the requested granularity."""


class ProviderUnreachable(ProviderError):
    """Raised when the provider cannot be reached after bounded retries."""
