"""Series retrieval and normalization."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from macroseries.data.base import SeriesProvider
from macroseries.data.normalize import normalize_observations
from macroseries.domain.models import Source, TimeSeries, TimeSeriesRequest
from macroseries.errors import InvalidRequest

logger = logging.getLogger("macroseries.fetcher")


class SeriesFetcher:
    """Dispatch requests to registered providers and normalize their output."""

    def __init__(self, providers: Mapping[Source | str, SeriesProvider]) -> None:
        self._providers: dict[Source, SeriesProvider] = {
            Source.parse(source): provider for source, provider in providers.items()
        }

    @property
    def sources(self) -> list[Source]:
        return sorted(self._providers)

    def fetch(self, request: TimeSeriesRequest) -> TimeSeries:
        """Return the normalized series for ``request``.

        Provider errors (``NotFound``, ``RangeUnavailable``,
        ``UnsupportedPeriodicity``, ``ProviderUnreachable``) propagate unchanged.
        """
        request.validate()
        provider = self._providers.get(request.source)
        if provider is None:
            supported = ", ".join(source.value for source in self.sources) or "none"
            raise InvalidRequest(
                f"Source '{request.source.value}' is not configured. Supported: {supported}"
            )

        logger.debug(
            "requesting %s from %s (%s, %s to %s)",
            request.symbol,
            request.source.value,
            request.periodicity.value,
            request.start_date.isoformat(),
            request.end_date.isoformat(),
        )
        raw = provider.get_observations(request)
        points = normalize_observations(raw, request)
        return TimeSeries(request=request, points=points)

    def fetch_many(self, requests: Iterable[TimeSeriesRequest]) -> list[TimeSeries]:
        """Fetch requests in order; the first failure propagates."""
        return [self.fetch(request) for request in requests]
