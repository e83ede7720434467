"""Series provider contract."""

from __future__ import annotations

from typing import Protocol

import pandas as pd

from macroseries.domain.models import Source, TimeSeriesRequest


class SeriesProvider(Protocol):
    """Interface for raw observation retrieval."""

    source: Source

    def get_observations(self, request: TimeSeriesRequest) -> pd.DataFrame:
        """Return raw observations with ``date`` and ``value`` columns."""
