"""Series analysis helpers."""

from .summary import SeriesSummary, summarize

__all__ = ["SeriesSummary", "summarize"]
