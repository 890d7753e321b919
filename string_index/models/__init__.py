"""Data models for the string index."""

from .item import IndexedItem
from .request import SearchOptions, SearchType
from .response import (
    BuildReport,
    EngineMetrics,
    FilterStats,
    MetricsSnapshot,
    SearchHit,
    SearchResponse,
)

__all__ = [
    "IndexedItem",
    "SearchOptions",
    "SearchType",
    "BuildReport",
    "EngineMetrics",
    "FilterStats",
    "MetricsSnapshot",
    "SearchHit",
    "SearchResponse",
]
