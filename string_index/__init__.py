"""
String Index - fast local lookups over large collections of translatable strings.

This package combines a Bloom filter for instant negative answers, a prefix
tree for ranked completions and Levenshtein-based fuzzy matching behind a
single SearchIndex, so repeated lookups do not have to go back to the remote
translation API.
"""

__version__ = "1.0.0"

from .core.engine import SearchIndex
from .core.registry import IndexRegistry
from .exceptions import ConfigurationError, IndexBuildError, SearchIndexError
from .logging_config import configure_logging
from .models.request import SearchOptions, SearchType
from .models.response import MetricsSnapshot, SearchHit, SearchResponse

__all__ = [
    "SearchIndex",
    "IndexRegistry",
    "SearchOptions",
    "SearchType",
    "SearchHit",
    "SearchResponse",
    "MetricsSnapshot",
    "SearchIndexError",
    "ConfigurationError",
    "IndexBuildError",
    "configure_logging",
]
