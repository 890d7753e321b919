"""Registry of per-corpus search indexes with a shared result cache."""

import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional, Union

import structlog

from ..config import IndexSettings, get_settings
from ..models.request import SearchOptions
from ..models.response import BuildReport, SearchResponse
from .cache import ResultCache
from .engine import SearchIndex

logger = structlog.get_logger(__name__)


class _Entry(NamedTuple):
    index: SearchIndex
    report: BuildReport
    built_at: float


class IndexRegistry:
    """
    Keeps one SearchIndex per corpus (for example one per project) and caches
    search responses.

    A corpus is rebuilt only when its index is older than ``index_ttl`` or a
    rebuild is forced; rebuilding drops that corpus's cached responses.
    """

    def __init__(
        self,
        settings: Optional[IndexSettings] = None,
        clock: Callable[[], float] = time.monotonic,
        **index_options: Any,
    ) -> None:
        """
        Args:
            settings: Settings used for every index and for the cache
            clock: Time source, in seconds
            **index_options: Extra SearchIndex arguments, e.g. ``key``
        """
        self.settings = settings or get_settings()
        self._clock = clock
        self._index_options = index_options
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._index_reuses = 0
        self._cache: Optional[ResultCache] = None
        if self.settings.enable_cache:
            self._cache = ResultCache(
                max_size=self.settings.cache_max_size,
                ttl=self.settings.cache_ttl,
                clock=clock,
            )

    def build(self, corpus_id: str, items: Iterable[Any], force: bool = False) -> BuildReport:
        """
        Index a corpus unless a fresh enough index already exists.

        Args:
            corpus_id: Identifier of the corpus
            items: Records of the corpus
            force: Rebuild even if the current index has not expired

        Returns:
            BuildReport of the index now serving the corpus
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(corpus_id)
            if entry is not None and not force and now - entry.built_at < self.settings.index_ttl:
                self._index_reuses += 1
                logger.info("Reusing search index", corpus_id=corpus_id)
                return entry.report

        index = SearchIndex.from_settings(self.settings, **self._index_options)
        report = index.build_index(items)

        with self._lock:
            self._entries[corpus_id] = _Entry(index, report, now)
        dropped = self._drop_results(corpus_id)
        logger.info(
            "Corpus indexed",
            corpus_id=corpus_id,
            indexed_count=report.indexed_count,
            dropped_results=dropped,
        )
        return report

    def get(self, corpus_id: str) -> Optional[SearchIndex]:
        entry = self._entries.get(corpus_id)
        return entry.index if entry is not None else None

    def corpora(self) -> List[str]:
        return list(self._entries)

    def search(
        self,
        corpus_id: str,
        query: str,
        options: Union[SearchOptions, Mapping[str, Any], None] = None,
        **overrides: Any,
    ) -> SearchResponse:
        """
        Search one corpus, serving repeated queries from the cache.

        Returns:
            SearchResponse; an unknown corpus yields an empty response with
            ``error`` set
        """
        index = self.get(corpus_id)
        if index is None:
            return SearchResponse(
                query=str(query),
                search_type=SearchIndex.requested_type(options, overrides),
                error=f"Unknown corpus: {corpus_id}",
            )

        if not isinstance(query, str):
            return index.search(query, options, **overrides)
        try:
            opts = SearchIndex.resolve_options(options, overrides)
        except (TypeError, ValueError):
            # let the index report the invalid options
            return index.search(query, options, **overrides)

        cache_key = (corpus_id, query, opts.model_dump_json())
        if self._cache is not None:
            cached = self._cache.get(cache_key)
            if cached is not None:
                return cached.model_copy(update={"cache_hit": True}, deep=True)

        response = index.search(query, opts)
        if self._cache is not None and response.error is None:
            self._cache.set(cache_key, response.model_copy(deep=True))
        return response

    def _drop_results(self, corpus_id: str) -> int:
        if self._cache is None:
            return 0
        return self._cache.invalidate(lambda key: key[0] == corpus_id)

    def invalidate(self, corpus_id: str) -> bool:
        """Forget a corpus and its cached responses."""
        with self._lock:
            entry = self._entries.pop(corpus_id, None)
        self._drop_results(corpus_id)
        if entry is not None:
            logger.info("Corpus invalidated", corpus_id=corpus_id)
        return entry is not None

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics and per-corpus index metrics."""
        with self._lock:
            entries = dict(self._entries)
            reuses = self._index_reuses
        return {
            "cache": self._cache.stats() if self._cache is not None else None,
            "index_reuses": reuses,
            "corpora": {
                corpus_id: entry.index.get_metrics().model_dump(mode="json")
                for corpus_id, entry in entries.items()
            },
        }
