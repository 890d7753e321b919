"""Search index combining a Bloom filter, a prefix tree and fuzzy matching."""

import threading
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import structlog

from ..config import IndexSettings, get_settings
from ..exceptions import ConfigurationError, IndexBuildError
from ..models.item import IndexedItem
from ..models.request import SearchOptions, SearchType
from ..models.response import (
    BuildReport,
    EngineMetrics,
    MetricsSnapshot,
    SearchHit,
    SearchResponse,
)
from .bloom import BloomFilter
from .fuzzy_matcher import FuzzyMatcher
from .normalizer import KeyExtractor, KeyNormalizer, make_extractor
from .trie import PrefixMatch, PrefixTree

logger = structlog.get_logger(__name__)

MISSING_KEY_POLICIES = ("skip", "coerce", "error")


class _Snapshot:
    """One published generation of the index structures."""

    __slots__ = ("bloom", "trie", "items")

    def __init__(self, bloom: BloomFilter, trie: PrefixTree, items: Dict[str, IndexedItem]) -> None:
        self.bloom = bloom
        self.trie = trie
        self.items = items


class SearchIndex:
    """
    In-memory index over a corpus of keyed records.

    The corpus is indexed in bulk by ``build_index``; each build replaces the
    previous generation. ``search`` routes a query to the Bloom filter, the
    prefix tree, a linear scan or the fuzzy matcher depending on the search
    type, and never raises.

    Writers (``build_index``, ``clear_index``) are serialized and publish a
    complete set of structures with a single reference swap, so searches
    running on other threads always see either the old or the new index.
    """

    def __init__(
        self,
        key: Union[str, KeyExtractor] = "key",
        identifier: Union[str, KeyExtractor, None] = "id",
        bloom_size: int = 100000,
        hash_count: int = 4,
        fuzzy_threshold: float = 0.6,
        max_results: int = 100,
        enable_fuzzy: bool = True,
        fuzzy_fallback_min_results: int = 5,
        missing_key_policy: str = "skip",
        latency_smoothing: float = 0.5,
    ) -> None:
        """
        Initialize the search index.

        Args:
            key: Field name or function giving the search key of a record
            identifier: Field name or function giving the record id; the key
                is used when this is None or yields nothing
            bloom_size: Number of bits in the Bloom filter
            hash_count: Number of hash positions per key
            fuzzy_threshold: Default minimum similarity for fuzzy matches
            max_results: Default maximum number of results
            enable_fuzzy: Append fuzzy matches when a search finds few results
            fuzzy_fallback_min_results: Result count below which fuzzy matches
                are appended
            missing_key_policy: ``skip``, ``coerce`` or ``error`` for records
                without a usable key
            latency_smoothing: Weight of the newest sample in the average
                search time

        Raises:
            ConfigurationError: If any parameter is invalid
        """
        if key is None:
            raise ConfigurationError("A key field or key function is required")
        if not 0.0 <= fuzzy_threshold <= 1.0:
            raise ConfigurationError(f"fuzzy_threshold must be within [0, 1], got {fuzzy_threshold!r}")
        if not isinstance(max_results, int) or max_results < 1:
            raise ConfigurationError(f"max_results must be a positive integer, got {max_results!r}")
        if not isinstance(fuzzy_fallback_min_results, int) or fuzzy_fallback_min_results < 0:
            raise ConfigurationError(
                f"fuzzy_fallback_min_results must be a non-negative integer, got {fuzzy_fallback_min_results!r}"
            )
        if missing_key_policy not in MISSING_KEY_POLICIES:
            raise ConfigurationError(
                f"missing_key_policy must be one of {', '.join(MISSING_KEY_POLICIES)}, got {missing_key_policy!r}"
            )
        if not 0.0 < latency_smoothing <= 1.0:
            raise ConfigurationError(f"latency_smoothing must be within (0, 1], got {latency_smoothing!r}")

        try:
            self._key = make_extractor(key)
            self._identifier = make_extractor(identifier)
        except TypeError as exc:
            raise ConfigurationError(str(exc)) from exc

        self.bloom_size = bloom_size
        self.hash_count = hash_count
        self.fuzzy_threshold = fuzzy_threshold
        self.max_results = max_results
        self.enable_fuzzy = enable_fuzzy
        self.fuzzy_fallback_min_results = fuzzy_fallback_min_results
        self.missing_key_policy = missing_key_policy
        self.latency_smoothing = latency_smoothing

        self.normalizer = KeyNormalizer()
        self.fuzzy_matcher = FuzzyMatcher(fuzzy_threshold)

        self._write_lock = threading.Lock()
        self._metrics_lock = threading.Lock()
        self._snapshot = self._empty_snapshot()
        self._metrics = EngineMetrics()

    @classmethod
    def from_settings(cls, settings: Optional[IndexSettings] = None, **overrides: Any) -> "SearchIndex":
        """Create an index configured from ``IndexSettings``."""
        settings = settings or get_settings()
        params = dict(
            key=settings.key_field,
            identifier=settings.id_field,
            bloom_size=settings.bloom_size,
            hash_count=settings.hash_count,
            fuzzy_threshold=settings.fuzzy_threshold,
            max_results=settings.max_results,
            enable_fuzzy=settings.enable_fuzzy,
            fuzzy_fallback_min_results=settings.fuzzy_fallback_min_results,
            missing_key_policy=settings.missing_key_policy,
            latency_smoothing=settings.latency_smoothing,
        )
        params.update(overrides)
        return cls(**params)

    def _empty_snapshot(self) -> _Snapshot:
        return _Snapshot(BloomFilter(self.bloom_size, self.hash_count), PrefixTree(), {})

    @property
    def index_size(self) -> int:
        return len(self._snapshot.items)

    # building -----------------------------------------------------------

    def _extract_key(self, record: Any, position: int) -> Optional[str]:
        try:
            raw = self._key(record)
        except Exception as exc:
            raise IndexBuildError(
                f"Key extraction failed for record {position}: {exc}", position
            ) from exc

        if raw is None or raw == "":
            if self.missing_key_policy == "error":
                raise IndexBuildError(f"Record {position} has no key", position)
            if self.missing_key_policy == "skip":
                return None
            raw = str(record)

        return self.normalizer.normalize(raw)

    def _extract_id(self, record: Any, key: str, position: int) -> str:
        if self._identifier is None:
            return key
        try:
            raw = self._identifier(record)
        except Exception as exc:
            raise IndexBuildError(
                f"Id extraction failed for record {position}: {exc}", position
            ) from exc
        if raw is None or raw == "":
            return key
        return str(raw)

    def build_index(self, items: Iterable[Any]) -> BuildReport:
        """
        Index a corpus, replacing whatever was indexed before.

        Args:
            items: Caller records, in order

        Returns:
            BuildReport with counts, timing and Bloom filter statistics

        Raises:
            IndexBuildError: If key extraction fails, or a record has no key
                and the missing-key policy is ``error``. The previously
                published index is left untouched.
        """
        with self._write_lock:
            start_time = time.perf_counter()

            bloom = BloomFilter(self.bloom_size, self.hash_count)
            trie = PrefixTree()
            records: Dict[str, IndexedItem] = {}
            received = 0
            skipped = 0

            for position, item in enumerate(items):
                received += 1
                key = self._extract_key(item, position)
                if key is None:
                    skipped += 1
                    continue

                record = IndexedItem(key=key, id=self._extract_id(item, key, position), payload=item)
                bloom.add(key)
                trie.insert(key, record)
                records[record.id] = record

            for record in records.values():
                record.frequency = trie.get(record.key).frequency

            self._snapshot = _Snapshot(bloom, trie, records)
            build_time = (time.perf_counter() - start_time) * 1000

        if skipped:
            logger.warning(
                "Skipped records without a key",
                skipped=skipped,
                policy=self.missing_key_policy,
            )

        filter_stats = bloom.get_stats()
        logger.info(
            "Search index built",
            item_count=received,
            indexed_count=len(records),
            word_count=trie.word_count,
            build_time_ms=round(build_time, 3),
            load_factor=filter_stats.load_factor,
            estimated_false_positive_rate=filter_stats.estimated_false_positive_rate,
        )

        return BuildReport(
            item_count=received,
            indexed_count=len(records),
            skipped_count=skipped,
            build_time_ms=build_time,
            filter_stats=filter_stats,
        )

    def clear_index(self, reset_metrics: bool = False) -> None:
        """Drop all indexed records, keeping the configured capacity."""
        with self._write_lock:
            self._snapshot = self._empty_snapshot()
        if reset_metrics:
            with self._metrics_lock:
                self._metrics = EngineMetrics()
        logger.info("Search index cleared", reset_metrics=reset_metrics)

    # searching ----------------------------------------------------------

    def search(
        self,
        query: str,
        options: Union[SearchOptions, Mapping[str, Any], None] = None,
        **overrides: Any,
    ) -> SearchResponse:
        """
        Search the index.

        Args:
            query: Search query
            options: SearchOptions, or a mapping of option names (snake_case
                or camelCase)
            **overrides: Individual options, applied on top of ``options``

        Returns:
            SearchResponse. Failures produce an empty response with ``error``
            set instead of raising.
        """
        start_time = time.perf_counter()
        snapshot = self._snapshot

        try:
            opts = self.resolve_options(options, overrides)
            response, counters = self._dispatch(snapshot, query, opts)
        except Exception as exc:
            search_type = self.requested_type(options, overrides)
            logger.error("Search failed", query=query, search_type=search_type, error=str(exc))
            response = SearchResponse(query=str(query), search_type=search_type, error=str(exc))
            counters = ["failed_searches"]

        response.search_time_ms = (time.perf_counter() - start_time) * 1000
        self._record(counters, response.search_time_ms)
        return response

    @staticmethod
    def resolve_options(
        options: Union[SearchOptions, Mapping[str, Any], None],
        overrides: Dict[str, Any],
    ) -> SearchOptions:
        if options is None:
            return SearchOptions(**overrides)
        if isinstance(options, SearchOptions):
            if not overrides:
                return options
            return SearchOptions(**{**options.model_dump(), **overrides})
        return SearchOptions(**{**dict(options), **overrides})

    @staticmethod
    def requested_type(
        options: Union[SearchOptions, Mapping[str, Any], None],
        overrides: Dict[str, Any],
    ) -> str:
        if "search_type" in overrides:
            requested = overrides["search_type"]
        elif isinstance(options, Mapping):
            requested = options.get("search_type", options.get("searchType", ""))
        elif isinstance(options, SearchOptions):
            requested = options.search_type
        else:
            requested = SearchType.CONTAINS
        return str(getattr(requested, "value", requested))

    def _dispatch(
        self, snapshot: _Snapshot, query: str, opts: SearchOptions
    ) -> Tuple[SearchResponse, List[str]]:
        search_type = opts.search_type
        if not isinstance(query, str):
            raise TypeError(f"Query must be a string, got {type(query).__name__}")

        max_results = opts.max_results or self.max_results
        threshold = self.fuzzy_threshold if opts.fuzzy_threshold is None else opts.fuzzy_threshold
        enable_fuzzy = self.enable_fuzzy if opts.enable_fuzzy is None else opts.enable_fuzzy
        counters: List[str] = []

        if search_type is SearchType.EXACT:
            counters.append("exact_searches")
            if not snapshot.bloom.test(query):
                counters.append("filter_negative_hits")
                return SearchResponse(
                    query=query,
                    search_type=search_type.value,
                    from_bloom=True,
                    total_found=0,
                ), counters
            hits = self._exact_search(snapshot, query)
        elif opts.is_prefix:
            counters.append("prefix_searches")
            hits = self._prefix_search(snapshot, query, max_results)
        elif search_type is SearchType.CONTAINS:
            counters.append("contains_searches")
            hits = self._contains_search(snapshot, query, max_results)
        else:
            counters.append("fuzzy_searches")
            hits = self._fuzzy_search(snapshot, query, threshold, max_results)

        augmented = False
        if (
            enable_fuzzy
            and search_type is not SearchType.FUZZY
            and len(hits) < self.fuzzy_fallback_min_results
        ):
            counters.append("fuzzy_searches")
            seen = {hit.id for hit in hits}
            extra = [
                hit for hit in self._fuzzy_search(snapshot, query, threshold, max_results)
                if hit.id not in seen
            ]
            augmented = bool(extra)
            hits = (hits + extra)[:max_results]

        suggestions = None
        if not hits and opts.include_suggestions:
            keys = list(dict.fromkeys(record.key for record in snapshot.items.values()))
            suggestions = self.fuzzy_matcher.suggest_corrections(query, keys)

        return SearchResponse(
            query=query,
            search_type=search_type.value,
            items=hits,
            total_found=len(hits),
            fuzzy_augmented=augmented,
            suggestions=suggestions,
        ), counters

    @staticmethod
    def _hit_from_match(match: PrefixMatch, match_type: str) -> SearchHit:
        record = match.payload
        return SearchHit(
            key=match.key,
            id=record.id,
            payload=record.payload,
            frequency=match.frequency,
            match_type=match_type,
        )

    def _exact_search(self, snapshot: _Snapshot, query: str) -> List[SearchHit]:
        normalized = self.normalizer.normalize(query)
        return [
            self._hit_from_match(match, "exact")
            for match in snapshot.trie.search(normalized, 1)
            if match.key == normalized
        ]

    def _prefix_search(self, snapshot: _Snapshot, query: str, max_results: int) -> List[SearchHit]:
        return [
            self._hit_from_match(match, "prefix")
            for match in snapshot.trie.search(query, max_results)
        ]

    def _contains_search(self, snapshot: _Snapshot, query: str, max_results: int) -> List[SearchHit]:
        hits: List[SearchHit] = []
        for record in snapshot.items.values():
            if self.normalizer.contains(record.key, query):
                hits.append(SearchHit(
                    key=record.key,
                    id=record.id,
                    payload=record.payload,
                    frequency=record.frequency,
                    match_type="contains",
                ))
                if len(hits) >= max_results:
                    break
        return hits

    def _fuzzy_search(
        self, snapshot: _Snapshot, query: str, threshold: float, max_results: int
    ) -> List[SearchHit]:
        matches = self.fuzzy_matcher.fuzzy_search(
            query, snapshot.items.values(), threshold, max_results
        )
        return [
            SearchHit(
                key=match.key,
                id=match.item.id,
                payload=match.item.payload,
                frequency=match.item.frequency,
                match_type="fuzzy",
                similarity=match.similarity,
                distance=match.distance,
            )
            for match in matches
        ]

    # metrics ------------------------------------------------------------

    def _record(self, counters: List[str], elapsed_ms: float) -> None:
        with self._metrics_lock:
            metrics = self._metrics
            metrics.total_searches += 1
            for name in counters:
                setattr(metrics, name, getattr(metrics, name) + 1)
            if metrics.total_searches == 1:
                metrics.avg_search_time_ms = elapsed_ms
            else:
                metrics.avg_search_time_ms += self.latency_smoothing * (
                    elapsed_ms - metrics.avg_search_time_ms
                )

    def get_metrics(self) -> MetricsSnapshot:
        """Get search counters together with index statistics."""
        snapshot = self._snapshot
        with self._metrics_lock:
            counters = self._metrics.model_dump()
        return MetricsSnapshot(
            **counters,
            index_size=len(snapshot.items),
            word_count=snapshot.trie.word_count,
            insert_count=snapshot.trie.insert_count,
            filter_stats=snapshot.bloom.get_stats(),
        )
