"""Response models returned by the index."""

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SearchHit(BaseModel):
    """Individual search result."""

    key: str = Field(..., description="The matched key")
    id: str = Field(..., description="Identifier of the matched record")
    payload: Any = Field(None, description="The caller record")
    frequency: int = Field(default=0, description="Insert count of the key")
    match_type: str = Field(..., description="Strategy that produced the hit")
    similarity: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Similarity score for fuzzy matches"
    )
    distance: Optional[int] = Field(
        None, ge=0, description="Edit distance for fuzzy matches"
    )


class SearchResponse(BaseModel):
    """Result envelope for a search call."""

    query: str = Field(..., description="Original search query")
    search_type: str = Field(..., description="Strategy requested for the query")
    items: List[SearchHit] = Field(default_factory=list, description="Search results")
    total_found: int = Field(default=0, description="Number of results returned")
    from_bloom: bool = Field(
        default=False, description="Whether the Bloom filter rejected the query"
    )
    fuzzy_augmented: bool = Field(
        default=False, description="Whether fuzzy matches were appended"
    )
    cache_hit: bool = Field(default=False, description="Whether result was served from cache")
    suggestions: Optional[List[str]] = Field(None, description="Alternative suggestions if no match")
    error: Optional[str] = Field(None, description="Failure description, if the search failed")
    search_time_ms: float = Field(default=0.0, description="Search time in milliseconds")
    timestamp: datetime = Field(default_factory=_utcnow, description="Response timestamp")


class FilterStats(BaseModel):
    """Bloom filter occupancy statistics."""

    size: int = Field(..., description="Number of bits in the filter")
    hash_count: int = Field(..., description="Number of hash positions per key")
    set_bits: int = Field(..., description="Number of bits currently set")
    load_factor: float = Field(..., description="Fraction of bits set")
    estimated_false_positive_rate: float = Field(
        ..., description="load_factor ** hash_count"
    )
    item_count: int = Field(..., description="Number of add() calls")


class BuildReport(BaseModel):
    """Summary of a build_index call."""

    item_count: int = Field(..., description="Records received")
    indexed_count: int = Field(..., description="Records indexed")
    skipped_count: int = Field(default=0, description="Records skipped for lacking a key")
    build_time_ms: float = Field(..., description="Build time in milliseconds")
    filter_stats: FilterStats


class EngineMetrics(BaseModel):
    """Search counters kept by an index."""

    total_searches: int = 0
    filter_negative_hits: int = 0
    exact_searches: int = 0
    prefix_searches: int = 0
    contains_searches: int = 0
    fuzzy_searches: int = 0
    failed_searches: int = 0
    avg_search_time_ms: float = 0.0


class MetricsSnapshot(EngineMetrics):
    """Engine counters combined with index statistics."""

    index_size: int = Field(..., description="Records in the raw map")
    word_count: int = Field(..., description="Distinct keys in the prefix tree")
    insert_count: int = Field(..., description="Inserts into the prefix tree")
    filter_stats: FilterStats
    timestamp: datetime = Field(default_factory=_utcnow, description="Snapshot timestamp")
