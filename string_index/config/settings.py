"""Index settings and configuration management."""

from functools import lru_cache

from pydantic import Field, ConfigDict
from pydantic_settings import BaseSettings


class IndexSettings(BaseSettings):
    """Index settings with environment variable support."""

    # Bloom filter capacity
    bloom_size: int = Field(default=100000, gt=0)
    hash_count: int = Field(default=4, gt=0)

    # Search Configuration
    fuzzy_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    max_results: int = Field(default=100, gt=0)
    enable_fuzzy: bool = Field(default=True)
    fuzzy_fallback_min_results: int = Field(default=5, ge=0)
    latency_smoothing: float = Field(default=0.5, gt=0.0, le=1.0)

    # Record handling
    key_field: str = Field(default="key")
    id_field: str = Field(default="id")
    missing_key_policy: str = Field(default="skip")  # skip | coerce | error

    # Cache Configuration
    enable_cache: bool = Field(default=True)
    cache_ttl: float = Field(default=120.0, gt=0)  # search results, seconds
    index_ttl: float = Field(default=600.0, gt=0)  # built indexes, seconds
    cache_max_size: int = Field(default=10000, gt=0)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    model_config = ConfigDict(
        env_prefix="STRING_INDEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> IndexSettings:
    """Get cached index settings."""
    return IndexSettings()
