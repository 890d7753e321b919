"""LRU cache with per-entry expiry."""

import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple


class ResultCache:
    """
    Thread-safe LRU cache whose entries expire after a time-to-live.

    Usage:
        cache = ResultCache(max_size=1000, ttl=120)
        value = cache.get(key)
        if value is None:
            value = compute()
            cache.set(key, value)
    """

    def __init__(
        self,
        max_size: int = 10000,
        ttl: float = 120.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            max_size: Maximum number of entries
            ttl: Default time-to-live in seconds
            clock: Time source, in seconds
        """
        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._entries: "OrderedDict[Hashable, Tuple[Any, float]]" = OrderedDict()
        self._lock = threading.Lock()
        self._stats = {"hits": 0, "misses": 0, "sets": 0, "evictions": 0}

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None on a miss or expired entry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return None

            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                self._stats["misses"] += 1
                self._stats["evictions"] += 1
                return None

            self._entries.move_to_end(key)
            self._stats["hits"] += 1
            return value

    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value, evicting the least recently used entry when full."""
        expires_at = self._clock() + (self.ttl if ttl is None else ttl)
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
                self._stats["evictions"] += 1
            self._entries[key] = (value, expires_at)
            self._stats["sets"] += 1

    def invalidate(self, predicate: Callable[[Hashable], bool]) -> int:
        """Drop every entry whose key satisfies ``predicate``."""
        with self._lock:
            doomed: List[Hashable] = [key for key in self._entries if predicate(key)]
            for key in doomed:
                del self._entries[key]
            return len(doomed)

    def cleanup(self) -> int:
        """Drop expired entries. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
            for key in expired:
                del self._entries[key]
            self._stats["evictions"] += len(expired)
            return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        """Get hit/miss statistics."""
        with self._lock:
            stats: Dict[str, Any] = dict(self._stats)
            stats["size"] = len(self._entries)
        total = stats["hits"] + stats["misses"]
        stats["hit_rate"] = stats["hits"] / total if total else 0.0
        return stats

    def __len__(self) -> int:
        return len(self._entries)
