"""Bloom filter for fast negative lookups."""

from typing import Callable, List, Tuple

from ..exceptions import ConfigurationError
from ..models.response import FilterStats

_MASK = 0xFFFFFFFF


def _djb2(key: str) -> int:
    h = 5381
    for ch in key:
        h = ((h << 5) + h + ord(ch)) & _MASK
    return h


def _sdbm(key: str) -> int:
    h = 0
    for ch in key:
        h = (ord(ch) + (h << 6) + (h << 16) - h) & _MASK
    return h


def _fnv1a(key: str) -> int:
    h = 2166136261
    for ch in key:
        h ^= ord(ch)
        h = (h * 16777619) & _MASK
    return h


def _one_at_a_time(key: str) -> int:
    h = 0
    for ch in key:
        h = (h + ord(ch)) & _MASK
        h = (h + (h << 10)) & _MASK
        h ^= h >> 6
    h = (h + (h << 3)) & _MASK
    h ^= h >> 11
    h = (h + (h << 15)) & _MASK
    return h


_MIXERS: Tuple[Callable[[str], int], ...] = (_djb2, _sdbm, _fnv1a, _one_at_a_time)


class BloomFilter:
    """
    Fixed-size Bloom filter over lower-cased string keys.

    ``test`` never reports an added key as absent. Keys that were never added
    may still test positive with probability close to
    ``(set_bits / size) ** hash_count``.
    """

    def __init__(self, size: int = 100000, hash_count: int = 4) -> None:
        """
        Initialize the filter.

        Args:
            size: Number of bits
            hash_count: Number of bit positions derived from each key
        """
        if not isinstance(size, int) or size <= 0:
            raise ConfigurationError(f"Bloom filter size must be a positive integer, got {size!r}")
        if not isinstance(hash_count, int) or hash_count <= 0:
            raise ConfigurationError(f"Hash count must be a positive integer, got {hash_count!r}")

        self.size = size
        self.hash_count = hash_count
        self._bits = bytearray((size + 7) // 8)
        self._set_bits = 0
        self.item_count = 0

    def _positions(self, key: str) -> List[int]:
        key = str(key).lower()
        hashes = [mixer(key) for mixer in _MIXERS[:self.hash_count]]
        if self.hash_count > len(_MIXERS):
            # double hashing for any positions beyond the four mixers
            h1, h2 = hashes[2], hashes[0] | 1
            for i in range(len(_MIXERS), self.hash_count):
                hashes.append((h1 + i * h2) & _MASK)
        return [h % self.size for h in hashes]

    def add(self, key: str) -> None:
        """Record a key in the filter."""
        for pos in self._positions(key):
            byte_index, mask = pos >> 3, 1 << (pos & 7)
            if not self._bits[byte_index] & mask:
                self._bits[byte_index] |= mask
                self._set_bits += 1
        self.item_count += 1

    def test(self, key: str) -> bool:
        """Return False if the key was definitely never added."""
        for pos in self._positions(key):
            if not self._bits[pos >> 3] & (1 << (pos & 7)):
                return False
        return True

    __contains__ = test

    @property
    def set_bits(self) -> int:
        return self._set_bits

    def get_stats(self) -> FilterStats:
        """Get filter occupancy statistics."""
        load_factor = self._set_bits / self.size
        return FilterStats(
            size=self.size,
            hash_count=self.hash_count,
            set_bits=self._set_bits,
            load_factor=load_factor,
            estimated_false_positive_rate=load_factor ** self.hash_count,
            item_count=self.item_count,
        )
