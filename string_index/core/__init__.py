"""Core index structures and the search orchestrator."""

from .bloom import BloomFilter
from .cache import ResultCache
from .engine import SearchIndex
from .fuzzy_matcher import FuzzyMatch, FuzzyMatcher
from .normalizer import KeyNormalizer, field_getter, make_extractor
from .registry import IndexRegistry
from .trie import PrefixMatch, PrefixTree, TrieNode

__all__ = [
    "BloomFilter",
    "ResultCache",
    "SearchIndex",
    "FuzzyMatch",
    "FuzzyMatcher",
    "KeyNormalizer",
    "field_getter",
    "make_extractor",
    "IndexRegistry",
    "PrefixMatch",
    "PrefixTree",
    "TrieNode",
]
