"""Fuzzy matching for typo-tolerant lookups."""

from typing import Any, Callable, Iterable, List, NamedTuple, Optional

from rapidfuzz import fuzz, process
from rapidfuzz.distance import Levenshtein

from .normalizer import KeyNormalizer


class FuzzyMatch(NamedTuple):
    """A candidate whose similarity reached the threshold."""

    item: Any
    key: str
    similarity: float
    distance: int


class FuzzyMatcher:
    """Approximate matching based on Levenshtein edit distance."""

    def __init__(self, threshold: float = 0.6) -> None:
        """
        Initialize the fuzzy matcher.

        Args:
            threshold: Minimum similarity for matches
        """
        self.threshold = threshold
        self.normalizer = KeyNormalizer()

    @staticmethod
    def distance(a: str, b: str) -> int:
        """Minimum number of single-character edits turning ``a`` into ``b``."""
        return Levenshtein.distance(a, b)

    @classmethod
    def similarity(cls, a: str, b: str) -> float:
        """
        Normalized similarity ``(max_len - distance) / max_len``.

        Two empty strings are identical and score 1.0.
        """
        max_len = max(len(a), len(b))
        if max_len == 0:
            return 1.0
        return (max_len - cls.distance(a, b)) / max_len

    def _candidate_key(self, item: Any, key: Optional[Callable[[Any], Any]]) -> str:
        if key is not None:
            return self.normalizer.normalize(key(item))
        if isinstance(item, str):
            return self.normalizer.normalize(item)
        return self.normalizer.normalize(getattr(item, "key", item))

    def fuzzy_search(
        self,
        query: str,
        items: Iterable[Any],
        threshold: Optional[float] = None,
        limit: int = 50,
        key: Optional[Callable[[Any], Any]] = None,
    ) -> List[FuzzyMatch]:
        """
        Find items whose key is similar to the query.

        Args:
            query: Search query
            items: Candidates; strings are their own key, other objects expose ``.key``
            threshold: Minimum similarity (uses instance threshold if None)
            limit: Maximum number of results
            key: Optional function returning the key of a candidate

        Returns:
            List of FuzzyMatch sorted by similarity (descending)
        """
        if threshold is None:
            threshold = self.threshold
        normalized_query = self.normalizer.normalize(query)

        matches = []
        for item in items:
            candidate = self._candidate_key(item, key)
            distance = self.distance(normalized_query, candidate)
            max_len = max(len(normalized_query), len(candidate))
            similarity = (max_len - distance) / max_len if max_len else 1.0
            if similarity >= threshold:
                matches.append(FuzzyMatch(item, candidate, similarity, distance))

        # stable: ties keep candidate order
        matches.sort(key=lambda m: m.similarity, reverse=True)
        return matches[:limit]

    def suggest_corrections(
        self,
        query: str,
        candidates: List[str],
        max_suggestions: int = 5
    ) -> List[str]:
        """
        Suggest corrections for a query.

        Args:
            query: Query to get suggestions for
            candidates: List of candidate keys
            max_suggestions: Maximum number of suggestions

        Returns:
            List of suggested corrections
        """
        if not query or not candidates:
            return []

        suggestions = process.extract(
            self.normalizer.normalize(query),
            candidates,
            limit=max_suggestions,
            scorer=fuzz.ratio,
            score_cutoff=self.threshold * 100,
        )
        return [suggestion[0] for suggestion in suggestions]
