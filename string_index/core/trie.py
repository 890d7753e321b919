"""Prefix tree for ranked prefix lookups."""

from typing import Any, Dict, List, NamedTuple, Optional


class PrefixMatch(NamedTuple):
    """A terminal key found under a prefix."""

    key: str
    payload: Any
    frequency: int


class TrieNode:
    """
    A single node in the prefix tree.

    children: char -> TrieNode
    is_terminal: True if the path to this node is an inserted key
    payload: payload of the most recent insert of that key
    frequency: how many times that key was inserted
    """

    __slots__ = ("children", "is_terminal", "payload", "frequency")

    def __init__(self) -> None:
        self.children: Dict[str, "TrieNode"] = {}
        self.is_terminal = False
        self.payload: Any = None
        self.frequency = 0


class PrefixTree:
    """Trie keyed by lower-cased characters, ranking completions by frequency."""

    def __init__(self) -> None:
        self._root = TrieNode()
        self.word_count = 0
        self.insert_count = 0

    def insert(self, key: str, payload: Any = None) -> None:
        """
        Insert a key, or bump its frequency if already present.

        Args:
            key: Key to insert, lower-cased before insertion
            payload: Value stored at the terminal node, replacing any earlier one
        """
        node = self._root
        for ch in key.lower():
            child = node.children.get(ch)
            if child is None:
                child = node.children[ch] = TrieNode()
            node = child

        if not node.is_terminal:
            node.is_terminal = True
            self.word_count += 1
        node.payload = payload
        node.frequency += 1
        self.insert_count += 1

    def _find(self, prefix: str) -> Optional[TrieNode]:
        node = self._root
        for ch in prefix:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    def search(self, prefix: str, limit: int = 100) -> List[PrefixMatch]:
        """
        Return keys starting with ``prefix``, most frequent first.

        Collection stops as soon as ``limit`` terminal keys have been seen,
        so with a small limit only part of a large subtree is ranked.

        Args:
            prefix: Prefix to look up (case-insensitive)
            limit: Maximum number of matches

        Returns:
            List of PrefixMatch, sorted by frequency descending
        """
        if limit <= 0:
            return []

        prefix = prefix.lower()
        start = self._find(prefix)
        if start is None:
            return []

        results: List[PrefixMatch] = []
        # iterative pre-order DFS; long keys would exhaust the recursion limit
        stack = [(start, prefix)]
        while stack:
            node, path = stack.pop()
            if node.is_terminal:
                results.append(PrefixMatch(path, node.payload, node.frequency))
                if len(results) >= limit:
                    break
            for ch, child in reversed(list(node.children.items())):
                stack.append((child, path + ch))

        results.sort(key=lambda match: match.frequency, reverse=True)
        return results[:limit]

    def get(self, key: str) -> Optional[PrefixMatch]:
        """Exact lookup of a single key."""
        key = key.lower()
        node = self._find(key)
        if node is None or not node.is_terminal:
            return None
        return PrefixMatch(key, node.payload, node.frequency)

    def __contains__(self, key: str) -> bool:
        node = self._find(key.lower())
        return node is not None and node.is_terminal

    def __len__(self) -> int:
        return self.word_count
