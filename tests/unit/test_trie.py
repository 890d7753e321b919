"""Unit tests for the prefix tree."""

import pytest

from string_index.core.trie import PrefixTree


class TestPrefixTree:
    """Test cases for the PrefixTree class."""

    @pytest.fixture
    def trie(self):
        """Create a prefix tree loaded with a few keys."""
        trie = PrefixTree()
        for key in ["hello", "help", "world"]:
            trie.insert(key, {"key": key})
        return trie

    def test_initialization(self):
        """Test an empty tree."""
        trie = PrefixTree()
        assert len(trie) == 0
        assert trie.insert_count == 0
        assert trie.search("a") == []

    def test_prefix_search(self, trie):
        """Test a prefix returns exactly the keys below it."""
        keys = {match.key for match in trie.search("hel")}
        assert keys == {"hello", "help"}

    def test_prefix_not_present(self, trie):
        """Test an unknown prefix yields an empty list."""
        assert trie.search("xyz") == []
        assert trie.search("helz") == []

    def test_full_key_as_prefix(self, trie):
        """Test searching a full key includes that key."""
        results = trie.search("help")
        assert [match.key for match in results] == ["help"]
        assert results[0].payload == {"key": "help"}

    def test_case_insensitive(self):
        """Test keys and prefixes are lower-cased."""
        trie = PrefixTree()
        trie.insert("Hello", 1)
        assert [match.key for match in trie.search("HEL")] == ["hello"]
        assert "HELLO" in trie

    def test_results_start_with_prefix(self, trie):
        """Test no result lies outside the prefix."""
        for prefix in ["h", "he", "w", "wor"]:
            for match in trie.search(prefix):
                assert match.key.startswith(prefix)

    def test_repeated_insert_increments_frequency(self):
        """Test re-inserting a key bumps frequency and keeps the latest payload."""
        trie = PrefixTree()
        trie.insert("apple", "first")
        trie.insert("APPLE", "second")

        match = trie.get("apple")
        assert match.frequency == 2
        assert match.payload == "second"
        assert trie.word_count == 1
        assert trie.insert_count == 2
        assert len(trie.search("app")) == 1

    def test_sorted_by_frequency(self):
        """Test results are ranked most frequent first."""
        trie = PrefixTree()
        for key, times in [("cart", 1), ("car", 3), ("care", 2)]:
            for _ in range(times):
                trie.insert(key)

        results = trie.search("car")
        assert [match.key for match in results] == ["car", "care", "cart"]
        frequencies = [match.frequency for match in results]
        assert frequencies == sorted(frequencies, reverse=True)

    def test_limit(self):
        """Test the limit bounds the number of results."""
        trie = PrefixTree()
        for i in range(50):
            trie.insert(f"key{i}")
        assert len(trie.search("key", limit=10)) == 10
        assert trie.search("key", limit=0) == []

    def test_limit_one_returns_the_prefix_itself(self, trie):
        """Test a terminal prefix node is collected before its descendants."""
        trie.insert("hel", None)
        assert [match.key for match in trie.search("hel", 1)] == ["hel"]

    def test_empty_prefix_enumerates_everything(self, trie):
        """Test an empty prefix walks the whole tree."""
        assert {match.key for match in trie.search("")} == {"hello", "help", "world"}

    def test_get(self, trie):
        """Test exact lookup."""
        assert trie.get("hello").key == "hello"
        assert trie.get("hel") is None
        assert trie.get("nope") is None

    def test_contains(self, trie):
        """Test membership only matches complete keys."""
        assert "help" in trie
        assert "hel" not in trie

    def test_long_keys(self):
        """Test very long keys do not exhaust the recursion limit."""
        trie = PrefixTree()
        long_key = "a" * 5000
        trie.insert(long_key, "long")
        results = trie.search("a")
        assert results[0].key == long_key

    def test_results_are_plain_tuples(self, trie):
        """Test matches do not expose tree nodes."""
        match = trie.search("world")[0]
        assert tuple(match) == ("world", {"key": "world"}, 1)
