"""Performance benchmarks for the string index."""

import random
import string

import pytest

from string_index.core.bloom import BloomFilter
from string_index.core.engine import SearchIndex


def _corpus(size, seed=1):
    rng = random.Random(seed)
    words = ["".join(rng.choice(string.ascii_lowercase) for _ in range(rng.randint(4, 10))) for _ in range(500)]
    return [
        {"key": " ".join(rng.sample(words, 3)), "id": f"str-{i}"}
        for i in range(size)
    ]


class TestPerformanceBenchmarks:
    """Performance benchmark tests."""

    @pytest.fixture(scope="class")
    def corpus(self):
        return _corpus(10000)

    @pytest.fixture(scope="class")
    def large_index(self, corpus):
        """Create a search index with a large corpus for performance testing."""
        index = SearchIndex(bloom_size=200000, hash_count=4, enable_fuzzy=False)
        index.build_index(corpus)
        return index

    def test_build_performance(self, corpus, benchmark):
        """Benchmark indexing ten thousand records."""
        index = SearchIndex(bloom_size=200000, enable_fuzzy=False)

        report = benchmark(index.build_index, corpus)

        assert report.indexed_count == 10000
        assert index.get_metrics().index_size == 10000

    def test_negative_exact_lookup_performance(self, large_index, benchmark):
        """Benchmark a Bloom filter rejection."""
        response = benchmark(large_index.search, "zzqx9notpresent", search_type="exact")
        assert response.from_bloom is True
        assert response.search_time_ms < 5.0

    def test_positive_exact_lookup_performance(self, large_index, corpus, benchmark):
        """Benchmark an exact hit."""
        key = corpus[1234]["key"]
        response = benchmark(large_index.search, key, search_type="exact")
        assert response.total_found == 1

    def test_prefix_performance(self, large_index, corpus, benchmark):
        """Benchmark a short prefix over a large tree."""
        prefix = corpus[0]["key"][:2]
        response = benchmark(large_index.search, prefix, search_type="prefix", max_results=20)
        assert 0 < response.total_found <= 20

    def test_contains_performance(self, large_index, corpus, benchmark):
        """Benchmark a substring scan."""
        needle = corpus[42]["key"].split()[1]
        response = benchmark(large_index.search, needle, search_type="contains", max_results=50)
        assert 0 < response.total_found <= 50

    def test_fuzzy_performance(self, large_index, corpus, benchmark):
        """Benchmark a full fuzzy scan."""
        target = corpus[7]["key"]
        query = target[:-1] + ("a" if target[-1] != "a" else "b")
        response = benchmark(large_index.search, query, search_type="fuzzy", max_results=10)
        assert response.items[0].key == target

    def test_bloom_add_performance(self, benchmark):
        """Benchmark filter inserts."""
        keys = [f"string-{i}" for i in range(1000)]

        def add_all():
            bloom = BloomFilter(size=100000, hash_count=4)
            for key in keys:
                bloom.add(key)
            return bloom

        bloom = benchmark(add_all)
        assert bloom.get_stats().item_count == 1000
