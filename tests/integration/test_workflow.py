"""End-to-end tests: records from a translation project through the registry."""

import json

import pytest

from string_index import IndexRegistry, SearchIndex
from string_index.config import IndexSettings


@pytest.fixture
def project_strings():
    """Records shaped like strings fetched from a translation project."""
    texts = [
        "Sign in", "Sign out", "Sign up for free", "Forgot your password?",
        "Password", "Username", "Save changes", "Cancel", "Submit order",
        "Settings", "Profile settings", "Welcome back", "Welcome to the dashboard",
    ]
    return [
        {"hashcode": f"h{i:03d}", "stringText": text, "variant": None}
        for i, text in enumerate(texts)
    ]


class TestWorkflow:
    """Full search flow over a realistic corpus."""

    @pytest.fixture
    def registry(self):
        settings = IndexSettings(bloom_size=8192, enable_fuzzy=True)
        return IndexRegistry(settings=settings, key="stringText", identifier="hashcode")

    def test_typeahead_flow(self, registry, project_strings):
        """Test the queries a typeahead issues while the user types."""
        report = registry.build("proj-1", project_strings)
        assert report.indexed_count == len(project_strings)

        completions = registry.search("proj-1", "sign", searchType="prefix", maxResults=10)
        assert {hit.key for hit in completions.items} == {"sign in", "sign out", "sign up for free"}

        exact = registry.search("proj-1", "Password", search_type="exact")
        assert [hit.id for hit in exact.items] == ["h004"]

        missing = registry.search("proj-1", "zzqx9notpresent", search_type="exact")
        assert missing.from_bloom is True

        typo = registry.search("proj-1", "setings", search_type="prefix")
        assert typo.fuzzy_augmented is True
        assert typo.items[0].key == "settings"
        assert typo.items[0].distance == 1

        substring = registry.search("proj-1", "welcome", search_type="contains")
        assert [hit.id for hit in substring.items] == ["h011", "h012"]

    def test_envelopes_embed_in_tool_responses(self, registry, project_strings):
        """Test results and metrics can go straight into a JSON tool response."""
        registry.build("proj-1", project_strings)
        response = registry.search("proj-1", "save", search_type="prefix")

        envelope = {
            "content": response.model_dump(mode="json"),
            "stats": registry.get_stats(),
        }
        decoded = json.loads(json.dumps(envelope))

        assert decoded["content"]["items"][0]["payload"]["stringText"] == "Save changes"
        assert decoded["stats"]["corpora"]["proj-1"]["index_size"] == len(project_strings)

    def test_standalone_index(self, project_strings):
        """Test the index used directly, without a registry."""
        index = SearchIndex(key="stringText", identifier="hashcode", bloom_size=8192)
        index.build_index(project_strings)

        fuzzy = index.search("sign un", search_type="fuzzy", fuzzy_threshold=0.7)
        assert fuzzy.items[0].key == "sign in"
        assert fuzzy.items[0].distance == 1
        assert all(hit.similarity >= 0.7 for hit in fuzzy.items)

        metrics = index.get_metrics()
        assert metrics.fuzzy_searches == 1
        assert metrics.index_size == len(project_strings)
