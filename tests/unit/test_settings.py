"""Unit tests for settings and logging configuration."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from string_index.config import IndexSettings, get_settings
from string_index.logging_config import configure_logging


class TestSettings:
    """Test cases for IndexSettings."""

    def test_defaults(self, monkeypatch):
        """Test default values."""
        monkeypatch.delenv("STRING_INDEX_BLOOM_SIZE", raising=False)
        settings = IndexSettings()

        assert settings.bloom_size == 100000
        assert settings.hash_count == 4
        assert settings.fuzzy_threshold == 0.6
        assert settings.fuzzy_fallback_min_results == 5
        assert settings.enable_fuzzy is True
        assert settings.missing_key_policy == "skip"

    def test_environment_override(self, monkeypatch):
        """Test values are read from prefixed environment variables."""
        monkeypatch.setenv("STRING_INDEX_BLOOM_SIZE", "2048")
        monkeypatch.setenv("STRING_INDEX_ENABLE_FUZZY", "false")

        settings = IndexSettings()

        assert settings.bloom_size == 2048
        assert settings.enable_fuzzy is False

    def test_invalid_values(self):
        """Test out-of-range values are rejected."""
        with pytest.raises(ValidationError):
            IndexSettings(bloom_size=0)
        with pytest.raises(ValidationError):
            IndexSettings(fuzzy_threshold=1.5)

    def test_get_settings_is_cached(self):
        """Test the settings accessor returns one shared instance."""
        assert get_settings() is get_settings()


class TestLogging:
    """Test cases for logging configuration."""

    @pytest.mark.parametrize("fmt", ["json", "console"])
    def test_configure_logging(self, fmt):
        """Test structlog can be configured and used."""
        configure_logging(level="DEBUG", fmt=fmt)
        logger = structlog.get_logger("string_index.test")
        logger.info("configured", fmt=fmt)
        assert structlog.is_configured()

    def test_configure_logging_from_settings(self, monkeypatch):
        """Test level and format default to the configured settings."""
        calls = []
        monkeypatch.setattr("logging.basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging(settings=IndexSettings(log_level="warning", log_format="console"))

        assert calls[0]["level"] == logging.WARNING
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)

    def test_explicit_arguments_override_settings(self, monkeypatch):
        """Test explicit level and format win over settings."""
        calls = []
        monkeypatch.setattr("logging.basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging("ERROR", "json", settings=IndexSettings(log_level="DEBUG", log_format="console"))

        assert calls[0]["level"] == logging.ERROR
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)
