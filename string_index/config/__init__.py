"""Configuration management for the string index."""

from .settings import IndexSettings, get_settings

__all__ = ["IndexSettings", "get_settings"]
