"""Key normalization and extraction for indexed records."""

from collections.abc import Mapping
from typing import Any, Callable, Optional, Union

KeyExtractor = Callable[[Any], Optional[str]]


class KeyNormalizer:
    """Handles key normalization for consistent lookups."""

    def normalize(self, text: Any) -> str:
        """
        Normalize a key for indexing and lookup.

        Keys are treated as raw character sequences: the only transformation
        is lower-casing, so ``"Hello World"`` and ``"hello world"`` collide
        but ``"hello_world"`` does not.

        Args:
            text: Input key

        Returns:
            Normalized key
        """
        if text is None:
            return ""
        return str(text).lower()

    def contains(self, haystack: str, needle: str) -> bool:
        """Case-insensitive substring test."""
        return self.normalize(needle) in self.normalize(haystack)


def field_getter(field: str) -> KeyExtractor:
    """
    Build an extractor that reads ``field`` from a record.

    Mappings are read with ``.get``, other objects with ``getattr``. A bare
    string is its own key.
    """
    def _get(record: Any) -> Optional[str]:
        if isinstance(record, str):
            return record
        if isinstance(record, Mapping):
            value = record.get(field)
        else:
            value = getattr(record, field, None)
        if value is None:
            return None
        return str(value)

    _get.__name__ = f"field_getter_{field}"
    return _get


def make_extractor(source: Union[str, KeyExtractor, None]) -> Optional[KeyExtractor]:
    """Turn a field name or callable into an extractor."""
    if source is None:
        return None
    if isinstance(source, str):
        return field_getter(source)
    if callable(source):
        return source
    raise TypeError(f"Expected a field name or callable, got {type(source).__name__}")
