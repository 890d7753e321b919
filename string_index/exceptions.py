"""Exception types raised by the string index."""


class SearchIndexError(Exception):
    """Base class for all string index errors."""


class ConfigurationError(SearchIndexError, ValueError):
    """Raised when an index is constructed with invalid parameters."""


class IndexBuildError(SearchIndexError):
    """Raised when a corpus cannot be indexed."""

    def __init__(self, message: str, position: int = -1) -> None:
        super().__init__(message)
        self.position = position
