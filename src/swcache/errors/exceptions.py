"""Custom exception hierarchy for swcache."""

from __future__ import annotations

from typing import Any


class SwCacheError(Exception):
    """Base exception for all swcache errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class NetworkError(SwCacheError):
    """The network fetch itself failed (DNS, refused connection, reset...).

    HTTP error statuses are not network errors; they arrive as responses.
    """

    def __init__(
        self,
        message: str = "",
        url: str = "",
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.original = original


class StorageError(SwCacheError):
    """Cache storage backend failure."""

    def __init__(self, message: str = "", partition: str | None = None) -> None:
        super().__init__(message)
        self.partition = partition


class ConfigError(SwCacheError):
    """Invalid router configuration."""

    def __init__(self, message: str = "", key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class PrecacheError(SwCacheError):
    """A URL in an all-or-nothing precache batch could not be stored.

    Examples: network failure, non-200 status.
    """

    def __init__(
        self,
        message: str = "",
        url: str = "",
        status: int | None = None,
        inner: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.inner = inner
