"""Error handling — exception hierarchy for the cache router."""

from swcache.errors.exceptions import (
    ConfigError,
    NetworkError,
    PrecacheError,
    StorageError,
    SwCacheError,
)

__all__ = [
    "SwCacheError",
    "NetworkError",
    "StorageError",
    "ConfigError",
    "PrecacheError",
]
