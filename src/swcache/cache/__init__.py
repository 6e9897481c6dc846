"""Cache subsystem — named response partitions over memory or SQLite storage."""

from swcache.cache.base import CachePartition, CacheStorage
from swcache.cache.disk import DiskCacheStorage
from swcache.cache.keys import is_cacheable_method, normalize_url, request_key
from swcache.cache.manager import CacheManager
from swcache.cache.memory import MemoryCacheStorage
from swcache.cache.stats import CacheStats

__all__ = [
    "CacheManager",
    "CachePartition",
    "CacheStats",
    "CacheStorage",
    "DiskCacheStorage",
    "MemoryCacheStorage",
    "is_cacheable_method",
    "normalize_url",
    "request_key",
]
