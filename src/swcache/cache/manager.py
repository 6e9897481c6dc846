"""Cache manager — the current version's three partitions over one storage."""

from __future__ import annotations

import logging

from swcache.cache.base import CachePartition, CacheStorage
from swcache.cache.memory import MemoryCacheStorage
from swcache.cache.stats import CacheStats
from swcache.config.schema import RouterConfig
from swcache.types import CacheKind

logger = logging.getLogger(__name__)


class CacheManager:
    """Owns partition naming for one version and sweeps the others."""

    def __init__(
        self,
        config: RouterConfig,
        storage: CacheStorage | None = None,
    ) -> None:
        self._config = config
        self._storage = storage or MemoryCacheStorage()
        self._stats = CacheStats()

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def storage(self) -> CacheStorage:
        return self._storage

    @property
    def counters(self) -> CacheStats:
        """Live counters, updated by the strategies."""
        return self._stats

    def partition(self, kind: CacheKind) -> CachePartition:
        return self._storage.open(self._config.partition_name(kind))

    def current_names(self) -> list[str]:
        return [self._config.partition_name(kind) for kind in CacheKind]

    def is_stale(self, name: str) -> bool:
        """Our prefix, but not one of this version's partitions."""
        return name.startswith(self._config.cache_prefix) and name not in self.current_names()

    async def sweep(self) -> list[str]:
        """Delete every stale partition. Returns the deleted names."""
        deleted: list[str] = []
        for name in await self._storage.keys():
            if not self.is_stale(name):
                continue
            logger.info("Deleting old cache: %s", name)
            if await self._storage.delete(name):
                deleted.append(name)
        self._stats.partitions_deleted += len(deleted)
        return deleted

    async def clear(self) -> None:
        """Delete every partition carrying our prefix, current ones included."""
        for name in await self._storage.keys():
            if name.startswith(self._config.cache_prefix):
                await self._storage.delete(name)
        self._stats = CacheStats()

    async def stats(self) -> CacheStats:
        """Return counters plus storage totals."""
        size_bytes = await self._storage.size_bytes()
        return self._stats.model_copy(
            update={
                "partitions": await self._storage.keys(),
                "entries": await self._storage.entry_count(),
                "size_mb": size_bytes / (1024 * 1024),
            }
        )
