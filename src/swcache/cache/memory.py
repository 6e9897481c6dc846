"""In-memory cache storage."""

from __future__ import annotations

from collections import OrderedDict

from swcache.cache.base import CacheStorage
from swcache.types import CachedResponse


class MemoryCacheStorage(CacheStorage):
    """Partitions held in process memory; gone when the process exits."""

    def __init__(self) -> None:
        self._partitions: OrderedDict[str, OrderedDict[str, CachedResponse]] = OrderedDict()

    async def keys(self) -> list[str]:
        return list(self._partitions)

    async def delete(self, name: str) -> bool:
        return self._partitions.pop(name, None) is not None

    async def entry_count(self, name: str | None = None) -> int:
        if name is not None:
            return len(self._partitions.get(name, {}))
        return sum(len(p) for p in self._partitions.values())

    async def size_bytes(self) -> int:
        return sum(e.size_bytes for p in self._partitions.values() for e in p.values())

    async def _get(self, partition: str, key: str) -> CachedResponse | None:
        store = self._partitions.get(partition)
        if store is None:
            return None
        return store.get(key)

    async def _set(self, partition: str, key: str, entry: CachedResponse) -> None:
        # Partition is created lazily on first write
        self._partitions.setdefault(partition, OrderedDict())[key] = entry

    async def _remove(self, partition: str, key: str) -> bool:
        store = self._partitions.get(partition)
        if store is None:
            return False
        return store.pop(key, None) is not None

    async def _list(self, partition: str) -> list[str]:
        return list(self._partitions.get(partition, {}))
