"""Cache storage interface — named partitions of stored responses."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import httpx

from swcache.cache.keys import request_key
from swcache.errors.exceptions import NetworkError, PrecacheError
from swcache.types import CachedResponse, FetchRequest

if TYPE_CHECKING:
    from swcache.network.fetcher import Fetcher

logger = logging.getLogger(__name__)


class CacheStorage(ABC):
    """Backend holding every partition.

    Subclasses implement the primitive per-key operations; partition handles
    and cross-partition lookup are shared.
    """

    def open(self, name: str) -> CachePartition:
        """Return a handle. The partition itself appears on first write."""
        return CachePartition(name, self)

    async def match(self, request: FetchRequest | str) -> CachedResponse | None:
        """Search every partition in creation order; first hit wins."""
        key = _key_for(request)
        for name in await self.keys():
            entry = await self._get(name, key)
            if entry is not None:
                return entry
        return None

    async def has(self, name: str) -> bool:
        return name in await self.keys()

    @abstractmethod
    async def keys(self) -> list[str]:
        """Names of existing partitions, in creation order."""

    @abstractmethod
    async def delete(self, name: str) -> bool:
        """Drop a whole partition. Returns False if it did not exist."""

    @abstractmethod
    async def entry_count(self, name: str | None = None) -> int: ...

    @abstractmethod
    async def size_bytes(self) -> int: ...

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def _get(self, partition: str, key: str) -> CachedResponse | None: ...

    @abstractmethod
    async def _set(self, partition: str, key: str, entry: CachedResponse) -> None: ...

    @abstractmethod
    async def _remove(self, partition: str, key: str) -> bool: ...

    @abstractmethod
    async def _list(self, partition: str) -> list[str]: ...


class CachePartition:
    """Handle on one named partition."""

    def __init__(self, name: str, storage: CacheStorage) -> None:
        self._name = name
        self._storage = storage

    @property
    def name(self) -> str:
        return self._name

    async def match(self, request: FetchRequest | str) -> CachedResponse | None:
        return await self._storage._get(self._name, _key_for(request))

    async def put(self, request: FetchRequest | str, response: httpx.Response) -> CachedResponse:
        """Store a copy of a fully-read response. Last write wins."""
        entry = CachedResponse.from_httpx(response)
        await self._storage._set(self._name, _key_for(request), entry)
        return entry

    async def delete(self, request: FetchRequest | str) -> bool:
        return await self._storage._remove(self._name, _key_for(request))

    async def keys(self) -> list[str]:
        """Stored request keys (``METHOD url``)."""
        return await self._storage._list(self._name)

    async def add_all(self, urls: list[str], fetcher: Fetcher) -> None:
        """Fetch every URL and store them together, or store nothing.

        Raises PrecacheError on the first network failure or non-200 status.
        """
        fetched: list[tuple[FetchRequest, httpx.Response]] = []
        for url in urls:
            request = FetchRequest(url=url)
            try:
                response = await fetcher.fetch(request)
            except NetworkError as e:
                raise PrecacheError(
                    f"Failed to fetch {url}: {e}", url=url, inner=e
                ) from e
            if response.status_code != 200:
                raise PrecacheError(
                    f"Unexpected status {response.status_code} for {url}",
                    url=url,
                    status=response.status_code,
                )
            fetched.append((request, response))

        for request, response in fetched:
            await self.put(request, response)
        logger.debug("Stored %d entries in %s", len(fetched), self._name)


def _key_for(request: FetchRequest | str) -> str:
    if isinstance(request, FetchRequest):
        return request_key(request.method, request.url)
    return request_key("GET", request)
