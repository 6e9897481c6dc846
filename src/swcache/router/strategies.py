"""Caching strategies — Cache-First and Network-First."""

from __future__ import annotations

import logging

import httpx

from swcache.cache.base import CachePartition
from swcache.cache.manager import CacheManager
from swcache.errors.exceptions import NetworkError
from swcache.network.fetcher import Fetcher
from swcache.router.background import BackgroundWrites
from swcache.types import CacheKind, Credentials, FetchRequest, ResponseSource

logger = logging.getLogger(__name__)

_OFFLINE_BODY = (
    b"<!doctype html><html><head><meta charset=\"utf-8\"><title>Offline</title></head>"
    b"<body><h1>Offline</h1><p>This page is not available offline.</p></body></html>"
)


def is_storable(response: httpx.Response) -> bool:
    """Cache-First stores only plain 200s that do not set cookies."""
    return response.status_code == 200 and "set-cookie" not in response.headers


async def cache_first(
    request: FetchRequest,
    partition: CachePartition,
    fetcher: Fetcher,
    manager: CacheManager,
) -> tuple[httpx.Response, ResponseSource]:
    """Serve from the partition; on a miss fetch without credentials and store.

    A network failure on a miss propagates as NetworkError. There is no
    fallback to other partitions on this path, unlike Network-First.
    """
    counters = manager.counters
    cached = await partition.match(request)
    if cached is not None:
        counters.hits += 1
        logger.debug("Cache hit in %s: %s", partition.name, request.url)
        return cached.to_httpx(), ResponseSource.CACHE

    counters.misses += 1
    counters.network_fetches += 1
    response = await fetcher.fetch(request, credentials=Credentials.OMIT)

    if is_storable(response):
        await partition.put(request, response)
        counters.stores += 1
    return response, ResponseSource.NETWORK


async def network_first(
    request: FetchRequest,
    manager: CacheManager,
    fetcher: Fetcher,
    background: BackgroundWrites,
) -> tuple[httpx.Response, ResponseSource]:
    """Try the network; fall back to the stored page, then the offline page."""
    counters = manager.counters
    partition = manager.partition(CacheKind.DYNAMIC)
    counters.network_fetches += 1
    try:
        response = await fetcher.fetch(request, credentials=Credentials.SAME_ORIGIN)
    except NetworkError as e:
        logger.info("Network unavailable for %s: %s", request.url, e.original or e)
        return await _offline_response(request, partition, manager)

    if response.status_code == 200:
        background.schedule(_store(partition, request, response, manager), label=request.url)
    return response, ResponseSource.NETWORK


async def _store(
    partition: CachePartition,
    request: FetchRequest,
    response: httpx.Response,
    manager: CacheManager,
) -> None:
    await partition.put(request, response)
    manager.counters.stores += 1


async def _offline_response(
    request: FetchRequest,
    partition: CachePartition,
    manager: CacheManager,
) -> tuple[httpx.Response, ResponseSource]:
    counters = manager.counters
    cached = await partition.match(request)
    if cached is not None:
        counters.hits += 1
        return cached.to_httpx(), ResponseSource.CACHE

    counters.misses += 1
    counters.offline_fallbacks += 1
    offline = await manager.storage.match(manager.config.offline_url)
    if offline is not None:
        return offline.to_httpx(), ResponseSource.OFFLINE

    logger.warning("No offline document cached; answering %s with 503", request.url)
    return (
        httpx.Response(
            status_code=503,
            headers={"content-type": "text/html; charset=utf-8"},
            content=_OFFLINE_BODY,
            request=httpx.Request(request.method, request.url),
        ),
        ResponseSource.OFFLINE,
    )
