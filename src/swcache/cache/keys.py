"""Cache key generation — request identity is method + URL."""

from __future__ import annotations

import httpx

_CACHEABLE_METHODS = frozenset({"GET"})


def normalize_url(url: str) -> str:
    """Drop the fragment; the query string stays part of the identity."""
    return str(httpx.URL(url).copy_with(fragment=None))


def request_key(method: str, url: str) -> str:
    """Build the partition key for a request."""
    return f"{method.upper()} {normalize_url(url)}"


def is_cacheable_method(method: str) -> bool:
    return method.upper() in _CACHEABLE_METHODS
