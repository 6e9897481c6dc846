"""Shared Pydantic models for swcache."""

from __future__ import annotations

import time
from enum import StrEnum

import httpx
from pydantic import BaseModel, Field

# ── Enums ──


class Destination(StrEnum):
    DOCUMENT = "document"
    IMAGE = "image"
    SCRIPT = "script"
    STYLE = "style"
    FONT = "font"
    MANIFEST = "manifest"
    WORKER = "worker"
    EMPTY = "empty"


class RequestMode(StrEnum):
    NAVIGATE = "navigate"
    SAME_ORIGIN = "same-origin"
    CORS = "cors"
    NO_CORS = "no-cors"


class Credentials(StrEnum):
    OMIT = "omit"
    SAME_ORIGIN = "same-origin"
    INCLUDE = "include"


class CacheKind(StrEnum):
    STATIC = "static"
    DYNAMIC = "dynamic"
    IMAGE = "image"


class Strategy(StrEnum):
    CACHE_FIRST = "cache_first"
    NETWORK_FIRST = "network_first"
    BYPASS = "bypass"


class ResponseSource(StrEnum):
    CACHE = "cache"
    NETWORK = "network"
    OFFLINE = "offline"
    BYPASS = "bypass"


# Headers that only describe a single transfer; the stored body is already decoded.
_HOP_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})
_CREDENTIAL_HEADERS = frozenset({"cookie", "authorization"})


# ── Request / response models ──


class FetchRequest(BaseModel):
    """An outgoing request as seen by the router."""

    url: str
    method: str = "GET"
    destination: Destination = Destination.EMPTY
    mode: RequestMode = RequestMode.NO_CORS
    credentials: Credentials = Credentials.SAME_ORIGIN
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def origin(self) -> str:
        return origin_of(self.url)

    @property
    def path(self) -> str:
        return httpx.URL(self.url).path or "/"

    @property
    def is_navigation(self) -> bool:
        return self.mode == RequestMode.NAVIGATE

    def to_httpx(self, with_credentials: bool) -> httpx.Request:
        """Build the wire request, dropping cookies and auth unless allowed."""
        headers = {
            name: value
            for name, value in self.headers.items()
            if with_credentials or name.lower() not in _CREDENTIAL_HEADERS
        }
        return httpx.Request(self.method.upper(), self.url, headers=headers)


class CachedResponse(BaseModel):
    """A response copy held in a cache partition."""

    url: str
    status: int
    headers: list[tuple[str, str]] = Field(default_factory=list)
    body: bytes = b""
    stored_at: float = Field(default_factory=time.time)

    @property
    def size_bytes(self) -> int:
        return len(self.body)

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> CachedResponse:
        """Copy a fully-read httpx response."""
        headers = [
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in _HOP_HEADERS
        ]
        return cls(
            url=str(response.request.url),
            status=response.status_code,
            headers=headers,
            body=response.content,
        )

    def to_httpx(self) -> httpx.Response:
        return httpx.Response(
            status_code=self.status,
            headers=self.headers,
            content=self.body,
            request=httpx.Request("GET", self.url),
        )


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` with default ports elided."""
    parsed = httpx.URL(url)
    if parsed.port is not None:
        return f"{parsed.scheme}://{parsed.host}:{parsed.port}"
    return f"{parsed.scheme}://{parsed.host}"
