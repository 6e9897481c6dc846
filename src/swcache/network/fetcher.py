"""Async fetcher wrapping httpx."""

from __future__ import annotations

import logging

import httpx

from swcache.errors.exceptions import NetworkError
from swcache.types import Credentials, FetchRequest

logger = logging.getLogger(__name__)


class Fetcher:
    """Sends requests to the network with a given credentials mode.

    No retries and no timeout: any httpx request error surfaces exactly
    once as NetworkError, and aborts are left to the transport.
    """

    def __init__(
        self,
        site_origin: str,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._site_origin = site_origin
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            transport=transport,
            timeout=None,
            follow_redirects=True,
        )
        self._fetch_count = 0

    @property
    def fetch_count(self) -> int:
        """Number of requests sent, successful or not."""
        return self._fetch_count

    async def fetch(
        self,
        request: FetchRequest,
        credentials: Credentials | None = None,
    ) -> httpx.Response:
        """Fetch a request. HTTP error statuses are returned, not raised."""
        mode = credentials or request.credentials
        wire_request = request.to_httpx(self._sends_credentials(request, mode))
        self._fetch_count += 1
        logger.debug("Fetching %s %s (credentials=%s)", request.method, request.url, mode)
        try:
            return await self._client.send(wire_request)
        except httpx.RequestError as e:
            # Redirect loops and undecodable bodies fail the fetch like a drop
            raise NetworkError(
                f"Network request failed for {request.url}: {e}",
                url=request.url,
                original=e,
            ) from e

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Fetcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _sends_credentials(self, request: FetchRequest, mode: Credentials) -> bool:
        if mode == Credentials.INCLUDE:
            return True
        if mode == Credentials.SAME_ORIGIN:
            return request.origin == self._site_origin
        return False


def offline_transport() -> httpx.MockTransport:
    """A transport on which every request fails to connect."""

    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network unreachable", request=request)

    return httpx.MockTransport(_refuse)
