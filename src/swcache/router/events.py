"""Lifecycle events and the host that delivers them.

The host plays the browser's part: it dispatches install, activate and
fetch events to registered listeners, waits on whatever they extended the
event with, and performs the native fetch when no listener responded.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

import httpx

from swcache.errors.exceptions import SwCacheError
from swcache.network.fetcher import Fetcher
from swcache.types import FetchRequest

logger = logging.getLogger(__name__)


class EventType(StrEnum):
    INSTALL = "install"
    ACTIVATE = "activate"
    FETCH = "fetch"


class ExtendableEvent:
    """An event whose lifetime listeners can extend with ``wait_until``."""

    type: EventType

    def __init__(self) -> None:
        self._extensions: list[Awaitable[Any]] = []

    def wait_until(self, work: Awaitable[Any]) -> None:
        self._extensions.append(work)

    async def settle(self) -> None:
        """Await every extension; failures are logged, never raised."""
        results = await asyncio.gather(*self._extensions, return_exceptions=True)
        for result in results:
            if isinstance(result, SwCacheError):
                logger.error("%s handler failed: %s", self.type.value, result)
            elif isinstance(result, Exception):
                logger.error(
                    "%s handler crashed: %r", self.type.value, result, exc_info=result
                )
            elif isinstance(result, BaseException):
                raise result


class InstallEvent(ExtendableEvent):
    type = EventType.INSTALL


class ActivateEvent(ExtendableEvent):
    type = EventType.ACTIVATE


class FetchEvent(ExtendableEvent):
    type = EventType.FETCH

    def __init__(self, request: FetchRequest) -> None:
        super().__init__()
        self.request = request
        self._response: Awaitable[httpx.Response] | None = None

    @property
    def handled(self) -> bool:
        return self._response is not None

    def respond_with(self, response: Awaitable[httpx.Response]) -> None:
        if self._response is not None:
            raise RuntimeError("respond_with() already called for this event")
        self._response = response

    async def response(self) -> httpx.Response | None:
        if self._response is None:
            return None
        return await self._response


Listener = Callable[[Any], None]


class WorkerHost:
    """Minimal event runtime standing in for the browser."""

    def __init__(self, fetcher: Fetcher) -> None:
        self._fetcher = fetcher
        self._listeners: dict[EventType, list[Listener]] = {t: [] for t in EventType}

    def add_event_listener(self, event_type: EventType, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    async def dispatch(self, event: ExtendableEvent) -> None:
        for listener in self._listeners[event.type]:
            listener(event)
        await event.settle()

    async def install(self) -> None:
        await self.dispatch(InstallEvent())

    async def activate(self) -> None:
        await self.dispatch(ActivateEvent())

    async def fetch(self, request: FetchRequest) -> httpx.Response:
        """Deliver a fetch event; fall back to the native fetch if unhandled.

        Errors from an intercepting strategy reach the caller unchanged.
        """
        event = FetchEvent(request)
        for listener in self._listeners[EventType.FETCH]:
            listener(event)
            if event.handled:
                break
        response = await event.response()
        await event.settle()
        if response is not None:
            return response
        return await self._fetcher.fetch(request)
