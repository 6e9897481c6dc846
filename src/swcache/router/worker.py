"""The cache router — lifecycle handling and per-request dispatch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

import httpx

from swcache.cache.base import CacheStorage
from swcache.cache.manager import CacheManager
from swcache.config.schema import RouterConfig
from swcache.errors.exceptions import SwCacheError
from swcache.network.fetcher import Fetcher
from swcache.router.background import BackgroundWrites
from swcache.router.events import (
    ActivateEvent,
    EventType,
    FetchEvent,
    InstallEvent,
    WorkerHost,
)
from swcache.router.rules import Classification, build_rules, classify
from swcache.router.strategies import cache_first, network_first
from swcache.types import CacheKind, FetchRequest, ResponseSource, Strategy

logger = logging.getLogger(__name__)


class WorkerState(StrEnum):
    PARSED = "parsed"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVATED = "activated"
    REDUNDANT = "redundant"


@dataclass
class FetchOutcome:
    """What the router did with one request."""

    classification: Classification
    response: httpx.Response | None
    source: ResponseSource


class ServiceWorker:
    """Routes requests to Cache-First or Network-First over versioned partitions.

    The configuration (and with it the cache version) is fixed per instance;
    routers at different versions can share one storage.
    """

    def __init__(
        self,
        config: RouterConfig | None = None,
        storage: CacheStorage | None = None,
        fetcher: Fetcher | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or RouterConfig()
        self._manager = CacheManager(self._config, storage)
        self._fetcher = fetcher or Fetcher(self._config.site_origin, transport=transport)
        self._rules = build_rules(self._config)
        self._background = BackgroundWrites()
        self._state = WorkerState.PARSED
        self._skip_waiting = False
        self._controls_clients = False

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def cache_manager(self) -> CacheManager:
        return self._manager

    @property
    def fetcher(self) -> Fetcher:
        return self._fetcher

    @property
    def background(self) -> BackgroundWrites:
        return self._background

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def skip_waiting(self) -> bool:
        return self._skip_waiting

    @property
    def controls_clients(self) -> bool:
        return self._controls_clients

    # ── Lifecycle ──

    async def install(self) -> bool:
        """Warm the static partition with the seed routes.

        Best effort: a failed precache is logged and install still completes.
        Returns whether the precache succeeded. Anything other than a network
        or storage failure leaves the worker redundant and is re-raised.
        """
        logger.info("Installing service worker %s", self._config.version)
        self._state = WorkerState.INSTALLING
        urls = [
            self._config.absolute_url(path)
            for path in self._config.precache_paths
            # The offline page is stored later, when it is first visited
            if path != self._config.offline_path
        ]
        ok = True
        try:
            logger.info("Precaching static assets (%d)", len(urls))
            await self._manager.partition(CacheKind.STATIC).add_all(urls, self._fetcher)
        except SwCacheError as e:
            logger.error("Failed to precache static assets: %s", e)
            ok = False
        except Exception:
            self._state = WorkerState.REDUNDANT
            raise
        self._skip_waiting = True
        self._state = WorkerState.INSTALLED
        return ok

    async def activate(self) -> list[str]:
        """Delete partitions from other versions and take control of clients."""
        logger.info("Activating service worker %s", self._config.version)
        self._state = WorkerState.ACTIVATING
        try:
            deleted = await self._manager.sweep()
        except SwCacheError as e:
            logger.error("Failed to delete old caches: %s", e)
            deleted = []
        except Exception:
            self._state = WorkerState.REDUNDANT
            raise
        self._controls_clients = True
        self._state = WorkerState.ACTIVATED
        return deleted

    # ── Fetch ──

    def classify(self, request: FetchRequest) -> Classification:
        return classify(request, self._rules)

    async def route(self, request: FetchRequest) -> FetchOutcome:
        """Classify and apply the matching strategy.

        A bypassed request gets no response here; the caller fetches natively.
        """
        return await self._apply(request, self.classify(request))

    async def _apply(self, request: FetchRequest, classification: Classification) -> FetchOutcome:
        route = classification.route

        if route.strategy == Strategy.CACHE_FIRST and route.kind is not None:
            response, source = await cache_first(
                request,
                self._manager.partition(route.kind),
                self._fetcher,
                self._manager,
            )
        elif route.strategy == Strategy.NETWORK_FIRST:
            response, source = await network_first(
                request, self._manager, self._fetcher, self._background
            )
        else:
            logger.debug("Not intercepting %s (%s)", request.url, classification.rule)
            return FetchOutcome(classification, None, ResponseSource.BYPASS)

        return FetchOutcome(classification, response, source)

    async def handle_fetch(self, request: FetchRequest) -> httpx.Response | None:
        """Return the routed response, or None when not intercepted."""
        outcome = await self.route(request)
        return outcome.response

    async def fetch(self, request: FetchRequest) -> httpx.Response:
        """Fetch as a page under this worker's control would."""
        response = await self.handle_fetch(request)
        if response is not None:
            return response
        return await self._fetcher.fetch(request)

    # ── Host wiring ──

    def register(self, host: WorkerHost) -> None:
        """Subscribe to the host's install, activate and fetch events."""
        host.add_event_listener(EventType.INSTALL, self._on_install)
        host.add_event_listener(EventType.ACTIVATE, self._on_activate)
        host.add_event_listener(EventType.FETCH, self._on_fetch)

    def _on_install(self, event: InstallEvent) -> None:
        event.wait_until(self.install())

    def _on_activate(self, event: ActivateEvent) -> None:
        event.wait_until(self.activate())

    def _on_fetch(self, event: FetchEvent) -> None:
        classification = self.classify(event.request)
        if classification.intercepted:
            event.respond_with(self._respond(event.request, classification))

    async def _respond(
        self, request: FetchRequest, classification: Classification
    ) -> httpx.Response | None:
        outcome = await self._apply(request, classification)
        return outcome.response

    async def drain(self) -> None:
        await self._background.drain()

    async def close(self) -> None:
        await self._background.drain()
        await self._fetcher.close()
        await self._manager.storage.close()
