"""End-to-end router behavior against a scripted network."""

from swcache.cache.disk import DiskCacheStorage
from swcache.config.schema import RouterConfig
from swcache.router.worker import ServiceWorker
from swcache.types import (
    CacheKind,
    Credentials,
    Destination,
    FetchRequest,
    RequestMode,
    ResponseSource,
)

SITE = "https://modern-jan.com"
ASSETS = "https://r2.modern-jan.com"


class TestScenarios:
    async def test_blog_page_survives_going_offline(self, worker, network):
        request = FetchRequest(url=f"{SITE}/blog/", destination=Destination.DOCUMENT)

        live = await worker.fetch(request)
        assert live.status_code == 200
        await worker.drain()

        network.online = False
        network.add(f"{SITE}/offline.html", b"offline")
        again = await worker.fetch(request)
        assert again.content == live.content
        assert again.content != b"offline"

    async def test_asset_image_fetched_once(self, worker, network):
        network.add(f"{ASSETS}/photo.jpg", bytes(range(200)))
        request = FetchRequest(url=f"{ASSETS}/photo.jpg", destination=Destination.IMAGE)

        first = await worker.fetch(request)
        assert network.count(f"{ASSETS}/photo.jpg") == 1
        assert await worker.cache_manager.partition(CacheKind.IMAGE).match(request) is not None

        second = await worker.fetch(request)
        assert network.count(f"{ASSETS}/photo.jpg") == 1
        assert second.content == first.content


class TestProperties:
    async def test_foreign_origin_never_touches_cache(self, worker, network):
        network.add("https://example.org/a.js", b"js")
        for dest in Destination:
            await worker.fetch(FetchRequest(url="https://example.org/a.js", destination=dest))
        await worker.drain()
        assert await worker.cache_manager.storage.keys() == []

    async def test_credentialed_requests_never_read_or_write(self, worker, network):
        network.add(f"{SITE}/photo.jpg", b"fresh")
        cached_request = FetchRequest(url=f"{SITE}/photo.jpg", destination=Destination.IMAGE)
        await worker.fetch(cached_request)
        network.add(f"{SITE}/photo.jpg", b"newer")

        credentialed = FetchRequest(
            url=f"{SITE}/photo.jpg",
            destination=Destination.IMAGE,
            credentials=Credentials.INCLUDE,
        )
        response = await worker.fetch(credentialed)

        assert response.content == b"newer"
        stored = await worker.cache_manager.partition(CacheKind.IMAGE).match(cached_request)
        assert stored.body == b"fresh"

    async def test_navigation_without_any_copy_gets_offline_document(self, worker, network):
        network.add(f"{SITE}/offline.html", b"offline doc")
        await worker.fetch(FetchRequest(url=f"{SITE}/offline.html", mode=RequestMode.NAVIGATE))
        await worker.drain()

        network.online = False
        outcome = await worker.route(
            FetchRequest(url=f"{SITE}/blog/page/9/", mode=RequestMode.NAVIGATE)
        )
        assert outcome.source == ResponseSource.OFFLINE
        assert outcome.response.content == b"offline doc"

    async def test_version_bump_leaves_only_current_partitions(self, tmp_path, network):
        db = tmp_path / "cache.db"

        old = ServiceWorker(
            RouterConfig(version="v1"), storage=DiskCacheStorage(db), transport=network.transport
        )
        network.add(f"{ASSETS}/a.png", b"a")
        network.add(f"{SITE}/_astro/app.css", b"css")
        await old.install()
        await old.activate()
        await old.fetch(FetchRequest(url=f"{ASSETS}/a.png", destination=Destination.IMAGE))
        await old.fetch(FetchRequest(url=f"{SITE}/blog/", mode=RequestMode.NAVIGATE))
        await old.close()

        new = ServiceWorker(
            RouterConfig(version="v2"), storage=DiskCacheStorage(db), transport=network.transport
        )
        try:
            await new.install()
            await new.fetch(FetchRequest(url=f"{ASSETS}/a.png", destination=Destination.IMAGE))
            await new.fetch(FetchRequest(url=f"{SITE}/blog/", mode=RequestMode.NAVIGATE))
            await new.drain()
            await new.activate()
            names = await new.cache_manager.storage.keys()
        finally:
            await new.close()

        assert sorted(names) == sorted(new.cache_manager.current_names())
        assert not any("-v1-" in name for name in names)
