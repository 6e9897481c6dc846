import httpx
import pytest

from swcache.cache.memory import MemoryCacheStorage
from swcache.config.schema import RouterConfig
from swcache.router.worker import ServiceWorker

SITE = "https://modern-jan.com"


class FakeNetwork:
    """Scriptable origin servers behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.pages: dict[str, tuple[int, dict[str, str], bytes]] = {}
        self.requests: list[httpx.Request] = []
        self.online = True

    def add(
        self,
        url: str,
        body: bytes | str = b"",
        status: int = 200,
        headers: dict[str, str] | None = None,
    ) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.pages[str(httpx.URL(url))] = (status, headers or {}, body)

    def count(self, url: str) -> int:
        target = str(httpx.URL(url))
        return sum(1 for r in self.requests if str(r.url) == target)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.online:
            raise httpx.ConnectError("network unreachable", request=request)
        page = self.pages.get(str(request.url))
        if page is None:
            return httpx.Response(404, text="not found")
        status, headers, body = page
        return httpx.Response(status, headers=headers, content=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def network():
    net = FakeNetwork()
    for path in ["/", "/blog/", "/about/", "/member/", "/tutorial/"]:
        net.add(f"{SITE}{path}", f"<html>{path}</html>", headers={"content-type": "text/html"})
    return net


@pytest.fixture
def config():
    return RouterConfig()


@pytest.fixture
def storage():
    return MemoryCacheStorage()


@pytest.fixture
async def worker(config, storage, network):
    sw = ServiceWorker(config, storage=storage, transport=network.transport)
    yield sw
    await sw.close()
