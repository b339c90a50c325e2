"""Shared fixtures: a stub app origin served through httpx.MockTransport."""

import httpx
import pytest

from tandem_offline.config import CacheConfig
from tandem_offline.repositories import HttpxNetwork, InMemoryClientHost, InMemoryPartitionStore
from tandem_offline.services import ServiceWorker

ORIGIN = "http://localhost:5000"


class StubOrigin:
    """Fake upstream that records every request and can go offline."""

    def __init__(self, routes: dict[str, tuple[int, bytes | str]] | None = None) -> None:
        self.routes: dict[str, tuple[int, bytes | str]] = {
            f"{ORIGIN}/": (200, "<html>shell</html>"),
            f"{ORIGIN}/manifest.json": (200, '{"name": "Tandem"}'),
            f"{ORIGIN}/icon-192.png": (200, b"png-192"),
            f"{ORIGIN}/icon-512.png": (200, b"png-512"),
            f"{ORIGIN}/apple-touch-icon.png": (200, b"png-apple"),
        }
        self.routes.update(routes or {})
        self.offline = False
        self.calls: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(f"{request.method} {request.url}")
        if self.offline:
            raise httpx.ConnectError("network unreachable", request=request)
        status_code, body = self.routes.get(str(request.url), (404, "not found"))
        content = body.encode() if isinstance(body, str) else body
        return httpx.Response(status_code, content=content)

    def count(self, url: str, method: str = "GET") -> int:
        return self.calls.count(f"{method} {url}")

    def network(self) -> HttpxNetwork:
        client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return HttpxNetwork(client=client)


@pytest.fixture
def origin() -> StubOrigin:
    return StubOrigin()


@pytest.fixture
def config() -> CacheConfig:
    return CacheConfig(origin=ORIGIN)


@pytest.fixture
def store() -> InMemoryPartitionStore:
    return InMemoryPartitionStore()


@pytest.fixture
def clients() -> InMemoryClientHost:
    return InMemoryClientHost()


@pytest.fixture
def network(origin: StubOrigin) -> HttpxNetwork:
    return origin.network()


@pytest.fixture
def worker(config, store, network, clients) -> ServiceWorker:
    """A worker that has not been installed yet."""
    return ServiceWorker.create(config=config, store=store, network=network, clients=clients)


def get(path_or_url: str, **headers: str) -> httpx.Request:
    """Build a GET request for a same-origin path or an absolute URL."""
    url = path_or_url if "://" in path_or_url else f"{ORIGIN}{path_or_url}"
    return httpx.Request("GET", url, headers={k.replace("_", "-"): v for k, v in headers.items()})


class FlakyStore(InMemoryPartitionStore):
    """In-memory store that fails every call while ``broken`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.broken = False

    def _check(self) -> None:
        if self.broken:
            raise ConnectionError("store down")

    async def open(self, name: str) -> None:
        self._check()
        await super().open(name)

    async def match(self, name, key):
        self._check()
        return await super().match(name, key)

    async def put(self, name, key, entry) -> None:
        self._check()
        await super().put(name, key, entry)
