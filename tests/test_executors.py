"""
Tests for the cache-first and network-first executors.
"""

import asyncio

import httpx
import pytest
from conftest import ORIGIN, get

from tandem_offline.repositories import HttpxNetwork
from tandem_offline.services import (
    CacheFirstExecutor,
    CachePartitionManager,
    NetworkFirstExecutor,
)

STATIC = "tandem-static-v3"
API = "tandem-api-v3"


@pytest.fixture
def manager(config, store):
    return CachePartitionManager(store=store, config=config)


@pytest.fixture
def cache_first(manager, network):
    return CacheFirstExecutor(manager, network)


@pytest.fixture
def network_first(manager, network):
    return NetworkFirstExecutor(manager, network)


@pytest.mark.asyncio
async def test_cache_first_miss_then_hit(cache_first, origin, store):
    """First request is fetched and stored, the second never reaches the network."""
    url = f"{ORIGIN}/icon-192.png"

    first = await cache_first.execute(get("/icon-192.png"), STATIC)
    assert first.status_code == 200
    assert first.content == b"png-192"
    assert await store.keys(STATIC) == [f"GET {url}"]

    second = await cache_first.execute(get("/icon-192.png"), STATIC)
    assert second.content == b"png-192"
    assert origin.count(url) == 1


@pytest.mark.asyncio
async def test_cache_first_is_idempotent(cache_first, origin):
    origin.routes[f"{ORIGIN}/logo.png"] = (200, b"v1")
    await cache_first.execute(get("/logo.png"), STATIC)

    # Upstream changes, the stored copy does not
    origin.routes[f"{ORIGIN}/logo.png"] = (200, b"v2")
    responses = [await cache_first.execute(get("/logo.png"), STATIC) for _ in range(3)]

    assert [r.content for r in responses] == [b"v1", b"v1", b"v1"]
    assert origin.count(f"{ORIGIN}/logo.png") == 1


@pytest.mark.asyncio
async def test_cache_first_does_not_store_errors(cache_first, store):
    response = await cache_first.execute(get("/missing.png"), STATIC)

    assert response.status_code == 404
    assert await store.keys(STATIC) == []


@pytest.mark.asyncio
async def test_cache_first_miss_offline_raises(cache_first, origin):
    origin.offline = True

    with pytest.raises(httpx.ConnectError):
        await cache_first.execute(get("/icon-192.png"), STATIC)


@pytest.mark.asyncio
async def test_network_first_prefers_fresh_response(network_first, origin):
    url = f"{ORIGIN}/api/expenses"
    origin.routes[url] = (200, '[{"id": 1}]')
    await network_first.execute(get("/api/expenses"), API)

    origin.routes[url] = (200, '[{"id": 1}, {"id": 2}]')
    response = await network_first.execute(get("/api/expenses"), API)

    assert response.json() == [{"id": 1}, {"id": 2}]
    assert origin.count(url) == 2


@pytest.mark.asyncio
async def test_network_first_falls_back_when_offline(network_first, origin):
    """A prior successful API response is served while offline."""
    origin.routes[f"{ORIGIN}/api/expenses"] = (200, '[{"id": 1, "amount": 42}]')
    await network_first.execute(get("/api/expenses"), API)

    origin.offline = True
    response = await network_first.execute(get("/api/expenses"), API)

    assert response.status_code == 200
    assert response.json() == [{"id": 1, "amount": 42}]


@pytest.mark.asyncio
async def test_network_first_offline_without_entry_raises(network_first, origin):
    origin.offline = True

    with pytest.raises(httpx.ConnectError):
        await network_first.execute(get("/api/budgets"), API)


@pytest.mark.asyncio
async def test_network_first_returns_errors_without_storing(network_first, origin, store):
    origin.routes[f"{ORIGIN}/api/expenses"] = (200, "[]")
    await network_first.execute(get("/api/expenses"), API)

    origin.routes[f"{ORIGIN}/api/expenses"] = (503, "maintenance")
    response = await network_first.execute(get("/api/expenses"), API)
    assert response.status_code == 503

    # The stored copy is still the last 2xx one
    origin.offline = True
    fallback = await network_first.execute(get("/api/expenses"), API)
    assert fallback.text == "[]"


@pytest.mark.asyncio
async def test_returned_response_is_readable_after_store(network_first, origin):
    origin.routes[f"{ORIGIN}/api/members"] = (200, '{"members": 2}')

    response = await network_first.execute(get("/api/members"), API)

    assert response.json() == {"members": 2}


@pytest.mark.asyncio
async def test_concurrent_first_access_is_not_coalesced(manager, store):
    """Both misses fetch; the write that lands last is the one kept."""
    calls = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        if len(calls) == 1:
            await asyncio.sleep(0.02)
            return httpx.Response(200, content=b"slow")
        return httpx.Response(200, content=b"fast")

    network = HttpxNetwork(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    executor = CacheFirstExecutor(manager, network)

    first, second = await asyncio.gather(
        executor.execute(get("/logo.png"), STATIC),
        executor.execute(get("/logo.png"), STATIC),
    )

    assert calls == [f"{ORIGIN}/logo.png", f"{ORIGIN}/logo.png"]
    assert first.content == b"slow"
    assert second.content == b"fast"
    assert await store.keys(STATIC) == [f"GET {ORIGIN}/logo.png"]
    stored = await store.match(STATIC, f"GET {ORIGIN}/logo.png")
    assert stored.body == b"slow"
