"""
Tests for partition management: precache, stale deletion, statistics.
"""

import httpx
import pytest
from conftest import ORIGIN, StubOrigin, get

from tandem_offline.config import CacheConfig
from tandem_offline.errors import PrecacheError
from tandem_offline.services import CachePartitionManager


@pytest.fixture
def manager(config, store):
    return CachePartitionManager(store=store, config=config)


@pytest.mark.asyncio
async def test_precache_stores_exactly_the_list(store):
    """Fresh install with a two-path precache list."""
    config = CacheConfig(origin=ORIGIN, precache=("/", "/manifest.json"))
    manager = CachePartitionManager(store=store, config=config)

    count = await manager.precache(StubOrigin().network())

    assert count == 2
    assert await store.keys("tandem-static-v3") == [
        f"GET {ORIGIN}/",
        f"GET {ORIGIN}/manifest.json",
    ]


@pytest.mark.asyncio
async def test_precache_is_all_or_nothing(manager, store):
    origin = StubOrigin({f"{ORIGIN}/icon-512.png": (500, "boom")})

    with pytest.raises(PrecacheError) as exc_info:
        await manager.precache(origin.network())

    assert exc_info.value.failed == [f"{ORIGIN}/icon-512.png"]
    assert await store.names() == []


@pytest.mark.asyncio
async def test_precache_fails_when_offline(manager, store):
    origin = StubOrigin()
    origin.offline = True

    with pytest.raises(PrecacheError) as exc_info:
        await manager.precache(origin.network())

    assert len(exc_info.value.failed) == len(manager.config.precache)
    assert await store.keys("tandem-static-v3") == []


@pytest.mark.asyncio
async def test_delete_stale_removes_other_versions(manager, store):
    """Activation with only v2 partitions deletes both and creates nothing."""
    await store.open("tandem-static-v2")
    await store.open("tandem-dynamic-v2")

    deleted = await manager.delete_stale()

    assert deleted == ["tandem-static-v2", "tandem-dynamic-v2"]
    assert await store.names() == []


@pytest.mark.asyncio
async def test_delete_stale_keeps_current_version(manager, store):
    await store.open("tandem-static-v2")
    await store.open("tandem-static-v3")
    await store.open("tandem-api-v3")

    deleted = await manager.delete_stale()

    assert deleted == ["tandem-static-v2"]
    assert await store.names() == ["tandem-static-v3", "tandem-api-v3"]


@pytest.mark.asyncio
async def test_versions_do_not_share_partitions(store, origin):
    """Two generations write to disjoint partitions."""
    old = CachePartitionManager(store=store, config=CacheConfig(origin=ORIGIN, version="v2"))
    new = CachePartitionManager(store=store, config=CacheConfig(origin=ORIGIN, version="v3"))

    await old.precache(origin.network())
    await new.precache(origin.network())

    assert set(await store.names()) == {"tandem-static-v2", "tandem-static-v3"}

    await new.delete_stale()
    assert await store.names() == ["tandem-static-v3"]


@pytest.mark.asyncio
async def test_partition_match_returns_independent_copies(manager):
    partition = await manager.open("tandem-static-v3")
    request = get("/manifest.json")
    await partition.put(request, httpx.Response(200, content=b"{}", request=request))

    first = await partition.match(request)
    second = await partition.match(request)

    assert first is not second
    assert first.content == second.content == b"{}"


@pytest.mark.asyncio
async def test_request_identity_ignores_fragment(manager):
    partition = await manager.open("tandem-dynamic-v3")
    await partition.put(get("/dashboard"), httpx.Response(200, text="page"))

    hit = await partition.match(get("/dashboard#expenses"))

    assert hit is not None
    assert hit.text == "page"


@pytest.mark.asyncio
async def test_get_stats(manager, store, origin):
    await store.open("tandem-static-v2")
    await manager.precache(origin.network())

    stats = await manager.get_stats()

    assert stats == [
        {"name": "tandem-static-v2", "entries": 0, "current": False},
        {"name": "tandem-static-v3", "entries": 5, "current": True},
    ]
