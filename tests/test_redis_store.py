"""
Tests for the Redis partition store.

Skipped when no Redis server is reachable at REDIS_URL.
"""

import uuid

import pytest
import redis
import redis.asyncio as aioredis

from tandem_offline.config import settings
from tandem_offline.entities import StoredResponse
from tandem_offline.repositories import RedisPartitionStore


def _redis_available() -> bool:
    client = redis.Redis.from_url(
        settings.redis_url, password=settings.redis_password, socket_timeout=0.5
    )
    try:
        return bool(client.ping())
    except redis.RedisError:
        return False


pytestmark = pytest.mark.skipif(not _redis_available(), reason="Redis is not running")


@pytest.fixture
def namespace():
    return f"test-sw-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def store(namespace):
    client = aioredis.from_url(settings.redis_url, password=settings.redis_password)
    return RedisPartitionStore.create(redis_client=client, namespace=namespace)


def _entry(body: bytes = b"\x89PNG binary") -> StoredResponse:
    return StoredResponse(
        url="http://localhost:5000/icon-192.png",
        status_code=200,
        headers=(("content-type", "image/png"), ("x-cache", "miss")),
        body=body,
        stored_at=1700000000.0,
    )


async def _cleanup(store: RedisPartitionStore) -> None:
    for name in await store.names():
        await store.delete(name)
    await store.close()


@pytest.mark.asyncio
async def test_put_and_match(store):
    try:
        key = "GET http://localhost:5000/icon-192.png"
        await store.put("tandem-static-v3", key, _entry())

        assert await store.match("tandem-static-v3", key) == _entry()
        assert await store.match("tandem-static-v3", "GET http://localhost:5000/other") is None
        assert await store.match("tandem-api-v3", key) is None
        assert await store.keys("tandem-static-v3") == [key]
    finally:
        await _cleanup(store)


@pytest.mark.asyncio
async def test_names_in_creation_order_and_delete(store):
    try:
        await store.open("tandem-static-v2")
        await store.open("tandem-static-v3")
        await store.open("tandem-static-v2")

        assert await store.names() == ["tandem-static-v2", "tandem-static-v3"]
        assert await store.has("tandem-static-v3") is True

        assert await store.delete("tandem-static-v2") is True
        assert await store.delete("tandem-static-v2") is False
        assert await store.names() == ["tandem-static-v3"]
    finally:
        await _cleanup(store)


@pytest.mark.asyncio
async def test_health_check(store):
    try:
        assert await store.health_check() is True
    finally:
        await store.close()
