"""Redis implementation of PartitionStore.

Layout under the configured namespace:

- ``<ns>:partitions``: sorted set of partition names scored by creation time
- ``<ns>:partition:<name>``: hash mapping request identity to a JSON snapshot

Redis gives atomic HSET/HGET per key, which is all the worker needs. Several
gateway processes can share one store; version-tagged names keep generations
apart.
"""

import base64
import json
import time

import redis.asyncio as redis

from tandem_offline.config import get_redis_client, settings
from tandem_offline.entities import StoredResponse


class RedisPartitionStore:
    """Redis-backed partition store.

    This class satisfies the PartitionStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize the Redis partition store.

        Args:
            redis_client: asyncio Redis client. If None, creates default.
            namespace: Key prefix for every key this store writes.
        """
        self._client = redis_client or get_redis_client()
        self._namespace = namespace or settings.partition_namespace

    @classmethod
    def create(
        cls,
        redis_client: redis.Redis | None = None,
        namespace: str | None = None,
    ) -> "RedisPartitionStore":
        """Factory method to create RedisPartitionStore with defaults.

        Args:
            redis_client: Redis client. If None, built from settings.
            namespace: Key namespace. If None, uses settings.

        Returns:
            Configured RedisPartitionStore
        """
        return cls(redis_client=redis_client, namespace=namespace)

    @property
    def _index_key(self) -> str:
        return f"{self._namespace}:partitions"

    def _partition_key(self, name: str) -> str:
        return f"{self._namespace}:partition:{name}"

    @staticmethod
    def _encode(entry: StoredResponse) -> str:
        return json.dumps(
            {
                "url": entry.url,
                "status_code": entry.status_code,
                "headers": [list(pair) for pair in entry.headers],
                "body": base64.b64encode(entry.body).decode("ascii"),
                "stored_at": entry.stored_at,
            }
        )

    @staticmethod
    def _decode(raw: bytes | str) -> StoredResponse:
        data = json.loads(raw)
        return StoredResponse(
            url=data["url"],
            status_code=int(data["status_code"]),
            headers=tuple((k, v) for k, v in data["headers"]),
            body=base64.b64decode(data["body"]),
            stored_at=float(data["stored_at"]),
        )

    async def open(self, name: str) -> None:
        await self._client.zadd(self._index_key, {name: time.time()}, nx=True)

    async def has(self, name: str) -> bool:
        score = await self._client.zscore(self._index_key, name)
        return score is not None

    async def names(self) -> list[str]:
        raw = await self._client.zrange(self._index_key, 0, -1)
        return [n.decode() if isinstance(n, bytes) else n for n in raw]

    async def delete(self, name: str) -> bool:
        pipe = self._client.pipeline()
        pipe.zrem(self._index_key, name)
        pipe.delete(self._partition_key(name))
        removed, _ = await pipe.execute()
        return bool(removed)

    async def match(self, name: str, key: str) -> StoredResponse | None:
        raw = await self._client.hget(self._partition_key(name), key)
        if raw is None:
            return None
        return self._decode(raw)

    async def put(self, name: str, key: str, entry: StoredResponse) -> None:
        pipe = self._client.pipeline()
        pipe.zadd(self._index_key, {name: time.time()}, nx=True)
        pipe.hset(self._partition_key(name), key, self._encode(entry))
        await pipe.execute()

    async def keys(self, name: str) -> list[str]:
        raw = await self._client.hkeys(self._partition_key(name))
        return [k.decode() if isinstance(k, bytes) else k for k in raw]

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except redis.RedisError:
            return False

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
