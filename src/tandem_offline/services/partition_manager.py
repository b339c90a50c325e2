"""Cache partition management.

Owns the versioned partitions (static, dynamic, api): opening them, filling
the static one from the precache list, and deleting partitions that belong
to another version.
"""

import asyncio

import httpx
import structlog

from tandem_offline.config import CacheConfig
from tandem_offline.errors import PrecacheError
from tandem_offline.protocols import Network, PartitionStore
from tandem_offline.utils import materialize, request_key, snapshot

logger = structlog.get_logger(__name__)


class Partition:
    """Handle on one named partition.

    Entries are read and written as httpx objects; conversion to and from
    StoredResponse snapshots happens here so that nothing above this layer
    deals with storage types.
    """

    def __init__(self, store: PartitionStore, name: str) -> None:
        self._store = store
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    async def match(self, request: httpx.Request) -> httpx.Response | None:
        """Look up a request; every hit is a fresh, independent response."""
        entry = await self._store.match(self._name, request_key(request))
        if entry is None:
            return None
        return materialize(entry, request)

    async def put(self, request: httpx.Request, response: httpx.Response) -> None:
        """Store a response for a request, overwriting any previous entry.

        The response body is read; pass a clone if the caller still needs
        the original.
        """
        entry = await snapshot(response, request)
        await self._store.put(self._name, request_key(request), entry)

    async def keys(self) -> list[str]:
        return await self._store.keys(self._name)


class CachePartitionManager:
    """Creates, fills and garbage-collects the worker's partitions.

    Example:
        ```python
        manager = CachePartitionManager(store=InMemoryPartitionStore(), config=CacheConfig())
        static = await manager.open(manager.config.static_partition)
        await manager.precache(network)
        ```
    """

    def __init__(self, store: PartitionStore, config: CacheConfig) -> None:
        """Initialize the partition manager.

        Args:
            store: Storage backend holding all partitions.
            config: Worker configuration (prefix, version, precache list).
        """
        self._store = store
        self._config = config

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def store(self) -> PartitionStore:
        """Get the underlying store (for testing)."""
        return self._store

    async def open(self, name: str) -> Partition:
        """Open a partition, creating it if absent."""
        await self._store.open(name)
        return Partition(self._store, name)

    def asset_request(self, path: str) -> httpx.Request:
        """Build the GET request for a same-origin asset path."""
        return httpx.Request("GET", f"{self._config.origin}{path}")

    async def precache(self, network: Network) -> int:
        """Fill the static partition with the configured precache list.

        All assets are fetched first; nothing is stored unless every fetch
        succeeded with a 2xx status, so a failed install never leaves a
        partially filled partition behind.

        Args:
            network: Network used to fetch the assets

        Returns:
            Number of entries stored

        Raises:
            PrecacheError: If any asset errored or answered non-2xx
        """
        requests = [self.asset_request(path) for path in self._config.precache]
        results = await asyncio.gather(
            *(network.fetch(request) for request in requests),
            return_exceptions=True,
        )

        failed = []
        for request, result in zip(requests, results):
            if isinstance(result, BaseException):
                logger.warning("precache_fetch_failed", url=str(request.url), error=str(result))
                failed.append(str(request.url))
            elif not result.is_success:
                logger.warning(
                    "precache_bad_status", url=str(request.url), status=result.status_code
                )
                failed.append(str(request.url))
        if failed:
            raise PrecacheError(failed)

        partition = await self.open(self._config.static_partition)
        for request, response in zip(requests, results):
            await partition.put(request, response)

        logger.info("precache_complete", partition=partition.name, entries=len(requests))
        return len(requests)

    async def delete_stale(self) -> list[str]:
        """Delete every partition that does not carry the active version tag.

        Returns:
            Names of the deleted partitions
        """
        deleted = []
        for name in await self._store.names():
            if self._config.is_current(name):
                continue
            if await self._store.delete(name):
                logger.info("partition_deleted", partition=name)
                deleted.append(name)
        return deleted

    async def get_stats(self) -> list[dict]:
        """Get per-partition statistics.

        Returns:
            One dict per partition with name, entry count and currency
        """
        stats = []
        for name in await self._store.names():
            stats.append(
                {
                    "name": name,
                    "entries": len(await self._store.keys(name)),
                    "current": self._config.is_current(name),
                }
            )
        return stats
