"""Caching strategy executors.

Both executors follow the same contract for single-use bodies: a response
that is persisted AND returned is cloned first, and the clone is what gets
stored. Store writes are awaited before returning, so an event that awaits
the executor also keeps the write alive.

Concurrent first-access calls for the same key are not coalesced: each one
fetches and writes, and the last write wins.
"""

import httpx
import structlog

from tandem_offline.protocols import Network
from tandem_offline.services.partition_manager import CachePartitionManager
from tandem_offline.utils import clone_response

logger = structlog.get_logger(__name__)


class CacheFirstExecutor:
    """Serve from the partition when possible, otherwise fetch and store.

    Suited to content that rarely changes: a hit never touches the network
    and never checks freshness.
    """

    def __init__(self, manager: CachePartitionManager, network: Network) -> None:
        self._manager = manager
        self._network = network

    async def execute(self, request: httpx.Request, partition_name: str) -> httpx.Response:
        """Run the cache-first strategy.

        Args:
            request: The intercepted request
            partition_name: Partition to read from and write to

        Returns:
            The stored response on a hit, the network response otherwise

        Raises:
            httpx.TransportError: On a miss when the network is unreachable
        """
        partition = await self._manager.open(partition_name)

        cached = await partition.match(request)
        if cached is not None:
            logger.debug("cache_hit", partition=partition_name, url=str(request.url))
            return cached

        response = await self._network.fetch(request)
        if response.is_success:
            await partition.put(request, await clone_response(response, request))
            logger.debug("cache_stored", partition=partition_name, url=str(request.url))

        return response


class NetworkFirstExecutor:
    """Prefer the network, fall back to the last stored copy when offline."""

    def __init__(self, manager: CachePartitionManager, network: Network) -> None:
        self._manager = manager
        self._network = network

    async def execute(self, request: httpx.Request, partition_name: str) -> httpx.Response:
        """Run the network-first strategy.

        Args:
            request: The intercepted request
            partition_name: Partition to write to and fall back on

        Returns:
            The network response, or the stored one if the network failed

        Raises:
            httpx.TransportError: If the network failed and nothing was stored
        """
        partition = await self._manager.open(partition_name)

        try:
            response = await self._network.fetch(request)
        except httpx.TransportError as e:
            cached = await partition.match(request)
            if cached is not None:
                logger.info(
                    "network_fallback",
                    partition=partition_name,
                    url=str(request.url),
                    error=str(e),
                )
                return cached
            raise

        if response.is_success:
            await partition.put(request, await clone_response(response, request))

        return response
