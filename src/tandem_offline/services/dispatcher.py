"""Top-level fetch dispatch.

Wraps classification and strategy execution in a single error boundary.
Navigations that fail are answered with the cached app shell (or a bare
"Offline" page); every other failure is re-raised to the caller.
"""

import httpx
import structlog

from tandem_offline.entities import Route, Strategy
from tandem_offline.protocols import Network
from tandem_offline.services.executors import CacheFirstExecutor, NetworkFirstExecutor
from tandem_offline.services.partition_manager import CachePartitionManager

logger = structlog.get_logger(__name__)

OFFLINE_BODY = "Offline"


class FetchDispatcher:
    """Runs a classified request through its strategy."""

    def __init__(
        self,
        manager: CachePartitionManager,
        network: Network,
    ) -> None:
        self._manager = manager
        self._network = network
        self._cache_first = CacheFirstExecutor(manager, network)
        self._network_first = NetworkFirstExecutor(manager, network)

    async def dispatch(
        self,
        request: httpx.Request,
        route: Route,
        navigation: bool = False,
    ) -> httpx.Response:
        """Execute a route for a request.

        Args:
            request: The intercepted request
            route: Its classification
            navigation: Whether the request is a full-page navigation

        Returns:
            The response to hand back to the page

        Raises:
            Exception: Any strategy failure, for non-navigation requests
        """
        try:
            if route.strategy is Strategy.CACHE_FIRST:
                return await self._cache_first.execute(request, route.partition)
            if route.strategy is Strategy.NETWORK_FIRST:
                return await self._network_first.execute(request, route.partition)
            return await self._network.fetch(request)

        except Exception as e:
            logger.warning(
                "fetch_failed",
                url=str(request.url),
                route=route.kind.value,
                navigation=navigation,
                error=str(e),
            )
            if navigation:
                return await self.offline_shell(request)
            raise

    async def offline_shell(self, request: httpx.Request) -> httpx.Response:
        """Return the cached shell document, or a synthesized offline page."""
        config = self._manager.config
        try:
            partition = await self._manager.open(config.static_partition)
            shell = await partition.match(self._manager.asset_request(config.shell_path))
        except Exception as e:
            # The store may be what failed; the page still gets an answer
            logger.warning("shell_lookup_failed", url=str(request.url), error=str(e))
            shell = None
        if shell is not None:
            return shell
        return httpx.Response(
            200,
            text=OFFLINE_BODY,
            headers={"content-type": "text/plain; charset=utf-8"},
            request=request,
        )
