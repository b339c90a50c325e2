"""The worker: one object per version, wiring every component together.

Architecture:
    Runtime (gateway / registration) -> ServiceWorker.dispatch(event)
        -> on_install / on_activate   -> LifecycleController
        -> on_fetch                   -> StrategySelector -> FetchDispatcher -> executors
        -> on_sync / on_push / on_notification_click -> BackgroundChannels
"""

import httpx
import structlog

from tandem_offline.config import CacheConfig
from tandem_offline.entities import WorkerState
from tandem_offline.events import (
    ActivateEvent,
    ExtendableEvent,
    FetchEvent,
    InstallEvent,
    NotificationClickEvent,
    PushEvent,
    SyncEvent,
)
from tandem_offline.protocols import ClientHost, Network, PartitionStore
from tandem_offline.services.background import BackgroundChannels, SyncRoutine
from tandem_offline.services.dispatcher import FetchDispatcher
from tandem_offline.services.lifecycle import LifecycleController
from tandem_offline.services.partition_manager import CachePartitionManager
from tandem_offline.services.strategy_selector import StrategySelector

logger = structlog.get_logger(__name__)


class ServiceWorker:
    """Request-interception and cache-orchestration agent.

    The worker depends on PROTOCOLS, not concrete implementations:
    - PartitionStore: in-memory, Redis, ...
    - Network: httpx client, mock transport in tests
    - ClientHost: whatever owns windows and notifications

    Example:
        ```python
        worker = ServiceWorker.create(
            config=settings.cache_config(),
            store=InMemoryPartitionStore(),
            network=HttpxNetwork.create(),
            clients=InMemoryClientHost(),
        )
        await worker.dispatch(InstallEvent())
        await worker.dispatch(ActivateEvent())
        response = await worker.fetch(httpx.Request("GET", "http://localhost:5000/api/expenses"))
        ```
    """

    def __init__(
        self,
        config: CacheConfig,
        store: PartitionStore,
        network: Network,
        clients: ClientHost,
    ) -> None:
        """Initialize the worker.

        Args:
            config: Immutable configuration (prefix, version, precache list, ...).
            store: Partition storage backend shared by every version.
            network: Outbound network.
            clients: Host of window clients and notifications.
        """
        self._config = config
        self._network = network
        self._manager = CachePartitionManager(store=store, config=config)
        self._selector = StrategySelector(config)
        self._dispatcher = FetchDispatcher(self._manager, network)
        self._lifecycle = LifecycleController(self._manager, network, clients)
        self._background = BackgroundChannels(config, clients)

    @classmethod
    def create(
        cls,
        config: CacheConfig,
        store: PartitionStore,
        network: Network,
        clients: ClientHost,
    ) -> "ServiceWorker":
        """Factory method matching the other layers."""
        return cls(config=config, store=store, network=network, clients=clients)

    # -- event handlers -------------------------------------------------

    def on_install(self, event: InstallEvent) -> None:
        event.wait_until(self._lifecycle.install())

    def on_activate(self, event: ActivateEvent) -> None:
        event.wait_until(self._lifecycle.activate())

    def on_fetch(self, event: FetchEvent) -> None:
        """Claim the request unless the selector says to leave it alone."""
        route = self._selector.classify_request(event.request)
        if route is None:
            return
        event.respond_with(
            self._dispatcher.dispatch(
                event.request,
                route,
                navigation=event.mode == "navigate",
            )
        )

    def on_sync(self, event: SyncEvent) -> None:
        event.wait_until(self._background.handle_sync(event.tag))

    def on_push(self, event: PushEvent) -> None:
        event.wait_until(self._background.handle_push(event.data))

    def on_notification_click(self, event: NotificationClickEvent) -> None:
        event.wait_until(self._background.handle_notification_click(event.notification))

    # -- runtime side ---------------------------------------------------

    async def dispatch(self, event: ExtendableEvent) -> None:
        """Deliver an event to its handler and wait until it settles.

        Raises:
            ValueError: If the event type has no handler
        """
        handlers = {
            InstallEvent.type: self.on_install,
            ActivateEvent.type: self.on_activate,
            FetchEvent.type: self.on_fetch,
            SyncEvent.type: self.on_sync,
            PushEvent.type: self.on_push,
            NotificationClickEvent.type: self.on_notification_click,
        }
        handler = handlers.get(event.type)
        if handler is None:
            raise ValueError(f"No handler for event type {event.type!r}")
        handler(event)
        await event.settled()

    async def fetch(self, request: httpx.Request, mode: str | None = None) -> httpx.Response:
        """Send a request through the worker, as a controlled page would.

        Requests the worker does not claim (and every request while the
        worker is not active) go straight to the network.

        Args:
            request: The outgoing request
            mode: Request mode; derived from Sec-Fetch-Mode when None

        Returns:
            The response the page receives
        """
        if self.state is not WorkerState.ACTIVE:
            return await self._network.fetch(request)

        event = FetchEvent(request, mode=mode)
        await self.dispatch(event)
        if event.handled:
            return await event.response()
        return await self._network.fetch(request)

    # -- accessors ------------------------------------------------------

    def register_sync(self, tag: str, routine: SyncRoutine) -> None:
        """Extension point for deferred-sync routines."""
        self._background.register_sync(tag, routine)

    @property
    def sync_tags(self) -> list[str]:
        return self._background.sync_tags

    async def get_stats(self) -> dict:
        """Get worker statistics.

        Returns:
            Dictionary with version, state, precache list and partitions
        """
        return {
            "version": self._config.version,
            "state": self.state.value,
            "precache": list(self._config.precache),
            "partitions": await self._manager.get_stats(),
        }

    async def is_healthy(self) -> bool:
        return await self._manager.store.health_check()

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def version(self) -> str:
        return self._config.version

    @property
    def state(self) -> WorkerState:
        return self._lifecycle.state

    @property
    def skip_waiting(self) -> bool:
        return self._lifecycle.skip_waiting

    @property
    def partitions(self) -> CachePartitionManager:
        """Get the partition manager (for testing)."""
        return self._manager

    @property
    def selector(self) -> StrategySelector:
        return self._selector
