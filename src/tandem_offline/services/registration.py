"""Worker registration.

The registration is the hosting side of the worker: it installs and
activates workers, swaps in a new version when one appears, and polls for
updates on an interval (hourly by default).
"""

import asyncio
from collections.abc import Callable

import structlog

from tandem_offline.errors import OfflineCacheError
from tandem_offline.events import ActivateEvent, InstallEvent
from tandem_offline.services.service_worker import ServiceWorker

logger = structlog.get_logger(__name__)

WorkerFactory = Callable[[], ServiceWorker]
WorkerCallback = Callable[[ServiceWorker], None]


class ServiceWorkerRegistration:
    """Registration of a worker at a scope.

    Example:
        ```python
        registration = ServiceWorkerRegistration(
            worker_factory=lambda: build_worker(Settings(), store, network, clients),
            on_update_found=lambda worker: print("New version", worker.version),
        )
        await registration.register()
        registration.start_update_polling(3600)
        ```
    """

    def __init__(
        self,
        worker_factory: WorkerFactory,
        scope: str = "/",
        on_update_found: WorkerCallback | None = None,
        on_offline_ready: WorkerCallback | None = None,
    ) -> None:
        """Initialize the registration.

        Args:
            worker_factory: Builds a worker from the current configuration.
            scope: Path scope the worker controls.
            on_update_found: Called when a new version replaced a controller.
            on_offline_ready: Called when the first worker finished installing.
        """
        self._factory = worker_factory
        self._scope = scope
        self._on_update_found = on_update_found
        self._on_offline_ready = on_offline_ready
        self._active: ServiceWorker | None = None
        self._poll_task: asyncio.Task | None = None

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def active(self) -> ServiceWorker | None:
        """The worker currently controlling clients, if any."""
        return self._active

    async def _install_and_activate(self, worker: ServiceWorker) -> None:
        had_controller = self._active is not None

        await worker.dispatch(InstallEvent())

        if had_controller:
            logger.info("worker_update_found", version=worker.version)
            if self._on_update_found is not None:
                self._on_update_found(worker)
        else:
            logger.info("worker_offline_ready", version=worker.version)
            if self._on_offline_ready is not None:
                self._on_offline_ready(worker)

        # skip_waiting is always requested on install, so no waiting phase
        if worker.skip_waiting:
            await worker.dispatch(ActivateEvent())
            self._active = worker

    async def register(self) -> ServiceWorker:
        """Build, install and activate a worker for this scope.

        Returns:
            The active worker

        Raises:
            PrecacheError: If the install step failed
        """
        worker = self._factory()
        logger.info("worker_registering", scope=self._scope, version=worker.version)
        await self._install_and_activate(worker)
        return worker

    async def update(self) -> bool:
        """Check for a new worker version and install it.

        A worker with the same version tag as the active one is discarded.
        A failed install leaves the active worker in place.

        Returns:
            True if a new version became active
        """
        candidate = self._factory()
        if self._active is not None and candidate.version == self._active.version:
            logger.debug("worker_up_to_date", version=candidate.version)
            return False

        try:
            await self._install_and_activate(candidate)
        except OfflineCacheError as e:
            logger.error("worker_update_failed", version=candidate.version, error=str(e))
            return False
        return True

    async def _poll(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.update()
            except Exception:
                logger.exception("worker_update_poll_failed")

    def start_update_polling(self, interval: float) -> asyncio.Task:
        """Start checking for updates every ``interval`` seconds."""
        self.stop_update_polling()
        self._poll_task = asyncio.create_task(self._poll(interval))
        return self._poll_task

    def stop_update_polling(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None

    async def unregister(self) -> bool:
        """Stop polling and drop the active worker.

        Returns:
            True if a worker was registered
        """
        self.stop_update_polling()
        had_worker = self._active is not None
        self._active = None
        return had_worker
