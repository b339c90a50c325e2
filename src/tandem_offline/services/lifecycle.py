"""Worker lifecycle state machine.

    uninstalled -> installing -> installed -> activating -> active

A failed install drops back to ``uninstalled``; retrying is the caller's
decision. Activation is where partitions from other versions are removed.
"""

import structlog

from tandem_offline.entities import WorkerState
from tandem_offline.errors import LifecycleError
from tandem_offline.protocols import ClientHost, Network
from tandem_offline.services.partition_manager import CachePartitionManager

logger = structlog.get_logger(__name__)


class LifecycleController:
    """Drives install/activate/claim for one worker version."""

    def __init__(
        self,
        manager: CachePartitionManager,
        network: Network,
        clients: ClientHost,
    ) -> None:
        self._manager = manager
        self._network = network
        self._clients = clients
        self._state = WorkerState.UNINSTALLED
        self._skip_waiting = False

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def skip_waiting(self) -> bool:
        """Whether the worker asked to be activated without waiting for old clients."""
        return self._skip_waiting

    def _transition(self, expected: WorkerState, target: WorkerState) -> None:
        if self._state is not expected:
            raise LifecycleError(
                f"Cannot move to {target.value} from {self._state.value} "
                f"(expected {expected.value})"
            )
        self._state = target

    async def install(self) -> int:
        """Precache the static partition and request immediate promotion.

        Returns:
            Number of precached entries

        Raises:
            PrecacheError: If any precache asset could not be fetched
            LifecycleError: If the worker is not uninstalled
        """
        self._transition(WorkerState.UNINSTALLED, WorkerState.INSTALLING)
        logger.info("worker_installing", version=self._manager.config.version)

        try:
            count = await self._manager.precache(self._network)
        except Exception:
            self._state = WorkerState.UNINSTALLED
            logger.error("worker_install_failed", version=self._manager.config.version)
            raise

        self._skip_waiting = True
        self._state = WorkerState.INSTALLED
        logger.info("worker_installed", version=self._manager.config.version, entries=count)
        return count

    async def activate(self) -> list[str]:
        """Delete stale partitions and claim every open client.

        Returns:
            Names of the partitions that were deleted

        Raises:
            LifecycleError: If the worker is not installed
        """
        self._transition(WorkerState.INSTALLED, WorkerState.ACTIVATING)
        logger.info("worker_activating", version=self._manager.config.version)

        deleted = await self._manager.delete_stale()
        await self._clients.claim()

        self._state = WorkerState.ACTIVE
        logger.info("worker_active", version=self._manager.config.version, deleted=deleted)
        return deleted
