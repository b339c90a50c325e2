"""Dependency injection configuration for the gateway app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Overrides (settings, network, store) placed in app.state by create_app
    - Services built in the lifespan and stored in app.state
    - Dependency functions retrieve from request.app.state
"""

from contextlib import asynccontextmanager
from typing import Annotated

import structlog
from fastapi import Depends, FastAPI, Request

from tandem_offline.config import Settings, get_redis_client
from tandem_offline.errors import PrecacheError
from tandem_offline.handlers import WorkerHandler
from tandem_offline.log_config import configure_logging
from tandem_offline.protocols import ClientHost, Network, PartitionStore
from tandem_offline.repositories import (
    HttpxNetwork,
    InMemoryClientHost,
    InMemoryPartitionStore,
    RedisPartitionStore,
)
from tandem_offline.services import ServiceWorker, ServiceWorkerRegistration

logger = structlog.get_logger(__name__)


def build_store(settings: Settings) -> PartitionStore:
    """Create the partition store selected by PARTITION_BACKEND."""
    if settings.partition_backend == "redis":
        return RedisPartitionStore.create(
            redis_client=get_redis_client(settings),
            namespace=settings.partition_namespace,
        )
    return InMemoryPartitionStore.create()


def build_worker(
    settings: Settings,
    store: PartitionStore,
    network: Network,
    clients: ClientHost,
) -> ServiceWorker:
    """Build one worker generation from the given settings."""
    return ServiceWorker.create(
        config=settings.cache_config(),
        store=store,
        network=network,
        clients=clients,
    )


def get_handler(request: Request) -> WorkerHandler:
    """Dependency injection for WorkerHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The WorkerHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "worker_handler", None)
    if handler is None:
        raise RuntimeError("WorkerHandler not initialized. Check lifespan setup.")
    return handler


def get_registration(request: Request) -> ServiceWorkerRegistration:
    registration = getattr(request.app.state, "registration", None)
    if registration is None:
        raise RuntimeError("Registration not initialized. Check lifespan setup.")
    return registration


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for the gateway app.

    Initializes all layers and stores them in app.state:
    1. Store and network (repositories), unless create_app injected them
    2. Registration, which installs and activates the first worker
    3. Handler (HTTP endpoints) - stored in app.state.worker_handler

    A failed install does not stop the gateway: requests are proxied straight
    to the origin until an update check installs a worker.

    Args:
        app: The FastAPI application instance

    Yields:
        None
    """
    fixed_settings: Settings | None = getattr(app.state, "settings", None)
    settings = fixed_settings or Settings()
    configure_logging(settings.log_level, settings.log_json)

    store = getattr(app.state, "store", None) or build_store(settings)
    network = getattr(app.state, "network", None) or HttpxNetwork.create(
        timeout=settings.network_timeout
    )
    clients = InMemoryClientHost()

    # Settings are re-read per generation so a changed CACHE_VERSION is picked
    # up by the next update check
    registration = ServiceWorkerRegistration(
        worker_factory=lambda: build_worker(
            fixed_settings or Settings(), store, network, clients
        ),
    )
    try:
        await registration.register()
    except PrecacheError as e:
        logger.error("worker_register_failed", failed=e.failed)

    if settings.update_interval_seconds > 0:
        registration.start_update_polling(settings.update_interval_seconds)

    app.state.registration = registration
    app.state.clients = clients
    app.state.worker_handler = WorkerHandler(
        registration=registration,
        clients=clients,
        network=network,
        config=settings.cache_config(),
    )

    logger.info(
        "gateway_started",
        origin=settings.app_origin,
        backend=settings.partition_backend,
        version=settings.cache_version,
    )

    yield

    await registration.unregister()
    await network.close()
    if isinstance(store, RedisPartitionStore):
        await store.close()

    del app.state.worker_handler
    del app.state.registration
    del app.state.clients
    logger.info("gateway_stopped")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[WorkerHandler, Depends(get_handler)]
RegistrationDep = Annotated[ServiceWorkerRegistration, Depends(get_registration)]
