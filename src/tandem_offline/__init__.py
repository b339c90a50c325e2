"""Tandem Offline - offline caching layer for the Tandem family-finance app.

This package provides a layered architecture for a request-intercepting
cache worker:

Layers:
    - protocols: Interface contracts (PartitionStore, Network, ClientHost)
    - repositories: In-memory and Redis stores, httpx network, client host
    - services: Strategy selection, executors, lifecycle, background channels
    - handlers: HTTP endpoint handlers for the gateway
    - dto: Data transfer objects (API and push contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from tandem_offline.services import ServiceWorker

    worker = ServiceWorker.create(config=config, store=store, network=network, clients=clients)
    response = await worker.fetch(request)
    ```

For the HTTP gateway:
    ```python
    from tandem_offline.api.app import app
    ```
"""

from tandem_offline.config import CacheConfig, Settings, get_redis_client, settings
from tandem_offline.errors import LifecycleError, OfflineCacheError, PrecacheError
from tandem_offline.events import (
    ActivateEvent,
    FetchEvent,
    InstallEvent,
    NotificationClickEvent,
    PushEvent,
    SyncEvent,
)
from tandem_offline.protocols import ClientHost, Network, PartitionStore
from tandem_offline.repositories import (
    HttpxNetwork,
    InMemoryClientHost,
    InMemoryPartitionStore,
    RedisPartitionStore,
)
from tandem_offline.services import ServiceWorker, ServiceWorkerRegistration

__all__ = [
    # Configuration
    "CacheConfig",
    "Settings",
    "settings",
    "get_redis_client",
    # Errors
    "OfflineCacheError",
    "PrecacheError",
    "LifecycleError",
    # Events
    "InstallEvent",
    "ActivateEvent",
    "FetchEvent",
    "SyncEvent",
    "PushEvent",
    "NotificationClickEvent",
    # Protocols (interfaces)
    "PartitionStore",
    "Network",
    "ClientHost",
    # Repositories
    "InMemoryPartitionStore",
    "RedisPartitionStore",
    "HttpxNetwork",
    "InMemoryClientHost",
    # Services
    "ServiceWorker",
    "ServiceWorkerRegistration",
]
