"""Service layer for the worker's logic.

This layer contains the caching strategies, lifecycle and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> ServiceWorker -> Partition manager / executors -> Repository
    (HTTP)  -> (Orchestration) -> (Strategies)                 -> (Storage, network)

Usage:
    ```python
    from tandem_offline.services import ServiceWorker

    worker = ServiceWorker.create(config=config, store=store, network=network, clients=clients)
    ```
"""

from .background import BackgroundChannels
from .dispatcher import FetchDispatcher
from .executors import CacheFirstExecutor, NetworkFirstExecutor
from .lifecycle import LifecycleController
from .partition_manager import CachePartitionManager, Partition
from .registration import ServiceWorkerRegistration
from .service_worker import ServiceWorker
from .strategy_selector import StrategySelector

__all__ = [
    "BackgroundChannels",
    "CacheFirstExecutor",
    "CachePartitionManager",
    "FetchDispatcher",
    "LifecycleController",
    "NetworkFirstExecutor",
    "Partition",
    "ServiceWorker",
    "ServiceWorkerRegistration",
    "StrategySelector",
]
