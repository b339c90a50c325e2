"""Repository layer for data access.

This layer abstracts external dependencies (partition storage, the network,
window clients) behind protocol-based interfaces. This enables:
- Easy swapping of implementations (memory -> Redis, live network -> mock transport)
- Unit testing with in-process implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from .httpx_network import HttpxNetwork
from .memory_client_host import InMemoryClientHost, InMemoryWindow
from .memory_partition_store import InMemoryPartitionStore
from .redis_partition_store import RedisPartitionStore

__all__ = [
    "HttpxNetwork",
    "InMemoryClientHost",
    "InMemoryPartitionStore",
    "InMemoryWindow",
    "RedisPartitionStore",
]
