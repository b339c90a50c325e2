"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (memory -> Redis, real network -> mock transport)
- Unit testing with in-process implementations
- Clear separation of concerns

Usage:
    ```python
    from tandem_offline.protocols import Network, PartitionStore

    store: PartitionStore = InMemoryPartitionStore()   # works
    store: PartitionStore = RedisPartitionStore()      # also works
    ```
"""

from .client_host import ClientHost, WindowClient
from .network import Network
from .partition_store import PartitionStore

__all__ = [
    "ClientHost",
    "Network",
    "PartitionStore",
    "WindowClient",
]
