"""Partition storage protocol.

Defines the interface for the persistent store that holds the worker's cache
partitions: a set of named partitions, each mapping a request identity to a
stored response.

Implementations can include:
- In-process dictionaries (default, single process)
- Redis (shared between gateway processes)
- Any other key-value store with atomic per-key writes
"""

from typing import Protocol, runtime_checkable

from tandem_offline.entities import StoredResponse


@runtime_checkable
class PartitionStore(Protocol):
    """Protocol for partition storage backends.

    A single ``put`` or ``match`` must be atomic. Nothing else is required:
    the worker does not rely on multi-key transactions.

    Example:
        ```python
        from tandem_offline.protocols import PartitionStore

        store: PartitionStore = InMemoryPartitionStore()
        store: PartitionStore = RedisPartitionStore.create()
        ```
    """

    async def open(self, name: str) -> None:
        """Create the partition if it does not exist yet.

        Args:
            name: The partition name
        """
        ...

    async def has(self, name: str) -> bool:
        """Check whether a partition exists."""
        ...

    async def names(self) -> list[str]:
        """List all partitions in creation order.

        Returns:
            Partition names
        """
        ...

    async def delete(self, name: str) -> bool:
        """Drop a partition and every entry in it.

        Args:
            name: The partition name

        Returns:
            True if the partition existed, False otherwise
        """
        ...

    async def match(self, name: str, key: str) -> StoredResponse | None:
        """Look up an entry.

        Args:
            name: The partition name
            key: The normalized request identity

        Returns:
            The stored response, or None if absent
        """
        ...

    async def put(self, name: str, key: str, entry: StoredResponse) -> None:
        """Create or overwrite an entry, creating the partition if needed.

        Args:
            name: The partition name
            key: The normalized request identity
            entry: The response snapshot to store
        """
        ...

    async def keys(self, name: str) -> list[str]:
        """List the request identities stored in a partition."""
        ...

    async def health_check(self) -> bool:
        """Check if the store is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...
