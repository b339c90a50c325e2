"""In-process implementation of PartitionStore.

Partitions live in ordinary dictionaries owned by the event loop, so every
operation is trivially atomic. This is the default backend for a single
gateway process and the one used by the tests.
"""

from tandem_offline.entities import StoredResponse


class InMemoryPartitionStore:
    """Dictionary-backed partition store.

    This class satisfies the PartitionStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self) -> None:
        # dicts keep insertion order, which gives names() creation order
        self._partitions: dict[str, dict[str, StoredResponse]] = {}

    @classmethod
    def create(cls) -> "InMemoryPartitionStore":
        """Factory method mirroring the other backends."""
        return cls()

    async def open(self, name: str) -> None:
        self._partitions.setdefault(name, {})

    async def has(self, name: str) -> bool:
        return name in self._partitions

    async def names(self) -> list[str]:
        return list(self._partitions)

    async def delete(self, name: str) -> bool:
        return self._partitions.pop(name, None) is not None

    async def match(self, name: str, key: str) -> StoredResponse | None:
        partition = self._partitions.get(name)
        if partition is None:
            return None
        return partition.get(key)

    async def put(self, name: str, key: str, entry: StoredResponse) -> None:
        self._partitions.setdefault(name, {})[key] = entry

    async def keys(self, name: str) -> list[str]:
        return list(self._partitions.get(name, {}))

    async def health_check(self) -> bool:
        return True
