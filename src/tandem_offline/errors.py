"""Exceptions raised by the worker.

Network failures are not wrapped: they surface as ``httpx.TransportError``
so callers can tell connectivity loss apart from worker misuse.
"""


class OfflineCacheError(Exception):
    """Base class for worker errors."""


class PrecacheError(OfflineCacheError):
    """Raised when the install-time precache list cannot be fully fetched.

    Attributes:
        failed: URLs that errored or answered with a non-2xx status
    """

    def __init__(self, failed: list[str]) -> None:
        self.failed = failed
        super().__init__(f"Precache failed for {len(failed)} asset(s): {', '.join(failed)}")


class LifecycleError(OfflineCacheError):
    """Raised on an illegal lifecycle transition (e.g. activate before install)."""
