"""Network protocol.

The worker never talks to a transport directly; it asks a Network to fetch
a request. Connectivity failures are raised as ``httpx.TransportError``.
"""

from typing import Protocol, runtime_checkable

import httpx


@runtime_checkable
class Network(Protocol):
    """Protocol for the outbound network."""

    async def fetch(self, request: httpx.Request) -> httpx.Response:
        """Send a request and return the fully-read response.

        Args:
            request: The request to send

        Returns:
            The response, whatever its status

        Raises:
            httpx.TransportError: If the request could not be completed
        """
        ...

    async def close(self) -> None:
        """Release the underlying connections."""
        ...
