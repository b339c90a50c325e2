"""httpx implementation of Network."""

import httpx

from tandem_offline.config import settings


class HttpxNetwork:
    """Network backed by a shared ``httpx.AsyncClient``.

    This class satisfies the Network protocol through structural typing.
    Tests pass a client built on ``httpx.MockTransport``.

    Example:
        ```python
        network = HttpxNetwork.create()
        response = await network.fetch(httpx.Request("GET", "https://example.org/"))
        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the network.

        Args:
            client: Preconfigured client. If None, one is created lazily.
            timeout: Request timeout in seconds for the lazily created client.
        """
        self._client = client
        self._timeout = timeout or settings.network_timeout

    @classmethod
    def create(
        cls,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> "HttpxNetwork":
        return cls(client=client, timeout=timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def fetch(self, request: httpx.Request) -> httpx.Response:
        # send() without stream=True reads the body before returning
        return await self.client.send(request)

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
