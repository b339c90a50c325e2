"""HTTP handlers for the gateway.

Handlers convert between HTTP (FastAPI/Starlette objects, DTOs) and worker
calls. They handle HTTP concerns like status codes and error mapping.
"""

import httpx
import structlog
from fastapi import HTTPException, Request, Response, status

from tandem_offline.config import CacheConfig
from tandem_offline.dto import (
    HealthCheckResponse,
    NotificationClickResponse,
    NotificationItem,
    PartitionStatsItem,
    PushPayload,
    SyncResponse,
    UpdateResponse,
    WorkerStatusResponse,
)
from tandem_offline.entities import WorkerState
from tandem_offline.events import NotificationClickEvent, PushEvent, SyncEvent
from tandem_offline.protocols import Network
from tandem_offline.repositories import InMemoryClientHost
from tandem_offline.services import ServiceWorker, ServiceWorkerRegistration

logger = structlog.get_logger(__name__)

# Hop-by-hop headers plus the ones httpx already resolved for us.
_SKIP_REQUEST_HEADERS = frozenset({"host", "connection", "content-length", "transfer-encoding"})
_SKIP_RESPONSE_HEADERS = frozenset(
    {"connection", "content-encoding", "content-length", "transfer-encoding"}
)


class WorkerHandler:
    """HTTP handlers for the worker gateway.

    This handler delegates to the registration's active worker and handles
    HTTP-specific concerns like:
    - Translating incoming requests to upstream httpx requests
    - Converting worker results to DTOs
    - Mapping failures to status codes

    Example:
        ```python
        handler = WorkerHandler(
            registration=registration, clients=clients, network=network, config=config
        )

        @app.get("/__sw__/status", response_model=WorkerStatusResponse)
        async def worker_status():
            return await handler.status()
        ```
    """

    def __init__(
        self,
        registration: ServiceWorkerRegistration,
        clients: InMemoryClientHost,
        network: Network,
        config: CacheConfig,
    ) -> None:
        """Initialize the worker handler.

        Args:
            registration: Registration owning the active worker (required).
            clients: Client host shared with every worker version.
            network: Network used while no worker is active.
            config: Configuration used for proxying when no worker is active.
        """
        self._registration = registration
        self._clients = clients
        self._network = network
        self._config = config

    @property
    def worker(self) -> ServiceWorker:
        worker = self._registration.active
        if worker is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="No active worker. Check the install logs.",
            )
        return worker

    def _state(self) -> str:
        active = self._registration.active
        return active.state.value if active is not None else WorkerState.UNINSTALLED.value

    async def proxy(self, request: Request) -> Response:
        """Handle every non-control request by sending it through the worker.

        Args:
            request: The incoming request

        Returns:
            The response produced by the worker (or the network)

        Raises:
            HTTPException: 502 if the request failed and was not a navigation
        """
        url = f"{self._config.origin}{request.url.path}"
        if request.url.query:
            url = f"{url}?{request.url.query}"
        upstream = httpx.Request(
            request.method,
            url,
            headers=[
                (k, v) for k, v in request.headers.items() if k.lower() not in _SKIP_REQUEST_HEADERS
            ],
            content=await request.body(),
        )

        try:
            active = self._registration.active
            if active is not None:
                result = await active.fetch(upstream)
            else:
                result = await self._network.fetch(upstream)
        except httpx.HTTPError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Upstream unavailable: {e}",
            ) from e

        return Response(
            content=result.content,
            status_code=result.status_code,
            headers={
                k: v for k, v in result.headers.items() if k.lower() not in _SKIP_RESPONSE_HEADERS
            },
        )

    async def status(self) -> WorkerStatusResponse:
        """Handle GET /__sw__/status requests."""
        try:
            stats = await self.worker.get_stats()
            return WorkerStatusResponse(
                version=stats["version"],
                state=stats["state"],
                precache=stats["precache"],
                partitions=[PartitionStatsItem(**item) for item in stats["partitions"]],
            )
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get status: {e}",
            ) from e

    async def update(self) -> UpdateResponse:
        """Handle POST /__sw__/update requests."""
        try:
            updated = await self._registration.update()
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to check for updates: {e}",
            ) from e

        active = self._registration.active
        return UpdateResponse(
            updated=updated,
            version=active.version if active is not None else "",
            state=self._state(),
        )

    async def sync(self, tag: str) -> SyncResponse:
        """Handle POST /__sw__/sync/{tag} requests."""
        worker = self.worker
        handled = tag in worker.sync_tags
        try:
            await worker.dispatch(SyncEvent(tag))
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Sync routine failed: {e}",
            ) from e
        return SyncResponse(tag=tag, handled=handled)

    async def push(self, payload: PushPayload | None) -> list[NotificationItem]:
        """Handle POST /__sw__/push requests.

        Returns:
            The notifications shown after delivery
        """
        data = payload.model_dump_json(exclude_none=True) if payload is not None else None
        await self.worker.dispatch(PushEvent(data))
        return self.notifications()

    def notifications(self) -> list[NotificationItem]:
        """Handle GET /__sw__/notifications requests."""
        return [
            NotificationItem(
                title=n.title,
                body=n.body,
                tag=n.tag,
                icon=n.icon,
                badge=n.badge,
                data=n.data,
            )
            for n in self._clients.notifications.values()
        ]

    async def click(self, tag: str) -> NotificationClickResponse:
        """Handle POST /__sw__/notifications/{tag}/click requests."""
        notification = self._clients.notifications.get(tag)
        if notification is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No notification with tag {tag!r}",
            )

        windows_before = len(self._clients.windows)
        await self.worker.dispatch(NotificationClickEvent(notification))
        action = "opened" if len(self._clients.windows) > windows_before else "focused"
        return NotificationClickResponse(tag=tag, action=action)

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /__sw__/health requests."""
        active = self._registration.active
        store_healthy = await active.is_healthy() if active is not None else False
        healthy = store_healthy and active is not None and active.state is WorkerState.ACTIVE

        return HealthCheckResponse(
            status="healthy" if healthy else "unhealthy",
            store_healthy=store_healthy,
            state=self._state(),
        )
