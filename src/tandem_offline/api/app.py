"""Gateway application.

Control routes live under ``/__sw__``; every other path is sent through the
active worker to the configured app origin.
"""

from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from tandem_offline.api.dependencies import HandlerDep, RegistrationDep, lifespan
from tandem_offline.config import Settings, get_settings
from tandem_offline.dto import (
    HealthCheckResponse,
    NotificationClickResponse,
    NotificationItem,
    PushPayload,
    SyncResponse,
    UpdateResponse,
    WorkerStatusResponse,
)
from tandem_offline.protocols import Network, PartitionStore

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    settings: Settings | None = None,
    network: Network | None = None,
    store: PartitionStore | None = None,
) -> FastAPI:
    """Create the gateway app.

    Args:
        settings: Fixed settings. If None, read from the environment.
        network: Outbound network. If None, an httpx client is created.
        store: Partition store. If None, selected by PARTITION_BACKEND.

    Returns:
        The configured FastAPI application
    """
    app = FastAPI(
        title="Tandem Offline Gateway",
        description="Offline caching layer for the Tandem app",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.network = network
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/__sw__")
    async def root(registration: RegistrationDep) -> dict[str, Any]:
        """Gateway information."""
        active = registration.active
        return {
            "name": "Tandem Offline Gateway",
            "scope": registration.scope,
            "version": active.version if active is not None else None,
            "endpoints": {
                "health": "/__sw__/health",
                "status": "/__sw__/status",
                "update": "/__sw__/update",
                "sync": "/__sw__/sync/{tag}",
                "push": "/__sw__/push",
                "notifications": "/__sw__/notifications",
            },
        }

    @app.get("/__sw__/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        return await handler.health_check()

    @app.get("/__sw__/status", response_model=WorkerStatusResponse)
    async def worker_status(handler: HandlerDep) -> WorkerStatusResponse:
        """Version, lifecycle state and partition statistics."""
        return await handler.status()

    @app.post("/__sw__/update", response_model=UpdateResponse)
    async def update(handler: HandlerDep) -> UpdateResponse:
        """Check for a new worker version now instead of waiting for the poll."""
        return await handler.update()

    @app.post("/__sw__/sync/{tag}", response_model=SyncResponse)
    async def sync(tag: str, handler: HandlerDep) -> SyncResponse:
        return await handler.sync(tag)

    @app.post("/__sw__/push", response_model=list[NotificationItem])
    async def push(
        handler: HandlerDep, payload: PushPayload | None = None
    ) -> list[NotificationItem]:
        """Deliver a push message; an empty body is a push without data."""
        return await handler.push(payload)

    @app.get("/__sw__/notifications", response_model=list[NotificationItem])
    async def notifications(handler: HandlerDep) -> list[NotificationItem]:
        return handler.notifications()

    @app.post("/__sw__/notifications/{tag}/click", response_model=NotificationClickResponse)
    async def notification_click(tag: str, handler: HandlerDep) -> NotificationClickResponse:
        return await handler.click(tag)

    # Registered last so the control routes above take precedence
    @app.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
    async def proxy(path: str, request: Request, handler: HandlerDep) -> Response:
        return await handler.proxy(request)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    current = get_settings()
    uvicorn.run(
        "tandem_offline.api.app:app",
        host=current.api_host,
        port=current.api_port,
        reload=current.api_reload,
    )
