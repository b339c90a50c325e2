"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class PartitionStatsItem(BaseModel):
    """Statistics for a single partition."""

    name: str = Field(..., description="Partition name, including the version tag")
    entries: int = Field(..., description="Number of stored responses", ge=0)
    current: bool = Field(..., description="Whether the partition belongs to the active version")


class WorkerStatusResponse(BaseModel):
    """Response DTO for worker status."""

    version: str = Field(..., description="Active version tag")
    state: str = Field(..., description="Lifecycle state of the worker")
    precache: list[str] = Field(default_factory=list, description="Install-time precache paths")
    partitions: list[PartitionStatsItem] = Field(
        default_factory=list,
        description="Partitions in the store, in creation order",
    )


class UpdateResponse(BaseModel):
    """Response DTO for an update check."""

    updated: bool = Field(..., description="Whether a new worker version was installed")
    version: str = Field(..., description="Version tag of the active worker after the check")
    state: str = Field(..., description="Lifecycle state of the active worker")


class SyncResponse(BaseModel):
    """Response DTO for a background sync trigger."""

    tag: str = Field(..., description="The sync tag that was fired")
    handled: bool = Field(..., description="Whether a routine was registered for the tag")


class NotificationItem(BaseModel):
    """A notification currently shown by the host."""

    title: str
    body: str
    tag: str
    icon: str
    badge: str
    data: dict[str, Any] = Field(default_factory=dict)


class NotificationClickResponse(BaseModel):
    """Response DTO for a notification click."""

    tag: str = Field(..., description="Tag of the clicked notification")
    action: str = Field(..., description="'focused' or 'opened'")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    store_healthy: bool = Field(..., description="Whether the partition store is reachable")
    state: str = Field(..., description="Lifecycle state of the active worker")
