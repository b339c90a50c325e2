"""Data Transfer Objects for API contracts.

These Pydantic models define the external contracts: the push payload
schema and the gateway's control API. They are used for validation and
serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import PushPayload
from .responses import (
    HealthCheckResponse,
    NotificationClickResponse,
    NotificationItem,
    PartitionStatsItem,
    SyncResponse,
    UpdateResponse,
    WorkerStatusResponse,
)

__all__ = [
    "PushPayload",
    "HealthCheckResponse",
    "NotificationClickResponse",
    "NotificationItem",
    "PartitionStatsItem",
    "SyncResponse",
    "UpdateResponse",
    "WorkerStatusResponse",
]
