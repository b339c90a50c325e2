"""Request DTOs for push messages and API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class PushPayload(BaseModel):
    """JSON payload carried by a push message.

    Every field is optional; defaults are applied when the notification is
    built, not here, so an empty object is a valid payload.
    """

    title: str | None = Field(None, description="Notification title (defaults to the app name)")
    body: str | None = Field(None, description="Notification text")
    tag: str | None = Field(None, description="Grouping tag for the notification")
    data: dict[str, Any] | None = Field(
        None,
        description="Opaque data forwarded to the notification",
    )
