"""System notification domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Notification:
    """A notification the worker asked the host to display.

    Attributes:
        title: Notification title
        body: Notification text
        tag: Grouping tag; a new notification replaces one with the same tag
        icon: Icon path
        badge: Badge path
        data: Opaque payload forwarded from the push message
    """

    title: str
    body: str
    tag: str
    icon: str
    badge: str
    data: dict[str, Any] = field(default_factory=dict)
