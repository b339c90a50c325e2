"""In-process implementation of ClientHost.

Keeps the window list and notification tray in memory. The gateway uses it
to expose notifications over HTTP; the tests use it to observe what the
worker asked for.
"""

from dataclasses import dataclass, field

import structlog

from tandem_offline.entities import Notification

logger = structlog.get_logger(__name__)


@dataclass
class InMemoryWindow:
    """A window client tracked by InMemoryClientHost."""

    url: str
    focused: bool = False
    focus_count: int = 0

    async def focus(self) -> None:
        self.focused = True
        self.focus_count += 1


@dataclass
class InMemoryClientHost:
    """ClientHost that records every request made by the worker."""

    windows: list[InMemoryWindow] = field(default_factory=list)
    notifications: dict[str, Notification] = field(default_factory=dict)
    claimed: bool = False

    async def claim(self) -> None:
        self.claimed = True
        logger.info("clients_claimed", clients=len(self.windows))

    async def match_all(self) -> list[InMemoryWindow]:
        return list(self.windows)

    async def open_window(self, url: str) -> InMemoryWindow:
        window = InMemoryWindow(url=url, focused=True)
        self.windows.append(window)
        return window

    async def show_notification(self, notification: Notification) -> None:
        # Same tag replaces the previous notification, as browsers do
        self.notifications[notification.tag] = notification

    async def close_notification(self, notification: Notification) -> None:
        self.notifications.pop(notification.tag, None)
