"""Client host protocol.

The host is whatever owns the windows the worker controls and the system
notification tray. In a browser that is the browser itself; here it is
supplied by the embedding runtime.
"""

from typing import Protocol, runtime_checkable

from tandem_offline.entities import Notification


@runtime_checkable
class WindowClient(Protocol):
    """An open window controlled by the worker."""

    @property
    def url(self) -> str: ...

    async def focus(self) -> None:
        """Bring the window to the foreground."""
        ...


@runtime_checkable
class ClientHost(Protocol):
    """Protocol for window clients and notifications."""

    async def claim(self) -> None:
        """Take control of every open client of this origin immediately."""
        ...

    async def match_all(self) -> list[WindowClient]:
        """List the open window clients."""
        ...

    async def open_window(self, url: str) -> WindowClient:
        """Open a new window at ``url``."""
        ...

    async def show_notification(self, notification: Notification) -> None:
        """Display a system notification."""
        ...

    async def close_notification(self, notification: Notification) -> None:
        """Dismiss a displayed notification."""
        ...
