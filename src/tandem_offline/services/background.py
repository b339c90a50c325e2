"""Background channels: deferred sync, push delivery and notification clicks.

None of these touch the request path. The sync channel is an extension
point: the application registers a routine per tag and owns whatever offline
queue that routine drains.
"""

from collections.abc import Awaitable, Callable

import structlog

from tandem_offline.config import CacheConfig
from tandem_offline.dto import PushPayload
from tandem_offline.entities import Notification
from tandem_offline.protocols import ClientHost

logger = structlog.get_logger(__name__)

SyncRoutine = Callable[[], Awaitable[None]]


async def sync_expenses() -> None:
    """Default routine for the expense sync tag.

    The offline queue belongs to the application, so there is nothing to
    drain here until one is registered in its place.
    """
    logger.info("sync_expenses", queued=0)


class BackgroundChannels:
    """Handlers for sync, push and notification-click events."""

    def __init__(self, config: CacheConfig, clients: ClientHost) -> None:
        self._config = config
        self._clients = clients
        self._sync_routines: dict[str, SyncRoutine] = {config.sync_tag: sync_expenses}

    def register_sync(self, tag: str, routine: SyncRoutine) -> None:
        """Register (or replace) the routine fired for a sync tag.

        Args:
            tag: The sync tag
            routine: Coroutine function run when the tag fires
        """
        self._sync_routines[tag] = routine

    @property
    def sync_tags(self) -> list[str]:
        return list(self._sync_routines)

    async def handle_sync(self, tag: str) -> bool:
        """Run the routine registered for a tag.

        Returns:
            True if a routine ran, False if the tag is unknown
        """
        logger.info("sync_triggered", tag=tag)
        routine = self._sync_routines.get(tag)
        if routine is None:
            logger.info("sync_tag_ignored", tag=tag)
            return False
        await routine()
        return True

    def build_notification(self, payload: PushPayload) -> Notification:
        """Apply defaults to a push payload."""
        config = self._config
        return Notification(
            title=payload.title or config.app_name,
            body=payload.body or config.notification_body,
            tag=payload.tag or config.notification_tag,
            icon=config.notification_icon,
            badge=config.notification_icon,
            data=payload.data or {},
        )

    async def handle_push(self, data: bytes | str | None) -> Notification | None:
        """Parse a push message and show its notification.

        Args:
            data: Raw JSON payload, or None for a push without data

        Returns:
            The notification shown, or None if the push carried no data

        Raises:
            pydantic.ValidationError: If the payload is not a valid JSON object
        """
        logger.info("push_received", has_data=data is not None)
        if data is None:
            return None

        payload = PushPayload.model_validate_json(data)
        notification = self.build_notification(payload)
        await self._clients.show_notification(notification)
        return notification

    async def handle_notification_click(self, notification: Notification) -> str:
        """Close the notification and bring a window forward.

        Returns:
            "focused" if an existing window was focused, "opened" otherwise
        """
        logger.info("notification_clicked", tag=notification.tag)
        await self._clients.close_notification(notification)

        windows = await self._clients.match_all()
        if windows:
            await windows[0].focus()
            return "focused"

        await self._clients.open_window("/")
        return "opened"
