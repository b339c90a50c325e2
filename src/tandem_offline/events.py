"""Events delivered to the worker.

Each handler receives an event and registers the work it starts with
``wait_until`` (or ``respond_with`` for fetches). The runtime that
dispatched the event awaits ``settled()`` before treating the event as
done, so store writes scheduled by a handler are never dropped.
"""

import asyncio
from collections.abc import Awaitable

import httpx

from tandem_offline.entities import Notification
from tandem_offline.utils import is_navigation


class ExtendableEvent:
    """Base event with the keep-alive contract."""

    type = "extendable"

    def __init__(self) -> None:
        self._pending: list[asyncio.Future] = []

    def wait_until(self, work: Awaitable) -> None:
        """Keep the event alive until ``work`` completes."""
        self._pending.append(asyncio.ensure_future(work))

    async def settled(self) -> None:
        """Wait for every registered piece of work.

        Work registered while waiting is awaited too. The first failure is
        re-raised once everything has finished.
        """
        first_error: BaseException | None = None
        awaited = 0
        while awaited < len(self._pending):
            batch = self._pending[awaited:]
            awaited = len(self._pending)
            results = await asyncio.gather(*batch, return_exceptions=True)
            for result in results:
                if isinstance(result, BaseException) and first_error is None:
                    first_error = result
        if first_error is not None:
            raise first_error


class InstallEvent(ExtendableEvent):
    type = "install"


class ActivateEvent(ExtendableEvent):
    type = "activate"


class FetchEvent(ExtendableEvent):
    """A request observed by the worker.

    Attributes:
        request: The intercepted request
        mode: Request mode; "navigate" for full-page navigations
    """

    type = "fetch"

    def __init__(self, request: httpx.Request, mode: str | None = None) -> None:
        super().__init__()
        self.request = request
        self.mode = mode or ("navigate" if is_navigation(request) else "no-cors")
        self._response: asyncio.Future | None = None

    @property
    def handled(self) -> bool:
        """Whether the worker claimed the request with respond_with."""
        return self._response is not None

    def respond_with(self, response: Awaitable[httpx.Response]) -> None:
        """Claim the request; the runtime will use this response."""
        if self._response is not None:
            raise RuntimeError("respond_with() called twice for the same fetch event")
        self._response = asyncio.ensure_future(response)
        self._pending.append(self._response)

    async def response(self) -> httpx.Response:
        if self._response is None:
            raise RuntimeError("fetch event was not handled")
        return await self._response


class SyncEvent(ExtendableEvent):
    type = "sync"

    def __init__(self, tag: str) -> None:
        super().__init__()
        self.tag = tag


class PushEvent(ExtendableEvent):
    type = "push"

    def __init__(self, data: bytes | str | None = None) -> None:
        super().__init__()
        self.data = data


class NotificationClickEvent(ExtendableEvent):
    type = "notificationclick"

    def __init__(self, notification: Notification) -> None:
        super().__init__()
        self.notification = notification
