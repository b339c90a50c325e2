"""Domain entities for internal representation.

These are pure dataclasses and enums used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .lifecycle import WorkerState
from .notification import Notification
from .route import Route, RouteKind, Strategy
from .stored_response import StoredResponse

__all__ = [
    "Notification",
    "Route",
    "RouteKind",
    "Strategy",
    "StoredResponse",
    "WorkerState",
]
