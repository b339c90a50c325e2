"""Utility modules for the offline cache worker."""

from .http import (
    clone_response,
    is_navigation,
    materialize,
    origin_of,
    request_key,
    snapshot,
)

__all__ = [
    "clone_response",
    "is_navigation",
    "materialize",
    "origin_of",
    "request_key",
    "snapshot",
]
