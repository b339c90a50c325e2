"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (the worker and its registration), not directly
on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Worker) -> (Storage, network)
"""

from .worker_handler import WorkerHandler

__all__ = [
    "WorkerHandler",
]
