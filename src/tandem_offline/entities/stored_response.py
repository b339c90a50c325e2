"""Stored response domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StoredResponse:
    """Snapshot of a network response held in a cache partition.

    The snapshot owns its bytes, so reading it never consumes anything that
    another caller could still need.

    Attributes:
        url: The URL the response was fetched from
        status_code: HTTP status code
        headers: Response headers, minus transfer-encoding related ones
        body: Decoded response body
        stored_at: When the snapshot was written (Unix timestamp)
    """

    url: str
    status_code: int
    headers: tuple[tuple[str, str], ...]
    body: bytes
    stored_at: float
