"""Helpers around httpx request/response objects.

httpx responses behave like browser responses in one important way: the body
is a stream that can be consumed once. ``clone_response`` reads it fully and
builds an independent copy, and ``materialize`` turns a stored snapshot back
into a fresh response every time it is called.
"""

import time

import httpx

from tandem_offline.entities import StoredResponse

# The stored body is already decoded, so these no longer describe it.
_NON_PORTABLE_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})

_DEFAULT_PORTS = {"http": 80, "https": 443}


def request_key(request: httpx.Request) -> str:
    """Return the normalized identity of a request: method plus URL without fragment."""
    url = request.url.copy_with(fragment=None)
    return f"{request.method.upper()} {url}"


def origin_of(url: httpx.URL | str) -> str:
    """Return ``scheme://host[:port]`` with the default port elided."""
    url = httpx.URL(url)
    port = url.port
    if port is None or port == _DEFAULT_PORTS.get(url.scheme):
        return f"{url.scheme}://{url.host}"
    return f"{url.scheme}://{url.host}:{port}"


def is_navigation(request: httpx.Request) -> bool:
    """Check whether a request is a full-page navigation."""
    return request.headers.get("sec-fetch-mode", "").lower() == "navigate"


def portable_headers(headers: httpx.Headers) -> list[tuple[str, str]]:
    return [(k, v) for k, v in headers.multi_items() if k.lower() not in _NON_PORTABLE_HEADERS]


async def clone_response(response: httpx.Response, request: httpx.Request) -> httpx.Response:
    """Duplicate a response into an independent, fully-read copy.

    The original is read as a side effect and stays readable for its caller.

    Args:
        response: The response to duplicate
        request: The request the response answers

    Returns:
        A new response with the same status, headers and body
    """
    await response.aread()
    return httpx.Response(
        status_code=response.status_code,
        headers=portable_headers(response.headers),
        content=response.content,
        request=request,
    )


async def snapshot(response: httpx.Response, request: httpx.Request) -> StoredResponse:
    """Freeze a response into a StoredResponse, reading its body if needed."""
    body = await response.aread()
    return StoredResponse(
        url=str(request.url),
        status_code=response.status_code,
        headers=tuple(portable_headers(response.headers)),
        body=body,
        stored_at=time.time(),
    )


def materialize(entry: StoredResponse, request: httpx.Request) -> httpx.Response:
    """Build a fresh response from a stored snapshot."""
    return httpx.Response(
        status_code=entry.status_code,
        headers=list(entry.headers),
        content=entry.body,
        request=request,
    )
