"""Request classification.

The selector decides, before any I/O, which strategy and partition a request
gets. Rules are evaluated in a fixed order and the first match wins:

1. non-GET methods and ignored schemes are not intercepted
2. precache paths and icon/image paths -> cache-first, static partition
3. font hosts -> cache-first, dynamic partition
4. auth endpoints -> network only, never stored
5. other API endpoints -> network-first, api partition
6. other same-origin requests -> network-first, dynamic partition
7. everything else -> network only
"""

import httpx

from tandem_offline.config import CacheConfig
from tandem_offline.entities import Route, RouteKind, Strategy
from tandem_offline.utils import origin_of

_IMAGE_SUFFIXES = (".png", ".ico")


class StrategySelector:
    """Pure classification of requests into routes."""

    def __init__(self, config: CacheConfig) -> None:
        self._config = config
        self._precache = frozenset(config.precache)
        self._font_hosts = frozenset(host.lower() for host in config.font_hosts)
        self._ignored_schemes = frozenset(s.lower() for s in config.ignored_schemes)
        self._origin = origin_of(config.origin)

    def classify(self, method: str, url: httpx.URL | str) -> Route | None:
        """Classify a request.

        Args:
            method: HTTP method
            url: Absolute request URL

        Returns:
            The route to execute, or None if the request must not be
            intercepted at all
        """
        url = httpx.URL(url)
        if method.upper() != "GET":
            return None
        if url.scheme.lower() in self._ignored_schemes:
            return None

        path = url.path
        config = self._config

        if path in self._precache or path.startswith("/icon-") or path.endswith(_IMAGE_SUFFIXES):
            return Route(RouteKind.STATIC, Strategy.CACHE_FIRST, config.static_partition)

        if url.host.lower() in self._font_hosts:
            return Route(RouteKind.FONT, Strategy.CACHE_FIRST, config.dynamic_partition)

        # Auth is checked first: it is also under the API prefix
        if path.startswith(config.auth_prefix):
            return Route(RouteKind.AUTH_PASSTHROUGH, Strategy.NETWORK_ONLY)

        if path.startswith(config.api_prefix):
            return Route(RouteKind.API, Strategy.NETWORK_FIRST, config.api_partition)

        if origin_of(url) == self._origin:
            return Route(RouteKind.APP_SHELL, Strategy.NETWORK_FIRST, config.dynamic_partition)

        return Route(RouteKind.EXTERNAL, Strategy.NETWORK_ONLY)

    def classify_request(self, request: httpx.Request) -> Route | None:
        return self.classify(request.method, request.url)
