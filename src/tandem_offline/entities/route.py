"""Classification result produced by the strategy selector."""

from dataclasses import dataclass
from enum import Enum


class RouteKind(str, Enum):
    """Which rule of the selector matched the request."""

    STATIC = "static"
    FONT = "font"
    AUTH_PASSTHROUGH = "auth_passthrough"
    API = "api"
    APP_SHELL = "app_shell"
    EXTERNAL = "external"


class Strategy(str, Enum):
    """Caching policy applied to a classified request."""

    CACHE_FIRST = "cache_first"
    NETWORK_FIRST = "network_first"
    NETWORK_ONLY = "network_only"


@dataclass(frozen=True)
class Route:
    """A classified request.

    Attributes:
        kind: The matching rule
        strategy: The policy to execute
        partition: Target partition name, None for network-only routes
    """

    kind: RouteKind
    strategy: Strategy
    partition: str | None = None
