import os
from dataclasses import dataclass, field
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


def _env_list(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


DEFAULT_PRECACHE = "/,/manifest.json,/icon-192.png,/icon-512.png,/apple-touch-icon.png"
DEFAULT_FONT_HOSTS = "fonts.googleapis.com,fonts.gstatic.com"


@dataclass(frozen=True)
class CacheConfig:
    """Immutable configuration handed to a worker at construction.

    Two workers built from configs with different ``version`` values never
    share a partition name, which is what lets an old and a new generation
    live side by side until activation removes the old one.
    """

    prefix: str = "tandem"
    version: str = "v3"
    precache: tuple[str, ...] = (
        "/",
        "/manifest.json",
        "/icon-192.png",
        "/icon-512.png",
        "/apple-touch-icon.png",
    )
    origin: str = "http://localhost:5000"
    api_prefix: str = "/api/"
    auth_prefix: str = "/api/auth/"
    font_hosts: tuple[str, ...] = ("fonts.googleapis.com", "fonts.gstatic.com")
    ignored_schemes: tuple[str, ...] = ("chrome-extension",)
    shell_path: str = "/"
    sync_tag: str = "expense-sync"
    app_name: str = "Tandem"
    notification_body: str = "Nova notificação do Tandem"
    notification_tag: str = "tandem-notification"
    notification_icon: str = "/icon-192.png"

    @property
    def static_partition(self) -> str:
        return f"{self.prefix}-static-{self.version}"

    @property
    def dynamic_partition(self) -> str:
        return f"{self.prefix}-dynamic-{self.version}"

    @property
    def api_partition(self) -> str:
        return f"{self.prefix}-api-{self.version}"

    @property
    def partitions(self) -> tuple[str, str, str]:
        """All partition names owned by this version."""
        return (self.static_partition, self.dynamic_partition, self.api_partition)

    def is_current(self, partition_name: str) -> bool:
        """Check whether a partition name carries this config's version tag.

        The tag must be a whole "-"-separated segment, so "v3" does not match
        "tandem-static-v30" or "tandem-static-v3.1". A plain substring test
        would keep both.
        """
        return self.version in partition_name.split("-")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Every field is read when the instance is created, so ``Settings()`` always
    reflects the current environment while ``get_settings()`` returns the
    cached process-wide copy.
    """

    # Redis
    redis_url: str = field(default_factory=lambda: _env("REDIS_URL", "redis://localhost:6379"))
    redis_password: str | None = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))

    # Partitions
    partition_backend: str = field(default_factory=lambda: _env("PARTITION_BACKEND", "memory"))
    partition_namespace: str = field(default_factory=lambda: _env("PARTITION_NAMESPACE", "sw"))
    cache_prefix: str = field(default_factory=lambda: _env("CACHE_PREFIX", "tandem"))
    cache_version: str = field(default_factory=lambda: _env("CACHE_VERSION", "v3"))
    precache_paths: tuple[str, ...] = field(
        default_factory=lambda: _env_list("PRECACHE_PATHS", DEFAULT_PRECACHE)
    )

    # Routing
    app_origin: str = field(default_factory=lambda: _env("APP_ORIGIN", "http://localhost:5000"))
    api_prefix: str = field(default_factory=lambda: _env("API_PREFIX", "/api/"))
    auth_prefix: str = field(default_factory=lambda: _env("AUTH_PREFIX", "/api/auth/"))
    font_hosts: tuple[str, ...] = field(
        default_factory=lambda: _env_list("FONT_HOSTS", DEFAULT_FONT_HOSTS)
    )

    # Background channels
    sync_tag: str = field(default_factory=lambda: _env("SYNC_TAG", "expense-sync"))
    app_name: str = field(default_factory=lambda: _env("APP_NAME", "Tandem"))

    # Network / registration
    network_timeout: float = field(default_factory=lambda: float(_env("NETWORK_TIMEOUT", "30")))
    update_interval_seconds: int = field(
        default_factory=lambda: int(_env("UPDATE_INTERVAL_SECONDS", "3600"))  # hourly
    )

    # API
    api_host: str = field(default_factory=lambda: _env("API_HOST", "0.0.0.0"))
    api_port: int = field(default_factory=lambda: int(_env("API_PORT", "8080")))
    api_reload: bool = field(default_factory=lambda: _env("API_RELOAD", "false").lower() == "true")

    # Logging
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    log_json: bool = field(default_factory=lambda: _env("LOG_JSON", "false").lower() == "true")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.partition_backend not in ("memory", "redis"):
            raise ValueError(
                f"PARTITION_BACKEND must be 'memory' or 'redis', got {self.partition_backend!r}"
            )

        if not self.cache_version or "-" in self.cache_version:
            raise ValueError("CACHE_VERSION must be a non-empty tag without '-'")

        if not self.auth_prefix.startswith(self.api_prefix):
            raise ValueError("AUTH_PREFIX must live under API_PREFIX")

        if self.update_interval_seconds < 0:
            raise ValueError("UPDATE_INTERVAL_SECONDS must be >= 0 (0 disables polling)")

        for path in self.precache_paths:
            if not path.startswith("/"):
                raise ValueError(f"PRECACHE_PATHS entries must be absolute paths, got {path!r}")

    def cache_config(self) -> CacheConfig:
        """Build the immutable worker configuration from these settings."""
        return CacheConfig(
            prefix=self.cache_prefix,
            version=self.cache_version,
            precache=self.precache_paths,
            origin=self.app_origin.rstrip("/"),
            api_prefix=self.api_prefix,
            auth_prefix=self.auth_prefix,
            font_hosts=self.font_hosts,
            sync_tag=self.sync_tag,
            app_name=self.app_name,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(current: Settings | None = None) -> redis.Redis:
    """Create an asyncio Redis client instance."""
    current = current or settings
    return redis.from_url(
        current.redis_url,
        password=current.redis_password,
        decode_responses=False,
    )
