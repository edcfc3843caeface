"""Cache configuration entity."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class CacheConfig:
    """Cache configuration.

    Holds process-wide settings for the caching system. The ``app_name``
    is mixed into every cache key as a namespace tag, so several
    applications can share one store without colliding.
    """

    app_name: str = "freshcache"
    key_prefix: str = "freshcache"
    enabled: bool = True

    # Single-flight guard for concurrent recomputes of the same key
    single_flight: bool = True
    single_flight_timeout: float | None = 30.0

    # Lifetime of tag version markers used for flushing by tag
    tag_ttl: timedelta | None = None

    def __post_init__(self) -> None:
        """Set default tag TTL if not provided."""
        if self.tag_ttl is None:
            self.tag_ttl = timedelta(days=1)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CacheConfig":
        """Build a configuration from environment variables.

        Reads ``FRESHCACHE_APP_NAME`` (falling back to ``APP_NAME``),
        ``FRESHCACHE_KEY_PREFIX``, ``FRESHCACHE_ENABLED`` and
        ``FRESHCACHE_SINGLE_FLIGHT``.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            A new CacheConfig instance.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def flag(name: str, default: bool) -> bool:
            value = env.get(name)
            if value is None:
                return default
            return value.strip().lower() in _TRUE_VALUES

        return cls(
            app_name=env.get("FRESHCACHE_APP_NAME") or env.get("APP_NAME") or defaults.app_name,
            key_prefix=env.get("FRESHCACHE_KEY_PREFIX", defaults.key_prefix),
            enabled=flag("FRESHCACHE_ENABLED", defaults.enabled),
            single_flight=flag("FRESHCACHE_SINGLE_FLIGHT", defaults.single_flight),
        )
