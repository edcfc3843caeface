"""Core domain layer for freshcache."""

from freshcache.core.entities import (
    CacheConfig,
    CacheEntry,
    CacheTimes,
    Freshness,
    RequestCacheOptions,
)
from freshcache.core.interfaces import (
    ICacheable,
    ICacheBackend,
    IKeyBuilder,
    ISerializer,
    ITaskRunner,
)
from freshcache.core.services import (
    CacheService,
    FreshnessPolicy,
    RefreshTask,
    RequestCoalescer,
    TaggedStore,
)

__all__ = [
    # Entities
    "CacheConfig",
    "CacheEntry",
    "CacheTimes",
    "Freshness",
    "RequestCacheOptions",
    # Interfaces
    "ICacheable",
    "ICacheBackend",
    "IKeyBuilder",
    "ISerializer",
    "ITaskRunner",
    # Services
    "CacheService",
    "FreshnessPolicy",
    "RefreshTask",
    "RequestCoalescer",
    "TaggedStore",
]
