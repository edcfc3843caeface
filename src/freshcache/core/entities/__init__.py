"""Domain entities for freshcache."""

from freshcache.core.entities.cache_config import CacheConfig
from freshcache.core.entities.cache_entry import CacheEntry
from freshcache.core.entities.cache_options import RequestCacheOptions
from freshcache.core.entities.cache_times import CacheTimes
from freshcache.core.entities.freshness import Freshness

__all__ = [
    "CacheEntry",
    "CacheConfig",
    "CacheTimes",
    "RequestCacheOptions",
    "Freshness",
]
