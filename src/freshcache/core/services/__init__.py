"""Domain services for freshcache."""

from freshcache.core.services.cache_service import CacheService
from freshcache.core.services.coalescer import RequestCoalescer
from freshcache.core.services.freshness_policy import FreshnessPolicy
from freshcache.core.services.refresh import RefreshTask
from freshcache.core.services.tagged_store import TaggedStore

__all__ = [
    "CacheService",
    "FreshnessPolicy",
    "RefreshTask",
    "RequestCoalescer",
    "TaggedStore",
]
