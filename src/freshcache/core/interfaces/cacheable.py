"""Cacheable resource interface."""

from typing import Any, Protocol

from freshcache.core.entities.cache_options import RequestCacheOptions
from freshcache.core.entities.cache_times import CacheTimes


class ICacheable(Protocol):
    """Contract for a resource whose computed value can be cached.

    Implemented once per resource type by the application. The cache
    service asks the resource for its identity, tags, timing thresholds
    and request options, and calls ``compute`` on a miss or refresh.
    """

    def hash(self) -> str:
        """Return a stable identity for the requested resource."""
        ...

    def cache_tags(self) -> list[str]:
        """Return tags applied to the stored entry."""
        ...

    def cache_times(self) -> CacheTimes:
        """Return the freshness thresholds for this resource."""
        ...

    def cache_options(self) -> RequestCacheOptions:
        """Return the cache directives of the current request."""
        ...

    async def compute(self) -> Any:
        """Produce a fresh payload for the resource.

        Any exception raised here is surfaced to the caller of
        ``CacheService.get`` wrapped in a ComputeError.
        """
        ...
