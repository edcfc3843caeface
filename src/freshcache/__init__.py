"""freshcache - Read-through caching with refresh-ahead for asyncio.

Serves cached results while deciding per request whether a value is
fresh, stale enough to refresh in the background, or too old to serve.
Entries are scoped by tags for bulk invalidation, concurrent misses
share a single compute, and request options follow HTTP Cache-Control.

Example:
    from freshcache import (
        CacheConfig,
        CacheService,
        CacheTimes,
        DefaultKeyBuilder,
        InMemoryCacheBackend,
        JsonSerializer,
        RequestCacheOptions,
    )

    class StationReadings:
        def __init__(self, station_id: str, cache_control: str | None = None):
            self.station_id = station_id
            self.cache_control = cache_control

        def hash(self) -> str:
            return f"readings:{self.station_id}"

        def cache_tags(self) -> list[str]:
            return ["readings", f"station:{self.station_id}"]

        def cache_times(self) -> CacheTimes:
            return CacheTimes(
                expiration_time=3600,
                update_time=300,
                min_database_refresh_time=30,
            )

        def cache_options(self) -> RequestCacheOptions:
            return RequestCacheOptions.from_header(self.cache_control)

        async def compute(self) -> list[dict]:
            return await db.fetch_readings(self.station_id)

    cache_service = CacheService(
        backend=InMemoryCacheBackend(),
        key_builder=DefaultKeyBuilder(),
        serializer=JsonSerializer(),
        config=CacheConfig.from_env(),
    )

    entry = await cache_service.get(StationReadings("A301"))
    entry.payload      # the readings
    entry.meta         # {"fromCache": ..., "expiresIn": ..., "builtIn": ...}

    # Drop everything cached for one station
    await cache_service.invalidate(["station:A301"])
"""

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
from freshcache.decorators import cached, configure, invalidates
from freshcache.exceptions import (
    ComputeError,
    DispatchError,
    FreshCacheError,
    SerializationError,
)
from freshcache.infrastructure import (
    AsyncioTaskRunner,
    DefaultKeyBuilder,
    InMemoryCacheBackend,
    JsonSerializer,
    PickleSerializer,
)
from freshcache.resources import CallableResource

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CacheConfig",
    "CacheEntry",
    "CacheTimes",
    "Freshness",
    "RequestCacheOptions",
    # Core interfaces
    "ICacheable",
    "ICacheBackend",
    "IKeyBuilder",
    "ISerializer",
    "ITaskRunner",
    # Core services
    "CacheService",
    "FreshnessPolicy",
    "RefreshTask",
    "RequestCoalescer",
    "TaggedStore",
    # Errors
    "FreshCacheError",
    "ComputeError",
    "DispatchError",
    "SerializationError",
    # Infrastructure implementations
    "InMemoryCacheBackend",
    "DefaultKeyBuilder",
    "JsonSerializer",
    "PickleSerializer",
    "AsyncioTaskRunner",
    # Resources and decorators
    "CallableResource",
    "cached",
    "invalidates",
    "configure",
]
