"""Cache service - main orchestrator for read-through caching."""

import logging
import time
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from freshcache.core.entities.cache_config import CacheConfig
from freshcache.core.entities.cache_entry import CacheEntry
from freshcache.core.entities.cache_options import RequestCacheOptions
from freshcache.core.entities.cache_times import CacheTimes
from freshcache.core.entities.freshness import Freshness
from freshcache.core.interfaces.cache_backend import ICacheBackend
from freshcache.core.interfaces.cacheable import ICacheable
from freshcache.core.interfaces.key_builder import IKeyBuilder
from freshcache.core.interfaces.serializer import ISerializer
from freshcache.core.interfaces.task_runner import ITaskRunner
from freshcache.core.services.coalescer import RequestCoalescer
from freshcache.core.services.freshness_policy import FreshnessPolicy
from freshcache.core.services.refresh import RefreshTask
from freshcache.core.services.tagged_store import TaggedStore
from freshcache.exceptions import ComputeError
from freshcache.infrastructure.key_builders import DefaultKeyBuilder
from freshcache.infrastructure.serializers import JsonSerializer
from freshcache.infrastructure.task_runners import AsyncioTaskRunner

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CacheService:
    """Domain service that orchestrates read-through caching.

    This is the main entry point for cache operations. For each request
    it looks the resource up in the tag-scoped store, classifies the
    entry with the freshness policy, and then serves it, serves it while
    dispatching a background refresh, or recomputes it synchronously.
    """

    def __init__(
        self,
        backend: ICacheBackend,
        key_builder: IKeyBuilder | None = None,
        serializer: ISerializer | None = None,
        task_runner: ITaskRunner | None = None,
        config: CacheConfig | None = None,
        policy: FreshnessPolicy | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the cache service.

        Args:
            backend: The cache backend to use for storage.
            key_builder: The key builder for generating cache keys. Defaults
                to a DefaultKeyBuilder using the configured key prefix.
            serializer: The serializer for encoding/decoding entries.
                Defaults to JsonSerializer.
            task_runner: Runner for background refreshes. Defaults to an
                AsyncioTaskRunner on the running event loop.
            config: Optional cache configuration. Uses defaults if not provided.
            policy: Optional freshness policy. Uses FreshnessPolicy if not provided.
            clock: Returns the current time as an aware datetime.
        """
        self._config = config or CacheConfig()
        self._store = TaggedStore(
            backend=backend,
            serializer=serializer or JsonSerializer(),
            key_builder=key_builder or DefaultKeyBuilder(prefix=self._config.key_prefix),
            config=self._config,
        )
        self._task_runner = task_runner if task_runner is not None else AsyncioTaskRunner()
        self._policy = policy or FreshnessPolicy()
        self._clock = clock
        self._coalescer = (
            RequestCoalescer(timeout=self._config.single_flight_timeout)
            if self._config.single_flight
            else None
        )

        # Statistics
        self._hits = 0
        self._misses = 0
        self._stale = 0
        self._recomputes = 0
        self._throttled = 0
        self._dispatch_failures = 0

    @property
    def config(self) -> CacheConfig:
        """Get the cache configuration."""
        return self._config

    @property
    def store(self) -> TaggedStore:
        """Get the tag-scoped store adapter."""
        return self._store

    @property
    def task_runner(self) -> ITaskRunner:
        """Get the background refresh runner."""
        return self._task_runner

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, stale serves that dispatched a
            refresh, recomputes, throttled recomputes, dispatch failures,
            and total requests.
        """
        return {
            "hits": self._hits,
            "misses": self._misses,
            "stale": self._stale,
            "recomputes": self._recomputes,
            "throttled": self._throttled,
            "dispatch_failures": self._dispatch_failures,
            "total": self._hits + self._misses,
        }

    def now(self) -> datetime:
        """Return the current time from the service clock."""
        return self._clock()

    async def get(self, resource: ICacheable) -> CacheEntry | None:
        """Return the cached value of a resource, recomputing as needed.

        Args:
            resource: The resource to read.

        Returns:
            The entry annotated with cache metadata and ``built_in``.
            None only when ``only_if_cached`` is set and nothing is cached.

        Raises:
            ComputeError: If the resource had to be computed and failed.
        """
        start = time.perf_counter()
        now = self._clock()
        options = resource.cache_options()
        times = resource.cache_times()

        cached = None
        if self._reads_cache(options):
            cached = await self._lookup(resource, times, now)

        freshness = self._policy.classify(cached, options, times, now)
        logger.debug("Cache %s for %s", freshness.value, resource.hash())

        if freshness.serves_cached:
            self._hits += 1
            entry = cached
            if freshness is Freshness.NEEDS_REFRESH:
                entry = await self._dispatch_refresh(resource, cached, times, now)
        else:
            self._misses += 1
            entry = await self._recompute(resource, cached, options, times, now)
            # A throttled recompute may hand back an entry that is itself due
            if (
                entry is not None
                and entry.from_cache
                and self._policy.needs_refresh(entry, times, now)
            ):
                entry = await self._dispatch_refresh(resource, entry, times, now)

        if entry is None:
            return None

        return entry.with_build_time(time.perf_counter() - start)

    async def get_from_database(
        self,
        resource: ICacheable,
        ignore_cache: bool = False,
    ) -> CacheEntry | None:
        """Recompute a resource synchronously, subject to the throttle.

        Unless ``ignore_cache`` is set, the existing entry is returned
        instead when the request is ``only_if_cached`` or the entry is
        younger than ``min_database_refresh_time``.

        Args:
            resource: The resource to compute.
            ignore_cache: Skip the throttle and always compute.

        Returns:
            The new entry, or the existing one (possibly None) if throttled.

        Raises:
            ComputeError: If the resource fails to compute.
        """
        now = self._clock()
        options = resource.cache_options()
        times = resource.cache_times()

        cached = None
        if not ignore_cache and self._reads_cache(options):
            cached = await self._lookup(resource, times, now)

        return await self._recompute(
            resource, cached, options, times, now, ignore_cache=ignore_cache
        )

    async def update_cache(
        self,
        resource: ICacheable,
        entry: CacheEntry,
        *,
        now: datetime | None = None,
    ) -> CacheEntry:
        """Force-write an entry for a resource.

        The entry is stamped with its write time and any ``queued_at``
        marker is cleared.

        Args:
            resource: The resource the entry belongs to.
            entry: The entry to store.
            now: Write time. Defaults to the service clock.

        Returns:
            The entry as written.
        """
        stamped = entry.stamp(now or self._clock())
        await self._store.store(
            resource.hash(),
            resource.cache_tags(),
            stamped,
            resource.cache_times().ttl,
        )
        return stamped

    async def compute_entry(
        self,
        resource: ICacheable,
        now: datetime | None = None,
    ) -> CacheEntry:
        """Compute a new, unstored entry for a resource.

        Raises:
            ComputeError: If the resource fails to compute.
        """
        now = now or self._clock()
        try:
            payload = await resource.compute()
        except Exception as e:
            raise ComputeError(resource.hash(), str(e) or type(e).__name__) from e

        self._recomputes += 1
        return CacheEntry.create(payload, resource.cache_times(), now)

    async def release_refresh(
        self,
        resource: ICacheable,
        entry: CacheEntry,
        *,
        now: datetime | None = None,
    ) -> bool:
        """Clear the queued marker left by a refresh that failed.

        The stale entry is written back without ``queued_at`` for the rest
        of its lifetime, so the next read past ``update_time`` dispatches
        a new refresh. Nothing is written if the entry has expired or a
        newer entry has replaced it.

        Args:
            resource: The resource whose refresh failed.
            entry: The entry that was served when the refresh was dispatched.
            now: Reference time. Defaults to the service clock.

        Returns:
            True if the entry was written back.
        """
        now = now or self._clock()
        key = resource.hash()
        tags = resource.cache_tags()
        remaining = resource.cache_times().expiration_time - entry.age(now)
        if remaining <= 0:
            return False

        current = await self._store.lookup(key, tags)
        if current is None or current.cached_at != entry.cached_at:
            return False

        released = replace(entry, queued_at=None)
        return await self._store.store(key, tags, released, timedelta(seconds=remaining))

    async def forget(self, resource: ICacheable) -> bool:
        """Delete the stored entry of a resource."""
        return await self._store.forget(resource.hash(), resource.cache_tags())

    async def invalidate(self, tags: list[str]) -> int:
        """Invalidate cached entries by tags.

        Args:
            tags: List of tags to invalidate.

        Returns:
            Number of tags invalidated.
        """
        return await self._store.flush(tags)

    async def clear(self) -> None:
        """Clear all cached entries."""
        await self._store.backend.clear()
        self._hits = 0
        self._misses = 0
        self._stale = 0
        self._recomputes = 0
        self._throttled = 0
        self._dispatch_failures = 0

    def _reads_cache(self, options: RequestCacheOptions) -> bool:
        return self._config.enabled and options.use_cache

    async def _lookup(
        self,
        resource: ICacheable,
        times: CacheTimes,
        now: datetime,
    ) -> CacheEntry | None:
        entry = await self._store.lookup(resource.hash(), resource.cache_tags())
        if entry is None:
            return None
        return self._policy.annotate(entry, times, now)

    async def _recompute(
        self,
        resource: ICacheable,
        cached: CacheEntry | None,
        options: RequestCacheOptions,
        times: CacheTimes,
        now: datetime,
        ignore_cache: bool = False,
    ) -> CacheEntry | None:
        if not ignore_cache and self._policy.should_throttle(cached, options, times, now):
            self._throttled += 1
            logger.debug("Recompute throttled for %s", resource.hash())
            return cached

        async def compute_and_store() -> CacheEntry:
            entry = await self.compute_entry(resource, now)
            if not options.no_store:
                await self.update_cache(resource, entry, now=now)
            return entry

        if self._coalescer is None:
            return await compute_and_store()

        coordinates = self._store.coordinates(resource.hash(), resource.cache_tags())
        if options.no_store:
            coordinates += "|no-store"
        return await self._coalescer.run(coordinates, compute_and_store)

    async def _dispatch_refresh(
        self,
        resource: ICacheable,
        entry: CacheEntry,
        times: CacheTimes,
        now: datetime,
    ) -> CacheEntry:
        key = resource.hash()
        tags = resource.cache_tags()
        remaining = timedelta(seconds=times.expiration_time - entry.age(now))
        queued = entry.mark_queued(now)

        # Mark before dispatching so the refresh cannot be overwritten by it
        marked = remaining > timedelta(0) and await self._store.store(key, tags, queued, remaining)

        try:
            await self._task_runner.dispatch(
                RefreshTask(service=self, resource=resource, stale=entry)
            )
        except Exception:
            self._dispatch_failures += 1
            logger.warning(
                "Refresh dispatch failed for %s, serving stale entry", key, exc_info=True
            )
            if marked:
                await self._store.store(key, tags, entry, remaining)
            return entry

        self._stale += 1
        logger.info("Dispatched background refresh for %s", key)
        return queued
