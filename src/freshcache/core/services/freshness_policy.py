"""Freshness policy service.

Decides, for one request, what to do with a cached entry:

- BYPASS: caching is skipped or nothing is cached; recompute.
- FORCED_EXPIRE: the entry is older than the request's max age; recompute.
- FRESH: the entry is younger than the update time; serve it.
- NEEDS_REFRESH: past the update time; serve it and refresh in background.
- ALREADY_QUEUED: past the update time but a refresh is already queued.

Thresholds are compared independently, so out-of-order CacheTimes
produce consistent (if unusual) decisions rather than errors.
"""

from datetime import datetime

from freshcache.core.entities.cache_entry import CacheEntry
from freshcache.core.entities.cache_options import RequestCacheOptions
from freshcache.core.entities.cache_times import CacheTimes
from freshcache.core.entities.freshness import Freshness


class FreshnessPolicy:
    """Classifies cached entries by age against CacheTimes thresholds."""

    def classify(
        self,
        entry: CacheEntry | None,
        options: RequestCacheOptions,
        times: CacheTimes,
        now: datetime,
    ) -> Freshness:
        """Classify an entry for the current request.

        Args:
            entry: The cached entry, if any.
            options: The request's cache options.
            times: The resource's freshness thresholds.
            now: The request's time snapshot.

        Returns:
            The freshness decision.
        """
        if not options.use_cache or entry is None:
            return Freshness.BYPASS

        age = entry.age(now)

        if options.has_max_age and age > options.max_age:
            return Freshness.FORCED_EXPIRE

        if age < times.update_time:
            return Freshness.FRESH

        if entry.is_queued:
            return Freshness.ALREADY_QUEUED

        return Freshness.NEEDS_REFRESH

    def needs_refresh(
        self,
        entry: CacheEntry,
        times: CacheTimes,
        now: datetime,
    ) -> bool:
        """Check if a served entry is due a background refresh."""
        return entry.age(now) >= times.update_time and not entry.is_queued

    def should_throttle(
        self,
        entry: CacheEntry | None,
        options: RequestCacheOptions,
        times: CacheTimes,
        now: datetime,
    ) -> bool:
        """Check if a synchronous recompute must be skipped.

        A recompute is skipped when the request only accepts cached
        data, or when the existing entry is still inside the throttle
        window.
        """
        if options.only_if_cached:
            return True
        return entry is not None and entry.is_newer_than(
            times.min_database_refresh_time, now
        )

    def annotate(
        self,
        entry: CacheEntry,
        times: CacheTimes,
        now: datetime,
    ) -> CacheEntry:
        """Derive ``expires_in``, ``queue_in`` and ``from_cache`` for a read."""
        return entry.annotate(times, now)
