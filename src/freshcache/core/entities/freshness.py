"""Freshness classification entity."""

from enum import Enum


class Freshness(Enum):
    """Outcome of classifying a cached entry for one request.

    BYPASS: No usable entry, or the cache is skipped. Recompute.
    FORCED_EXPIRE: The entry is older than the request allows. Recompute.
    FRESH: Serve the entry as-is.
    NEEDS_REFRESH: Serve the entry and dispatch a background refresh.
    ALREADY_QUEUED: Serve the entry; a refresh is already on its way.
    """

    BYPASS = "bypass"
    FORCED_EXPIRE = "forced_expire"
    FRESH = "fresh"
    NEEDS_REFRESH = "needs_refresh"
    ALREADY_QUEUED = "already_queued"

    @property
    def serves_cached(self) -> bool:
        """Check if the cached entry is returned without recomputing."""
        return self in (
            Freshness.FRESH,
            Freshness.NEEDS_REFRESH,
            Freshness.ALREADY_QUEUED,
        )
