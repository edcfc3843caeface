"""Cache entry entity."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from freshcache.core.entities.cache_times import CacheTimes


@dataclass(frozen=True)
class CacheEntry:
    """Immutable cache entry value object.

    Wraps a cached payload with the timestamps needed to decide its
    freshness and the observability fields reported back to callers.
    Only ``payload``, ``cached_at`` and ``queued_at`` are persisted; the
    remaining fields are derived for the current read.
    """

    payload: Any
    cached_at: datetime | None = None
    queued_at: datetime | None = None
    from_cache: bool = False
    expires_in: float | None = None
    queue_in: float | None = None
    built_in: float | None = None

    def age(self, now: datetime) -> float:
        """Seconds elapsed since the entry was written.

        Negative ages caused by clock skew are clamped to 0.

        Args:
            now: The reference time.

        Returns:
            The entry age in seconds.
        """
        if self.cached_at is None:
            return 0.0
        return max(0.0, (now - self.cached_at).total_seconds())

    def is_older_than(self, seconds: float, now: datetime) -> bool:
        """Check if the entry age exceeds ``seconds``."""
        return self.age(now) > seconds

    def is_newer_than(self, seconds: float, now: datetime) -> bool:
        """Check if the entry age is below ``seconds``."""
        return self.age(now) < seconds

    @property
    def is_queued(self) -> bool:
        """Check if a background refresh was dispatched for this entry."""
        return self.queued_at is not None

    @property
    def meta(self) -> dict[str, Any]:
        """Observability fields for embedding in API responses."""
        return {
            "cachedAt": self.cached_at.isoformat() if self.cached_at else None,
            "expiresIn": self.expires_in,
            "queueIn": self.queue_in,
            "fromCache": self.from_cache,
            "queuedAt": self.queued_at.isoformat() if self.queued_at else None,
            "builtIn": self.built_in,
        }

    def annotate(self, times: CacheTimes, now: datetime) -> "CacheEntry":
        """Derive the read-time fields for an entry served from the store."""
        age = self.age(now)
        return replace(
            self,
            expires_in=times.expiration_time - age,
            queue_in=times.update_time - age,
            from_cache=True,
        )

    def stamp(self, now: datetime) -> "CacheEntry":
        """Return a copy written at ``now``, with no refresh queued."""
        return replace(self, cached_at=now, queued_at=None)

    def mark_queued(self, now: datetime) -> "CacheEntry":
        """Return a copy flagged as having a refresh dispatched at ``now``."""
        if self.queued_at is not None and self.queued_at >= now:
            return self
        return replace(self, queued_at=now)

    def with_build_time(self, seconds: float) -> "CacheEntry":
        """Return a copy carrying the time spent building the response."""
        return replace(self, built_in=round(seconds, 4))

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted representation of the entry."""
        return {
            "payload": self.payload,
            "cached_at": self.cached_at.isoformat() if self.cached_at else None,
            "queued_at": self.queued_at.isoformat() if self.queued_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheEntry":
        """Restore an entry from its persisted representation.

        Args:
            data: A mapping produced by ``to_dict``.

        Returns:
            The restored entry, flagged as coming from the cache.

        Raises:
            KeyError: If the payload is missing.
            ValueError: If a timestamp cannot be parsed.
        """
        cached_at = data.get("cached_at")
        queued_at = data.get("queued_at")
        return cls(
            payload=data["payload"],
            cached_at=datetime.fromisoformat(cached_at) if cached_at else None,
            queued_at=datetime.fromisoformat(queued_at) if queued_at else None,
            from_cache=True,
        )

    @classmethod
    def create(
        cls,
        payload: Any,
        times: CacheTimes,
        now: datetime,
    ) -> "CacheEntry":
        """Factory method for a freshly computed entry.

        Args:
            payload: The computed value.
            times: Thresholds of the resource that produced it.
            now: Write time of the entry.

        Returns:
            A new CacheEntry instance.
        """
        return cls(
            payload=payload,
            cached_at=now,
            from_cache=False,
            expires_in=times.expiration_time,
            queue_in=times.update_time,
        )
