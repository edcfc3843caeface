"""In-memory cache backend implementation."""

import time
from collections.abc import Callable
from datetime import timedelta
from typing import NamedTuple

from cachetools import TLRUCache  # type: ignore[import-untyped]


class _Item(NamedTuple):
    data: bytes
    ttl: float


class InMemoryCacheBackend:
    """In-memory cache backend with per-item TTL and bounded size.

    Suitable for single-process deployments. Uses cachetools' TLRUCache,
    so every key expires after its own TTL and the cache evicts items
    once ``maxsize`` is reached.
    """

    def __init__(
        self,
        maxsize: int = 1000,
        default_ttl: float = 300.0,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory cache backend.

        Args:
            maxsize: Maximum number of items in the cache.
            default_ttl: TTL in seconds for items stored without one.
            timer: Clock used for expiration, in seconds.
        """
        self._maxsize = maxsize
        self._default_ttl = default_ttl
        self._cache: TLRUCache[str, _Item] = TLRUCache(
            maxsize=maxsize,
            ttu=self._time_to_use,
            timer=timer,
        )

    @staticmethod
    def _time_to_use(_key: str, item: _Item, now: float) -> float:
        return now + item.ttl

    async def get(self, key: str) -> bytes | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value as bytes, or None if not found or expired.
        """
        item = self._cache.get(key)
        return item.data if item is not None else None

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Store value with optional TTL.

        Args:
            key: The cache key.
            value: The value to store as bytes.
            ttl: Optional time-to-live. If None, uses default.
        """
        seconds = ttl.total_seconds() if ttl is not None else self._default_ttl
        self._cache[key] = _Item(value, seconds)

    async def delete(self, key: str) -> bool:
        """Delete cached value.

        Args:
            key: The cache key to delete.

        Returns:
            True if the key existed and was deleted, False otherwise.
        """
        return self._cache.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        """Check if key exists in cache.

        Args:
            key: The cache key to check.

        Returns:
            True if the key exists and has not expired, False otherwise.
        """
        return key in self._cache

    async def clear(self) -> None:
        """Clear all cached values."""
        self._cache.clear()

    def __len__(self) -> int:
        """Return the number of items in the cache."""
        self._cache.expire()
        return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the cache."""
        return self._maxsize
