"""Redis cache backend implementation."""

from datetime import timedelta

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError


class RedisCacheBackend:
    """Redis cache backend for distributed deployments.

    Entries from every process share one Redis database, so refreshed
    values and ``queued_at`` markers are visible cluster-wide. TTLs are
    applied with millisecond precision.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str = "freshcache",
        default_ttl: int | None = 300,
        client: redis.Redis | None = None,
    ) -> None:
        """Initialize the Redis cache backend.

        Args:
            redis_url: Redis connection URL, used when no client is given.
            key_prefix: Prefix for all cache keys.
            default_ttl: Default TTL in seconds. None stores without expiry.
            client: An existing client to use instead of connecting.
        """
        self._redis: redis.Redis = client if client is not None else redis.from_url(redis_url)
        self._key_prefix = key_prefix
        self._default_ttl = default_ttl

    async def get(self, key: str) -> bytes | None:
        """Retrieve cached value by key."""
        return await self._redis.get(self._prefixed_key(key))

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
        prefixed_key = self._prefixed_key(key)

        if ttl is None and self._default_ttl is not None:
            ttl = timedelta(seconds=self._default_ttl)

        if ttl is None:
            await self._redis.set(prefixed_key, value)
            return

        # Redis rejects non-positive expirations; keep at least 1ms
        milliseconds = max(1, int(ttl.total_seconds() * 1000))
        await self._redis.set(prefixed_key, value, px=milliseconds)

    async def delete(self, key: str) -> bool:
        """Delete cached value."""
        result = await self._redis.delete(self._prefixed_key(key))
        return result > 0

    async def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        result = await self._redis.exists(self._prefixed_key(key))
        return result > 0

    async def clear(self) -> None:
        """Clear all cached values with our prefix.

        Only keys under our prefix are removed, never the whole database.
        Uses SCAN instead of KEYS for production safety.
        """
        cursor = 0
        pattern = f"{self._key_prefix}:*"

        while True:
            cursor, keys = await self._redis.scan(cursor, match=pattern, count=100)
            if keys:
                await self._redis.delete(*keys)
            if cursor == 0:
                break

    async def ping(self) -> bool:
        """Check that the Redis server is reachable."""
        try:
            return bool(await self._redis.ping())
        except (RedisConnectionError, RedisTimeoutError):
            return False

    def _prefixed_key(self, key: str) -> str:
        """Add prefix to key if not already present."""
        if key.startswith(f"{self._key_prefix}:"):
            return key
        return f"{self._key_prefix}:{key}"

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()

    async def __aenter__(self) -> "RedisCacheBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()
