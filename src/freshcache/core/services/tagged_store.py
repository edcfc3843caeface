"""Tag-scoped store adapter over a cache backend."""

import logging
import uuid
from collections.abc import Iterable
from datetime import timedelta

from freshcache.core.entities.cache_config import CacheConfig
from freshcache.core.entities.cache_entry import CacheEntry
from freshcache.core.interfaces.cache_backend import ICacheBackend
from freshcache.core.interfaces.key_builder import IKeyBuilder
from freshcache.core.interfaces.serializer import ISerializer
from freshcache.utils.hashing import hash_value, unique_tags

logger = logging.getLogger(__name__)


class TaggedStore:
    """Reads and writes cache entries scoped by a set of tags.

    Every entry is scoped by the application namespace tag plus the
    resource's own tags. Each tag has a version marker in the backend and
    the entry key embeds a digest of all its tag versions, so flushing a
    tag rotates its version and orphans every entry stored under it.
    Orphans are reclaimed by the backend TTL.

    Backend failures never propagate: reads degrade to a miss and writes
    are dropped, both with a warning.
    """

    def __init__(
        self,
        backend: ICacheBackend,
        serializer: ISerializer,
        key_builder: IKeyBuilder,
        config: CacheConfig | None = None,
    ) -> None:
        """Initialize the store adapter.

        Args:
            backend: The cache backend to use for storage.
            serializer: The serializer for encoding/decoding entries.
            key_builder: The key builder for generating backend keys.
            config: Optional cache configuration. Uses defaults if not provided.
        """
        self._backend = backend
        self._serializer = serializer
        self._key_builder = key_builder
        self._config = config or CacheConfig()

    @property
    def backend(self) -> ICacheBackend:
        """Get the underlying cache backend."""
        return self._backend

    def scope(self, tags: Iterable[str]) -> list[str]:
        """Return the full tag set for an entry, namespace tag first."""
        return unique_tags([self._config.app_name, *tags])

    def coordinates(self, key: str, tags: Iterable[str]) -> str:
        """Return a version-free identity for a key and its tags."""
        return f"{key}[{','.join(sorted(self.scope(tags)))}]"

    async def lookup(self, key: str, tags: Iterable[str]) -> CacheEntry | None:
        """Fetch the entry stored under a tag-scoped key.

        Args:
            key: The resource hash.
            tags: The resource's cache tags.

        Returns:
            The stored entry flagged as coming from the cache, or None if
            absent, expired, unreadable or the store is unavailable.
        """
        try:
            store_key = await self._store_key(key, tags)
            data = await self._backend.get(store_key)
            if data is None:
                return None
            return CacheEntry.from_dict(self._serializer.deserialize(data))
        except Exception:
            logger.warning(
                "Cache lookup failed for %s, treating as a miss",
                self.coordinates(key, tags),
                exc_info=True,
            )
            return None

    async def has(self, key: str, tags: Iterable[str]) -> bool:
        """Check if an entry exists under a tag-scoped key."""
        try:
            return await self._backend.exists(await self._store_key(key, tags))
        except Exception:
            logger.warning(
                "Cache existence check failed for %s",
                self.coordinates(key, tags),
                exc_info=True,
            )
            return False

    async def store(
        self,
        key: str,
        tags: Iterable[str],
        entry: CacheEntry,
        ttl: timedelta,
    ) -> bool:
        """Write an entry under a tag-scoped key.

        Args:
            key: The resource hash.
            tags: The resource's cache tags.
            entry: The entry to persist.
            ttl: Time after which the store treats the entry as absent.

        Returns:
            True if the entry was written, False if the write was dropped.
        """
        try:
            store_key = await self._store_key(key, tags)
            data = self._serializer.serialize(entry.to_dict())
            await self._backend.set(store_key, data, ttl)
            return True
        except Exception:
            logger.warning(
                "Cache write failed for %s, entry not stored",
                self.coordinates(key, tags),
                exc_info=True,
            )
            return False

    async def forget(self, key: str, tags: Iterable[str]) -> bool:
        """Delete the entry stored under a tag-scoped key."""
        try:
            return await self._backend.delete(await self._store_key(key, tags))
        except Exception:
            logger.warning(
                "Cache delete failed for %s",
                self.coordinates(key, tags),
                exc_info=True,
            )
            return False

    async def flush(self, tags: Iterable[str]) -> int:
        """Invalidate every entry stored under any of the given tags.

        Args:
            tags: Tags to invalidate.

        Returns:
            Number of tags whose version was rotated.
        """
        count = 0
        for tag in unique_tags(tags):
            try:
                await self._write_version(tag)
                count += 1
            except Exception:
                logger.warning("Cache flush failed for tag %s", tag, exc_info=True)
        return count

    async def _store_key(self, key: str, tags: Iterable[str]) -> str:
        versions = [f"{tag}={await self._tag_version(tag)}" for tag in self.scope(tags)]
        return self._key_builder.build(key, hash_value(versions))

    async def _tag_version(self, tag: str) -> str:
        data = await self._backend.get(self._key_builder.build_tag_key(tag))
        if data is not None:
            return data.decode()
        # A lost marker yields a new version: old entries become unreachable
        return await self._write_version(tag)

    async def _write_version(self, tag: str) -> str:
        version = uuid.uuid4().hex[:12]
        await self._backend.set(
            self._key_builder.build_tag_key(tag),
            version.encode(),
            self._config.tag_ttl,
        )
        return version
