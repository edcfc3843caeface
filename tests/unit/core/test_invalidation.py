"""Tests for the tag-scoped store and tag-based invalidation."""

from datetime import timedelta
from unittest.mock import AsyncMock

from freshcache import (
    CacheConfig,
    CacheEntry,
    DefaultKeyBuilder,
    InMemoryCacheBackend,
    JsonSerializer,
    TaggedStore,
)

TTL = timedelta(minutes=5)


def create_store(
    backend=None,
    app_name: str = "test-app",
) -> tuple[TaggedStore, InMemoryCacheBackend]:
    """Create a tagged store with in-memory backend for testing."""
    backend = backend if backend is not None else InMemoryCacheBackend(maxsize=100)
    store = TaggedStore(
        backend=backend,
        serializer=JsonSerializer(),
        key_builder=DefaultKeyBuilder(prefix="test"),
        config=CacheConfig(app_name=app_name),
    )
    return store, backend


class TestTaggedStore:
    """Tests for tag-scoped reads and writes."""

    async def test_store_and_lookup(self):
        """Should read back what was written under the same tags."""
        store, _ = create_store()

        written = await store.store("user:1", ["User"], CacheEntry(payload={"id": 1}), TTL)
        entry = await store.lookup("user:1", ["User"])

        assert written is True
        assert entry.payload == {"id": 1}
        assert entry.from_cache is True

    async def test_tags_scope_the_key(self):
        """Should not find an entry under a different tag set."""
        store, _ = create_store()

        await store.store("user:1", ["User"], CacheEntry(payload="scoped"), TTL)

        assert await store.lookup("user:1", ["Admin"]) is None
        assert await store.lookup("user:1", []) is None

    async def test_scope_includes_app_name_first(self):
        store, _ = create_store(app_name="weather")

        assert store.scope(["station:1", "weather", "station:1"]) == ["weather", "station:1"]

    async def test_has_and_forget(self):
        store, _ = create_store()
        await store.store("user:1", ["User"], CacheEntry(payload="x"), TTL)

        assert await store.has("user:1", ["User"]) is True
        assert await store.forget("user:1", ["User"]) is True
        assert await store.has("user:1", ["User"]) is False
        assert await store.forget("user:1", ["User"]) is False

    async def test_corrupt_data_is_a_miss(self):
        """Should treat undecodable data as absent."""
        store, backend = create_store()
        await store.store("user:1", ["User"], CacheEntry(payload="x"), TTL)
        for key in [k for k in list(backend._cache.keys()) if ":tag:" not in k]:
            await backend.set(key, b"\x00not json")

        assert await store.lookup("user:1", ["User"]) is None

    async def test_backend_failure_degrades(self):
        """Should never raise when the backend is unavailable."""
        backend = AsyncMock()
        backend.get.side_effect = ConnectionError("down")
        backend.set.side_effect = ConnectionError("down")
        backend.exists.side_effect = ConnectionError("down")
        backend.delete.side_effect = ConnectionError("down")
        store, _ = create_store(backend=backend)

        assert await store.lookup("k", ["t"]) is None
        assert await store.store("k", ["t"], CacheEntry(payload="x"), TTL) is False
        assert await store.has("k", ["t"]) is False
        assert await store.forget("k", ["t"]) is False
        assert await store.flush(["t"]) == 0


class TestTagInvalidation:
    """Tests for flushing entries by tag."""

    async def test_flush_single_tag(self):
        """Should invalidate entries with the specified tag."""
        store, _ = create_store()
        await store.store("user:1", ["User", "User:1"], CacheEntry(payload="1"), TTL)
        await store.store("user:2", ["User", "User:2"], CacheEntry(payload="2"), TTL)

        flushed = await store.flush(["User:1"])

        assert flushed == 1
        assert await store.lookup("user:1", ["User", "User:1"]) is None
        assert (await store.lookup("user:2", ["User", "User:2"])).payload == "2"

    async def test_flush_shared_tag(self):
        """Should invalidate every entry sharing a tag."""
        store, _ = create_store()
        await store.store("user:1", ["User", "User:1"], CacheEntry(payload="1"), TTL)
        await store.store("user:2", ["User", "User:2"], CacheEntry(payload="2"), TTL)

        await store.flush(["User"])

        assert await store.lookup("user:1", ["User", "User:1"]) is None
        assert await store.lookup("user:2", ["User", "User:2"]) is None

    async def test_flush_app_namespace(self):
        """Should invalidate everything when the namespace tag is flushed."""
        store, _ = create_store(app_name="api")
        await store.store("a", ["x"], CacheEntry(payload="a"), TTL)
        await store.store("b", ["y"], CacheEntry(payload="b"), TTL)

        await store.flush(["api"])

        assert await store.lookup("a", ["x"]) is None
        assert await store.lookup("b", ["y"]) is None

    async def test_writes_after_flush_are_visible(self):
        store, _ = create_store()
        await store.store("user:1", ["User"], CacheEntry(payload="old"), TTL)
        await store.flush(["User"])

        await store.store("user:1", ["User"], CacheEntry(payload="new"), TTL)

        assert (await store.lookup("user:1", ["User"])).payload == "new"

    async def test_lost_tag_marker_never_resurrects(self):
        """Should miss, not serve old data, when a tag marker disappears."""
        store, backend = create_store()
        await store.store("user:1", ["User"], CacheEntry(payload="old"), TTL)

        await backend.delete("test:tag:User")

        assert await store.lookup("user:1", ["User"]) is None

    async def test_service_invalidate(self, cache_service, make_resource):
        """Should recompute a resource after its tag is invalidated."""
        resource = make_resource(tags=["station:1"])
        await cache_service.get(resource)

        await cache_service.invalidate(["station:1"])
        entry = await cache_service.get(resource)

        assert entry.payload == "report#2"
        assert entry.from_cache is False
