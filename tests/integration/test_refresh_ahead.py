"""End-to-end refresh-ahead with a real background runner."""

import asyncio

import pytest

from freshcache import (
    AsyncioTaskRunner,
    CacheConfig,
    CacheService,
    CacheTimes,
    DefaultKeyBuilder,
    InMemoryCacheBackend,
    JsonSerializer,
    RequestCacheOptions,
)


@pytest.fixture
def task_runner() -> AsyncioTaskRunner:
    return AsyncioTaskRunner()


@pytest.fixture
def service(clock, task_runner: AsyncioTaskRunner) -> CacheService:
    return CacheService(
        backend=InMemoryCacheBackend(timer=clock.timestamp),
        key_builder=DefaultKeyBuilder(),
        serializer=JsonSerializer(),
        task_runner=task_runner,
        config=CacheConfig(app_name="weather"),
        clock=clock,
    )


class TestRefreshAhead:
    """Serving stale entries while refreshing them in the background."""

    @pytest.mark.asyncio
    async def test_stale_served_then_refreshed(
        self, service: CacheService, task_runner: AsyncioTaskRunner, clock, make_resource
    ) -> None:
        resource = make_resource(times=CacheTimes(expiration_time=60, update_time=10))

        first = await service.get(resource)
        assert first.payload == "report#1"

        clock.advance(20)
        stale = await service.get(resource)
        again = await service.get(resource)

        # Only the first stale read dispatches; the marker suppresses the second
        assert stale.payload == "report#1"
        assert stale.is_queued
        assert again.is_queued
        assert service.stats["stale"] == 1

        await task_runner.drain()

        fresh = await service.get(resource)
        assert fresh.payload == "report#2"
        assert fresh.queued_at is None
        assert fresh.age(clock()) == 0
        assert resource.compute_calls == 2
        assert task_runner.stats["completed"] == 1

    @pytest.mark.asyncio
    async def test_expired_entry_recomputes_synchronously(
        self, service: CacheService, task_runner: AsyncioTaskRunner, clock, make_resource
    ) -> None:
        resource = make_resource()
        await service.get(resource)

        clock.advance(61)
        entry = await service.get(resource)

        assert entry.payload == "report#2"
        assert entry.from_cache is False
        assert task_runner.pending == 0

    @pytest.mark.asyncio
    async def test_failed_refresh_is_retried_by_next_stale_read(
        self, service: CacheService, task_runner: AsyncioTaskRunner, clock, make_resource
    ) -> None:
        """A failing refresh keeps serving the stale entry and is attempted again."""
        resource = make_resource(times=CacheTimes(expiration_time=3600, update_time=10))
        await service.get(resource)

        resource.error = RuntimeError("database down")
        clock.advance(20)
        await service.get(resource)
        await task_runner.drain()

        assert task_runner.stats["failed"] == 1

        resource.error = None
        clock.advance(60)
        stale = await service.get(resource)

        assert stale.payload == "report#1"
        assert stale.is_queued
        assert service.stats["stale"] == 2

        await task_runner.drain()
        entry = await service.get(resource)

        assert entry.payload == "report#3"
        assert entry.queued_at is None
        assert task_runner.stats["completed"] == 1

    @pytest.mark.asyncio
    async def test_max_age_header_forces_recompute(
        self, service: CacheService, clock, make_resource
    ) -> None:
        resource = make_resource()
        await service.get(resource)
        clock.advance(5)

        resource.options = RequestCacheOptions.from_header("max-age=2")
        entry = await service.get(resource)

        assert entry.payload == "report#2"

    @pytest.mark.asyncio
    async def test_concurrent_stale_reads_dispatch_once(
        self, service: CacheService, task_runner: AsyncioTaskRunner, clock, make_resource
    ) -> None:
        resource = make_resource()
        await service.get(resource)
        clock.advance(20)

        await asyncio.gather(*(service.get(resource) for _ in range(5)))
        await task_runner.drain()

        assert resource.compute_calls == 2
