"""Pytest configuration for freshcache tests."""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from freshcache import (
    CacheConfig,
    CacheService,
    CacheTimes,
    DefaultKeyBuilder,
    InMemoryCacheBackend,
    JsonSerializer,
    RequestCacheOptions,
)
from freshcache.exceptions import DispatchError


class FakeClock:
    """Controllable clock shared by the service and the memory backend."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)

    def timestamp(self) -> float:
        return self.current.timestamp()


class StubResource:
    """Cacheable resource recording how often it was computed.

    Each compute returns ``"<payload>#<n>"`` so tests can tell
    successive computes apart.
    """

    def __init__(
        self,
        key: str = "report:1",
        tags: list[str] | None = None,
        times: CacheTimes | None = None,
        options: RequestCacheOptions | None = None,
        payload: str = "report",
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.key = key
        self.tags = tags if tags is not None else ["reports", "report:1"]
        self.times = times or CacheTimes(expiration_time=60, update_time=10)
        self.options = options or RequestCacheOptions()
        self.payload = payload
        self.error = error
        self.gate = gate
        self.compute_calls = 0

    def hash(self) -> str:
        return self.key

    def cache_tags(self) -> list[str]:
        return self.tags

    def cache_times(self) -> CacheTimes:
        return self.times

    def cache_options(self) -> RequestCacheOptions:
        return self.options

    async def compute(self) -> Any:
        self.compute_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return f"{self.payload}#{self.compute_calls}"


class RecordingTaskRunner:
    """Task runner that only records dispatched tasks."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.tasks: list[Any] = []

    async def dispatch(self, task: Any) -> None:
        if self.fail:
            raise DispatchError("runner unavailable")
        self.tasks.append(task)


@pytest.fixture(autouse=True)
def reset_decorator_config():
    """Reset decorator configuration before each test."""
    import freshcache.decorators

    original_service = freshcache.decorators._cache_service

    yield

    freshcache.decorators._cache_service = original_service


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend(clock: FakeClock) -> InMemoryCacheBackend:
    return InMemoryCacheBackend(maxsize=100, timer=clock.timestamp)


@pytest.fixture
def runner() -> RecordingTaskRunner:
    return RecordingTaskRunner()


@pytest.fixture
def config() -> CacheConfig:
    return CacheConfig(app_name="test-app")


@pytest.fixture
def cache_service(
    backend: InMemoryCacheBackend,
    runner: RecordingTaskRunner,
    config: CacheConfig,
    clock: FakeClock,
) -> CacheService:
    """Create a cache service on a fake clock for testing."""
    return CacheService(
        backend=backend,
        key_builder=DefaultKeyBuilder(prefix="test"),
        serializer=JsonSerializer(),
        task_runner=runner,
        config=config,
        clock=clock,
    )


@pytest.fixture
def make_resource() -> Callable[..., StubResource]:
    """Factory for stub resources."""
    return StubResource
