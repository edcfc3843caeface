"""Ready-made cacheable resources."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from freshcache.core.entities.cache_options import RequestCacheOptions
from freshcache.core.entities.cache_times import CacheTimes
from freshcache.infrastructure.key_builders.default import DefaultKeyBuilder


@dataclass
class CallableResource:
    """A cacheable resource backed by an async function call.

    Lets plain coroutine functions be cached without writing a dedicated
    ICacheable implementation.

    Example:
        resource = CallableResource(
            func=fetch_forecast,
            kwargs={"city": "Fortaleza"},
            times=CacheTimes(expiration_time=3600, update_time=600),
            tags=["forecast", "forecast:Fortaleza"],
        )
        entry = await cache_service.get(resource)
    """

    func: Callable[..., Awaitable[Any]]
    times: CacheTimes
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    options: RequestCacheOptions = field(default_factory=RequestCacheOptions)
    key: str | None = None

    def hash(self) -> str:
        if self.key is not None:
            return self.key
        return DefaultKeyBuilder().build_call_key(self.func, self.args, self.kwargs)

    def cache_tags(self) -> list[str]:
        return list(self.tags)

    def cache_times(self) -> CacheTimes:
        return self.times

    def cache_options(self) -> RequestCacheOptions:
        return self.options

    async def compute(self) -> Any:
        return await self.func(*self.args, **self.kwargs)
