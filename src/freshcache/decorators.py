"""Cache decorators for async functions.

These decorators turn coroutine functions into read-through cached
calls, with background refresh, using a configured CacheService.
"""

import functools
import re
from collections.abc import Callable
from typing import Any, TypeVar

from freshcache.core.entities.cache_options import RequestCacheOptions
from freshcache.core.entities.cache_times import CacheTimes
from freshcache.core.services.cache_service import CacheService
from freshcache.resources import CallableResource

F = TypeVar("F", bound=Callable[..., Any])

# Module-level cache service reference
_cache_service: CacheService | None = None


def configure(cache_service: CacheService) -> None:
    """Configure the cache service for decorators.

    Must be called before @cached or @invalidates have any effect.

    Args:
        cache_service: The cache service instance to use.

    Example:
        cache_service = CacheService(
            backend=InMemoryCacheBackend(),
            key_builder=DefaultKeyBuilder(),
            serializer=JsonSerializer(),
        )
        configure(cache_service)
    """
    global _cache_service
    _cache_service = cache_service


def get_cache_service() -> CacheService | None:
    """Get the configured cache service.

    Returns:
        The configured cache service, or None if not configured.
    """
    return _cache_service


def cached(
    times: CacheTimes,
    tags: list[str] | None = None,
    options: RequestCacheOptions | Callable[..., RequestCacheOptions] | None = None,
    key: str | Callable[..., str] | None = None,
) -> Callable[[F], F]:
    """Decorator for read-through caching of async function results.

    The decorated function returns the cached payload. Stale results are
    served while a refresh runs in the background, following ``times``.

    Args:
        times: Freshness thresholds for the cached results.
        tags: Tags for cache invalidation. Supports {arg_name} interpolation.
        options: Request cache options, or a callable receiving the call's
            arguments and returning them.
        key: Custom cache key or function to generate key.
            If string, supports {arg_name} interpolation.
            If callable, receives (*args, **kwargs) and returns key string.

    Returns:
        Decorated function.

    Example:
        @cached(CacheTimes(expiration_time=3600, update_time=300), tags=["User:{id}"])
        async def get_user(id: str) -> dict:
            return await db.get_user(id)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            if _cache_service is None:
                # Cache not configured, execute directly
                return await func(*args, **kwargs)

            resource = CallableResource(
                func=func,
                times=times,
                args=args,
                kwargs=kwargs,
                tags=_resolve_tags(tags, args, kwargs),
                options=_resolve_options(options, args, kwargs),
                key=_resolve_key(key, args, kwargs),
            )

            entry = await _cache_service.get(resource)
            return entry.payload if entry is not None else None

        return wrapper  # type: ignore

    return decorator


def invalidates(
    tags: list[str],
) -> Callable[[F], F]:
    """Decorator for invalidating cache entries after a write.

    Executes the decorated function and then invalidates all cache
    entries stored under the specified tags.

    Args:
        tags: Tags to invalidate. Supports {arg_name} interpolation.

    Returns:
        Decorated function.

    Example:
        @invalidates(tags=["User:{id}"])
        async def update_user(id: str, data: dict) -> dict:
            return await db.update_user(id, data)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            # Execute function first
            result = await func(*args, **kwargs)

            if _cache_service is not None:
                await _cache_service.invalidate(_resolve_tags(tags, args, kwargs))

            return result

        return wrapper  # type: ignore

    return decorator


def _resolve_key(
    key: str | Callable[..., str] | None,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> str | None:
    if key is None:
        return None
    if callable(key):
        return key(*args, **kwargs)
    return _interpolate_string(key, kwargs)


def _resolve_options(
    options: RequestCacheOptions | Callable[..., RequestCacheOptions] | None,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> RequestCacheOptions:
    if options is None:
        return RequestCacheOptions()
    if callable(options):
        return options(*args, **kwargs)
    return options


def _resolve_tags(
    tags: list[str] | None,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> list[str]:
    """Resolve tags with argument interpolation.

    Args:
        tags: Tag patterns with optional {arg} placeholders.
        args: Positional arguments.
        kwargs: Keyword arguments.

    Returns:
        List of resolved tag strings.
    """
    if not tags:
        return []
    return [_interpolate_string(tag, kwargs) for tag in tags]


def _interpolate_string(template: str, kwargs: dict[str, Any]) -> str:
    """Interpolate {arg_name} placeholders from keyword arguments.

    Placeholders without a matching keyword argument are kept as-is.
    """

    def replacer(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in kwargs:
            return str(kwargs[name])
        return match.group(0)

    return re.sub(r"\{(\w+)\}", replacer, template)
