"""Cache backend implementations.

``RedisCacheBackend`` needs the optional ``redis`` dependency and is
imported from ``freshcache.infrastructure.backends.redis_backend``.
"""

from freshcache.infrastructure.backends.memory import InMemoryCacheBackend

__all__ = ["InMemoryCacheBackend"]
