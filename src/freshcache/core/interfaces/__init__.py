"""Core interfaces (Protocol classes) for freshcache."""

from freshcache.core.interfaces.cache_backend import ICacheBackend
from freshcache.core.interfaces.cacheable import ICacheable
from freshcache.core.interfaces.key_builder import IKeyBuilder
from freshcache.core.interfaces.serializer import ISerializer
from freshcache.core.interfaces.task_runner import ITaskRunner

__all__ = [
    "ICacheBackend",
    "ICacheable",
    "IKeyBuilder",
    "ISerializer",
    "ITaskRunner",
]
