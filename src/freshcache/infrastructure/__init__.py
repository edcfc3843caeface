"""Infrastructure layer implementations for freshcache."""

from freshcache.infrastructure.backends import InMemoryCacheBackend
from freshcache.infrastructure.key_builders import DefaultKeyBuilder
from freshcache.infrastructure.serializers import JsonSerializer, PickleSerializer
from freshcache.infrastructure.task_runners import AsyncioTaskRunner

__all__ = [
    "InMemoryCacheBackend",
    "DefaultKeyBuilder",
    "JsonSerializer",
    "PickleSerializer",
    "AsyncioTaskRunner",
]
