"""Serializer implementations."""

from freshcache.infrastructure.serializers.json import JsonSerializer
from freshcache.infrastructure.serializers.pickle import PickleSerializer

__all__ = ["JsonSerializer", "PickleSerializer"]
