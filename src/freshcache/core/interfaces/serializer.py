"""Serializer interface."""

from typing import Any, Protocol


class ISerializer(Protocol):
    """Encodes persisted cache entries for a byte-oriented backend.

    The store hands over the mapping produced by ``CacheEntry.to_dict``,
    so a serializer must preserve the payload exactly and round-trip the
    ISO timestamp strings. Failures are reported as SerializationError,
    which the store treats as a miss on read and a dropped write on store.
    """

    def serialize(self, value: dict[str, Any]) -> bytes: ...

    def deserialize(self, data: bytes) -> dict[str, Any]: ...
