"""Pickle serializer implementation."""

import pickle
from typing import Any

from freshcache.exceptions import SerializationError


class PickleSerializer:
    """Pickle serializer for arbitrary Python payloads.

    Only use with stores that untrusted parties cannot write to:
    unpickling executes code embedded in the data.
    """

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self._protocol = protocol

    def serialize(self, value: Any) -> bytes:
        try:
            return pickle.dumps(value, protocol=self._protocol)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise SerializationError(f"Failed to serialize value: {e}") from e

    def deserialize(self, data: bytes) -> Any:
        try:
            return pickle.loads(data)
        except (
            pickle.UnpicklingError,
            EOFError,
            AttributeError,
            ImportError,
            IndexError,
            ValueError,
        ) as e:
            raise SerializationError(f"Failed to deserialize data: {e}") from e
