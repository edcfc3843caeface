"""JSON serializer implementation."""

import json
from datetime import date, datetime
from typing import Any

from freshcache.exceptions import SerializationError

_DATETIME_MARKER = "__datetime__"
_DATE_MARKER = "__date__"


class _PayloadEncoder(json.JSONEncoder):
    """Encodes temporal values as single-key marker objects."""

    def default(self, o: Any) -> Any:
        # datetime first: it is a subclass of date
        if isinstance(o, datetime):
            return {_DATETIME_MARKER: o.isoformat()}
        if isinstance(o, date):
            return {_DATE_MARKER: o.isoformat()}
        if hasattr(o, "__dict__"):
            return vars(o)
        return super().default(o)


def _decode_markers(obj: dict[str, Any]) -> Any:
    if len(obj) == 1:
        if _DATETIME_MARKER in obj:
            return datetime.fromisoformat(obj[_DATETIME_MARKER])
        if _DATE_MARKER in obj:
            return date.fromisoformat(obj[_DATE_MARKER])
    return obj


class JsonSerializer:
    """JSON serializer for cache entries.

    Payloads must be JSON-compatible. ``datetime`` and ``date`` values
    inside a payload are restored with their types, and plain objects are
    stored as their attribute dicts (and come back as dicts).
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the JSON serializer.

        Args:
            encoding: Character encoding of the stored bytes.
        """
        self._encoding = encoding

    def serialize(self, value: Any) -> bytes:
        """Encode a value as compact JSON bytes.

        Raises:
            SerializationError: If the value is not JSON-compatible.
        """
        try:
            text = json.dumps(
                value,
                cls=_PayloadEncoder,
                ensure_ascii=False,
                separators=(",", ":"),
            )
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize value: {e}") from e
        return text.encode(self._encoding)

    def deserialize(self, data: bytes) -> Any:
        """Decode JSON bytes, restoring temporal values.

        Raises:
            SerializationError: If the data is not valid JSON.
        """
        try:
            return json.loads(data.decode(self._encoding), object_hook=_decode_markers)
        except (UnicodeDecodeError, ValueError) as e:
            raise SerializationError(f"Failed to deserialize data: {e}") from e
