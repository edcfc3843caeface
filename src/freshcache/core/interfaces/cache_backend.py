"""Cache backend interface."""

from datetime import timedelta
from typing import Protocol


class ICacheBackend(Protocol):
    """Byte store underneath the tag-scoped store adapter.

    A backend only knows flat string keys and opaque byte values. It must
    stop returning a key once its TTL has elapsed; nothing above this
    layer deletes expired entries. Implementations may raise on I/O
    failure: the adapter logs the error and degrades to a miss.
    """

    async def get(self, key: str) -> bytes | None:
        """Return the value under ``key``, or None if absent or expired."""
        ...

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Write ``value`` under ``key``, replacing any previous value.

        Args:
            key: The backend key.
            value: The encoded entry or tag version marker.
            ttl: Lifetime of the key. None applies the backend's default.
        """
        ...

    async def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if it was present."""
        ...

    async def exists(self, key: str) -> bool:
        """Check if ``key`` is present and not expired."""
        ...

    async def clear(self) -> None:
        """Remove every key owned by this backend."""
        ...
