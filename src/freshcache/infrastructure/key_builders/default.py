"""Default key builder implementation."""

from collections.abc import Callable
from typing import Any

from freshcache.utils.hashing import hash_value


class DefaultKeyBuilder:
    """Default key builder using a prefix and SHA-256 digests.

    Produces ``<prefix>:<namespace>:<resource hash>`` for entries and
    ``<prefix>:tag:<tag>`` for tag version markers.
    """

    def __init__(self, prefix: str = "freshcache") -> None:
        """Initialize the key builder.

        Args:
            prefix: Prefix for all cache keys.
        """
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        """Return the key prefix."""
        return self._prefix

    def build(self, resource_hash: str, namespace: str) -> str:
        """Build the backend key for a resource within a tag namespace.

        Args:
            resource_hash: The stable identity of the cached resource.
            namespace: Digest of the tag set the entry is scoped to.

        Returns:
            The backend key.
        """
        return ":".join([self._prefix, namespace, resource_hash])

    def build_tag_key(self, tag: str) -> str:
        """Build the backend key holding the current version of a tag."""
        return f"{self._prefix}:tag:{tag}"

    def build_call_key(
        self,
        func: Callable[..., Any],
        args: tuple[Any, ...] | None = None,
        kwargs: dict[str, Any] | None = None,
    ) -> str:
        """Build a resource hash for a function call.

        Args:
            func: The function being cached.
            args: Positional arguments of the call.
            kwargs: Keyword arguments of the call.

        Returns:
            A key made of the function's qualified name and an
            argument digest.
        """
        module = getattr(func, "__module__", None) or "default"
        name = getattr(func, "__qualname__", None) or getattr(func, "__name__", "call")
        parts = [f"{module}.{name}"]

        if args or kwargs:
            parts.append(f"a:{hash_value({'args': list(args or ()), 'kwargs': kwargs or {}})}")

        return ":".join(parts)
