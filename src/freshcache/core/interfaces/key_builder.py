"""Key builder interface."""

from typing import Protocol


class IKeyBuilder(Protocol):
    """Contract for building backend keys for tag-scoped entries."""

    def build(self, resource_hash: str, namespace: str) -> str:
        """Build the backend key for a resource within a tag namespace.

        Args:
            resource_hash: The stable identity of the cached resource.
            namespace: A digest identifying the tag set (and its versions)
                the entry is scoped to.

        Returns:
            The key under which the entry is stored in the backend.
        """
        ...

    def build_tag_key(self, tag: str) -> str:
        """Build the backend key holding the current version of a tag."""
        ...
