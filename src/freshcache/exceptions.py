"""Exceptions raised by freshcache."""


class FreshCacheError(Exception):
    """Base class for all freshcache errors."""


class ComputeError(FreshCacheError):
    """Raised when a resource fails to produce its payload.

    The original exception is always available as ``__cause__``.
    """

    def __init__(self, resource_hash: str, message: str) -> None:
        super().__init__(f"Failed to compute {resource_hash}: {message}")
        self.resource_hash = resource_hash


class DispatchError(FreshCacheError):
    """Raised by a task runner that cannot accept a refresh task."""


class SerializationError(FreshCacheError):
    """Raised when serialization or deserialization fails."""
