"""Task runner implementations."""

from freshcache.infrastructure.task_runners.asyncio_runner import AsyncioTaskRunner

__all__ = ["AsyncioTaskRunner"]
