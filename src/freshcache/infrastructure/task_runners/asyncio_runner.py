"""In-process asyncio task runner."""

import asyncio
import logging
from typing import TYPE_CHECKING

from freshcache.exceptions import DispatchError

if TYPE_CHECKING:
    from freshcache.core.services.refresh import RefreshTask

logger = logging.getLogger(__name__)


class AsyncioTaskRunner:
    """Runs refresh tasks as background tasks on the running event loop.

    Dispatch only schedules the task and returns. Strong references to
    pending tasks are kept until they finish, so they are not garbage
    collected mid-flight. Failures are logged; there are no retries.
    """

    def __init__(self, max_pending: int | None = 100) -> None:
        """Initialize the runner.

        Args:
            max_pending: Maximum number of unfinished tasks. Dispatch is
                refused once reached. None means unbounded.
        """
        self._max_pending = max_pending
        self._tasks: set[asyncio.Task[None]] = set()
        self._completed = 0
        self._failed = 0

    @property
    def pending(self) -> int:
        """Number of dispatched tasks that have not finished yet."""
        return len(self._tasks)

    @property
    def stats(self) -> dict[str, int]:
        """Get runner statistics.

        Returns:
            Dictionary with pending, completed and failed task counts.
        """
        return {
            "pending": self.pending,
            "completed": self._completed,
            "failed": self._failed,
        }

    async def dispatch(self, task: "RefreshTask") -> None:
        """Schedule a refresh task on the running loop.

        Raises:
            DispatchError: If the pending limit is reached or no event
                loop is running.
        """
        if self._max_pending is not None and len(self._tasks) >= self._max_pending:
            raise DispatchError(
                f"Refresh queue is full ({self._max_pending} pending tasks)"
            )

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise DispatchError("No running event loop to dispatch refresh on") from e

        background = loop.create_task(self._run(task), name=f"freshcache-refresh:{task.name}")
        self._tasks.add(background)
        background.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait until every pending task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run(self, task: "RefreshTask") -> None:
        try:
            await task.run()
        except Exception:
            self._failed += 1
            logger.exception("Background refresh failed for %s", task.name)
        else:
            self._completed += 1
