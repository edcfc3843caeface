"""Single-flight coalescing of concurrent recomputes.

When several coroutines miss on the same key at once, only the first
runs the compute; the others await its result instead of hammering the
producer.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class _LeaderCancelled(Exception):
    """Set on the shared future when the caller running the compute is cancelled."""


def _consume_outcome(future: "asyncio.Future[Any]") -> None:
    # Mark exceptions as retrieved when no waiter awaited the future
    if not future.cancelled():
        future.exception()


class RequestCoalescer:
    """Ensures concurrent callers for the same key share one compute.

    Pattern:
    - The first caller for a key runs the compute
    - Later callers for the same key await the first caller's future
    - When the compute finishes, all waiters receive the same result or
      the same exception

    Waiting is best effort. A waiter that times out computes on its own,
    and if the first caller is cancelled its waiters start over, one of
    them taking its place. Neither case is reported to the waiters.

    Usage:
        coalescer = RequestCoalescer()
        entry = await coalescer.run("report:42", build_report)
    """

    def __init__(self, timeout: float | None = 30.0) -> None:
        """Initialize the coalescer.

        Args:
            timeout: Max seconds a waiter waits for an in-flight compute
                before computing itself. None waits indefinitely.
        """
        self._in_flight: dict[str, asyncio.Future[Any]] = {}
        self._timeout = timeout

    async def run(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Either join the in-flight compute for ``key`` or start one.

        Args:
            key: Identity of the value being computed.
            fn: Coroutine function performing the compute.

        Returns:
            The computed value, usually shared among all concurrent callers.

        Raises:
            Exception: Any error from ``fn`` is propagated to every caller
                that shared the compute.
        """
        while True:
            in_flight = self._in_flight.get(key)
            if in_flight is None:
                return await self._lead(key, fn)

            logger.debug("Coalescing compute for %s", key)
            try:
                return await asyncio.wait_for(asyncio.shield(in_flight), self._timeout)
            except _LeaderCancelled:
                logger.debug("Coalesced compute for %s was abandoned, retrying", key)
            except asyncio.TimeoutError:
                logger.warning(
                    "Timed out after %ss waiting for coalesced compute of %s, "
                    "computing directly",
                    self._timeout,
                    key,
                )
                return await fn()

    async def _lead(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        future.add_done_callback(_consume_outcome)
        self._in_flight[key] = future

        try:
            result = await fn()
        except asyncio.CancelledError:
            # Only this caller was cancelled; release the waiters to retry
            future.set_exception(_LeaderCancelled())
            raise
        except Exception as e:
            future.set_exception(e)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            if self._in_flight.get(key) is future:
                del self._in_flight[key]

    @property
    def active(self) -> int:
        """Number of computes currently in flight."""
        return len(self._in_flight)
