"""Task runner interface."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from freshcache.core.services.refresh import RefreshTask


class ITaskRunner(Protocol):
    """Contract for runners executing background refresh tasks.

    ``dispatch`` must return as soon as the task is accepted; running it
    to completion, retrying and cancelling are the runner's concern.
    """

    async def dispatch(self, task: "RefreshTask") -> None:
        """Accept a refresh task for background execution.

        Args:
            task: The refresh task to run.

        Raises:
            DispatchError: If the task cannot be accepted.
        """
        ...
