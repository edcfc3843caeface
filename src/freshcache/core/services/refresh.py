"""Background refresh task."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from freshcache.core.entities.cache_entry import CacheEntry
from freshcache.core.interfaces.cacheable import ICacheable
from freshcache.exceptions import ComputeError

if TYPE_CHECKING:
    from freshcache.core.services.cache_service import CacheService

logger = logging.getLogger(__name__)


@dataclass
class RefreshTask:
    """Recomputes a resource and commits the result to the store.

    Handed to an ITaskRunner when a served entry is past its update time.
    Running it replaces the stored entry, which also clears its
    ``queued_at`` marker. If the compute fails, the ``stale`` entry is
    put back unmarked so a later read can dispatch again.
    """

    service: "CacheService"
    resource: ICacheable
    stale: CacheEntry | None = None

    @property
    def name(self) -> str:
        return self.resource.hash()

    async def run(self) -> CacheEntry:
        """Compute a fresh entry and write it to the store.

        Returns:
            The freshly stored entry.

        Raises:
            ComputeError: If the resource fails to compute.
        """
        try:
            entry = await self.service.compute_entry(self.resource)
        except ComputeError:
            if self.stale is not None and await self.service.release_refresh(
                self.resource, self.stale
            ):
                logger.info("Released refresh marker for %s after failure", self.name)
            raise

        stored = await self.service.update_cache(self.resource, entry, now=entry.cached_at)
        logger.info("Refreshed cache entry for %s", self.name)
        return stored
