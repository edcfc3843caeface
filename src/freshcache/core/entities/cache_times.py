"""Cache timing thresholds entity."""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class CacheTimes:
    """Freshness thresholds for one kind of cacheable resource.

    All values are in seconds and measured against an entry's age.

    Attributes:
        expiration_time: Age after which the entry is unusable. Also used
            as the store TTL.
        update_time: Age from which a background refresh is dispatched
            while the entry keeps being served.
        min_database_refresh_time: Age below which a synchronous recompute
            is skipped in favour of the existing entry.

    The intended ordering is ``min_database_refresh_time <= update_time <=
    expiration_time``, but it is not enforced: each threshold is compared
    on its own.
    """

    expiration_time: float
    update_time: float
    min_database_refresh_time: float = 0

    def __post_init__(self) -> None:
        for name in ("expiration_time", "update_time", "min_database_refresh_time"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

    @property
    def ttl(self) -> timedelta:
        """Store TTL for freshly written entries."""
        return timedelta(seconds=self.expiration_time)

    @property
    def is_ordered(self) -> bool:
        """Check whether the thresholds follow the intended ordering."""
        return (
            self.min_database_refresh_time
            <= self.update_time
            <= self.expiration_time
        )
