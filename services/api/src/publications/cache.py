"""
Time-bounded in-memory cache of extracted publications.

The whole record set is replaced on every reload; there are no partial
updates. Refreshes are not locked: two requests that both find the cache
stale will both reload and the last one to finish wins.
"""

import time
from datetime import datetime
from typing import Callable, List, Optional

from shared.models import CacheStats, Publication
from shared.utils import get_logger

logger = get_logger(__name__)

PublicationLoader = Callable[[], List[Publication]]


class PublicationCache:
    """
    Memoizes one extraction pass for ``ttl_seconds``.

    The loader is called synchronously from ``get()`` whenever the cache is
    empty or expired. Loader errors propagate and leave the previous state
    untouched.
    """

    def __init__(
        self,
        loader: PublicationLoader,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            loader: Callable returning a fresh list of publications
            ttl_seconds: How long a loaded record set stays valid
            clock: Monotonic clock in seconds, injectable for tests
        """
        self.loader = loader
        self.ttl_seconds = ttl_seconds
        self.clock = clock

        self.records: Optional[List[Publication]] = None
        self.last_refresh: Optional[float] = None
        self.last_refresh_at: Optional[datetime] = None

    def is_stale(self) -> bool:
        """Whether the next ``get()`` will reload."""
        if self.records is None or self.last_refresh is None:
            return True
        return self.clock() - self.last_refresh >= self.ttl_seconds

    def get(self) -> List[Publication]:
        """Return cached publications, reloading them if stale."""
        if not self.is_stale():
            return self.records  # type: ignore[return-value]
        return self.refresh()

    def refresh(self) -> List[Publication]:
        """Reload publications unconditionally."""
        started = self.clock()
        records = self.loader()

        self.records = records
        self.last_refresh = self.clock()
        self.last_refresh_at = datetime.utcnow()

        logger.info(
            f"Publication cache refreshed with {len(records)} records",
            extra={"records": len(records), "load_seconds": round(self.last_refresh - started, 4)},
        )
        return records

    def invalidate(self) -> None:
        """Drop cached records so the next ``get()`` reloads."""
        self.records = None
        self.last_refresh = None
        logger.debug("Publication cache invalidated")

    def stats(self) -> CacheStats:
        """Snapshot of the cache state for monitoring."""
        age = None
        if self.last_refresh is not None:
            age = self.clock() - self.last_refresh
        return CacheStats(
            size=len(self.records) if self.records else 0,
            ttl_seconds=self.ttl_seconds,
            last_refresh=self.last_refresh_at,
            age_seconds=age,
            is_stale=self.is_stale(),
        )
