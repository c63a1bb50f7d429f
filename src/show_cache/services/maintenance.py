"""Administrative maintenance jobs for the show cache."""

import logging
from datetime import timedelta

from show_cache.schemas.show import RefreshSummary
from show_cache.services.base import OriginError
from show_cache.services.store import CacheStore, StorageError
from show_cache.services.sync import SyncCoordinator

logger = logging.getLogger(__name__)


class MaintenanceJobs:
    """Bounded batch jobs run on demand, outside the request hot path."""

    def __init__(self, coordinator: SyncCoordinator, store: CacheStore) -> None:
        self._coordinator = coordinator
        self._store = store

    async def refresh_stale(self, max_age: timedelta, limit: int) -> RefreshSummary:
        """Force a refresh of up to ``limit`` stale shows, one at a time.

        Individual failures are counted, never raised.
        """
        summary = RefreshSummary()
        for tmdb_id in await self._store.list_stale(max_age, limit):
            summary.attempted += 1
            try:
                await self._coordinator.get_show(tmdb_id, force_refresh=True)
            except (OriginError, StorageError) as e:
                summary.failed += 1
                logger.warning("Failed to refresh show %s: %s", tmdb_id, e)
            else:
                summary.succeeded += 1

        logger.info(
            "Refreshed stale shows: %d attempted, %d succeeded, %d failed",
            summary.attempted,
            summary.succeeded,
            summary.failed,
        )
        return summary

    async def prune(self, max_age: timedelta) -> int:
        """Delete shows not refreshed within ``max_age`` and return how many were removed."""
        deleted = await self._store.delete_older_than(max_age)
        logger.info("Pruned %d shows older than %s", deleted, max_age)
        return deleted
