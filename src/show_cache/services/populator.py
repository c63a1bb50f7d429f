"""Fire-and-forget population of the cache from listing responses."""

import asyncio
import logging
from collections.abc import Sequence

from show_cache.schemas.external import TMDBShowResult
from show_cache.schemas.show import ShowFields
from show_cache.services.store import CacheStore

logger = logging.getLogger(__name__)


class BackgroundPopulator:
    """Seeds the store with the top entries of listing responses.

    Each call to :meth:`populate` schedules one detached task. The task is
    not tied to the request that triggered it; it is only awaited by
    :meth:`join` at shutdown.
    """

    def __init__(self, store: CacheStore, top_n: int = 10) -> None:
        self._store = store
        self._top_n = top_n
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of population tasks still running."""
        return len(self._tasks)

    def populate(self, items: Sequence[TMDBShowResult]) -> None:
        """Schedule persistence of the first ``top_n`` items and return immediately."""
        batch = list(items[: self._top_n])
        if not batch:
            return

        task = asyncio.create_task(self._persist(batch), name=f"populate-{batch[0].id}")
        # Strong reference until done; the event loop only keeps weak ones
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    async def _persist(self, batch: list[TMDBShowResult]) -> None:
        stored = 0
        for item in batch:
            try:
                await self._store.upsert_entity(item.id, ShowFields.from_summary(item))
            except Exception as e:
                logger.warning("Failed to cache show %s from listing: %s", item.id, e)
            else:
                stored += 1
        logger.info("Background population stored %d of %d shows", stored, len(batch))

    def _on_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Background population task %s was cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background population task %s failed", task.get_name(), exc_info=exc)

    async def join(self) -> None:
        """Wait for every scheduled population task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
