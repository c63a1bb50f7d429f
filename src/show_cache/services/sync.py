"""Read-through synchronisation between TMDB and the local cache store.

``SyncCoordinator.get_show`` moves through these states for every call::

    cache check --fresh--> return cached
        |
        +--missing/stale/forced--> origin fetch --ok--> persist --> re-read --> return
                                        |
                                        +--failed--> cached? return stale : raise

Child collections are fetched concurrently and persisted independently: a
failed fetch or write for one collection keeps what was cached before for
that collection and never fails the call.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable, Sequence
from datetime import timedelta
from typing import TYPE_CHECKING, Any, TypeVar

from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception, stop_after_attempt

from show_cache.models.show import utcnow
from show_cache.schemas.external import TMDBPageResponse, TMDBShowDetails
from show_cache.schemas.show import (
    AssembledShow,
    ChildItem,
    ChildKind,
    SeasonItem,
    ShowFields,
    ShowPage,
    ShowSummary,
)
from show_cache.services.base import OriginError, is_transient
from show_cache.services.staleness import DEFAULT_MAX_AGE, needs_refresh
from show_cache.services.store import StorageError

if TYPE_CHECKING:
    from show_cache.config import Settings
    from show_cache.models import Show
    from show_cache.services.populator import BackgroundPopulator
    from show_cache.services.store import CacheStore
    from show_cache.services.tmdb import TMDBClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Collections fetched from their own TMDB endpoints; seasons come with the show details
FETCHED_KINDS = (ChildKind.CAST, ChildKind.VIDEOS, ChildKind.IMAGES)


class SyncCoordinator:
    """Serves shows from the cache, refreshing them from TMDB when stale."""

    def __init__(
        self,
        origin: TMDBClient,
        store: CacheStore,
        populator: BackgroundPopulator,
        *,
        max_age: timedelta = DEFAULT_MAX_AGE,
        origin_attempts: int = 2,
        page_size: int = 20,
        cast_limit: int = 20,
        video_limit: int = 10,
        image_limit: int = 10,
        single_flight: bool = False,
    ) -> None:
        self._origin = origin
        self._store = store
        self._populator = populator
        self._max_age = max_age
        self._origin_attempts = origin_attempts
        self._page_size = page_size
        self._limits: dict[ChildKind, int] = {
            ChildKind.CAST: cast_limit,
            ChildKind.VIDEOS: video_limit,
            ChildKind.IMAGES: image_limit,
        }
        self._single_flight = single_flight
        self._in_flight: dict[int, asyncio.Task[AssembledShow]] = {}

    @classmethod
    def from_settings(
        cls,
        origin: TMDBClient,
        store: CacheStore,
        populator: BackgroundPopulator,
        settings: Settings,
    ) -> SyncCoordinator:
        """Build a coordinator configured from application settings."""
        return cls(
            origin,
            store,
            populator,
            max_age=timedelta(days=settings.show_max_age_days),
            origin_attempts=settings.origin_attempts,
            page_size=settings.listing_page_size,
            cast_limit=settings.cast_limit,
            video_limit=settings.video_limit,
            image_limit=settings.image_limit,
            single_flight=settings.single_flight,
        )

    async def _call_origin(self, call: Callable[..., Awaitable[T]], *args: Any) -> T:
        """Call the origin with one bounded retry and no backoff for transient failures."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._origin_attempts),
            retry=retry_if_exception(is_transient),
            before_sleep=before_sleep_log(logger, logging.INFO),
            reraise=True,
        )
        return await retrying(call, *args)

    async def _assemble(self, show: Show, *, cached: bool) -> AssembledShow:
        children = await self._store.read_child_collections(show.id)
        return AssembledShow.assemble(show, children, cached=cached)

    async def get_show(self, tmdb_id: int, force_refresh: bool = False) -> AssembledShow:
        """Return a show with its child collections.

        Args:
            tmdb_id: TMDB show ID.
            force_refresh: Skip the cache and refresh from TMDB. A forced
                refresh has no cached fallback, so origin failures surface.

        Raises:
            NotFoundError: If nothing is cached and TMDB does not know the show.
            OriginError: If nothing is cached and TMDB is unavailable.
            StorageError: If the refreshed show could not be stored.
        """
        cached: Show | None = None
        if not force_refresh:
            cached = await self._store.read_entity(tmdb_id)
            if cached is not None and not needs_refresh(cached.last_refreshed_at, self._max_age):
                return await self._assemble(cached, cached=True)

        # Fallback is decided per caller; only the refresh itself is shared
        try:
            return await self._shared_refresh(tmdb_id)
        except OriginError as e:
            if cached is not None:
                logger.warning("Serving stale show %s, refresh from TMDB failed: %s", tmdb_id, e)
                return await self._assemble(cached, cached=True)
            logger.warning("Show %s could not be refreshed from TMDB: %s", tmdb_id, e)
            raise

    async def _shared_refresh(self, tmdb_id: int) -> AssembledShow:
        if not self._single_flight:
            return await self._refresh(tmdb_id)

        task = self._in_flight.get(tmdb_id)
        if task is None:
            task = asyncio.create_task(self._refresh(tmdb_id), name=f"refresh-{tmdb_id}")
            self._in_flight[tmdb_id] = task
            task.add_done_callback(lambda done: self._forget(tmdb_id, done))
        else:
            logger.debug("Joining in-flight refresh of show %s", tmdb_id)
        return await asyncio.shield(task)

    def _forget(self, tmdb_id: int, task: asyncio.Task[AssembledShow]) -> None:
        if self._in_flight.get(tmdb_id) is task:
            del self._in_flight[tmdb_id]

    async def _refresh(self, tmdb_id: int) -> AssembledShow:
        """Fetch a show from TMDB, store it and return what was stored.

        Raises:
            OriginError: If the show details could not be fetched.
        """
        details = await self._call_origin(self._origin.get_show, tmdb_id)

        collections = await self._fetch_children(tmdb_id, details)
        show_id = await self._persist_show(tmdb_id, details)
        await self._persist_children(show_id, tmdb_id, collections)

        # Re-read so the response is exactly what is stored, including kept collections
        show = await self._store.read_entity(tmdb_id)
        if show is None:
            raise StorageError(f"Show {tmdb_id} disappeared after it was stored")
        return await self._assemble(show, cached=False)

    async def _fetch_children(
        self, tmdb_id: int, details: TMDBShowDetails
    ) -> dict[ChildKind, Sequence[ChildItem]]:
        """Fetch every child collection, settling all requests before inspecting any."""
        outcomes = await asyncio.gather(
            *(
                self._call_origin(
                    self._origin.get_child_collection, tmdb_id, kind, self._limits[kind]
                )
                for kind in FETCHED_KINDS
            ),
            return_exceptions=True,
        )

        collections: dict[ChildKind, Sequence[ChildItem]] = {
            ChildKind.SEASONS: [
                SeasonItem.from_tmdb(season, position)
                for position, season in enumerate(details.seasons)
            ],
        }
        for kind, outcome in zip(FETCHED_KINDS, outcomes, strict=True):
            if isinstance(outcome, OriginError):
                logger.warning(
                    "Keeping cached %s for show %s, fetch failed: %s", kind.value, tmdb_id, outcome
                )
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                collections[kind] = outcome
        return collections

    async def _persist_show(self, tmdb_id: int, details: TMDBShowDetails) -> int:
        """Upsert the show row and return its authoritative internal id."""
        show_id = await self._store.upsert_entity(
            tmdb_id, ShowFields.from_details(details), refreshed_at=utcnow()
        )
        if show_id is None:
            # A racing insert can leave the upsert without a returned id
            show_id = await self._store.resolve_internal_id(tmdb_id)
        if show_id is None:
            raise StorageError(f"Could not resolve the stored id of show {tmdb_id}")
        return show_id

    async def _persist_children(
        self,
        show_id: int,
        tmdb_id: int,
        collections: dict[ChildKind, Sequence[ChildItem]],
    ) -> None:
        """Replace each fetched collection; a failed write keeps the previous rows."""
        kinds = list(collections)
        results = await asyncio.gather(
            *(
                self._store.replace_child_collection(show_id, kind, collections[kind])
                for kind in kinds
            ),
            return_exceptions=True,
        )
        for kind, result in zip(kinds, results, strict=True):
            if isinstance(result, StorageError):
                logger.warning("Failed to store %s for show %s: %s", kind.value, tmdb_id, result)
            elif isinstance(result, BaseException):
                raise result

    def _page_from_origin(self, response: TMDBPageResponse) -> ShowPage:
        return ShowPage(
            page=response.page,
            total_pages=response.total_pages,
            total_results=response.total_results,
            results=[ShowSummary.from_tmdb(result) for result in response.results],
            source="origin",
        )

    async def _page_from_cache(self, page: int) -> ShowPage | None:
        shows, total = await self._store.list_popular(page, self._page_size)
        if not shows:
            return None
        return ShowPage(
            page=page,
            total_pages=math.ceil(total / self._page_size),
            total_results=total,
            results=[ShowSummary.from_cached(show) for show in shows],
            source="cache",
        )

    async def search(self, query: str, page: int = 1) -> ShowPage:
        """Search TMDB. Results always reflect live data and are never cached."""
        response = await self._call_origin(self._origin.search_shows, query, page)
        return self._page_from_origin(response)

    async def list_popular(self, page: int = 1) -> ShowPage:
        """List popular shows, from the cache when it has this page.

        When TMDB answers instead, the top of the page is cached in the
        background without delaying the response.
        """
        cached_page = await self._page_from_cache(page)
        if cached_page is not None:
            return cached_page

        response = await self._call_origin(self._origin.get_popular, page)
        self._populator.populate(response.results)
        return self._page_from_origin(response)

    async def list_trending(self) -> ShowPage:
        """List this week's trending shows from TMDB.

        The cache has no notion of trending, so it is only used as a fallback
        (by popularity) while TMDB is unavailable.
        """
        try:
            response = await self._call_origin(self._origin.get_trending)
        except OriginError as e:
            cached_page = await self._page_from_cache(1)
            if cached_page is None:
                raise
            logger.warning("Serving cached popular shows instead of trending: %s", e)
            return cached_page

        self._populator.populate(response.results)
        return self._page_from_origin(response)
