"""Show API endpoints."""

from fastapi import APIRouter, Query

from show_cache.api.deps import Coordinator
from show_cache.schemas.show import AssembledShow, ShowPage

router = APIRouter(prefix="/shows", tags=["shows"])


@router.get("/search", response_model=ShowPage)
async def search_shows(
    sync: Coordinator,
    query: str = Query(..., min_length=1, description="Search query for shows"),
    page: int = Query(1, ge=1, le=500, description="Page number"),
) -> ShowPage:
    """Search for shows on TMDB.

    Search always hits TMDB so relevance reflects live data.
    """
    return await sync.search(query, page)


@router.get("/popular", response_model=ShowPage)
async def list_popular_shows(
    sync: Coordinator,
    page: int = Query(1, ge=1, le=500, description="Page number"),
) -> ShowPage:
    """List popular shows.

    Served from the cache when it holds the page; otherwise from TMDB, with
    the top results cached in the background.
    """
    return await sync.list_popular(page)


@router.get("/trending", response_model=ShowPage)
async def list_trending_shows(sync: Coordinator) -> ShowPage:
    """List this week's trending shows."""
    return await sync.list_trending()


@router.get("/{tmdb_id}", response_model=AssembledShow)
async def get_show(
    tmdb_id: int,
    sync: Coordinator,
    force_refresh: bool = Query(False, description="Bypass the cache and refresh from TMDB"),
) -> AssembledShow:
    """Get a show with its cast, videos, seasons and images.

    Fresh cached data is returned as is. Stale or missing data is refreshed
    from TMDB; if TMDB fails, previously cached data is returned instead.
    """
    return await sync.get_show(tmdb_id, force_refresh=force_refresh)
