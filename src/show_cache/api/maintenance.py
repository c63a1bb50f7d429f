"""Maintenance API endpoints (admin only)."""

from datetime import timedelta

from fastapi import APIRouter, Query

from show_cache.api.deps import Maintenance
from show_cache.config import get_settings
from show_cache.schemas.show import PruneResult, RefreshSummary
from show_cache.utils.security import AdminToken

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@router.post("/refresh-stale", response_model=RefreshSummary)
async def refresh_stale_shows(
    _admin: AdminToken,
    jobs: Maintenance,
    max_age_days: int | None = Query(None, ge=0, description="Refresh shows older than this"),
    limit: int | None = Query(None, ge=1, le=500, description="Maximum shows to refresh"),
) -> RefreshSummary:
    """Refresh a bounded batch of stale shows from TMDB."""
    settings = get_settings()
    if max_age_days is None:
        max_age_days = settings.maintenance_max_age_days
    if limit is None:
        limit = settings.refresh_batch_limit

    return await jobs.refresh_stale(timedelta(days=max_age_days), limit)


@router.post("/prune", response_model=PruneResult)
async def prune_shows(
    _admin: AdminToken,
    jobs: Maintenance,
    max_age_days: int | None = Query(None, ge=1, description="Delete shows older than this"),
) -> PruneResult:
    """Delete shows that have not been refreshed for a long time."""
    if max_age_days is None:
        max_age_days = get_settings().prune_max_age_days

    deleted = await jobs.prune(timedelta(days=max_age_days))
    return PruneResult(deleted=deleted)
