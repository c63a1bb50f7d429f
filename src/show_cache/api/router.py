"""Main API router aggregation."""

from fastapi import APIRouter

from show_cache.api.maintenance import router as maintenance_router
from show_cache.api.shows import router as shows_router

# Main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(shows_router)
api_router.include_router(maintenance_router)
