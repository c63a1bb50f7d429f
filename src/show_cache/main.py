"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from show_cache import __version__
from show_cache.api import api_router
from show_cache.config import get_settings
from show_cache.database import async_session, engine, init_models
from show_cache.services.base import NotFoundError, OriginError, RateLimitError
from show_cache.services.maintenance import MaintenanceJobs
from show_cache.services.populator import BackgroundPopulator
from show_cache.services.store import CacheStore, StorageError
from show_cache.services.sync import SyncCoordinator
from show_cache.services.tmdb import get_tmdb_client

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - builds the cache collaborators on startup."""
    # Startup
    logger.info("Starting %s v%s", settings.app_name, __version__)
    logger.info("Debug mode: %s", settings.debug)
    logger.info("Database: %s", settings.database_url.split("///")[-1])  # Hide path details
    logger.info("Show max age: %d days", settings.show_max_age_days)

    # Validate and log warnings
    warnings = settings.validate_runtime_config()
    if warnings:
        logger.warning("Configuration warnings:")
        for warning in warnings:
            logger.warning("  - %s", warning)
    else:
        logger.info("Configuration validation passed - no warnings")

    if settings.create_tables:
        await init_models(engine)

    tmdb_client = await get_tmdb_client()
    store = CacheStore(async_session)
    populator = BackgroundPopulator(store, top_n=settings.populate_top_n)
    app.state.sync = SyncCoordinator.from_settings(tmdb_client, store, populator, settings)
    app.state.maintenance = MaintenanceJobs(app.state.sync, store)

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Application shutting down")
    if populator.pending:
        logger.info("Waiting for %d background population tasks", populator.pending)
    await populator.join()
    await tmdb_client.close()
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(NotFoundError)
async def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle NotFoundError exceptions globally."""
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc) or "Resource not found"},
    )


@app.exception_handler(RateLimitError)
async def rate_limit_error_handler(_request: Request, exc: RateLimitError) -> JSONResponse:
    """Handle RateLimitError exceptions globally."""
    headers = {}
    if exc.retry_after:
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse(
        status_code=429,
        content={"detail": str(exc) or "Rate limit exceeded"},
        headers=headers,
    )


@app.exception_handler(OriginError)
async def origin_error_handler(_request: Request, exc: OriginError) -> JSONResponse:
    """Handle OriginError exceptions globally.

    An error answer from TMDB is a bad gateway; no answer at all means the
    show is temporarily unavailable.
    """
    return JSONResponse(
        status_code=502 if exc.status_code else 503,
        content={"detail": str(exc) or "External API error"},
    )


@app.exception_handler(StorageError)
async def storage_error_handler(_request: Request, exc: StorageError) -> JSONResponse:
    """Handle StorageError exceptions globally."""
    logger.error("Storage failure: %s", exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Cache storage unavailable"},
    )


# Include API router
app.include_router(api_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the API is running."""
    return {"status": "healthy", "version": __version__}
