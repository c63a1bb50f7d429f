"""Origin client, cache store and synchronisation services."""

from show_cache.services.base import (
    BaseAPIClient,
    NotFoundError,
    OriginError,
    RateLimitError,
)
from show_cache.services.maintenance import MaintenanceJobs
from show_cache.services.populator import BackgroundPopulator
from show_cache.services.staleness import needs_refresh
from show_cache.services.store import CacheStore, StorageError
from show_cache.services.sync import SyncCoordinator
from show_cache.services.tmdb import TMDBClient, get_tmdb_client

__all__ = [
    "BackgroundPopulator",
    "BaseAPIClient",
    "CacheStore",
    "MaintenanceJobs",
    "NotFoundError",
    "OriginError",
    "RateLimitError",
    "StorageError",
    "SyncCoordinator",
    "TMDBClient",
    "get_tmdb_client",
    "needs_refresh",
]
