"""Dependencies resolving the collaborators built in the application lifespan."""

from typing import Annotated

from fastapi import Depends, Request

from show_cache.services.maintenance import MaintenanceJobs
from show_cache.services.sync import SyncCoordinator


def get_sync_coordinator(request: Request) -> SyncCoordinator:
    """Return the application's sync coordinator."""
    return request.app.state.sync


def get_maintenance_jobs(request: Request) -> MaintenanceJobs:
    """Return the application's maintenance jobs."""
    return request.app.state.maintenance


Coordinator = Annotated[SyncCoordinator, Depends(get_sync_coordinator)]
Maintenance = Annotated[MaintenanceJobs, Depends(get_maintenance_jobs)]
