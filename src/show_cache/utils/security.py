"""Security utilities for the administrative endpoints."""

import secrets
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from show_cache.config import get_settings


async def require_admin_token(
    x_admin_token: Annotated[str | None, Header()] = None,
) -> None:
    """Check the ``X-Admin-Token`` header against the configured admin token.

    This is a FastAPI dependency guarding the maintenance endpoints.

    Raises:
        HTTPException 503: If no admin token is configured.
        HTTPException 401: If the header is missing or does not match.
    """
    settings = get_settings()
    if not settings.admin_token:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Maintenance endpoints are disabled",
        )

    # Constant-time comparison
    if x_admin_token is None or not secrets.compare_digest(x_admin_token, settings.admin_token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token",
        )


# Type alias for use in route dependencies
AdminToken = Annotated[None, Depends(require_admin_token)]
