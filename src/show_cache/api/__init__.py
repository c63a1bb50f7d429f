"""API routers."""

from show_cache.api.router import api_router

__all__ = ["api_router"]
