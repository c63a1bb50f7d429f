"""SQLAlchemy ORM models."""

from show_cache.models.children import ShowCast, ShowImage, ShowSeason, ShowVideo
from show_cache.models.show import Show

__all__ = [
    "Show",
    "ShowCast",
    "ShowImage",
    "ShowSeason",
    "ShowVideo",
]
