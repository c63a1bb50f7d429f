"""Pydantic schemas for request/response validation."""

from show_cache.schemas.external import (
    TMDBCreditsResponse,
    TMDBImagesResponse,
    TMDBPageResponse,
    TMDBShowDetails,
    TMDBShowResult,
    TMDBVideosResponse,
)
from show_cache.schemas.show import (
    AssembledShow,
    CachedShow,
    CastItem,
    ChildCollections,
    ChildKind,
    ImageItem,
    ImageType,
    PruneResult,
    RefreshSummary,
    SeasonItem,
    ShowFields,
    ShowPage,
    ShowStatus,
    ShowSummary,
    VideoItem,
    VideoType,
)

__all__ = [
    # External
    "TMDBCreditsResponse",
    "TMDBImagesResponse",
    "TMDBPageResponse",
    "TMDBShowDetails",
    "TMDBShowResult",
    "TMDBVideosResponse",
    # Show
    "AssembledShow",
    "CachedShow",
    "CastItem",
    "ChildCollections",
    "ChildKind",
    "ImageItem",
    "ImageType",
    "PruneResult",
    "RefreshSummary",
    "SeasonItem",
    "ShowFields",
    "ShowPage",
    "ShowStatus",
    "ShowSummary",
    "VideoItem",
    "VideoType",
]
