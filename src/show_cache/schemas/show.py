"""Pydantic schemas for cached shows and their child collections.

TMDB payloads are mapped into these records exactly once, here. Defaults for
missing origin values are applied at this boundary so the store and the
coordinator never deal with loosely typed payloads.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from show_cache.schemas.external import (
    TMDBCastMember,
    TMDBImage,
    TMDBSeason,
    TMDBShowDetails,
    TMDBShowResult,
    TMDBVideo,
)


class ShowStatus(str, Enum):
    """Production status of a show."""

    RETURNING = "Returning Series"
    PLANNED = "Planned"
    IN_PRODUCTION = "In Production"
    ENDED = "Ended"
    CANCELED = "Canceled"
    PILOT = "Pilot"
    UNKNOWN = "Unknown"

    @classmethod
    def from_tmdb(cls, value: str | None) -> ShowStatus:
        """Map a TMDB status string, falling back to UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class VideoType(str, Enum):
    """Kind of video."""

    TRAILER = "trailer"
    TEASER = "teaser"
    OTHER = "other"

    @classmethod
    def from_tmdb(cls, value: str | None) -> VideoType:
        """Map a TMDB video type ("Trailer", "Teaser", "Clip", ...)."""
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.OTHER


class ImageType(str, Enum):
    """Kind of image."""

    BACKDROP = "backdrop"
    POSTER = "poster"
    LOGO = "logo"


class ChildKind(str, Enum):
    """Child collections owned by a show."""

    CAST = "cast"
    VIDEOS = "videos"
    SEASONS = "seasons"
    IMAGES = "images"


def _unique(values: list) -> list:
    return list(dict.fromkeys(values))


class ShowFields(BaseModel):
    """Scalar fields of a show as written to the store.

    Only the fields that were explicitly set are written on update, so a
    partial record (built from a listing summary) never clears detail-only
    columns of an existing row.
    """

    model_config = ConfigDict(use_enum_values=True)

    title: str
    original_title: str | None = None
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    first_air_date: date | None = None
    last_air_date: date | None = None
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    status: ShowStatus = ShowStatus.UNKNOWN
    number_of_episodes: int | None = None
    number_of_seasons: int | None = None
    genre_ids: list[int] = Field(default_factory=list)
    origin_country: list[str] = Field(default_factory=list)
    original_language: str | None = None
    episode_run_time: int | None = None
    homepage: str | None = None
    tagline: str | None = None

    @classmethod
    def from_details(cls, details: TMDBShowDetails) -> ShowFields:
        """Build the full record from a show details payload."""
        return cls(
            title=details.name or details.original_name or "",
            original_title=details.original_name,
            overview=details.overview,
            poster_path=details.poster_path,
            backdrop_path=details.backdrop_path,
            first_air_date=details.first_air_date,
            last_air_date=details.last_air_date,
            vote_average=details.vote_average,
            vote_count=details.vote_count,
            popularity=details.popularity,
            status=ShowStatus.from_tmdb(details.status),
            number_of_episodes=details.number_of_episodes,
            number_of_seasons=details.number_of_seasons,
            genre_ids=_unique([genre.id for genre in details.genres]),
            origin_country=_unique(details.origin_country),
            original_language=details.original_language,
            episode_run_time=details.episode_run_time[0] if details.episode_run_time else None,
            homepage=details.homepage or None,
            tagline=details.tagline or None,
        )

    @classmethod
    def from_summary(cls, result: TMDBShowResult) -> ShowFields:
        """Build a partial record from a listing or search result."""
        return cls(
            title=result.name or result.original_name or "",
            original_title=result.original_name,
            overview=result.overview,
            poster_path=result.poster_path,
            backdrop_path=result.backdrop_path,
            first_air_date=result.first_air_date,
            vote_average=result.vote_average,
            vote_count=result.vote_count,
            popularity=result.popularity,
            genre_ids=_unique(result.genre_ids),
            origin_country=_unique(result.origin_country),
        )

    def to_values(self) -> dict:
        """Column values for the fields that were explicitly set."""
        return self.model_dump(exclude_unset=True)


class CastItem(BaseModel):
    """A cast member of a show."""

    model_config = ConfigDict(from_attributes=True)

    tmdb_person_id: int = Field(description="TMDB person ID")
    name: str = Field(description="Person's name")
    character: str | None = Field(default=None, description="Character name")
    profile_path: str | None = Field(default=None, description="Profile image path")
    position: int = Field(default=0, description="Display order")

    @classmethod
    def from_tmdb(cls, member: TMDBCastMember, position: int) -> CastItem:
        return cls(
            tmdb_person_id=member.id,
            name=member.name,
            character=member.character,
            profile_path=member.profile_path,
            position=position,
        )


class VideoItem(BaseModel):
    """A video of a show."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    tmdb_video_id: str = Field(description="TMDB video ID")
    key: str | None = Field(default=None, description="Site-specific video key")
    site: str | None = Field(default=None, description="Hosting site")
    video_type: VideoType = Field(default=VideoType.OTHER, description="Video type")
    name: str | None = Field(default=None, description="Video title")
    size: int | None = Field(default=None, description="Resolution")
    official: bool = Field(default=False, description="Whether the video is official")
    published_at: datetime | None = Field(default=None, description="Publish timestamp")
    position: int = Field(default=0, description="Display order, trailers and teasers first")

    @classmethod
    def from_tmdb(cls, video: TMDBVideo, position: int) -> VideoItem:
        return cls(
            tmdb_video_id=video.id,
            key=video.key,
            site=video.site,
            video_type=VideoType.from_tmdb(video.type),
            name=video.name,
            size=video.size,
            official=video.official,
            published_at=video.published_at,
            position=position,
        )


class SeasonItem(BaseModel):
    """A season of a show."""

    model_config = ConfigDict(from_attributes=True)

    tmdb_season_id: int | None = Field(default=None, description="TMDB season ID")
    season_number: int = Field(description="Season number (0 for specials)")
    name: str | None = Field(default=None, description="Season name")
    overview: str | None = Field(default=None, description="Season overview")
    episode_count: int = Field(default=0, description="Number of episodes")
    air_date: date | None = Field(default=None, description="Air date")
    poster_path: str | None = Field(default=None, description="Poster image path")
    position: int = Field(default=0, description="Order in the origin response")

    @classmethod
    def from_tmdb(cls, season: TMDBSeason, position: int) -> SeasonItem:
        return cls(
            tmdb_season_id=season.id,
            season_number=season.season_number,
            name=season.name,
            overview=season.overview,
            episode_count=season.episode_count,
            air_date=season.air_date,
            poster_path=season.poster_path,
            position=position,
        )


class ImageItem(BaseModel):
    """An image of a show."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    image_type: ImageType = Field(description="Backdrop, poster or logo")
    file_path: str = Field(description="Image path")
    width: int = Field(default=0, description="Width in pixels")
    height: int = Field(default=0, description="Height in pixels")
    aspect_ratio: float = Field(default=0.0, description="Aspect ratio")
    vote_average: float = Field(default=0.0, description="Average vote score")
    position: int = Field(default=0, description="Order in the origin response")

    @classmethod
    def from_tmdb(cls, image: TMDBImage, image_type: ImageType, position: int) -> ImageItem:
        return cls(
            image_type=image_type,
            file_path=image.file_path,
            width=image.width,
            height=image.height,
            aspect_ratio=image.aspect_ratio,
            vote_average=image.vote_average,
            position=position,
        )


ChildItem = CastItem | VideoItem | SeasonItem | ImageItem


class ChildCollections(BaseModel):
    """All child collections of one show. Missing collections are empty."""

    cast: list[CastItem] = Field(default_factory=list)
    videos: list[VideoItem] = Field(default_factory=list)
    seasons: list[SeasonItem] = Field(default_factory=list)
    images: list[ImageItem] = Field(default_factory=list)


class CachedShow(BaseModel):
    """Show data from the local cache."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Local database ID")
    tmdb_id: int = Field(description="TMDB show ID")
    title: str = Field(description="Show title")
    original_title: str | None = Field(default=None, description="Original title")
    overview: str | None = Field(default=None, description="Show overview/synopsis")
    poster_path: str | None = Field(default=None, description="Poster image path")
    backdrop_path: str | None = Field(default=None, description="Backdrop image path")
    first_air_date: date | None = Field(default=None, description="First air date")
    last_air_date: date | None = Field(default=None, description="Last air date")
    vote_average: float = Field(default=0.0, description="Average vote score")
    vote_count: int = Field(default=0, description="Number of votes")
    popularity: float = Field(default=0.0, description="Popularity score")
    status: str = Field(default=ShowStatus.UNKNOWN.value, description="Production status")
    number_of_episodes: int | None = Field(default=None, description="Episode count")
    number_of_seasons: int | None = Field(default=None, description="Season count")
    genre_ids: list[int] = Field(default_factory=list, description="Genre IDs")
    origin_country: list[str] = Field(default_factory=list, description="Origin countries")
    original_language: str | None = Field(default=None, description="Original language")
    episode_run_time: int | None = Field(default=None, description="Episode runtime in minutes")
    homepage: str | None = Field(default=None, description="Official homepage URL")
    tagline: str | None = Field(default=None, description="Show tagline")
    last_refreshed_at: datetime | None = Field(
        default=None, description="When the show was last refreshed from TMDB"
    )


class AssembledShow(CachedShow, ChildCollections):
    """A cached show together with its child collections."""

    cached: bool = Field(
        default=False, description="Served from cache without a refresh from TMDB"
    )

    @classmethod
    def assemble(
        cls, show: object, children: ChildCollections, *, cached: bool
    ) -> AssembledShow:
        base = CachedShow.model_validate(show)
        return cls(**base.model_dump(), **children.model_dump(), cached=cached)


class ShowSummary(BaseModel):
    """A show in listing and search responses."""

    tmdb_id: int = Field(description="TMDB show ID")
    title: str = Field(description="Show title")
    original_title: str | None = Field(default=None, description="Original title")
    overview: str | None = Field(default=None, description="Show overview/synopsis")
    poster_path: str | None = Field(default=None, description="Poster image path")
    backdrop_path: str | None = Field(default=None, description="Backdrop image path")
    first_air_date: date | None = Field(default=None, description="First air date")
    vote_average: float = Field(default=0.0, description="Average vote score")
    vote_count: int = Field(default=0, description="Number of votes")
    popularity: float = Field(default=0.0, description="Popularity score")
    genre_ids: list[int] = Field(default_factory=list, description="Genre IDs")
    origin_country: list[str] = Field(default_factory=list, description="Origin countries")

    @classmethod
    def from_tmdb(cls, result: TMDBShowResult) -> ShowSummary:
        return cls(
            tmdb_id=result.id,
            title=result.name or result.original_name or "",
            original_title=result.original_name,
            overview=result.overview,
            poster_path=result.poster_path,
            backdrop_path=result.backdrop_path,
            first_air_date=result.first_air_date,
            vote_average=result.vote_average,
            vote_count=result.vote_count,
            popularity=result.popularity,
            genre_ids=result.genre_ids,
            origin_country=result.origin_country,
        )

    @classmethod
    def from_cached(cls, show: object) -> ShowSummary:
        cached = CachedShow.model_validate(show)
        return cls.model_validate(cached.model_dump(), from_attributes=False)


class ShowPage(BaseModel):
    """A page of show summaries."""

    page: int = Field(description="Current page number")
    total_pages: int = Field(description="Total number of pages")
    total_results: int = Field(description="Total number of results")
    results: list[ShowSummary] = Field(default_factory=list, description="Show results")
    source: Literal["cache", "origin"] = Field(description="Where the page was served from")


class RefreshSummary(BaseModel):
    """Outcome of a bulk refresh of stale shows."""

    attempted: int = Field(default=0, description="Shows a refresh was attempted for")
    succeeded: int = Field(default=0, description="Shows refreshed successfully")
    failed: int = Field(default=0, description="Shows whose refresh failed")


class PruneResult(BaseModel):
    """Outcome of pruning old shows."""

    deleted: int = Field(description="Number of shows deleted")
