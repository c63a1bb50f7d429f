"""Pydantic schemas for TMDB TV API responses."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _empty_str_to_none(v: object) -> object:
    """Convert empty strings to None for date fields."""
    if v == "":
        return None
    return v


class TMDBShowResult(BaseModel):
    """A single show result from TMDB search, popular or trending listings."""

    model_config = ConfigDict(extra="ignore")

    id: int = Field(description="TMDB show ID")
    name: str = Field(default="", description="Show name")
    original_name: str | None = Field(default=None, description="Original name")
    overview: str | None = Field(default=None, description="Show overview/synopsis")
    poster_path: str | None = Field(default=None, description="Poster image path")
    backdrop_path: str | None = Field(default=None, description="Backdrop image path")
    first_air_date: date | None = Field(default=None, description="First air date")
    vote_average: float = Field(default=0.0, description="Average vote score")
    vote_count: int = Field(default=0, description="Number of votes")
    popularity: float = Field(default=0.0, description="Popularity score")
    genre_ids: list[int] = Field(default_factory=list, description="Genre IDs")
    origin_country: list[str] = Field(default_factory=list, description="Origin countries")

    @field_validator("first_air_date", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | date | None) -> str | date | None:
        """Convert empty strings to None for date fields."""
        return _empty_str_to_none(v)  # type: ignore[return-value]


class TMDBPageResponse(BaseModel):
    """Paginated response from TMDB listing endpoints."""

    model_config = ConfigDict(extra="ignore")

    page: int = Field(default=1, description="Current page number")
    total_pages: int = Field(default=0, description="Total number of pages")
    total_results: int = Field(default=0, description="Total number of results")
    results: list[TMDBShowResult] = Field(default_factory=list, description="Show results")


class TMDBGenre(BaseModel):
    """A genre attached to show details."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str | None = None


class TMDBSeason(BaseModel):
    """A season summary embedded in show details."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = Field(default=None, description="TMDB season ID")
    season_number: int = Field(description="Season number (0 for specials)")
    name: str | None = Field(default=None, description="Season name")
    overview: str | None = Field(default=None, description="Season overview")
    episode_count: int = Field(default=0, description="Number of episodes")
    air_date: date | None = Field(default=None, description="Air date")
    poster_path: str | None = Field(default=None, description="Poster image path")

    @field_validator("air_date", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | date | None) -> str | date | None:
        """Convert empty strings to None for date fields."""
        return _empty_str_to_none(v)  # type: ignore[return-value]


class TMDBShowDetails(BaseModel):
    """Detailed show information from TMDB."""

    model_config = ConfigDict(extra="ignore")

    id: int = Field(description="TMDB show ID")
    name: str = Field(default="", description="Show name")
    original_name: str | None = Field(default=None, description="Original name")
    overview: str | None = Field(default=None, description="Show overview/synopsis")
    poster_path: str | None = Field(default=None, description="Poster image path")
    backdrop_path: str | None = Field(default=None, description="Backdrop image path")
    first_air_date: date | None = Field(default=None, description="First air date")
    last_air_date: date | None = Field(default=None, description="Last air date")
    vote_average: float = Field(default=0.0, description="Average vote score")
    vote_count: int = Field(default=0, description="Number of votes")
    popularity: float = Field(default=0.0, description="Popularity score")
    status: str | None = Field(default=None, description="Production status")
    number_of_episodes: int | None = Field(default=None, description="Episode count")
    number_of_seasons: int | None = Field(default=None, description="Season count")
    genres: list[TMDBGenre] = Field(default_factory=list, description="Genres")
    origin_country: list[str] = Field(default_factory=list, description="Origin countries")
    original_language: str | None = Field(default=None, description="Original language")
    episode_run_time: list[int] = Field(default_factory=list, description="Episode runtimes")
    homepage: str | None = Field(default=None, description="Official homepage URL")
    tagline: str | None = Field(default=None, description="Show tagline")
    seasons: list[TMDBSeason] = Field(default_factory=list, description="Seasons")

    @field_validator("first_air_date", "last_air_date", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | date | None) -> str | date | None:
        """Convert empty strings to None for date fields."""
        return _empty_str_to_none(v)  # type: ignore[return-value]


class TMDBCastMember(BaseModel):
    """A single cast member from TMDB credits."""

    model_config = ConfigDict(extra="ignore")

    id: int = Field(description="TMDB person ID")
    name: str = Field(description="Person's name")
    character: str | None = Field(default=None, description="Character name")
    order: int = Field(default=0, description="Billing order")
    profile_path: str | None = Field(default=None, description="Profile image path")


class TMDBCreditsResponse(BaseModel):
    """Response from TMDB show credits endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = Field(default=None, description="TMDB show ID")
    cast: list[TMDBCastMember] = Field(default_factory=list, description="Cast members")


class TMDBVideo(BaseModel):
    """A single video from TMDB."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(description="TMDB video ID")
    key: str | None = Field(default=None, description="Site-specific video key")
    site: str | None = Field(default=None, description="Hosting site, e.g. YouTube")
    type: str | None = Field(default=None, description="Trailer, Teaser, Clip, ...")
    name: str | None = Field(default=None, description="Video title")
    size: int | None = Field(default=None, description="Resolution")
    official: bool = Field(default=False, description="Whether the video is official")
    published_at: datetime | None = Field(default=None, description="Publish timestamp")

    @field_validator("published_at", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | datetime | None) -> str | datetime | None:
        """Convert empty strings to None for timestamp fields."""
        return _empty_str_to_none(v)  # type: ignore[return-value]


class TMDBVideosResponse(BaseModel):
    """Response from TMDB show videos endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = Field(default=None, description="TMDB show ID")
    results: list[TMDBVideo] = Field(default_factory=list, description="Videos")


class TMDBImage(BaseModel):
    """A single image from TMDB."""

    model_config = ConfigDict(extra="ignore")

    file_path: str = Field(description="Image path")
    width: int = Field(default=0, description="Width in pixels")
    height: int = Field(default=0, description="Height in pixels")
    aspect_ratio: float = Field(default=0.0, description="Aspect ratio")
    vote_average: float = Field(default=0.0, description="Average vote score")


class TMDBImagesResponse(BaseModel):
    """Response from TMDB show images endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = Field(default=None, description="TMDB show ID")
    backdrops: list[TMDBImage] = Field(default_factory=list, description="Backdrops")
    posters: list[TMDBImage] = Field(default_factory=list, description="Posters")
    logos: list[TMDBImage] = Field(default_factory=list, description="Logos")
