"""TMDB (The Movie Database) TV API client service."""

from typing import Any

from show_cache.config import get_settings
from show_cache.schemas.external import (
    TMDBCreditsResponse,
    TMDBImagesResponse,
    TMDBPageResponse,
    TMDBShowDetails,
    TMDBVideosResponse,
)
from show_cache.schemas.show import (
    CastItem,
    ChildItem,
    ChildKind,
    ImageItem,
    ImageType,
    SeasonItem,
    VideoItem,
    VideoType,
)
from show_cache.services.base import BaseAPIClient


class TMDBClient(BaseAPIClient):
    """Client for the TMDB TV endpoints.

    Accepts either a v4 read access token (sent as a Bearer header) or a v3
    API key (sent as the ``api_key`` query parameter). Every request carries
    the configured ``language``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        language: str | None = None,
    ) -> None:
        """Initialize the TMDB client.

        Args:
            api_key: TMDB API key or read access token. If not provided, uses settings.
            base_url: TMDB base URL. If not provided, uses settings.
            timeout: Request timeout in seconds. If not provided, uses settings.
            language: Response language code. If not provided, uses settings.
        """
        settings = get_settings()
        self._api_key = api_key or settings.tmdb_api_key
        self.language = language or settings.tmdb_language
        base = base_url or settings.tmdb_base_url

        if not self._api_key:
            raise ValueError("TMDB API key is required")

        super().__init__(base_url=base, timeout=timeout or settings.tmdb_timeout)

    @property
    def uses_bearer_token(self) -> bool:
        """Whether the credential is a v4 read access token (a JWT)."""
        return self._api_key.startswith("eyJ")

    @property
    def default_headers(self) -> dict[str, str]:
        """Return default headers, with Bearer authentication for v4 tokens."""
        headers = {"Accept": "application/json"}
        if self.uses_bearer_token:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    @property
    def default_params(self) -> dict[str, Any]:
        """Return the language and, for v3 keys, the api_key parameter."""
        params: dict[str, Any] = {"language": self.language}
        if not self.uses_bearer_token:
            params["api_key"] = self._api_key
        return params

    async def get_show(self, tmdb_id: int) -> TMDBShowDetails:
        """Get detailed information about a show, including its seasons.

        Raises:
            NotFoundError: If the show is not found.
        """
        return await self.get_model(TMDBShowDetails, f"/tv/{tmdb_id}")

    async def get_credits(self, tmdb_id: int) -> TMDBCreditsResponse:
        """Get the cast of a show."""
        return await self.get_model(TMDBCreditsResponse, f"/tv/{tmdb_id}/credits")

    async def get_videos(self, tmdb_id: int) -> TMDBVideosResponse:
        """Get the videos of a show."""
        return await self.get_model(TMDBVideosResponse, f"/tv/{tmdb_id}/videos")

    async def get_images(self, tmdb_id: int) -> TMDBImagesResponse:
        """Get the images of a show.

        Images are filtered by language on TMDB's side, so language-neutral
        images are requested alongside the configured language.
        """
        lang = self.language.split("-")[0]
        params = {"include_image_language": f"{lang},en,null"}
        return await self.get_model(TMDBImagesResponse, f"/tv/{tmdb_id}/images", params=params)

    async def get_child_collection(
        self,
        tmdb_id: int,
        kind: ChildKind,
        limit: int | None = None,
    ) -> list[ChildItem]:
        """Fetch one child collection of a show, mapped to store records.

        Args:
            tmdb_id: TMDB show ID.
            kind: Which collection to fetch.
            limit: Maximum number of items to keep (per image type for images).

        Returns:
            The items in origin order, with ``position`` set accordingly.
        """
        if kind is ChildKind.CAST:
            credits = await self.get_credits(tmdb_id)
            return [
                CastItem.from_tmdb(member, position)
                for position, member in enumerate(credits.cast[:limit])
            ]

        if kind is ChildKind.VIDEOS:
            videos = await self.get_videos(tmdb_id)
            # Trailers and teasers first so the limit never crowds them out
            ranked = sorted(
                videos.results,
                key=lambda video: VideoType.from_tmdb(video.type) is VideoType.OTHER,
            )
            return [
                VideoItem.from_tmdb(video, position)
                for position, video in enumerate(ranked[:limit])
            ]

        if kind is ChildKind.IMAGES:
            images = await self.get_images(tmdb_id)
            items: list[ChildItem] = []
            for image_type, group in (
                (ImageType.BACKDROP, images.backdrops),
                (ImageType.POSTER, images.posters),
                (ImageType.LOGO, images.logos),
            ):
                items.extend(
                    ImageItem.from_tmdb(image, image_type, position)
                    for position, image in enumerate(group[:limit])
                )
            return items

        details = await self.get_show(tmdb_id)
        return [
            SeasonItem.from_tmdb(season, position)
            for position, season in enumerate(details.seasons[:limit])
        ]

    async def search_shows(self, query: str, page: int = 1) -> TMDBPageResponse:
        """Search for shows by name.

        Args:
            query: Search query string.
            page: Page number (1-based).

        Returns:
            Search response containing show results.
        """
        params: dict[str, Any] = {"query": query, "page": page, "include_adult": "false"}
        return await self.get_model(TMDBPageResponse, "/search/tv", params=params)

    async def get_popular(self, page: int = 1) -> TMDBPageResponse:
        """Get a page of popular shows."""
        return await self.get_model(TMDBPageResponse, "/tv/popular", params={"page": page})

    async def get_trending(self) -> TMDBPageResponse:
        """Get the shows trending this week."""
        return await self.get_model(TMDBPageResponse, "/trending/tv/week")


async def get_tmdb_client() -> TMDBClient:
    """Factory function to create a TMDB client."""
    return TMDBClient()
