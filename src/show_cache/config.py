"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "Show Cache API"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./show_cache.db"
    create_tables: bool = True  # Disable when the schema is managed by Alembic

    # TMDB API
    tmdb_api_key: str = ""
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_language: str = "pt-BR"
    tmdb_timeout: float = Field(default=30.0, gt=0)

    # Staleness thresholds
    show_max_age_days: int = Field(default=7, ge=0)
    maintenance_max_age_days: int = Field(default=7, ge=0)
    prune_max_age_days: int = Field(default=90, ge=1)
    refresh_batch_limit: int = Field(default=50, ge=1)

    # Sync behaviour
    populate_top_n: int = Field(default=10, ge=0)
    listing_page_size: int = Field(default=20, ge=1)
    cast_limit: int = Field(default=20, ge=0)
    video_limit: int = Field(default=10, ge=0)
    image_limit: int = Field(default=10, ge=0)
    origin_attempts: int = Field(default=2, ge=1)
    single_flight: bool = False

    # Maintenance endpoints
    admin_token: str = ""

    @field_validator("tmdb_language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Validate that the language looks like an ISO 639-1 code with optional region."""
        parts = v.split("-")
        if not parts[0] or len(parts[0]) != 2 or len(parts) > 2:
            raise ValueError("TMDB_LANGUAGE must look like 'en' or 'pt-BR'")
        return v

    def validate_runtime_config(self) -> list[str]:
        """Validate runtime configuration and return warnings."""
        warnings = []

        if self.tmdb_api_key and not self.tmdb_api_key.startswith("eyJ"):
            warnings.append(
                "TMDB_API_KEY looks like a v3 key - it will be sent as a query parameter"
            )

        if not self.admin_token:
            warnings.append("ADMIN_TOKEN is not set - maintenance endpoints are disabled")

        if self.single_flight:
            warnings.append("SINGLE_FLIGHT is enabled - concurrent refreshes are coalesced")

        # Warn about debug mode in production
        if self.debug:
            warnings.append("DEBUG mode is enabled - should be disabled in production")

        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
