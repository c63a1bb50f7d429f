"""Tests for mapping TMDB payloads into cache records."""

from datetime import date

import pytest

from show_cache.config import Settings
from show_cache.schemas.external import TMDBShowDetails, TMDBShowResult
from show_cache.schemas.show import ShowFields, ShowStatus, VideoType


class TestShowFields:
    """Tests for ShowFields."""

    def test_from_details(self) -> None:
        """Test mapping a full details payload."""
        details = TMDBShowDetails.model_validate(
            {
                "id": 1,
                "name": "",
                "original_name": "사랑의 여관",
                "first_air_date": "",
                "status": "Returning Series",
                "genres": [{"id": 18}, {"id": 18}, {"id": 35}],
                "origin_country": ["KR", "KR"],
                "episode_run_time": [],
                "homepage": "",
            }
        )

        fields = ShowFields.from_details(details)

        assert fields.title == "사랑의 여관"
        assert fields.first_air_date is None
        assert fields.status == "Returning Series"
        assert fields.genre_ids == [18, 35]
        assert fields.origin_country == ["KR"]
        assert fields.episode_run_time is None
        assert fields.homepage is None

    def test_from_summary_only_sets_listing_fields(self) -> None:
        """Test that a summary leaves detail-only fields unset."""
        result = TMDBShowResult(id=1, name="Show", first_air_date=date(2024, 1, 1))

        values = ShowFields.from_summary(result).to_values()

        assert values["title"] == "Show"
        assert values["first_air_date"] == date(2024, 1, 1)
        for detail_only in ("status", "number_of_episodes", "tagline", "last_air_date"):
            assert detail_only not in values


class TestEnums:
    """Tests for origin value normalisation."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Ended", ShowStatus.ENDED),
            ("Canceled", ShowStatus.CANCELED),
            ("Something New", ShowStatus.UNKNOWN),
            (None, ShowStatus.UNKNOWN),
        ],
    )
    def test_show_status(self, value: str | None, expected: ShowStatus) -> None:
        """Test that unknown statuses fall back to UNKNOWN."""
        assert ShowStatus.from_tmdb(value) is expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Trailer", VideoType.TRAILER),
            ("Teaser", VideoType.TEASER),
            ("Featurette", VideoType.OTHER),
            (None, VideoType.OTHER),
        ],
    )
    def test_video_type(self, value: str | None, expected: VideoType) -> None:
        """Test that video types are case-insensitive with an OTHER fallback."""
        assert VideoType.from_tmdb(value) is expected


class TestSettings:
    """Tests for runtime configuration checks."""

    def test_invalid_language_rejected(self) -> None:
        """Test that malformed language codes are rejected."""
        with pytest.raises(ValueError, match="TMDB_LANGUAGE"):
            Settings(tmdb_language="portuguese")

    def test_runtime_warnings(self) -> None:
        """Test warnings for a v3 key, missing admin token and single flight."""
        settings = Settings(
            tmdb_api_key="v3-key", admin_token="", single_flight=True, debug=False
        )

        warnings = settings.validate_runtime_config()

        assert any("v3 key" in warning for warning in warnings)
        assert any("ADMIN_TOKEN" in warning for warning in warnings)
        assert any("SINGLE_FLIGHT" in warning for warning in warnings)
        assert not any("DEBUG" in warning for warning in warnings)

    def test_no_warnings_for_production_config(self) -> None:
        """Test that a v4 token with an admin token produces no warnings."""
        settings = Settings(tmdb_api_key="eyJtoken", admin_token="secret", debug=False)

        assert settings.validate_runtime_config() == []
