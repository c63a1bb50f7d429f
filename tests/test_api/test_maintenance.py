"""Tests for maintenance API endpoints."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import AsyncClient

from show_cache.api.deps import get_maintenance_jobs
from show_cache.config import Settings
from show_cache.main import app
from show_cache.schemas.show import RefreshSummary
from show_cache.services.maintenance import MaintenanceJobs

ADMIN_TOKEN = "test-admin-token"
ADMIN_HEADERS = {"X-Admin-Token": ADMIN_TOKEN}


@pytest.fixture
def admin_settings():
    """Settings with an admin token configured."""
    settings = Settings(tmdb_api_key="test-api-key", admin_token=ADMIN_TOKEN)
    with (
        patch("show_cache.utils.security.get_settings", return_value=settings),
        patch("show_cache.api.maintenance.get_settings", return_value=settings),
    ):
        yield settings


@pytest.fixture
def mock_jobs() -> MagicMock:
    """Create mock maintenance jobs and install them on the app."""
    mock = MagicMock(spec=MaintenanceJobs)
    mock.refresh_stale = AsyncMock(return_value=RefreshSummary(attempted=3, succeeded=2, failed=1))
    mock.prune = AsyncMock(return_value=4)
    app.dependency_overrides[get_maintenance_jobs] = lambda: mock
    return mock


class TestAdminToken:
    """Tests for the admin token guard."""

    async def test_missing_token(
        self, client: AsyncClient, admin_settings: Settings, mock_jobs: MagicMock  # noqa: ARG002
    ) -> None:
        """Test that requests without a token are rejected."""
        response = await client.post("/api/maintenance/prune")

        assert response.status_code == 401
        mock_jobs.prune.assert_not_called()

    async def test_wrong_token(
        self, client: AsyncClient, admin_settings: Settings, mock_jobs: MagicMock  # noqa: ARG002
    ) -> None:
        """Test that a wrong token is rejected."""
        response = await client.post(
            "/api/maintenance/prune", headers={"X-Admin-Token": "not-the-token"}
        )

        assert response.status_code == 401
        mock_jobs.prune.assert_not_called()

    async def test_disabled_without_configured_token(
        self, client: AsyncClient, mock_jobs: MagicMock
    ) -> None:
        """Test that maintenance is unavailable when no token is configured."""
        settings = Settings(tmdb_api_key="test-api-key", admin_token="")
        with patch("show_cache.utils.security.get_settings", return_value=settings):
            response = await client.post("/api/maintenance/prune", headers=ADMIN_HEADERS)

        assert response.status_code == 503
        mock_jobs.prune.assert_not_called()


class TestRefreshStale:
    """Tests for the refresh-stale endpoint."""

    async def test_refresh_stale_defaults(
        self, client: AsyncClient, admin_settings: Settings, mock_jobs: MagicMock  # noqa: ARG002
    ) -> None:
        """Test that the batch uses the configured age and limit by default."""
        response = await client.post("/api/maintenance/refresh-stale", headers=ADMIN_HEADERS)

        assert response.status_code == 200
        assert response.json() == {"attempted": 3, "succeeded": 2, "failed": 1}
        mock_jobs.refresh_stale.assert_awaited_once_with(timedelta(days=7), 50)

    async def test_refresh_stale_custom(
        self, client: AsyncClient, admin_settings: Settings, mock_jobs: MagicMock  # noqa: ARG002
    ) -> None:
        """Test overriding the age and limit."""
        response = await client.post(
            "/api/maintenance/refresh-stale?max_age_days=1&limit=5", headers=ADMIN_HEADERS
        )

        assert response.status_code == 200
        mock_jobs.refresh_stale.assert_awaited_once_with(timedelta(days=1), 5)

    async def test_refresh_stale_invalid_limit(
        self, client: AsyncClient, admin_settings: Settings, mock_jobs: MagicMock  # noqa: ARG002
    ) -> None:
        """Test that a zero limit is rejected."""
        response = await client.post(
            "/api/maintenance/refresh-stale?limit=0", headers=ADMIN_HEADERS
        )

        assert response.status_code == 422


class TestPrune:
    """Tests for the prune endpoint."""

    async def test_prune_defaults(
        self, client: AsyncClient, admin_settings: Settings, mock_jobs: MagicMock  # noqa: ARG002
    ) -> None:
        """Test that pruning uses the configured age by default."""
        response = await client.post("/api/maintenance/prune", headers=ADMIN_HEADERS)

        assert response.status_code == 200
        assert response.json() == {"deleted": 4}
        mock_jobs.prune.assert_awaited_once_with(timedelta(days=90))

    async def test_prune_custom_age(
        self, client: AsyncClient, admin_settings: Settings, mock_jobs: MagicMock  # noqa: ARG002
    ) -> None:
        """Test overriding the prune age."""
        response = await client.post(
            "/api/maintenance/prune?max_age_days=30", headers=ADMIN_HEADERS
        )

        assert response.status_code == 200
        mock_jobs.prune.assert_awaited_once_with(timedelta(days=30))
