"""Tests for the FastAPI application factory module."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from cris_api import __version__
from cris_api.core.config import Settings
from cris_api.main import create_app


class TestCreateApp:
    """Tests for create_app."""

    @pytest.fixture
    def app(self):
        return create_app()

    def test_app_is_created(self, app) -> None:
        assert app.title == "CRIS API"
        assert app.version == __version__

    def test_app_has_openapi_schema(self, app) -> None:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/openapi.json")
        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/health" in paths
        assert "/api/health" in paths

    def test_value_error_handler_registered(self, app) -> None:
        assert app.exception_handlers.get(ValueError) is not None


class TestAppLifespan:
    """Tests for lifespan management."""

    async def test_lifespan_init_and_dispose(self) -> None:
        """Lifespan context manager initializes and disposes engine."""
        from cris_api.main import lifespan

        mock_app = AsyncMock()

        with (
            patch("cris_api.main.get_settings") as mock_get_settings,
            patch("cris_api.main.setup_logging") as mock_setup_logging,
            patch("cris_api.main.configure_hashing") as mock_configure_hashing,
            patch("cris_api.main.init_engine") as mock_init_engine,
            patch("cris_api.main.dispose_engine", new_callable=AsyncMock) as mock_dispose,
        ):
            mock_get_settings.return_value = Settings(
                _env_file=None,  # type: ignore[call-arg]
                database_url="sqlite+aiosqlite:///:memory:",
                bcrypt_rounds=10,
            )

            async with lifespan(mock_app):
                mock_setup_logging.assert_called_once()
                mock_configure_hashing.assert_called_once_with(10)
                mock_init_engine.assert_called_once()
                mock_dispose.assert_not_awaited()

            mock_dispose.assert_awaited_once()
