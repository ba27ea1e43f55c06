"""Unit tests for src.api.main module."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture

from src.api.main import create_app, lifespan
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings
from src.infrastructure.schema.registry import SchemaRegistry
from tests.fixtures.entities import Book, Event


@pytest.fixture(autouse=True)
def no_logging_setup(mocker: MockerFixture) -> None:
    """Keep create_app from reconfiguring Loguru."""
    mocker.patch("src.api.main.setup_logging")


@pytest.mark.unit
class TestCreateApp:
    """Test cases for the application factory."""

    def test_uses_settings(self, mock_settings: Settings) -> None:
        """Test title and version come from settings."""
        app = create_app(mock_settings)

        assert app.title == "TestApp"
        assert app.version == "1.0.0"
        assert app.router.default_response_class is ORJSONResponse

    def test_registers_resource_routes(self) -> None:
        """Test each resource gets a prefixed create route sharing the registry."""
        # Setup
        registry = SchemaRegistry()

        # Execution
        app = create_app(resources=[Book, Event], registry=registry)

        # Assertions
        paths = {route.path for route in app.routes}  # type: ignore[attr-defined]
        assert {"/api/books", "/api/events", "/health"} <= paths
        assert app.state.schema_registry is registry
        assert set(registry) == {"inputBodyPostSchema-Book", "inputBodyPostSchema-Event"}

    def test_route_prefix_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the configured prefix is applied to resource routes."""
        monkeypatch.setenv("JSONAPI_CONFIG__ROUTE_PREFIX", "/v2/")

        app = create_app(resources=[Book])

        paths = {route.path for route in app.routes}  # type: ignore[attr-defined]
        assert "/v2/books" in paths


@pytest.mark.unit
class TestHealth:
    """Test cases for the health endpoint."""

    @pytest.mark.parametrize(
        ("result", "expected"),
        [((True, None), "healthy"), ((False, "refused"), "degraded")],
    )
    def test_health(
        self,
        mocker: MockerFixture,
        result: tuple[bool, str | None],
        expected: str,
    ) -> None:
        """Test the status reflects database connectivity."""
        mocker.patch("src.api.main.check_database_connection", return_value=result)
        client = TestClient(create_app(resources=[Book]))

        response = client.get("/health")

        assert response.json() == {
            "status": expected,
            "database": result[0],
            "schemas": 1,
        }


@pytest.mark.unit
class TestLifespan:
    """Test cases for the lifespan handler."""

    async def test_startup_and_shutdown(self, mocker: MockerFixture) -> None:
        """Test the database is checked on startup and closed on shutdown."""
        mocker.patch(
            "src.api.main.check_database_connection", return_value=(True, None)
        )
        close = mocker.patch("src.api.main.close_database")

        async with lifespan(FastAPI()):
            close.assert_not_awaited()

        close.assert_awaited_once()

    async def test_startup_fails_without_database(self, mocker: MockerFixture) -> None:
        """Test startup aborts when the database is unreachable."""
        mocker.patch(
            "src.api.main.check_database_connection",
            return_value=(False, "connection refused"),
        )

        with pytest.raises(RuntimeError, match="connection refused"):
            async with lifespan(FastAPI()):
                pass
