"""Shared fixtures for unit tests."""

import os
from collections.abc import Generator
from datetime import UTC, datetime
from typing import Any

import pytest
from pytest_mock import MockerFixture, MockType
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import LogConfig, Settings, get_settings
from src.core.context import RequestContext
from src.core.error_context import _get_sensitive_fields
from src.infrastructure.database.metadata import EntityMetadata
from src.infrastructure.schema.registry import SchemaRegistry
from tests.fixtures.entities import Book


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide a real Settings object built from test environment variables.

    Returns:
        Settings: Settings with test defaults.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("API_HOST", "127.0.0.1")
    monkeypatch.setenv("API_PORT", "3000")
    return Settings()


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear cached settings before and after each test."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove application environment variables that could leak into Settings.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    env_prefixes = [
        "APP_",
        "API_",
        "ENVIRONMENT",
        "DEBUG",
        "LOG_CONFIG__",
        "DATABASE_CONFIG__",
        "JSONAPI_CONFIG__",
    ]
    for key in list(os.environ):
        if any(key.startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def clean_request_context() -> Generator[None]:
    """Reset the correlation ID between tests."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture
def book_metadata() -> EntityMetadata:
    """Metadata of the Book test entity."""
    return EntityMetadata.from_model(Book)


@pytest.fixture
def registry(book_metadata: EntityMetadata) -> SchemaRegistry:
    """Schema registry holding the Book create-document schema."""
    schema_registry = SchemaRegistry()
    schema_registry.register_entity(book_metadata)
    return schema_registry


@pytest.fixture
def mock_session(mocker: MockerFixture) -> MockType:
    """Provide an AsyncSession double that fakes server-generated values.

    ``refresh`` assigns an id and timestamps the way the database would;
    ``get`` returns None unless a test configures it.

    Returns:
        MockType: Session mock with async ``flush``, ``refresh`` and ``get``.
    """
    session = mocker.MagicMock(spec=AsyncSession)

    def fake_refresh(obj: Any) -> None:
        obj.id = 7
        obj.created_at = datetime(2024, 1, 1, tzinfo=UTC)
        obj.updated_at = datetime(2024, 1, 1, tzinfo=UTC)

    session.refresh.side_effect = fake_refresh
    session.get.return_value = None
    return session


@pytest.fixture
def mock_get_settings(mocker: MockerFixture) -> MockType:
    """Mock get_settings for error_context with custom sensitive fields.

    Returns:
        MockType: Mock get_settings function.
    """
    settings = mocker.Mock(spec=Settings)
    log_config = mocker.Mock(spec=LogConfig)
    log_config.sensitive_fields = ["custom_secret", "isbn"]
    settings.log_config = log_config

    mock_fn = mocker.patch("src.core.error_context.get_settings")
    mock_fn.return_value = settings
    _get_sensitive_fields.cache_clear()
    return mock_fn
