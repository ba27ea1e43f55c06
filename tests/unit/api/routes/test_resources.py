"""Unit tests for src.api.routes.resources module."""

from collections.abc import AsyncGenerator
from datetime import date

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture, MockType
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.main import create_app
from src.api.routes.resources import build_resource_router, to_resource_object
from src.infrastructure.database.dependencies import get_db
from src.infrastructure.database.metadata import EntityMetadata
from src.infrastructure.schema.registry import SchemaRegistry
from tests.fixtures.entities import Book, User, book_document


@pytest.fixture
def app(mocker: MockerFixture, mock_session: MockType) -> FastAPI:
    """Application exposing books, backed by a mocked session."""
    mocker.patch("src.api.main.setup_logging")
    application = create_app(resources=[Book])

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        yield mock_session

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Client that does not run the lifespan (no database check)."""
    return TestClient(app)


@pytest.mark.unit
class TestBuildResourceRouter:
    """Test cases for build_resource_router."""

    def test_registers_missing_schema(self) -> None:
        """Test building a router registers the entity's schema once."""
        registry = SchemaRegistry()

        router = build_resource_router(Book, registry)
        build_resource_router(Book, registry)

        assert registry.keys() == ["inputBodyPostSchema-Book"]
        assert [route.path for route in router.routes] == ["/books"]  # type: ignore[attr-defined]

    def test_to_resource_object(self, book_metadata: EntityMetadata) -> None:
        """Test persisted entities render without keys in the attributes."""
        # Setup
        book = Book(id=3, title="Dune", author_id=1, published_at=date(1965, 8, 1))
        relationships = {"author": {"data": {"type": "users", "id": "1"}}}

        # Execution
        resource = to_resource_object(book, book_metadata, relationships)

        # Assertions
        assert resource.type == "books"
        assert resource.id == "3"
        assert "id" not in resource.attributes
        assert "author_id" not in resource.attributes
        assert resource.attributes["published_at"] == date(1965, 8, 1)
        assert resource.relationships["author"].model_dump() == {
            "data": {"type": "users", "id": "1"}
        }


@pytest.mark.unit
class TestCreateResourceEndpoint:
    """Test cases for POST /api/<resource type>."""

    def test_created(self, client: TestClient, mock_session: MockType) -> None:
        """Test a valid document is persisted and echoed as JSON:API."""
        # Setup
        mock_session.get.return_value = User(id=1, login="frank")

        # Execution
        response = client.post(
            "/api/books", json=book_document(published_at="1965-08-01")
        )

        # Assertions
        assert response.status_code == status.HTTP_201_CREATED
        assert response.headers["content-type"] == "application/vnd.api+json"
        data = response.json()["data"]
        assert data["type"] == "books"
        assert data["id"] == "7"
        assert data["attributes"]["title"] == "Dune"
        assert data["attributes"]["published_at"] == "1965-08-01"
        assert data["relationships"] == {
            "author": {"data": {"type": "users", "id": "1"}}
        }
        mock_session.add.assert_called_once()

    def test_schema_violation(self, client: TestClient, mock_session: MockType) -> None:
        """Test structural errors answer 422 with parameter sources."""
        response = client.post("/api/books", json=book_document(status="archived"))

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        body = response.json()
        assert body["error_code"] == "UNPROCESSABLE_ENTITY"
        assert body["errors"][0]["source"]["parameter"] == "/data/attributes/status"
        assert body["errors"][0]["detail"].endswith(
            '. Allowed values are: "draft,published"'
        )
        mock_session.add.assert_not_called()

    def test_constraint_violation(self, client: TestClient) -> None:
        """Test domain errors answer 422 with pointer sources."""
        document = book_document()
        del document["data"]["relationships"]

        response = client.post("/api/books", json=document)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["errors"] == [
            {
                "source": {"parameter": None, "pointer": "/data/relationships/author"},
                "detail": "Field required",
            }
        ]

    def test_unknown_related_resource(self, client: TestClient) -> None:
        """Test linkage to a missing resource answers 404."""
        response = client.post("/api/books", json=book_document())

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["details"] == {"pointer": "/data/relationships/author"}
        assert response.json()["errors"][0]["source"]["pointer"] == (
            "/data/relationships/author"
        )

    def test_body_must_be_an_object(self, client: TestClient) -> None:
        """Test a non-object body is rejected before the pipe runs."""
        response = client.post("/api/books", json=["not", "a", "document"])

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_correlation_id_is_echoed(self, client: TestClient) -> None:
        """Test the correlation ID travels back on error responses."""
        response = client.post(
            "/api/books",
            json={},
            headers={"X-Correlation-ID": "corr-123"},
        )

        assert response.headers["X-Correlation-ID"] == "corr-123"
        assert response.json()["correlation_id"] == "corr-123"
