"""Database infrastructure: async SQLAlchemy sessions, entity metadata and
the resource repository.

- **base**: Declarative base and the abstract ``ResourceModel``
- **metadata**: Read-only entity metadata derived from mappers
- **session**: Async engine and session management
- **repository**: Creation of entities from validated documents
- **dependencies**: FastAPI dependency injection helpers
"""

from src.infrastructure.database.base import Base, ResourceModel
from src.infrastructure.database.dependencies import DatabaseSession, get_db
from src.infrastructure.database.metadata import EntityMetadata
from src.infrastructure.database.repository import BaseRepository, ResourceRepository
from src.infrastructure.database.session import (
    check_database_connection,
    close_database,
    get_async_session,
)

__all__ = [
    "Base",
    "BaseRepository",
    "DatabaseSession",
    "EntityMetadata",
    "ResourceModel",
    "ResourceRepository",
    "check_database_connection",
    "close_database",
    "get_async_session",
    "get_db",
]
