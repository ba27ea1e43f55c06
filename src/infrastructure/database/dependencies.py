"""FastAPI dependency injection for database sessions.

``DatabaseSession`` injects a request-scoped session into route handlers;
the session commits when the handler returns and rolls back when it raises.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.session import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Provide a database session for FastAPI dependency injection.

    Yields:
        AsyncSession: Session committed on success, rolled back on error.
    """
    async with get_async_session() as session:
        yield session


DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
