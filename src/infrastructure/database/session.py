"""Async database engine and session lifecycle management.

A single engine and session factory are created lazily and shared for the
lifetime of the process. Sessions handed out by ``get_async_session`` commit
on success and roll back on error, so a resource rejected half-way through
creation (e.g. an unknown related id) leaves nothing behind.
"""

import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.core.config import get_settings

POOL_RECYCLE_SECONDS = 3600  # 1 hour


def create_database_engine(database_url: str | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine with connection pooling.

    Args:
        database_url: Optional database URL. If not provided, uses the
                     configured database URL from settings.

    Returns:
        AsyncEngine: Configured async engine instance.
    """
    db_config = get_settings().database_config

    engine = create_async_engine(
        database_url or db_config.database_url,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_pre_ping=db_config.pool_pre_ping,
        pool_recycle=POOL_RECYCLE_SECONDS,
        echo=db_config.echo,
    )

    logger.info(
        "Created database engine - pool_size: {}, max_overflow: {}",
        db_config.pool_size,
        db_config.max_overflow,
    )

    return engine


class _DatabaseManager:
    """Holds the process-wide engine and session factory."""

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._async_session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = threading.Lock()

    def get_engine(self) -> AsyncEngine:
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self._engine = create_database_engine()
        return self._engine

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._async_session_factory is None:
            with self._lock:
                if self._async_session_factory is None:
                    self._async_session_factory = async_sessionmaker(
                        self.get_engine(),
                        class_=AsyncSession,
                        expire_on_commit=False,
                    )
                    logger.info("Created async session factory")
        return self._async_session_factory

    async def close(self) -> None:
        """Dispose of the engine and forget the factory."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self.reset()

    def reset(self) -> None:
        self._engine = None
        self._async_session_factory = None


_db_manager = _DatabaseManager()


def get_engine() -> AsyncEngine:
    """Get or create the global async engine instance."""
    return _db_manager.get_engine()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the global async session factory."""
    return _db_manager.get_session_factory()


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Provide a session that commits on success and rolls back on error.

    Yields:
        AsyncSession: Database session for performing operations.

    Example:
        async with get_async_session() as session:
            book = await ResourceRepository(session, Book).create_from_payload(data)
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            logger.debug("Database session rolled back due to error")
            raise


async def close_database() -> None:
    """Close the database engine; call during application shutdown."""
    await _db_manager.close()


async def check_database_connection() -> tuple[bool, str | None]:
    """Check if the database answers a trivial query.

    Returns:
        tuple[bool, str | None]: Success flag and the error message on failure.
    """
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return False, str(e)
    else:
        return True, None
