"""
Database configuration and connection management.

This module provides engine creation, session factories and the
module-level engine used by the application and the seeder.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from identity_api.config.settings import settings

logger = logging.getLogger(__name__)

# Global database engine and session factory
_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_database_url() -> str:
    """
    Get database URL from configuration.

    Returns:
        Database URL string
    """
    return settings.database_url


def create_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Args:
        database_url: Database URL (uses settings if not provided)
        echo: Enable SQL query logging

    Returns:
        Configured async SQLAlchemy engine
    """
    if database_url is None:
        database_url = get_database_url()

    if echo is None:
        echo = settings.get("database_echo", False)

    if "sqlite" in database_url:
        # In-memory databases must share one connection
        pool_kwargs = {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    else:
        pool_kwargs = {"pool_pre_ping": True}

    engine = create_async_engine(database_url, echo=echo, **pool_kwargs)

    _add_connection_listeners(engine)

    logger.info(
        f"Created database engine: {database_url.split('@')[-1] if '@' in database_url else database_url}",
        extra={
            "event_type": "database_engine_created",
            "database_type": database_url.split("://")[0],
        }
    )

    return engine


def _add_connection_listeners(engine: AsyncEngine) -> None:
    """
    Add connection event listeners.

    Args:
        engine: SQLAlchemy async engine
    """
    if engine.url.get_backend_name() != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """SQLite leaves foreign keys off unless asked."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory.

    Args:
        engine: SQLAlchemy async engine

    Returns:
        Async session factory
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=True,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all identity tables that do not exist yet."""
    from .base import Base
    from . import models  # noqa: F401  (registers the tables)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "Database tables created successfully",
        extra={"event_type": "database_tables_created"}
    )


async def init_database(database_url: Optional[str] = None, create_schema: bool = True) -> None:
    """
    Initialize the global engine and session factory.

    Args:
        database_url: Database URL (uses settings if not provided)
        create_schema: Whether to create missing tables
    """
    global _engine, _session_factory

    _engine = create_engine(database_url)
    _session_factory = create_session_factory(_engine)

    if create_schema:
        await create_tables(_engine)

    logger.info(
        "Database initialized successfully",
        extra={"event_type": "database_initialized"}
    )


async def close_database() -> None:
    """
    Close database connections and cleanup resources.
    """
    global _engine, _session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        logger.info(
            "Database connections closed",
            extra={"event_type": "database_closed"}
        )

    _session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get the global session factory.

    Returns:
        Async session factory

    Raises:
        RuntimeError: If database is not initialized
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _session_factory


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Unit-of-work session: commits on success, rolls back on error.

    Yields:
        SQLAlchemy async session

    Example:
        async with get_session() as session:
            container = build_container(session, ...)
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
