# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database connection management using SQLAlchemy async.

Uses the SQLAlchemy 2.0 async API: asyncpg in deployment, aiosqlite for
local runs and tests. Timeouts and reconnect behaviour come from the engine
and driver configuration; the services add none of their own.

Example:
    from coursesched.infrastructure.database.connection import (
        init_database,
        get_session,
    )

    # Initialize at application startup
    await init_database(settings)

    # Use in request handlers
    async with get_session() as session:
        result = await session.execute(select(User))
"""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from coursesched.core.exceptions import StoreFailureError
from coursesched.infrastructure.database.models import Base

if TYPE_CHECKING:
    from coursesched.core.config.settings import Settings

_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


class DatabaseError(StoreFailureError):
    """Raised when the database layer itself is unavailable or misused."""


def create_engine_from_url(url: str, echo: bool = False, **pool_options: int) -> AsyncEngine:
    """Create an async engine suitable for the given URL.

    SQLite URLs get a single shared connection so in-memory databases survive
    across sessions. Other URLs get a pre-pinged, recycled connection pool.

    Args:
        url: Async database URL.
        echo: Log emitted SQL.
        **pool_options: pool_size / max_overflow for pooled engines.

    Returns:
        The configured engine.
    """
    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_recycle=1800,
        **pool_options,
    )


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Build the session factory used across the application."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_database(settings: "Settings", create_tables: bool = False) -> None:
    """Initialize the database connection pool.

    Args:
        settings: Application settings containing database configuration.
        create_tables: Create missing tables (local development and tests;
            deployed databases are migrated separately).

    Raises:
        DatabaseError: If engine creation or table creation fails.
    """
    global _engine, _sessionmaker

    try:
        if settings.db.is_sqlite:
            _engine = create_engine_from_url(settings.db.url, echo=False)
        else:
            _engine = create_engine_from_url(
                settings.db.url,
                echo=False,
                pool_size=settings.db.pool_size,
                max_overflow=settings.db.max_overflow,
            )
        _sessionmaker = create_sessionmaker(_engine)

        if create_tables:
            async with _engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to initialize database connection", e) from e


async def close_database() -> None:
    """Close the database connection pool."""
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _sessionmaker = None


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the sessionmaker.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _sessionmaker is None:
        raise DatabaseError("Database not initialized. Call init_database() first.")
    return _sessionmaker


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Get an async session.

    Services commit their own units of work. Anything left pending when the
    block exits is rolled back on error.

    Yields:
        AsyncSession for database operations.

    Raises:
        DatabaseError: If the database has not been initialized or
            if a database operation fails.
    """
    sessionmaker = get_sessionmaker()

    async with sessionmaker() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            raise DatabaseError("Database operation failed", e) from e
        except Exception:
            await session.rollback()
            raise


async def check_database_connection() -> bool:
    """Check if the database is reachable.

    Returns:
        True if the database is reachable, False otherwise.
    """
    if _engine is None:
        return False

    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
