"""
Database Infrastructure
=======================

Manages database connections, session lifecycle, and engine configuration.

Uses SQLAlchemy 2.0 async engines: asyncpg for PostgreSQL in production,
aiosqlite for local development and tests.
"""

from contextlib import asynccontextmanager, contextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Iterator, Optional

from sqlalchemy import DateTime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from ispdesk.config import settings
from ispdesk.core.exceptions import RepositoryException


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    SQLAlchemy 2.0 style using DeclarativeBase.
    All models inherit from this class.
    """
    pass


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime stored in UTC.

    SQLite drops tzinfo on the way back; values are re-tagged as UTC so the
    domain always compares aware datetimes.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# Global engine and session maker
_engine: AsyncEngine | None = None
_session_maker: async_sessionmaker[AsyncSession] | None = None


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Pool sizing only applies to server databases; SQLite uses its own pool.
    """
    # asyncpg expects ssl= rather than libpq's sslmode=
    database_url = database_url.replace("sslmode=", "ssl=")

    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)

    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,  # Verify connections before using
    )


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory shared by the app and the test-suite."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Prevent lazy loading after commit
        autoflush=False,
    )


def get_engine() -> AsyncEngine:
    """
    Get the database engine.

    Raises:
        RuntimeError: If engine has not been initialized
    """
    if _engine is None:
        raise RuntimeError("Database engine not initialized. Call init_database() first.")
    return _engine


def init_database(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Initialize the database engine and session maker.

    Should be called during application startup.
    """
    global _engine, _session_maker

    _engine = build_engine(database_url or settings.database_url, echo=settings.debug)
    _session_maker = build_session_maker(_engine)
    return _engine


async def close_database() -> None:
    """
    Close the database engine and dispose of connections.

    Should be called during application shutdown.
    """
    global _engine, _session_maker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_maker = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async generator for database sessions.

    For use with FastAPI's Depends(): the request's writes commit together
    when the handler returns and roll back if it raises.

    Yields:
        AsyncSession: SQLAlchemy async session
    """
    if _session_maker is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    async with _session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager for database sessions.

    For use in scripts and startup hooks outside the request cycle.

    Usage:
        async with get_session_context() as session:
            await CategoryRegistryService(...).seed_defaults(actor)
    """
    if _session_maker is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    async with _session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables(engine: Optional[AsyncEngine] = None) -> None:
    """
    Create all database tables.

    This should only be used for development/testing.
    Production should use migrations (Alembic).
    """
    # Import models so they register on Base.metadata
    import ispdesk.categories.infrastructure.models  # noqa: F401
    import ispdesk.tickets.infrastructure.models  # noqa: F401
    import ispdesk.audit.infrastructure.models  # noqa: F401

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@contextmanager
def translate_db_errors(operation: str) -> Iterator[None]:
    """
    Re-raise driver and ORM failures as RepositoryException.

    Usage:
        with translate_db_errors("save ticket"):
            await self._session.flush()
    """
    try:
        yield
    except SQLAlchemyError as e:
        raise RepositoryException(
            f"Database error while trying to {operation}",
            {"operation": operation, "error": type(e).__name__}
        ) from e
