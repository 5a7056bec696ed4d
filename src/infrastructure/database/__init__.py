"""
Database Infrastructure
=======================

Manages database connections, session lifecycle, and engine configuration.

Uses SQLAlchemy 2.0 async engines. Two backends are supported through the
same models and repositories:
- SQLite via aiosqlite (embedded file, the default)
- PostgreSQL via asyncpg (client-server)

A ``Database`` is constructed explicitly, opened at application startup and
closed at shutdown. There is no module-level engine.
"""

import functools
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import DateTime, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

from src.config import Settings
from src.core import StorageUnavailableException
from src.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    SQLAlchemy 2.0 style using DeclarativeBase.
    All models inherit from this class.
    """
    pass


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC datetime on every backend.

    SQLite has no timezone storage, so values are written as naive UTC and
    re-tagged as UTC on the way out. PostgreSQL stores timestamptz as is.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("naive datetimes are not accepted, use an aware UTC value")
        value = value.astimezone(timezone.utc)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def storage_operation(func):
    """
    Translate driver and connection failures into StorageUnavailableException.

    Wraps async repository methods and commits. Application exceptions pass
    through untouched.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "Storage operation failed",
                extra={
                    "operation": func.__qualname__,
                    "error_type": type(e).__name__,
                    "error": str(e),
                }
            )
            raise StorageUnavailableException(func.__qualname__, str(e)) from e

    return wrapper


def normalize_database_url(database_url: str) -> str:
    """
    Pick the async driver for bare PostgreSQL and SQLite URLs.

    Hosted PostgreSQL usually hands out ``postgres://`` URLs with ``sslmode``,
    which asyncpg spells ``ssl``.
    """
    if database_url.startswith("postgres://"):
        database_url = "postgresql+asyncpg://" + database_url[len("postgres://"):]
    elif database_url.startswith("postgresql://"):
        database_url = "postgresql+asyncpg://" + database_url[len("postgresql://"):]
    elif database_url.startswith("sqlite://"):
        database_url = "sqlite+aiosqlite://" + database_url[len("sqlite://"):]

    if database_url.startswith("postgresql+asyncpg://"):
        database_url = database_url.replace("sslmode=", "ssl=")
    return database_url


class Database:
    """
    Owns one async engine and its session factory.

    Usage:
        database = Database(settings)
        database.connect()
        await database.create_tables()
        async with database.session() as session:
            ...
        await database.close()
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._url = normalize_database_url(settings.database_url)
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None

    @property
    def backend(self) -> str:
        """Dialect name: 'sqlite' or 'postgresql'."""
        return make_url(self._url).get_backend_name()

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        """
        The open engine.

        Raises:
            RuntimeError: If connect() has not been called
        """
        if self._engine is None:
            raise RuntimeError("Database engine not initialized. Call connect() first.")
        return self._engine

    def connect(self) -> AsyncEngine:
        """
        Create the engine and session maker.

        No connection is opened here; the first query does that, so an
        unreachable database surfaces as StorageUnavailableException on use.
        """
        url = make_url(self._url)
        timeout = self._settings.db_connect_timeout

        engine_options = {
            "echo": self._settings.debug,
            "pool_pre_ping": True,  # Verify connections before using
        }

        if url.get_backend_name() == "sqlite":
            engine_options["connect_args"] = {"timeout": timeout}
            if url.database in (None, "", ":memory:"):
                # One shared connection, otherwise every session sees an empty database
                engine_options["poolclass"] = StaticPool
        else:
            engine_options.update(
                pool_size=self._settings.db_pool_size,
                max_overflow=self._settings.db_max_overflow,
                pool_timeout=timeout,
                connect_args={"timeout": timeout},
            )

        self._engine = create_async_engine(url, **engine_options)

        if url.get_backend_name() == "sqlite":
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._session_maker = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Prevent lazy loading after commit
            autoflush=False,
        )

        logger.info("Database engine created", extra={"backend": self.backend})
        return self._engine

    async def close(self) -> None:
        """Dispose of pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None
            logger.info("Database connections closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Async context manager for database sessions.

        Commits on clean exit and rolls back when the block raises.

        Usage:
            async with database.session() as session:
                result = await session.execute(select(TicketModel))
        """
        if self._session_maker is None:
            raise RuntimeError("Database not initialized. Call connect() first.")

        async with self._session_maker() as session:
            try:
                yield session
                await _commit(session)
            except Exception:
                await session.rollback()
                raise

    @storage_operation
    async def create_tables(self) -> None:
        """
        Create all database tables.

        Idempotent; existing tables are left alone.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @storage_operation
    async def ping(self) -> None:
        """Round-trip a trivial query."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))


@storage_operation
async def _commit(session: AsyncSession) -> None:
    await session.commit()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Session per request, for use with FastAPI's Depends().

    The Database is taken from ``app.state.database``, set by the lifespan.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
