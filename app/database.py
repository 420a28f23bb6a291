"""Database backends and session management.

Both backends serve the same ORM models:

- ``DatabaseBackend`` talks to the configured ``DATABASE_URL`` (PostgreSQL via
  asyncpg). Its schema is owned by the Alembic revisions.
- ``FixtureBackend`` is an in-memory SQLite database, created from the model
  metadata and seeded with the fixture set. It is used when no database is
  configured, so reads fall back to fixed fixture data.

The backend is picked once at startup and kept on ``app.state.backend``.
"""
import logging
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class DatabaseBackend:
    name = "database"

    def __init__(self, url: str, echo: bool = False):
        self.engine = create_async_engine(url, echo=echo, pool_pre_ping=True)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    async def prepare(self) -> None:
        pass

    async def dispose(self) -> None:
        await self.engine.dispose()


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class FixtureBackend(DatabaseBackend):
    name = "fixture"

    def __init__(self, echo: bool = False):
        # A single shared connection keeps the in-memory database alive
        self.engine = create_async_engine(
            "sqlite+aiosqlite://",
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        event.listen(self.engine.sync_engine, "connect", _enable_foreign_keys)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    async def prepare(self) -> None:
        import app.models  # noqa: F401  (registers the tables)
        from app.fixtures import seed_fixtures

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with self.sessionmaker() as session:
            await seed_fixtures(session)
            await session.commit()


def select_backend(settings: Settings) -> DatabaseBackend:
    if settings.store_configured:
        logger.info("Using database backend")
        return DatabaseBackend(settings.DATABASE_URL, echo=settings.SQL_ECHO)

    logger.warning("DATABASE_URL is not configured, serving the in-memory fixture store")
    return FixtureBackend(echo=settings.SQL_ECHO)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.backend.sessionmaker() as session:
        yield session
