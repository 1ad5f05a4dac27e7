"""
Alpha Tower Backend — Database Session Management
===================================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       per-request session dependency.
How:   `Database` owns one engine and one session factory. The app factory
       builds it from `Settings` and stores it on `app.state.database`.
       `get_db_session` yields a session per request that commits on success
       and rolls back on error.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from alpha_tower.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models share this metadata, which Alembic reads for --autogenerate.
    """
    pass


class Database:
    """
    Engine and session factory for one configured database.

    Connection Pooling:
        pool_size / max_overflow / pre_ping come from settings for server
        databases. SQLite URLs use SQLAlchemy's default pool for the dialect,
        which rejects the sizing arguments.
    """

    def __init__(self, settings: Settings):
        engine_kwargs = {"echo": settings.log_level == "DEBUG"}
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )

        self.engine: AsyncEngine = create_async_engine(settings.database_url, **engine_kwargs)

        # expire_on_commit=False: attributes stay readable after commit,
        # lazy refreshes are not possible outside the session's greenlet.
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create every table registered on `Base.metadata` (dev/test only)."""
        # Importing the models registers their tables on the metadata
        from alpha_tower import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created from model metadata")

    async def ping(self) -> bool:
        """Run a lightweight `SELECT 1`; False if the database is unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's session factory
        2. Yields it to the route handler (repositories flush through it)
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the exception handlers
        5. Always: closes the session (returns connection to pool)
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
