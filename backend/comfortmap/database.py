"""
ComfortMap Backend — Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all review store connection logic in one place.
How:   Creates an async engine, provides a session dependency that
       auto-commits on success and auto-rolls-back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

The store is treated as an opaque single-collection document store: one
table, insert-one and find-all-sorted. PostgreSQL (asyncpg) is the default
target; SQLite (aiosqlite) is supported for local runs and tests.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from comfortmap.config import settings

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> Dict[str, Any]:
    """
    Build create_async_engine() keyword arguments for the given URL.

    SQLite drivers manage their own pool and reject pool sizing arguments,
    so those are only passed for server databases.
    """
    options: Dict[str, Any] = {
        "echo": settings.log_level == "DEBUG",
    }
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


def create_engine(database_url: str) -> AsyncEngine:
    """Create an async engine configured for the review store."""
    return create_async_engine(database_url, **_engine_options(database_url))


# ── Engine & Session Factory ──────────────────────────────────────────────
engine = create_engine(settings.database_url)

# expire_on_commit=False: records stay readable after commit so the
# created review can be serialized without another round trip
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits any pending work
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    Raises:
        Any database exceptions are propagated to the global error handler.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
def masked_database_url() -> str:
    """The configured database URL with any password hidden, safe for logs."""
    return make_url(settings.database_url).render_as_string(hide_password=True)


async def create_tables() -> None:
    """
    Create the reviews table if it doesn't exist.

    When: Startup, if DB_AUTO_CREATE is enabled. Alembic owns the schema
    everywhere else.
    """
    # Model module must be imported so its table is registered on Base
    from comfortmap.models import review  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_database() -> bool:
    """Run SELECT 1 against the store. Returns False instead of raising."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database unreachable: %s", str(e))
        return False
    return True


async def dispose_engine() -> None:
    """Gracefully close all pooled connections (application shutdown)."""
    await engine.dispose()
