"""
Alembic Migration Environment
===============================

What:  Runs the ComfortMap schema migrations (one table: `reviews`).
Why:   The app can create the table itself on startup (DB_AUTO_CREATE), but a
       production PostgreSQL store should get its schema, including the
       created_at DESC index, from versioned migrations.
How:   The URL comes from comfortmap settings (DATABASE_URL), never from
       alembic.ini, so the app and its migrations can't point at different
       stores. Online mode drives the async engine through run_sync().
Who:   `alembic upgrade head` / `alembic downgrade base` from backend/.

Usage:
    cd backend
    DATABASE_URL=postgresql+asyncpg://... alembic upgrade head
    DATABASE_URL=sqlite+aiosqlite:///./comfortmap.db alembic upgrade head
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context

from comfortmap.config import settings
from comfortmap.database import Base

# Registers the reviews table on Base.metadata for --autogenerate
from comfortmap.models.review import Review  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    # SQLite can't ALTER most things in place; batch mode rebuilds the table
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=settings.database_url.startswith("sqlite"),
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Print the migration SQL for DATABASE_URL without connecting."""
    _configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """
    Apply pending migrations over one async connection.

    NullPool: a migration run is a single short-lived connection, and the
    pool sizing in settings is meant for the API server.
    """
    engine = create_async_engine(settings.database_url, poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await engine.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
