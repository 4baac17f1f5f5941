"""Alembic environment for the marketplace schema.

The URL always comes from application settings (``DATABASE__URL``), so
migrations and the API server never disagree about the target database.
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from estate_market.core.config import get_settings
from estate_market.db import models  # noqa: F401  registers tables on Base.metadata
from estate_market.infrastructure.database.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
database_url = get_settings().database_url


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _context_options(url: str) -> dict:
    # SQLite cannot ALTER most column properties in place; batch mode
    # rebuilds the table instead. compare_type catches money columns
    # changing storage type.
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": _is_sqlite(url),
    }


def run_migrations_offline() -> None:
    """Emit SQL for the configured database without connecting to it."""
    offline_url = database_url.replace("+aiosqlite", "").replace("+asyncpg", "")
    context.configure(
        url=offline_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_context_options(offline_url),
    )
    with context.begin_transaction():
        context.run_migrations()


def _apply(connection: Connection) -> None:
    context.configure(connection=connection, **_context_options(database_url))
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    # A dedicated engine without pooling; the application's cached engine
    # stays untouched when migrations run inside the server process.
    engine = create_async_engine(database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_apply)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
