"""Async SQLAlchemy engine, session management and the atomic unit of work."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from estate_market.core.config import get_settings
from estate_market.infrastructure.database.base import Base
from estate_market.modules.common.exceptions import MarketplaceError

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
AsyncSessionFactory: async_sessionmaker[AsyncSession] | None = None


def _build_engine() -> AsyncEngine:
    settings = get_settings()
    engine_kwargs: dict[str, Any] = {
        "echo": settings.database.echo or settings.debug,
        "future": True,
    }
    if settings.database.pool_size is not None:
        engine_kwargs["pool_size"] = settings.database.pool_size
    if settings.database.max_overflow is not None:
        engine_kwargs["max_overflow"] = settings.database.max_overflow

    return create_async_engine(settings.database_url, **engine_kwargs)


def get_engine() -> AsyncEngine:
    global _engine, AsyncSessionFactory
    if _engine is None:
        _engine = _build_engine()
        AsyncSessionFactory = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _engine


async def dispose_engine() -> None:
    global _engine, AsyncSessionFactory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    AsyncSessionFactory = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    if AsyncSessionFactory is None:
        get_engine()

    assert AsyncSessionFactory is not None  # for mypy
    async with AsyncSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a block as one all-or-nothing database transaction.

    Commits when the block exits normally. On any exception the whole
    transaction is rolled back before the exception propagates, so none of
    the block's writes are ever visible to other readers.
    """
    try:
        yield session
        await session.commit()
    except MarketplaceError:
        await session.rollback()
        raise
    except Exception:
        logger.exception("Atomic operation failed, rolling back")
        await session.rollback()
        raise


async def init_db() -> None:
    """Create database tables in development mode (migrations preferred)."""
    from estate_market.db import models  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
