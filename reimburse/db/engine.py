"""PostgreSQL access: async engine, sessions, and startup/shutdown hooks.

SQLAlchemy 2.0 asyncio over asyncpg. The HTTP layer gets one session per
request from ``get_session``; background work (the audit subscriber) opens
its own with ``session_scope``.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncGenerator, AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from reimburse.config import DatabaseSettings, settings

logger = logging.getLogger(__name__)


def build_engine(db: DatabaseSettings) -> AsyncEngine:
    return create_async_engine(
        db.database_url,
        echo=db.sql_echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


engine: AsyncEngine = build_engine(settings.db)

# Objects stay readable after commit; routes serialise them afterwards
async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one transaction per HTTP request.

    Commits when the route returns, rolls back if it raises (including the
    domain errors the API turns into 4xx responses).
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@contextlib.asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Standalone unit of work outside a request; commits on clean exit."""
    async with async_session_factory() as session:
        async with session.begin():
            yield session


# ── Lifecycle ────────────────────────────────────────────────────────


async def init_db() -> None:
    """Check the connection; outside production also create missing tables.

    Production schemas are managed by Alembic only.
    """
    from reimburse.models import Base  # registers every mapped table

    async with engine.begin() as conn:
        if settings.is_production:
            return
        await conn.run_sync(Base.metadata.create_all)
        logger.info("Ensured %d tables exist", len(Base.metadata.tables))


async def close_db() -> None:
    await engine.dispose()


@contextlib.asynccontextmanager
async def db_lifespan() -> AsyncIterator[None]:
    """Open the pool on startup and dispose it on shutdown."""
    await init_db()
    try:
        yield
    finally:
        await close_db()
