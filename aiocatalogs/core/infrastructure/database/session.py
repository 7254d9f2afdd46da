"""Database session management.

The engine is created lazily so deployments on the file backend never need a
database driver installed.
"""

from functools import lru_cache

from loguru import logger
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from aiocatalogs.core.config import settings


@lru_cache
def get_async_engine(url: str | None = None) -> AsyncEngine:
    """Return the process-wide async engine for ``url``."""
    return create_async_engine(
        url or settings.SQLALCHEMY_DATABASE_URI,
        echo=settings.ENVIRONMENT == "local" and settings.LOG_LEVEL == "DEBUG",
        pool_pre_ping=True,
    )


def get_session_factory(
    engine: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine or get_async_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Check connectivity and create missing tables."""
    engine = engine or get_async_engine()
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database connection established successfully")
    except Exception as e:
        logger.error(f"Failed to connect to database: {e}")
        raise
