"""Relational source store on the ``user_configs`` table."""

from datetime import UTC, datetime

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import col, select

from aiocatalogs.modules.catalogs.domain.entities import CatalogSource
from aiocatalogs.modules.catalogs.domain.exceptions import StorageUnavailableError
from aiocatalogs.modules.catalogs.domain.repository import SourceStore
from aiocatalogs.modules.catalogs.infrastructure.mappers import UserConfigMapper
from aiocatalogs.modules.catalogs.infrastructure.models import UserConfigModel


class DatabaseSourceStore(SourceStore):
    """Source store backed by SQLAlchemy async sessions."""

    backend_name = "database"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        mapper: UserConfigMapper | None = None,
    ):
        self.session_factory = session_factory
        self.mapper = mapper or UserConfigMapper()

    async def load_sources(self, user_id: str) -> list[CatalogSource]:
        statement = select(UserConfigModel).where(UserConfigModel.user_id == user_id)
        try:
            async with self.session_factory() as session:
                result = await session.execute(statement)
                model = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error loading config for user {user_id}: {e}")
            return []

        if model is None:
            return []
        return self.mapper.to_domain(model.config)

    async def save_sources(self, user_id: str, sources: list[CatalogSource]) -> bool:
        payload = self.mapper.to_payload(sources)
        try:
            async with self.session_factory() as session:
                model = await session.get(UserConfigModel, user_id)
                if model is None:
                    session.add(UserConfigModel(user_id=user_id, config=payload))
                else:
                    model.config = payload
                    model.updated_at = datetime.now(UTC)
                    session.add(model)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error saving config for user {user_id}: {e}")
            return False
        return True

    async def exists(self, user_id: str) -> bool:
        statement = select(UserConfigModel.user_id).where(
            UserConfigModel.user_id == user_id
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(statement)
                return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            logger.error(f"Error checking user {user_id}: {e}")
            raise StorageUnavailableError(str(e)) from e

    async def list_users(self) -> list[str]:
        statement = select(UserConfigModel.user_id).order_by(
            col(UserConfigModel.user_id)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(statement)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing users: {e}")
            return []

    async def check_health(self) -> str | None:
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning(f"Database health check failed: {e}")
            return str(e)
        return None
