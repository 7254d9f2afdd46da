"""Source registry query services."""

from dataclasses import dataclass

from aiocatalogs.core.domain.exceptions import EntityNotFoundError
from aiocatalogs.modules.catalogs.domain.entities import CatalogSource
from aiocatalogs.modules.catalogs.domain.exceptions import UserNotFoundError
from aiocatalogs.modules.catalogs.domain.fetcher import ManifestFetcherPort
from aiocatalogs.modules.catalogs.domain.repository import SourceStore


@dataclass(frozen=True)
class SourceHealthData:
    source_id: str
    endpoint: str
    reachable: bool


class SourceQueryService:
    """Read-side access to a user's registered sources."""

    def __init__(self, store: SourceStore, fetcher: ManifestFetcherPort) -> None:
        self.store = store
        self.fetcher = fetcher

    async def ensure_user(self, user_id: str) -> None:
        if not await self.store.exists(user_id):
            raise UserNotFoundError(user_id)

    async def list_sources(self, user_id: str) -> list[CatalogSource]:
        await self.ensure_user(user_id)
        return await self.store.load_sources(user_id)

    async def get_source(self, user_id: str, source_id: str) -> CatalogSource:
        for source in await self.list_sources(user_id):
            if source.id == source_id:
                return source
        raise EntityNotFoundError("Source", source_id)

    async def check_source_health(
        self, user_id: str, source_id: str
    ) -> SourceHealthData:
        source = await self.get_source(user_id, source_id)
        reachable = await self.fetcher.check_health(source)
        return SourceHealthData(
            source_id=source.id, endpoint=source.endpoint, reachable=reachable
        )
