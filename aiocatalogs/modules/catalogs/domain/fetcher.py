"""Manifest fetcher port."""

from typing import Protocol

from aiocatalogs.modules.catalogs.domain.entities import CatalogSource


class ManifestFetcherPort(Protocol):
    async def fetch(self, url: str) -> CatalogSource | None: ...

    async def check_health(self, source: CatalogSource) -> bool: ...
