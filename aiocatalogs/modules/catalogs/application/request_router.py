"""Route composite catalog requests back to the owning upstream source."""

import random
from typing import Any

from loguru import logger

from aiocatalogs.core.config import settings
from aiocatalogs.core.infrastructure.http import JsonHttpClient
from aiocatalogs.core.infrastructure.logging import BusinessEvents
from aiocatalogs.modules.catalogs.domain.entities import CatalogSource
from aiocatalogs.modules.catalogs.domain.manifest import (
    DEFAULT_CATALOG_ID,
    SETUP_REQUIRED_ITEM_ID,
    CatalogResponse,
    parse_composite_id,
)


class CatalogRequestRouter:
    """Resolve ``sourceId:catalogId`` and fetch live content from that source.

    Every failure path (malformed id, unknown source or catalog, upstream
    error) yields an empty listing. A manifest cached before a source was
    removed can still reference it, so none of these are hard errors.
    """

    def __init__(
        self,
        http_client: JsonHttpClient | None = None,
        setup_poster: str | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.http_client = http_client or JsonHttpClient()
        self.setup_poster = setup_poster or settings.ADDON_LOGO
        self.rng = rng or random.Random()

    async def route(
        self,
        composite_id: str,
        content_type: str,
        sources: list[CatalogSource],
    ) -> CatalogResponse:
        logger.debug(f"Catalog request for type {content_type}, id {composite_id}")

        if composite_id == DEFAULT_CATALOG_ID:
            return CatalogResponse(metas=[self._setup_required_item(content_type)])

        parsed = parse_composite_id(composite_id)
        if parsed is None:
            logger.warning(f"Invalid catalog ID format: {composite_id}")
            return CatalogResponse.empty()
        source_id, catalog_id = parsed

        source = next((s for s in sources if s.id == source_id), None)
        if source is None:
            logger.warning(f"Source not found: {source_id}")
            return CatalogResponse.empty()

        if source.find_catalog(catalog_id, content_type) is None:
            logger.warning(
                f"Catalog not found: {catalog_id} ({content_type}) in source {source_id}"
            )
            return CatalogResponse.empty()

        url = self.catalog_url(source, content_type, catalog_id)
        logger.debug(f"Fetching catalog from: {url}")
        response = await self.http_client.get_json(url)
        if not response.ok:
            return CatalogResponse.empty()

        metas = self._extract_metas(response.data, url)
        for item in metas:
            item["sourceAddon"] = source_id
        if source.randomize:
            self.rng.shuffle(metas)

        BusinessEvents.catalog_routed(
            source_id=source_id,
            catalog_id=catalog_id,
            content_type=content_type,
            item_count=len(metas),
            latency_ms=response.duration_ms,
        )
        return CatalogResponse(metas=metas)

    @staticmethod
    def catalog_url(source: CatalogSource, content_type: str, catalog_id: str) -> str:
        endpoint = source.endpoint.rstrip("/")
        return f"{endpoint}/catalog/{content_type}/{catalog_id}.json"

    @staticmethod
    def _extract_metas(data: Any, url: str) -> list[dict[str, Any]]:
        if not isinstance(data, dict):
            logger.warning(f"Catalog response from {url} is not an object")
            return []
        metas = data.get("metas")
        if metas is None:
            return []
        if not isinstance(metas, list):
            logger.warning(f"Catalog response from {url} has non-list metas")
            return []
        return [item for item in metas if isinstance(item, dict)]

    def _setup_required_item(self, content_type: str) -> dict[str, Any]:
        return {
            "id": SETUP_REQUIRED_ITEM_ID,
            "type": content_type,
            "name": "Setup Required",
            "poster": self.setup_poster,
            "description": "Please visit the configuration page to add catalogs.",
        }
