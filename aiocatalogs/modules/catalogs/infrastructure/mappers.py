"""Conversion between stored user configuration payloads and domain sources."""

from typing import Any

from loguru import logger
from pydantic import ValidationError

from aiocatalogs.modules.catalogs.domain.entities import CatalogSource


class UserConfigMapper:
    """Map the persisted ``{"catalogs": [...]}`` document to CatalogSource lists.

    Documents written by older versions may also carry a ``catalogOrder`` list
    of source ids; when present it decides the order, and sources missing
    from it follow in stored order. The ``randomizedCatalogs`` list of source
    ids is read into, and written back from, each source's randomize flag.
    """

    def to_domain(self, payload: Any) -> list[CatalogSource]:
        if not isinstance(payload, dict):
            return []
        raw_sources = payload.get("catalogs")
        if not isinstance(raw_sources, list):
            return []

        sources: list[CatalogSource] = []
        for raw in raw_sources:
            try:
                sources.append(CatalogSource.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping invalid stored source: {e}")

        randomized = payload.get("randomizedCatalogs")
        if isinstance(randomized, list):
            randomized_ids = {i for i in randomized if isinstance(i, str)}
            sources = [
                source.model_copy(update={"randomize": True})
                if source.id in randomized_ids
                else source
                for source in sources
            ]

        order = payload.get("catalogOrder")
        if isinstance(order, list) and order:
            sources = self._apply_order(sources, order)

        # ids are unique; a later duplicate replaces the earlier one in place
        unique: dict[str, CatalogSource] = {}
        for source in sources:
            unique[source.id] = source
        return list(unique.values())

    def to_payload(self, sources: list[CatalogSource]) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "catalogs": [source.to_storage() for source in sources]
        }
        randomized = [source.id for source in sources if source.randomize]
        if randomized:
            payload["randomizedCatalogs"] = randomized
        return payload

    @staticmethod
    def _apply_order(
        sources: list[CatalogSource], order: list[Any]
    ) -> list[CatalogSource]:
        by_id = {source.id: source for source in sources}
        ordered = [
            by_id[source_id]
            for source_id in order
            if isinstance(source_id, str) and source_id in by_id
        ]
        placed = {source.id for source in ordered}
        ordered.extend(source for source in sources if source.id not in placed)
        return ordered
