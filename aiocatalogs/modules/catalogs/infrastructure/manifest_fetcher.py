"""Fetch third-party addon manifests and turn them into CatalogSource values.

Upstream manifests are untrusted JSON. Everything is validated here so nothing
past this module ever sees a raw manifest dict.
"""

from typing import Any

from loguru import logger
from pydantic import ValidationError

from aiocatalogs.core.infrastructure.http import JsonHttpClient
from aiocatalogs.modules.catalogs.domain.entities import (
    DEFAULT_RESOURCES,
    DEFAULT_TYPES,
    DEFAULT_VERSION,
    CatalogEntry,
    CatalogSource,
    is_search_catalog,
)

MANIFEST_FILE = "manifest.json"


def to_https_url(url: str) -> str:
    """Rewrite a custom deep-link scheme (``stremio://`` ...) to ``https://``."""
    url = url.strip()
    scheme, sep, rest = url.partition("://")
    if sep and scheme.lower() not in ("http", "https"):
        return f"https://{rest}"
    return url


def split_manifest_url(url: str) -> tuple[str, str]:
    """Return ``(endpoint, manifest_url)`` for a user-supplied addon URL.

    The endpoint never ends with a slash; the manifest URL always ends with
    exactly one ``/manifest.json``.
    """
    base = to_https_url(url)
    suffix = f"/{MANIFEST_FILE}"
    if base.endswith(suffix):
        base = base[: -len(suffix)]
    base = base.rstrip("/") + "/"
    return base.rstrip("/"), f"{base}{MANIFEST_FILE}"


class ManifestFetcher:
    """Resolve addon URLs into validated CatalogSource values."""

    def __init__(self, http_client: JsonHttpClient | None = None) -> None:
        self.http_client = http_client or JsonHttpClient()

    async def fetch(self, url: str) -> CatalogSource | None:
        """Fetch the manifest behind ``url``. Returns None when unusable."""
        source_url = to_https_url(url)
        endpoint, manifest_url = split_manifest_url(source_url)
        logger.debug(f"Fetching manifest from: {manifest_url}")

        response = await self.http_client.get_json(manifest_url)
        if not response.ok:
            logger.warning(
                f"Failed to fetch manifest from {manifest_url}: {response.error}"
            )
            return None

        source = self.parse_manifest(response.data, endpoint, source_url)
        if source is not None:
            logger.info(
                f"Fetched manifest for {source.name} with {len(source.catalogs)} catalogs"
            )
        return source

    async def check_health(self, source: CatalogSource) -> bool:
        """Check whether a registered source still serves its manifest."""
        response = await self.http_client.get_json(
            f"{source.endpoint}/{MANIFEST_FILE}"
        )
        if not response.ok:
            logger.warning(f"Health check failed for {source.id}: {response.error}")
        return response.ok

    @staticmethod
    def parse_manifest(
        payload: Any, endpoint: str, source_url: str
    ) -> CatalogSource | None:
        if not isinstance(payload, dict):
            logger.error("Invalid manifest format: not an object")
            return None

        manifest_id = payload.get("id")
        name = payload.get("name")
        raw_catalogs = payload.get("catalogs")
        if (
            not isinstance(manifest_id, str)
            or not manifest_id
            or not isinstance(name, str)
            or not name
            or not isinstance(raw_catalogs, list)
        ):
            logger.error("Invalid manifest format: missing required fields")
            return None

        catalogs = ManifestFetcher._parse_catalogs(raw_catalogs)
        browsable = [c for c in catalogs if not is_search_catalog(c.id)]
        if len(browsable) != len(catalogs):
            logger.info(
                f"Filtered out {len(catalogs) - len(browsable)} search catalogs from {name}"
            )

        description = payload.get("description")
        version = payload.get("version")
        id_prefixes = payload.get("idPrefixes")
        behavior_hints = payload.get("behaviorHints")

        return CatalogSource(
            id=manifest_id,
            name=name,
            description=(
                description
                if isinstance(description, str) and description
                else f"Catalog from {source_url}"
            ),
            endpoint=endpoint,
            version=version if isinstance(version, str) and version else DEFAULT_VERSION,
            resources=ManifestFetcher._parse_resources(payload.get("resources")),
            types=ManifestFetcher._parse_strings(payload.get("types"), DEFAULT_TYPES),
            catalogs=browsable,
            id_prefixes=(
                [p for p in id_prefixes if isinstance(p, str)]
                if isinstance(id_prefixes, list)
                else None
            ),
            behavior_hints=behavior_hints if isinstance(behavior_hints, dict) else None,
        )

    @staticmethod
    def _parse_catalogs(raw_catalogs: list[Any]) -> list[CatalogEntry]:
        catalogs: list[CatalogEntry] = []
        for raw in raw_catalogs:
            if not isinstance(raw, dict):
                continue
            try:
                catalogs.append(CatalogEntry.model_validate(raw))
            except ValidationError as e:
                logger.debug(f"Skipping malformed catalog entry {raw!r}: {e}")
        return catalogs

    @staticmethod
    def _parse_resources(value: Any) -> list[str]:
        # Resources are either plain names or {"name": ..., "types": [...]} objects
        if not isinstance(value, list) or not value:
            return list(DEFAULT_RESOURCES)
        resources: list[str] = []
        for item in value:
            name = item.get("name") if isinstance(item, dict) else item
            if isinstance(name, str) and name not in resources:
                resources.append(name)
        return resources or list(DEFAULT_RESOURCES)

    @staticmethod
    def _parse_strings(value: Any, default: list[str]) -> list[str]:
        if not isinstance(value, list) or not value:
            return list(default)
        return [v for v in value if isinstance(v, str)] or list(default)
