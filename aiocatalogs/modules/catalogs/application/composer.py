"""Compose one addon manifest out of a user's registered sources."""

from dataclasses import dataclass

from loguru import logger

from aiocatalogs.core.config import settings
from aiocatalogs.core.infrastructure.logging import BusinessEvents
from aiocatalogs.modules.catalogs.domain.entities import (
    CatalogEntry,
    CatalogSource,
    is_search_catalog,
)
from aiocatalogs.modules.catalogs.domain.manifest import (
    DEFAULT_CATALOG_ID,
    DEFAULT_CATALOG_NAME,
    ERROR_CATALOG_ID,
    ERROR_CATALOG_NAME,
    SUPPORTED_RESOURCES,
    CompositeCatalogEntry,
    CompositeManifest,
    make_composite_id,
)


@dataclass(frozen=True)
class ManifestShell:
    """Fixed display fields of the composite manifest."""

    addon_id: str
    name: str
    version: str
    description: str
    logo: str
    background: str

    @classmethod
    def from_settings(cls) -> "ManifestShell":
        return cls(
            addon_id=settings.ADDON_ID,
            name=settings.ADDON_NAME,
            version=settings.ADDON_VERSION,
            description=settings.ADDON_DESCRIPTION,
            logo=settings.ADDON_LOGO,
            background=settings.ADDON_BACKGROUND,
        )


class ManifestComposer:
    """Build the composite manifest for one user.

    Catalog ids are namespaced as ``<sourceId>:<catalogId>`` so the request
    router can find the owning source again. Source order and catalog order
    are preserved, and ``types``/``resources`` keep first-seen order so two
    builds from the same input are identical.
    """

    def __init__(self, shell: ManifestShell | None = None) -> None:
        self.shell = shell or ManifestShell.from_settings()

    def compose(self, user_id: str, sources: list[CatalogSource]) -> CompositeManifest:
        try:
            manifest = self._compose(user_id, sources)
        except Exception as e:
            logger.exception(f"Error building manifest for user {user_id}: {e}")
            BusinessEvents.feature_degraded(
                feature="manifest", reason=str(e), user_id=user_id
            )
            return self.fallback_manifest(user_id)

        BusinessEvents.manifest_composed(
            user_id=user_id,
            source_count=len(sources),
            catalog_count=len(manifest.catalogs),
        )
        return manifest

    def _compose(self, user_id: str, sources: list[CatalogSource]) -> CompositeManifest:
        logger.debug(
            f"Building manifest for user {user_id} with {len(sources)} catalog sources"
        )
        manifest = self._shell(user_id)

        # dicts keep insertion order, used here as ordered sets
        types: dict[str, None] = {}
        resources: dict[str, None] = dict.fromkeys(SUPPORTED_RESOURCES)
        seen_ids: set[str] = set()

        if not sources:
            manifest.catalogs.append(
                CompositeCatalogEntry(
                    id=DEFAULT_CATALOG_ID, type="movie", name=DEFAULT_CATALOG_NAME
                )
            )
            types["movie"] = None

        for source in sources:
            for catalog in source.catalogs:
                # Stored sources may predate fetch-time filtering
                if is_search_catalog(catalog.id):
                    continue
                composite_id = make_composite_id(source.id, catalog.id)
                if composite_id in seen_ids:
                    continue
                seen_ids.add(composite_id)
                manifest.catalogs.append(
                    CompositeCatalogEntry(
                        id=composite_id,
                        type=catalog.type,
                        name=self.catalog_name(source, catalog),
                    )
                )
                types[catalog.type] = None

            for resource in source.resources:
                if resource in SUPPORTED_RESOURCES:
                    resources[resource] = None

        manifest.types = list(types)
        manifest.resources = list(resources)
        return manifest

    @staticmethod
    def catalog_name(source: CatalogSource, catalog: CatalogEntry) -> str:
        """Display name of one composite entry.

        A source renamed by the user prefixes its catalogs with that name.
        """
        if not source.custom_name:
            return catalog.name
        if not catalog.name:
            return source.custom_name
        return f"{source.custom_name} - {catalog.name}"

    def fallback_manifest(self, user_id: str) -> CompositeManifest:
        """Minimal manifest served when composing fails."""
        manifest = self._shell(user_id)
        manifest.description = "Error loading configuration"
        manifest.resources = list(SUPPORTED_RESOURCES)
        manifest.types = ["movie"]
        manifest.catalogs = [
            CompositeCatalogEntry(
                id=ERROR_CATALOG_ID, type="movie", name=ERROR_CATALOG_NAME
            )
        ]
        return manifest

    def _shell(self, user_id: str) -> CompositeManifest:
        return CompositeManifest(
            id=f"{self.shell.addon_id}.{user_id}",
            version=self.shell.version,
            name=self.shell.name,
            description=self.shell.description,
            logo=self.shell.logo,
            background=self.shell.background,
        )
