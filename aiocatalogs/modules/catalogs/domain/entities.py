"""Catalog source domain entities."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_RESOURCES = ["catalog"]
DEFAULT_TYPES = ["movie", "series"]
DEFAULT_VERSION = "0.0.1"


def is_search_catalog(catalog_id: str) -> bool:
    """Search-only catalogs have no browsable content of their own."""
    return "search" in catalog_id.lower()


class CatalogEntry(BaseModel):
    """One browsable catalog offered by a source.

    Keys the upstream adds beyond id/type/name (``extra``, ``genres`` ...) are
    kept so a stored source round-trips unchanged.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Catalog id inside its source")
    type: str = Field(..., description="Content type, e.g. movie or series")
    name: str = Field(default="", description="Display name")


class CatalogSource(BaseModel):
    """One registered upstream addon and the catalogs it offers."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Upstream addon id")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Display description")
    endpoint: str = Field(..., description="Base URL without trailing slash")
    version: str = Field(default=DEFAULT_VERSION)
    resources: list[str] = Field(default_factory=lambda: list(DEFAULT_RESOURCES))
    types: list[str] = Field(default_factory=lambda: list(DEFAULT_TYPES))
    catalogs: list[CatalogEntry] = Field(default_factory=list)
    id_prefixes: list[str] | None = Field(default=None, alias="idPrefixes")
    behavior_hints: dict[str, Any] | None = Field(default=None, alias="behaviorHints")
    custom_name: str | None = Field(
        default=None, alias="customName", description="User-chosen display name"
    )
    # Persisted as the document-level randomizedCatalogs list, not per source
    randomize: bool = Field(default=False, exclude=True)

    @field_validator("endpoint")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("custom_name")
    @classmethod
    def _blank_custom_name_is_unset(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @property
    def display_name(self) -> str:
        return self.custom_name or self.name

    def find_catalog(self, catalog_id: str, content_type: str) -> CatalogEntry | None:
        for catalog in self.catalogs:
            if catalog.id == catalog_id and catalog.type == content_type:
                return catalog
        return None

    def browsable_catalogs(self) -> list[CatalogEntry]:
        return [c for c in self.catalogs if not is_search_catalog(c.id)]

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
