"""Composite manifest and catalog response models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

COMPOSITE_ID_SEPARATOR = ":"
DEFAULT_CATALOG_ID = "aiocatalogs-default"
DEFAULT_CATALOG_NAME = "AIO Catalogs (No catalogs added yet)"
ERROR_CATALOG_ID = "error"
ERROR_CATALOG_NAME = "Error: Configuration could not be loaded"
SETUP_REQUIRED_ITEM_ID = "setup-required"
SUPPORTED_RESOURCES = ("catalog",)


def make_composite_id(source_id: str, catalog_id: str) -> str:
    return f"{source_id}{COMPOSITE_ID_SEPARATOR}{catalog_id}"


def parse_composite_id(composite_id: str) -> tuple[str, str] | None:
    """Split ``sourceId:catalogId``; anything but exactly one separator is invalid."""
    if composite_id.count(COMPOSITE_ID_SEPARATOR) != 1:
        return None
    source_id, catalog_id = composite_id.split(COMPOSITE_ID_SEPARATOR)
    return source_id, catalog_id


class CompositeCatalogEntry(BaseModel):
    id: str
    type: str
    name: str


class BehaviorHints(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    configurable: bool = True
    configuration_required: bool = Field(default=False, alias="configurationRequired")


class CompositeManifest(BaseModel):
    """The merged manifest served to the media client for one user."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    version: str
    name: str
    description: str
    logo: str
    background: str
    resources: list[str] = Field(default_factory=list)
    types: list[str] = Field(default_factory=list)
    catalogs: list[CompositeCatalogEntry] = Field(default_factory=list)
    behavior_hints: BehaviorHints = Field(
        default_factory=BehaviorHints, alias="behaviorHints"
    )
    id_prefixes: list[str] = Field(default_factory=list, alias="idPrefixes")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class CatalogResponse(BaseModel):
    """Catalog listing in the addon protocol's ``{"metas": [...]}`` shape."""

    metas: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "CatalogResponse":
        return cls(metas=[])
