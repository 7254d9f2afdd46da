"""Configuration API schemas."""

from pydantic import BaseModel, Field


class AddSourceRequest(BaseModel):
    """Add source request."""

    url: str = Field(..., min_length=1, description="Addon manifest URL")

    class Config:
        json_schema_extra = {
            "example": {"url": "stremio://example.com/manifest.json"},
        }


class RenameSourceRequest(BaseModel):
    """Rename source request. An empty name restores the upstream name."""

    name: str = Field(..., max_length=200, description="Custom display name")


class CatalogEntryResponse(BaseModel):
    id: str
    type: str
    name: str


class SourceResponse(BaseModel):
    """Registered source response."""

    id: str = Field(..., description="Source id")
    name: str = Field(..., description="Display name")
    description: str = Field(..., description="Display description")
    endpoint: str = Field(..., description="Base URL of the upstream addon")
    version: str = Field(..., description="Upstream addon version")
    custom_name: str | None = Field(None, description="User-chosen display name")
    display_name: str = Field(..., description="Custom name, else upstream name")
    randomize: bool = Field(False, description="Catalog items are shuffled")
    types: list[str] = Field(default_factory=list)
    catalogs: list[CatalogEntryResponse] = Field(default_factory=list)


class CreateUserResponse(BaseModel):
    user_id: str = Field(..., description="Generated user id")
    manifest_url: str = Field(..., description="Personal manifest path")


class SourceHealthResponse(BaseModel):
    source_id: str
    endpoint: str
    reachable: bool
