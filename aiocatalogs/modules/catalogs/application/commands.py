"""Source registry commands."""

from enum import StrEnum

from pydantic import BaseModel

from aiocatalogs.modules.catalogs.domain.entities import CatalogSource


class MoveDirection(StrEnum):
    UP = "up"
    DOWN = "down"

    @property
    def offset(self) -> int:
        return -1 if self is MoveDirection.UP else 1


class AddSourceCommand(BaseModel):
    """Add a source, or replace the registered source with the same id."""

    user_id: str
    source: CatalogSource


class AddSourceFromUrlCommand(BaseModel):
    """Fetch an addon manifest from a URL and add it."""

    user_id: str
    url: str


class RemoveSourceCommand(BaseModel):
    user_id: str
    source_id: str


class MoveSourceCommand(BaseModel):
    user_id: str
    source_id: str
    direction: MoveDirection


class RenameSourceCommand(BaseModel):
    """Set the custom display name of a source; an empty name clears it."""

    user_id: str
    source_id: str
    name: str


class ToggleRandomizeCommand(BaseModel):
    user_id: str
    source_id: str
