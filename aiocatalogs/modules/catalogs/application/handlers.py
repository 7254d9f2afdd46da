"""Source registry command handlers.

Every handler receives the invalidation hook explicitly and calls it after a
successful save, so the compiled addon interface of that user is rebuilt on
the next request.
"""

from collections.abc import Callable
from uuid import uuid4

from loguru import logger

from aiocatalogs.core.infrastructure.logging import BusinessEvents
from aiocatalogs.modules.catalogs.application.commands import (
    AddSourceCommand,
    AddSourceFromUrlCommand,
    MoveSourceCommand,
    RemoveSourceCommand,
    RenameSourceCommand,
    ToggleRandomizeCommand,
)
from aiocatalogs.modules.catalogs.domain.entities import CatalogSource
from aiocatalogs.modules.catalogs.domain.exceptions import (
    ManifestNotFoundError,
    SourceUpdateFailedError,
)
from aiocatalogs.modules.catalogs.domain.fetcher import ManifestFetcherPort
from aiocatalogs.modules.catalogs.domain.repository import SourceStore
from aiocatalogs.modules.catalogs.domain.source_list import (
    move_source,
    remove_source,
    rename_source,
    toggle_randomize,
    upsert_source,
)

SourcesChangedHook = Callable[[str], None]


class _RegistryHandler:
    def __init__(self, store: SourceStore, on_sources_changed: SourcesChangedHook):
        self.store = store
        self.on_sources_changed = on_sources_changed
        self.logger = logger

    async def _persist(self, user_id: str, sources: list[CatalogSource]) -> bool:
        saved = await self.store.save_sources(user_id, sources)
        if saved:
            self.on_sources_changed(user_id)
            self.logger.info(
                f"Saved config for user {user_id} with {len(sources)} sources"
            )
        else:
            self.logger.error(f"Failed to save config for user {user_id}")
        return saved


class CreateUserHandler(_RegistryHandler):
    """Create an empty configuration under a fresh user id."""

    async def handle(self) -> str:
        user_id = str(uuid4())
        if not await self._persist(user_id, []):
            raise SourceUpdateFailedError("create configuration for", user_id)
        self.logger.info(f"Generated new user ID: {user_id}")
        return user_id


class AddSourceHandler(_RegistryHandler):
    """Add a source; an existing id is replaced at its current position."""

    async def handle(self, command: AddSourceCommand) -> bool:
        sources = await self.store.load_sources(command.user_id)
        updated, replaced = upsert_source(sources, command.source)
        if replaced:
            self.logger.debug(f"Updating existing source {command.source.id}")

        saved = await self._persist(command.user_id, updated)
        if saved:
            BusinessEvents.source_added(
                user_id=command.user_id,
                source_id=command.source.id,
                catalog_count=len(command.source.catalogs),
                replaced=replaced,
            )
        return saved


class AddSourceFromUrlHandler:
    """Resolve a manifest URL and register the resulting source."""

    def __init__(self, fetcher: ManifestFetcherPort, add_handler: AddSourceHandler):
        self.fetcher = fetcher
        self.add_handler = add_handler

    async def handle(self, command: AddSourceFromUrlCommand) -> CatalogSource:
        source = await self.fetcher.fetch(command.url)
        if source is None:
            raise ManifestNotFoundError(command.url)

        saved = await self.add_handler.handle(
            AddSourceCommand(user_id=command.user_id, source=source)
        )
        if not saved:
            raise SourceUpdateFailedError("add", source.id)
        return source


class RemoveSourceHandler(_RegistryHandler):
    async def handle(self, command: RemoveSourceCommand) -> bool:
        sources = await self.store.load_sources(command.user_id)
        updated = remove_source(sources, command.source_id)
        if updated is None:
            self.logger.debug(
                f"Source {command.source_id} not registered for user {command.user_id}"
            )
            return False

        saved = await self._persist(command.user_id, updated)
        if saved:
            BusinessEvents.source_removed(
                user_id=command.user_id, source_id=command.source_id
            )
        return saved


class MoveSourceHandler(_RegistryHandler):
    """Swap a source with its neighbour; fails at either end of the list."""

    async def handle(self, command: MoveSourceCommand) -> bool:
        sources = await self.store.load_sources(command.user_id)
        updated = move_source(sources, command.source_id, command.direction.offset)
        if updated is None:
            self.logger.debug(
                f"Source {command.source_id} not found or already at the "
                f"{'top' if command.direction == 'up' else 'bottom'}"
            )
            return False

        saved = await self._persist(command.user_id, updated)
        if saved:
            BusinessEvents.sources_reordered(
                user_id=command.user_id,
                source_id=command.source_id,
                direction=command.direction.value,
            )
        return saved


class RenameSourceHandler(_RegistryHandler):
    """Give a source a custom display name, or clear it with a blank name."""

    async def handle(self, command: RenameSourceCommand) -> bool:
        sources = await self.store.load_sources(command.user_id)
        updated = rename_source(sources, command.source_id, command.name)
        if updated is None:
            self.logger.debug(
                f"Source {command.source_id} not registered for user {command.user_id}"
            )
            return False

        saved = await self._persist(command.user_id, updated)
        if saved:
            BusinessEvents.source_updated(
                user_id=command.user_id,
                source_id=command.source_id,
                field="custom_name",
            )
        return saved


class ToggleRandomizeHandler(_RegistryHandler):
    async def handle(self, command: ToggleRandomizeCommand) -> bool:
        sources = await self.store.load_sources(command.user_id)
        updated = toggle_randomize(sources, command.source_id)
        if updated is None:
            self.logger.debug(
                f"Source {command.source_id} not registered for user {command.user_id}"
            )
            return False

        saved = await self._persist(command.user_id, updated)
        if saved:
            BusinessEvents.source_updated(
                user_id=command.user_id,
                source_id=command.source_id,
                field="randomize",
            )
        return saved
