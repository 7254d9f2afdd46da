"""Catalog module application dependencies.

Ports are declared here and bound to infrastructure through
``app.dependency_overrides`` in ``main.py``.
"""

from typing import NoReturn

from fastapi import Depends

from aiocatalogs.modules.catalogs.application.addon_interface import (
    AddonInterfaceCache,
    AddonInterfaceProvider,
)
from aiocatalogs.modules.catalogs.application.handlers import (
    AddSourceFromUrlHandler,
    AddSourceHandler,
    CreateUserHandler,
    MoveSourceHandler,
    RemoveSourceHandler,
    RenameSourceHandler,
    ToggleRandomizeHandler,
)
from aiocatalogs.modules.catalogs.application.services import SourceQueryService
from aiocatalogs.modules.catalogs.domain.fetcher import ManifestFetcherPort
from aiocatalogs.modules.catalogs.domain.repository import SourceStore


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


def get_source_store() -> SourceStore:
    _missing_dependency("SourceStore")


def get_manifest_fetcher() -> ManifestFetcherPort:
    _missing_dependency("ManifestFetcher")


def get_addon_cache() -> AddonInterfaceCache:
    _missing_dependency("AddonInterfaceCache")


def get_addon_interface_provider() -> AddonInterfaceProvider:
    _missing_dependency("AddonInterfaceProvider")


async def get_source_query_service(
    store: SourceStore = Depends(get_source_store),
    fetcher: ManifestFetcherPort = Depends(get_manifest_fetcher),
) -> SourceQueryService:
    return SourceQueryService(store, fetcher)


async def get_create_user_handler(
    store: SourceStore = Depends(get_source_store),
    cache: AddonInterfaceCache = Depends(get_addon_cache),
) -> CreateUserHandler:
    return CreateUserHandler(store, cache.invalidate)


async def get_add_source_from_url_handler(
    store: SourceStore = Depends(get_source_store),
    cache: AddonInterfaceCache = Depends(get_addon_cache),
    fetcher: ManifestFetcherPort = Depends(get_manifest_fetcher),
) -> AddSourceFromUrlHandler:
    return AddSourceFromUrlHandler(fetcher, AddSourceHandler(store, cache.invalidate))


async def get_remove_source_handler(
    store: SourceStore = Depends(get_source_store),
    cache: AddonInterfaceCache = Depends(get_addon_cache),
) -> RemoveSourceHandler:
    return RemoveSourceHandler(store, cache.invalidate)


async def get_move_source_handler(
    store: SourceStore = Depends(get_source_store),
    cache: AddonInterfaceCache = Depends(get_addon_cache),
) -> MoveSourceHandler:
    return MoveSourceHandler(store, cache.invalidate)


async def get_rename_source_handler(
    store: SourceStore = Depends(get_source_store),
    cache: AddonInterfaceCache = Depends(get_addon_cache),
) -> RenameSourceHandler:
    return RenameSourceHandler(store, cache.invalidate)


async def get_toggle_randomize_handler(
    store: SourceStore = Depends(get_source_store),
    cache: AddonInterfaceCache = Depends(get_addon_cache),
) -> ToggleRandomizeHandler:
    return ToggleRandomizeHandler(store, cache.invalidate)
