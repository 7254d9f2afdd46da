"""Catalog module infrastructure dependencies.

One instance of each collaborator is shared by the whole process.
"""

from functools import lru_cache

from aiocatalogs.core.config import settings
from aiocatalogs.core.infrastructure.http import JsonHttpClient
from aiocatalogs.modules.catalogs.application.addon_interface import (
    AddonInterfaceCache,
    AddonInterfaceProvider,
)
from aiocatalogs.modules.catalogs.application.composer import ManifestComposer
from aiocatalogs.modules.catalogs.application.request_router import (
    CatalogRequestRouter,
)
from aiocatalogs.modules.catalogs.domain.repository import SourceStore
from aiocatalogs.modules.catalogs.infrastructure.manifest_fetcher import (
    ManifestFetcher,
)
from aiocatalogs.modules.catalogs.infrastructure.stores import create_source_store


@lru_cache
def get_source_store() -> SourceStore:
    return create_source_store(settings)


@lru_cache
def get_http_client() -> JsonHttpClient:
    return JsonHttpClient(
        timeout_sec=settings.FETCH_TIMEOUT_SEC,
        user_agent=settings.FETCHER_USER_AGENT,
    )


@lru_cache
def get_manifest_fetcher() -> ManifestFetcher:
    return ManifestFetcher(get_http_client())


@lru_cache
def get_addon_cache() -> AddonInterfaceCache:
    return AddonInterfaceCache()


@lru_cache
def get_addon_interface_provider() -> AddonInterfaceProvider:
    return AddonInterfaceProvider(
        store=get_source_store(),
        composer=ManifestComposer(),
        router=CatalogRequestRouter(get_http_client()),
        cache=get_addon_cache(),
    )
