"""Per-user compiled addon interfaces and their cache."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from loguru import logger

from aiocatalogs.modules.catalogs.application.composer import ManifestComposer
from aiocatalogs.modules.catalogs.application.request_router import (
    CatalogRequestRouter,
)
from aiocatalogs.modules.catalogs.domain.exceptions import StorageUnavailableError
from aiocatalogs.modules.catalogs.domain.manifest import (
    CatalogResponse,
    CompositeManifest,
)
from aiocatalogs.modules.catalogs.domain.repository import SourceStore

CatalogHandler = Callable[[str, str], Awaitable[CatalogResponse]]
Generation = tuple[int, int]


@dataclass(frozen=True)
class AddonInterface:
    """A composed manifest plus the handler serving its catalogs."""

    user_id: str
    manifest: CompositeManifest
    catalog_handler: CatalogHandler

    async def catalog(self, content_type: str, catalog_id: str) -> CatalogResponse:
        return await self.catalog_handler(content_type, catalog_id)


class AddonInterfaceCache:
    """Process-wide map from user id to the last compiled AddonInterface.

    Entries never expire on their own; registry handlers call
    ``invalidate`` after every successful mutation. Each invalidation also
    advances the user's generation, and ``set`` refuses an interface built
    from an older generation, so a compose that raced a mutation is dropped
    instead of cached.
    """

    def __init__(self) -> None:
        self._entries: dict[str, AddonInterface] = {}
        self._generations: dict[str, int] = {}
        self._epoch = 0

    def generation(self, user_id: str) -> Generation:
        return self._epoch, self._generations.get(user_id, 0)

    def get(self, user_id: str) -> AddonInterface | None:
        return self._entries.get(user_id)

    def set(
        self,
        user_id: str,
        interface: AddonInterface,
        generation: Generation | None = None,
    ) -> bool:
        if generation is not None and generation != self.generation(user_id):
            logger.debug(f"Discarding stale addon interface for user {user_id}")
            return False
        self._entries[user_id] = interface
        return True

    def invalidate(self, user_id: str) -> None:
        self._generations[user_id] = self._generations.get(user_id, 0) + 1
        if self._entries.pop(user_id, None) is not None:
            logger.debug(f"Clearing addon cache for user {user_id}")

    def clear(self) -> None:
        logger.debug("Clearing entire addon cache")
        self._epoch += 1
        self._entries.clear()

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class AddonInterfaceProvider:
    """Build or reuse the AddonInterface for a user.

    Interfaces of users without a stored configuration are composed on every
    request and never cached.
    """

    def __init__(
        self,
        store: SourceStore,
        composer: ManifestComposer,
        router: CatalogRequestRouter,
        cache: AddonInterfaceCache,
    ) -> None:
        self.store = store
        self.composer = composer
        self.router = router
        self.cache = cache

    async def get_interface(self, user_id: str) -> AddonInterface:
        interface = self.cache.get(user_id)
        if interface is not None:
            return interface

        generation = self.cache.generation(user_id)
        sources = await self.store.load_sources(user_id)
        known = bool(sources) or await self._is_known_user(user_id)
        manifest = self.composer.compose(user_id, sources)

        async def handle_catalog(content_type: str, catalog_id: str) -> CatalogResponse:
            # Content is always routed against the current stored sources
            current = await self.store.load_sources(user_id)
            return await self.router.route(catalog_id, content_type, current)

        interface = AddonInterface(
            user_id=user_id, manifest=manifest, catalog_handler=handle_catalog
        )
        if known:
            self.cache.set(user_id, interface, generation)
        return interface

    async def _is_known_user(self, user_id: str) -> bool:
        try:
            return await self.store.exists(user_id)
        except StorageUnavailableError as e:
            logger.warning(f"Not caching addon interface for user {user_id}: {e}")
            return False

    async def get_manifest(self, user_id: str) -> CompositeManifest:
        interface = await self.get_interface(user_id)
        return interface.manifest

    async def handle_catalog(
        self, user_id: str, content_type: str, catalog_id: str
    ) -> CatalogResponse:
        interface = await self.get_interface(user_id)
        return await interface.catalog(content_type, catalog_id)
