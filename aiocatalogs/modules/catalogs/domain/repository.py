"""Source store interface."""

from abc import ABC, abstractmethod

from aiocatalogs.modules.catalogs.domain.entities import CatalogSource


class SourceStore(ABC):
    """Persistence port for per-user ordered source lists."""

    backend_name: str = "unknown"

    @abstractmethod
    async def load_sources(self, user_id: str) -> list[CatalogSource]:
        """Load a user's sources in display order; unknown users get []."""
        pass

    @abstractmethod
    async def save_sources(self, user_id: str, sources: list[CatalogSource]) -> bool:
        """Replace a user's source list. Returns False on failure."""
        pass

    @abstractmethod
    async def exists(self, user_id: str) -> bool:
        """Check whether a configuration exists for the user.

        Raises StorageUnavailableError when the store cannot be queried.
        """
        pass

    @abstractmethod
    async def list_users(self) -> list[str]:
        """List all user ids with a stored configuration."""
        pass

    async def check_health(self) -> str | None:
        """Return an error message when the store is unusable, else None."""
        return None
