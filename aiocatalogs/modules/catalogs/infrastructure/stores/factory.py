"""Source store factory.

Picks the storage backend from configuration at startup.
"""

from aiocatalogs.core.config import Settings
from aiocatalogs.core.infrastructure.database.session import (
    get_async_engine,
    get_session_factory,
)
from aiocatalogs.modules.catalogs.domain.repository import SourceStore
from aiocatalogs.modules.catalogs.infrastructure.stores.database_store import (
    DatabaseSourceStore,
)
from aiocatalogs.modules.catalogs.infrastructure.stores.file_store import (
    FileSourceStore,
)


def create_source_store(config: Settings) -> SourceStore:
    """Create the store selected by ``STORAGE_BACKEND``.

    Raises:
        ValueError: unsupported backend name
    """
    if config.STORAGE_BACKEND == "file":
        return FileSourceStore(config.USER_CONFIGS_PATH)

    if config.STORAGE_BACKEND == "database":
        engine = get_async_engine(config.SQLALCHEMY_DATABASE_URI)
        return DatabaseSourceStore(get_session_factory(engine))

    raise ValueError(f"Unsupported storage backend: {config.STORAGE_BACKEND}")
