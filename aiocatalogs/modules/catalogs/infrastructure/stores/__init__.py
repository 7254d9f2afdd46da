"""Source store backends."""

from aiocatalogs.modules.catalogs.infrastructure.stores.database_store import (
    DatabaseSourceStore,
)
from aiocatalogs.modules.catalogs.infrastructure.stores.factory import (
    create_source_store,
)
from aiocatalogs.modules.catalogs.infrastructure.stores.file_store import (
    FileSourceStore,
)

__all__ = [
    "DatabaseSourceStore",
    "FileSourceStore",
    "create_source_store",
]
