"""JSON file source store: one ``<user_id>.json`` document per user."""

import json
import re
from pathlib import Path

from loguru import logger

from aiocatalogs.modules.catalogs.domain.entities import CatalogSource
from aiocatalogs.modules.catalogs.domain.repository import SourceStore
from aiocatalogs.modules.catalogs.infrastructure.mappers import UserConfigMapper

# User ids become file names
_USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


class FileSourceStore(SourceStore):
    """Source store backed by a directory of JSON documents."""

    backend_name = "file"

    def __init__(self, base_path: Path | str, mapper: UserConfigMapper | None = None):
        self.base_path = Path(base_path)
        self.mapper = mapper or UserConfigMapper()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _config_path(self, user_id: str) -> Path | None:
        if not _USER_ID_PATTERN.match(user_id):
            logger.warning(f"Rejected invalid user id: {user_id!r}")
            return None
        return self.base_path / f"{user_id}.json"

    async def load_sources(self, user_id: str) -> list[CatalogSource]:
        path = self._config_path(user_id)
        if path is None or not path.exists():
            return []
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading config for user {user_id}: {e}")
            return []

        sources = self.mapper.to_domain(payload)
        logger.debug(f"Loaded config for user {user_id} with {len(sources)} sources")
        return sources

    async def save_sources(self, user_id: str, sources: list[CatalogSource]) -> bool:
        path = self._config_path(user_id)
        if path is None:
            return False

        payload = self.mapper.to_payload(sources)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            logger.error(f"Error saving config for user {user_id}: {e}")
            return False
        return True

    async def exists(self, user_id: str) -> bool:
        path = self._config_path(user_id)
        return path is not None and path.exists()

    async def list_users(self) -> list[str]:
        try:
            return sorted(path.stem for path in self.base_path.glob("*.json"))
        except OSError as e:
            logger.error(f"Error listing users in {self.base_path}: {e}")
            return []

    async def check_health(self) -> str | None:
        if not self.base_path.is_dir():
            return f"{self.base_path} is not a directory"
        return None
