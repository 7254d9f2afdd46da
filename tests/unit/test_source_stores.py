"""Tests for the file and database source stores."""

import json
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from aiocatalogs.core.config import Settings
from aiocatalogs.modules.catalogs.domain.exceptions import StorageUnavailableError
from aiocatalogs.modules.catalogs.infrastructure.mappers import UserConfigMapper
from aiocatalogs.modules.catalogs.infrastructure.models import UserConfigModel
from aiocatalogs.modules.catalogs.infrastructure.stores import (
    DatabaseSourceStore,
    FileSourceStore,
    create_source_store,
)
from tests.factories import make_source

pytestmark = pytest.mark.anyio


# ============================================
# Mapper
# ============================================


class TestUserConfigMapper:
    def test_payload_round_trip_keeps_order_and_fields(self) -> None:
        mapper = UserConfigMapper()
        sources = [
            make_source("b", [("new", "series", "New")], id_prefixes=["tt"]),
            make_source(
                "a", [("top", "movie", "Top")], behavior_hints={"adult": False}
            ),
        ]

        payload = mapper.to_payload(sources)
        restored = mapper.to_domain(payload)

        assert restored == sources
        assert payload["catalogs"][0]["idPrefixes"] == ["tt"]
        assert payload["catalogs"][1]["behaviorHints"] == {"adult": False}

    def test_legacy_catalog_order_is_applied(self) -> None:
        mapper = UserConfigMapper()
        payload = mapper.to_payload(
            [make_source("a"), make_source("b"), make_source("c")]
        )
        payload["catalogOrder"] = ["c", "a", "ghost", 7]

        assert [s.id for s in mapper.to_domain(payload)] == ["c", "a", "b"]

    def test_legacy_document_keeps_user_settings(self) -> None:
        mapper = UserConfigMapper()
        document = {
            "catalogs": [
                {
                    "id": "a",
                    "name": "A",
                    "endpoint": "https://a.example.com",
                    "catalogs": [{"id": "top", "type": "movie", "name": "Top"}],
                    "customName": "My A",
                },
                make_source("b").to_storage(),
            ],
            "catalogOrder": ["b", "a"],
            "randomizedCatalogs": ["a", "ghost", 3],
        }

        sources = mapper.to_domain(document)
        payload = mapper.to_payload(sources)

        assert [s.id for s in sources] == ["b", "a"]
        assert sources[1].custom_name == "My A"
        assert [s.randomize for s in sources] == [False, True]
        assert payload["catalogs"][1]["customName"] == "My A"
        assert "randomize" not in payload["catalogs"][1]
        assert payload["randomizedCatalogs"] == ["a"]
        assert mapper.to_domain(payload) == sources

    def test_invalid_entries_and_documents(self) -> None:
        mapper = UserConfigMapper()

        assert mapper.to_domain(None) == []
        assert mapper.to_domain({"catalogs": "nope"}) == []
        sources = mapper.to_domain(
            {"catalogs": [{"id": "broken"}, make_source("ok").to_storage()]}
        )
        assert [s.id for s in sources] == ["ok"]

    def test_duplicate_ids_keep_first_position_last_value(self) -> None:
        mapper = UserConfigMapper()
        payload = mapper.to_payload(
            [
                make_source("a", name="Old"),
                make_source("b"),
                make_source("a", name="New"),
            ]
        )

        sources = mapper.to_domain(payload)

        assert [s.id for s in sources] == ["a", "b"]
        assert sources[0].name == "New"


# ============================================
# File store
# ============================================


class TestFileSourceStore:
    async def test_round_trip(self, file_store) -> None:
        sources = [
            make_source("b", [("new", "series", "New")]),
            make_source("a", [("top", "movie", "Top")]),
        ]

        assert await file_store.save_sources("u1", sources) is True
        assert await file_store.load_sources("u1") == sources
        assert await file_store.exists("u1") is True

    async def test_document_layout(self, file_store) -> None:
        await file_store.save_sources("u1", [make_source("a")])

        document = json.loads((file_store.base_path / "u1.json").read_text())

        assert list(document) == ["catalogs"]
        assert document["catalogs"][0]["id"] == "a"

    async def test_randomized_sources_are_listed_in_document(self, file_store) -> None:
        await file_store.save_sources(
            "u1", [make_source("a"), make_source("b", randomize=True)]
        )

        document = json.loads((file_store.base_path / "u1.json").read_text())

        assert document["randomizedCatalogs"] == ["b"]
        assert [s.randomize for s in await file_store.load_sources("u1")] == [
            False,
            True,
        ]

    async def test_missing_user(self, file_store) -> None:
        assert await file_store.load_sources("nobody") == []
        assert await file_store.exists("nobody") is False

    async def test_corrupt_document_loads_empty(self, file_store) -> None:
        (file_store.base_path / "u1.json").write_text("{not json")

        assert await file_store.load_sources("u1") == []

    @pytest.mark.parametrize("user_id", ["../escape", "a/b", "", "x" * 200])
    async def test_unsafe_user_ids_are_rejected(self, file_store, user_id) -> None:
        assert await file_store.save_sources(user_id, [make_source("a")]) is False
        assert await file_store.load_sources(user_id) == []
        assert await file_store.exists(user_id) is False

    async def test_list_users(self, file_store) -> None:
        await file_store.save_sources("zeta", [])
        await file_store.save_sources("alpha", [])

        assert await file_store.list_users() == ["alpha", "zeta"]

    async def test_health(self, file_store) -> None:
        assert await file_store.check_health() is None


# ============================================
# Database store
# ============================================


def _session_factory(session) -> MagicMock:
    """Mimic ``async with session_factory() as session``."""
    context = MagicMock()
    context.__aenter__.return_value = session
    context.__aexit__.return_value = False
    return MagicMock(return_value=context)


class TestDatabaseSourceStore:
    async def test_load_maps_stored_document(self, mock_db_session) -> None:
        sources = [make_source("a", [("top", "movie", "Top")])]
        model = UserConfigModel(
            user_id="u1", config=UserConfigMapper().to_payload(sources)
        )
        result = MagicMock()
        result.scalar_one_or_none.return_value = model
        mock_db_session.execute.return_value = result
        store = DatabaseSourceStore(_session_factory(mock_db_session))

        assert await store.load_sources("u1") == sources

    async def test_load_missing_user(self, mock_db_session) -> None:
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = result
        store = DatabaseSourceStore(_session_factory(mock_db_session))

        assert await store.load_sources("u1") == []

    async def test_save_inserts_new_row(self, mock_db_session) -> None:
        mock_db_session.get.return_value = None
        store = DatabaseSourceStore(_session_factory(mock_db_session))

        assert await store.save_sources("u1", [make_source("a")]) is True

        added = mock_db_session.add.call_args.args[0]
        assert added.user_id == "u1"
        assert added.config["catalogs"][0]["id"] == "a"
        mock_db_session.commit.assert_awaited_once()

    async def test_save_updates_existing_row(self, mock_db_session) -> None:
        existing = UserConfigModel(user_id="u1", config={"catalogs": []})
        mock_db_session.get.return_value = existing
        store = DatabaseSourceStore(_session_factory(mock_db_session))

        assert await store.save_sources("u1", [make_source("b")]) is True
        assert existing.config["catalogs"][0]["id"] == "b"

    async def test_database_errors_are_contained(self, mock_db_session) -> None:
        error = OperationalError("SELECT", {}, Exception("connection refused"))
        mock_db_session.execute.side_effect = error
        mock_db_session.get.side_effect = error
        store = DatabaseSourceStore(_session_factory(mock_db_session))

        assert await store.load_sources("u1") == []
        assert await store.save_sources("u1", []) is False
        assert await store.list_users() == []
        assert await store.check_health() is not None

    async def test_exists_reports_outage(self, mock_db_session) -> None:
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused")
        )
        store = DatabaseSourceStore(_session_factory(mock_db_session))

        with pytest.raises(StorageUnavailableError):
            await store.exists("u1")


# ============================================
# Factory
# ============================================


class TestCreateSourceStore:
    def test_file_backend(self, tmp_path) -> None:
        config = Settings(STORAGE_BACKEND="file", USER_CONFIGS_PATH=str(tmp_path))

        store = create_source_store(config)

        assert isinstance(store, FileSourceStore)
        assert store.backend_name == "file"
