"""Tests for composite manifest composition."""

from unittest.mock import patch

import pytest

from aiocatalogs.modules.catalogs.application.composer import ManifestComposer
from aiocatalogs.modules.catalogs.domain.manifest import (
    DEFAULT_CATALOG_ID,
    DEFAULT_CATALOG_NAME,
    ERROR_CATALOG_ID,
    make_composite_id,
    parse_composite_id,
)
from tests.factories import make_source


@pytest.fixture
def composer(manifest_shell) -> ManifestComposer:
    return ManifestComposer(manifest_shell)


class TestCompositeIds:
    def test_round_trip(self) -> None:
        composite = make_composite_id("org.example", "top-movies")
        assert parse_composite_id(composite) == ("org.example", "top-movies")

    @pytest.mark.parametrize("value", ["nocolon", "a:b:c", "", "::"])
    def test_anything_but_one_separator_is_rejected(self, value: str) -> None:
        assert parse_composite_id(value) is None


class TestCompose:
    def test_single_source(self, composer) -> None:
        sources = [make_source("a", [("top", "movie", "Top")])]

        manifest = composer.compose("u1", sources)

        assert [c.model_dump() for c in manifest.catalogs] == [
            {"id": "a:top", "type": "movie", "name": "Top"}
        ]
        assert manifest.types == ["movie"]
        assert manifest.resources == ["catalog"]

    def test_shell_fields(self, composer) -> None:
        manifest = composer.compose("u1", [])
        data = manifest.to_dict()

        assert data["id"] == "community.aiocatalogs.u1"
        assert data["version"] == "1.0.0"
        assert data["logo"] == "https://example.org/logo.png"
        assert data["behaviorHints"] == {
            "configurable": True,
            "configurationRequired": False,
        }
        assert data["idPrefixes"] == []

    def test_empty_sources_yield_placeholder(self, composer) -> None:
        manifest = composer.compose("u1", [])

        assert len(manifest.catalogs) == 1
        assert manifest.catalogs[0].id == DEFAULT_CATALOG_ID
        assert manifest.catalogs[0].name == DEFAULT_CATALOG_NAME
        assert manifest.types == ["movie"]
        assert manifest.resources == ["catalog"]

    def test_order_follows_sources_then_catalogs(self, composer) -> None:
        sources = [
            make_source("b", [("one", "series", "B1"), ("two", "movie", "B2")]),
            make_source("a", [("one", "movie", "A1")]),
        ]

        manifest = composer.compose("u1", sources)

        assert [c.id for c in manifest.catalogs] == ["b:one", "b:two", "a:one"]
        assert manifest.types == ["series", "movie"]

    def test_every_composite_id_splits_back(self, composer) -> None:
        sources = [
            make_source("x", [("c1", "movie", "X1")]),
            make_source("y", [("c2", "tv", "Y2")]),
        ]

        manifest = composer.compose("u1", sources)

        for entry in manifest.catalogs:
            source_id, catalog_id = parse_composite_id(entry.id)
            source = next(s for s in sources if s.id == source_id)
            assert source.find_catalog(catalog_id, entry.type) is not None

    def test_search_catalogs_are_skipped(self, composer) -> None:
        sources = [
            make_source(
                "a", [("top", "movie", "Top"), ("Search-Movies", "movie", "Search")]
            )
        ]

        manifest = composer.compose("u1", sources)

        assert [c.id for c in manifest.catalogs] == ["a:top"]

    def test_duplicate_composite_ids_are_collapsed(self, composer) -> None:
        sources = [make_source("a", [("top", "movie", "Top"), ("top", "movie", "Dup")])]

        manifest = composer.compose("u1", sources)

        assert [c.name for c in manifest.catalogs] == ["Top"]

    def test_custom_name_prefixes_catalog_names(self, composer) -> None:
        sources = [
            make_source(
                "a",
                [("top", "movie", "Top"), ("blank", "movie", "")],
                custom_name="Mine",
            ),
            make_source("b", [("new", "series", "New")]),
        ]

        manifest = composer.compose("u1", sources)

        assert [c.name for c in manifest.catalogs] == ["Mine - Top", "Mine", "New"]
        assert [c.id for c in manifest.catalogs] == ["a:top", "a:blank", "b:new"]

    def test_only_supported_resources_are_advertised(self, composer) -> None:
        sources = [
            make_source(
                "a", [("top", "movie", "Top")], resources=["catalog", "meta", "stream"]
            )
        ]

        manifest = composer.compose("u1", sources)

        assert manifest.resources == ["catalog"]

    def test_composing_twice_is_deterministic(self, composer) -> None:
        sources = [
            make_source("a", [("top", "movie", "Top")]),
            make_source("b", [("new", "series", "New")]),
        ]

        assert composer.compose("u1", sources) == composer.compose("u1", sources)

    def test_failure_returns_fallback_manifest(self, composer) -> None:
        with patch.object(
            ManifestComposer, "_compose", side_effect=RuntimeError("boom")
        ):
            manifest = composer.compose("u1", [make_source("a")])

        assert [c.id for c in manifest.catalogs] == [ERROR_CATALOG_ID]
        assert manifest.description == "Error loading configuration"
        assert manifest.resources == ["catalog"]
        assert manifest.types == ["movie"]
