"""
pytest configuration and shared fixtures.

Test layout:
- unit/: unit tests, no external services (upstream addons are served by
  httpx.MockTransport, storage uses tmp_path or mocked sessions)

Usage:
    # Run all tests
    uv run pytest

    # Unit tests only
    uv run pytest tests/unit/
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from aiocatalogs.core.config import Settings
from aiocatalogs.core.infrastructure.http import JsonHttpClient
from aiocatalogs.modules.catalogs.application.addon_interface import (
    AddonInterfaceCache,
    AddonInterfaceProvider,
)
from aiocatalogs.modules.catalogs.application.composer import (
    ManifestComposer,
    ManifestShell,
)
from aiocatalogs.modules.catalogs.application.request_router import (
    CatalogRequestRouter,
)
from aiocatalogs.modules.catalogs.infrastructure.manifest_fetcher import (
    ManifestFetcher,
)
from aiocatalogs.modules.catalogs.infrastructure.stores import FileSourceStore

UpstreamRoutes = dict[str, tuple[int, Any]]

# ============================================
# Configuration Fixtures
# ============================================


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def test_settings() -> Settings:
    """Settings for the test environment."""
    return Settings(
        ENVIRONMENT="local",
        STORAGE_BACKEND="file",
        FETCH_TIMEOUT_SEC=1.0,
        SENTRY_DSN=None,
    )


@pytest.fixture
def manifest_shell() -> ManifestShell:
    return ManifestShell(
        addon_id="community.aiocatalogs",
        name="AIOCatalogs",
        version="1.0.0",
        description="Test aggregator",
        logo="https://example.org/logo.png",
        background="https://example.org/background.jpg",
    )


# ============================================
# Storage Fixtures
# ============================================


@pytest.fixture
def file_store(tmp_path) -> FileSourceStore:
    """File store rooted in a per-test temporary directory."""
    return FileSourceStore(tmp_path / "userConfigs")


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Mocked database session for pure unit tests."""
    session = AsyncMock(spec=AsyncSession)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    # add() is synchronous on a real session
    session.add = MagicMock()
    return session


# ============================================
# Upstream HTTP Fixtures
# ============================================


@pytest.fixture
def make_http_client():
    """Build a JsonHttpClient whose requests are answered by ``handler``."""

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> JsonHttpClient:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler), follow_redirects=True
        )
        return JsonHttpClient(timeout_sec=1.0, user_agent="test-agent", client=client)

    return factory


@pytest.fixture
def upstream_routes() -> UpstreamRoutes:
    """URL -> (status, JSON body) table served by ``upstream_client``."""
    return {}


@pytest.fixture
def upstream_requests() -> list[str]:
    return []


@pytest.fixture
def upstream_client(
    make_http_client, upstream_routes: UpstreamRoutes, upstream_requests: list[str]
) -> JsonHttpClient:
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        upstream_requests.append(url)
        if url not in upstream_routes:
            return httpx.Response(404, json={"error": "not found"})
        status_code, body = upstream_routes[url]
        return httpx.Response(status_code, json=body)

    return make_http_client(handler)


# ============================================
# Domain Object Fixtures
# ============================================


@pytest.fixture
def sample_manifest() -> dict[str, Any]:
    """A typical upstream addon manifest."""
    return {
        "id": "org.example.movies",
        "name": "Example Movies",
        "description": "Popular and trending movies",
        "version": "2.1.0",
        "resources": ["catalog", {"name": "meta", "types": ["movie"]}],
        "types": ["movie", "series"],
        "catalogs": [
            {"id": "top", "type": "movie", "name": "Top Movies"},
            {
                "id": "trending",
                "type": "series",
                "name": "Trending Series",
                "extra": [{"name": "genre", "options": ["Drama"]}],
            },
            {"id": "movie-search", "type": "movie", "name": "Search"},
        ],
        "idPrefixes": ["tt"],
    }


# ============================================
# HTTP Client Fixtures
# ============================================


@pytest.fixture
async def async_client(
    anyio_backend,
    file_store: FileSourceStore,
    upstream_client: JsonHttpClient,
    manifest_shell: ManifestShell,
) -> AsyncGenerator[AsyncClient, None]:
    """ASGI client with storage on tmp_path and upstreams on MockTransport."""
    _ = anyio_backend
    from aiocatalogs.modules.catalogs.application import dependencies as app_deps
    from main import app

    cache = AddonInterfaceCache()
    fetcher = ManifestFetcher(upstream_client)
    provider = AddonInterfaceProvider(
        store=file_store,
        composer=ManifestComposer(manifest_shell),
        router=CatalogRequestRouter(upstream_client),
        cache=cache,
    )

    saved_overrides = dict(app.dependency_overrides)
    app.dependency_overrides[app_deps.get_source_store] = lambda: file_store
    app.dependency_overrides[app_deps.get_manifest_fetcher] = lambda: fetcher
    app.dependency_overrides[app_deps.get_addon_cache] = lambda: cache
    app.dependency_overrides[app_deps.get_addon_interface_provider] = lambda: provider

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
    app.dependency_overrides.update(saved_overrides)
