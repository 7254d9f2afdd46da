"""AIOCatalogs - catalog addon aggregator entry point."""

import sentry_sdk
from fastapi import Depends, FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.routing import APIRoute
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

from aiocatalogs.core.config import settings
from aiocatalogs.core.domain.exceptions import DomainException
from aiocatalogs.core.infrastructure.database.session import get_async_engine, init_db
from aiocatalogs.core.infrastructure.health import HealthStatus, StorageHealthResult
from aiocatalogs.core.infrastructure.logging import setup_logging
from aiocatalogs.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
)
from aiocatalogs.core.interfaces.http.routers import api_router
from aiocatalogs.modules.catalogs.application import dependencies as catalogs_app_deps
from aiocatalogs.modules.catalogs.domain.repository import SourceStore
from aiocatalogs.modules.catalogs.infrastructure import (
    dependencies as catalogs_infra_deps,
)
from aiocatalogs.modules.catalogs.interfaces.addon_router import (
    router as addon_router,
)


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        enable_tracing=True,
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting AIOCatalogs...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Storage backend: {settings.STORAGE_BACKEND}")

    if settings.STORAGE_BACKEND == "database":
        logger.info("Initializing database connection...")
        await init_db(get_async_engine(settings.SQLALCHEMY_DATABASE_URI))

    yield

    logger.info("Shutting down AIOCatalogs...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "Aggregates the catalogs of several media addons into one addon.\n\n"
        "Install `/{user_id}/manifest.json` in the media client and manage "
        "the sources through the configuration API."
    ),
    version=settings.ADDON_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[catalogs_app_deps.get_source_store] = (
    catalogs_infra_deps.get_source_store
)
app.dependency_overrides[catalogs_app_deps.get_manifest_fetcher] = (
    catalogs_infra_deps.get_manifest_fetcher
)
app.dependency_overrides[catalogs_app_deps.get_addon_cache] = (
    catalogs_infra_deps.get_addon_cache
)
app.dependency_overrides[catalogs_app_deps.get_addon_interface_provider] = (
    catalogs_infra_deps.get_addon_interface_provider
)

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS middleware
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=settings.all_cors_origins != ["*"],
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health", tags=["health"])
async def health_check(
    store: SourceStore = Depends(catalogs_app_deps.get_source_store),
):
    """Health check endpoint.

    Reports the state of the configured source store. Upstream addons are not
    probed here; use the per-source health route for that.
    """
    error = await store.check_health()
    storage = StorageHealthResult(
        status=HealthStatus.ERROR if error else HealthStatus.OK,
        backend=store.backend_name,
        error=error,
    )

    return {
        "status": "healthy" if storage.status == HealthStatus.OK else "unhealthy",
        "environment": settings.ENVIRONMENT,
        "version": settings.ADDON_VERSION,
        "components": {"storage": storage.to_dict()},
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to AIOCatalogs",
        "manifest": "/manifest.json",
        "docs": f"{settings.API_V1_STR}/docs",
    }


# Addon protocol routes last: their user-id path segment matches broadly
app.include_router(addon_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
