"""API router configuration."""

from fastapi import APIRouter

from aiocatalogs.modules.catalogs.interfaces.router import router as sources_router

api_router = APIRouter()

# Users and their sources
api_router.include_router(sources_router)
