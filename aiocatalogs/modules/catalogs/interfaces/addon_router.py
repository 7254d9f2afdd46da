"""Addon protocol routes consumed by the media client.

The user can be given either as the first path segment or as the ``userId``
query parameter. Responses are plain protocol JSON, not the ApiResponse
envelope.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from aiocatalogs.core.config import settings
from aiocatalogs.modules.catalogs.application.addon_interface import (
    AddonInterfaceProvider,
)
from aiocatalogs.modules.catalogs.application.dependencies import (
    get_addon_interface_provider,
)

router = APIRouter(tags=["addon"])


@router.get("/manifest.json", summary="Manifest for the user given by query")
async def get_manifest(
    user_id: str = Query(settings.DEFAULT_USER_ID, alias="userId"),
    provider: AddonInterfaceProvider = Depends(get_addon_interface_provider),
) -> dict[str, Any]:
    manifest = await provider.get_manifest(user_id)
    return manifest.to_dict()


@router.get(
    "/catalog/{content_type}/{catalog_id}.json",
    summary="Catalog for the user given by query",
)
async def get_catalog(
    content_type: str,
    catalog_id: str,
    user_id: str = Query(settings.DEFAULT_USER_ID, alias="userId"),
    provider: AddonInterfaceProvider = Depends(get_addon_interface_provider),
) -> dict[str, Any]:
    response = await provider.handle_catalog(user_id, content_type, catalog_id)
    return response.model_dump(mode="json")


@router.get("/{user_id}/manifest.json", summary="Manifest for a user")
async def get_user_manifest(
    user_id: str,
    provider: AddonInterfaceProvider = Depends(get_addon_interface_provider),
) -> dict[str, Any]:
    manifest = await provider.get_manifest(user_id)
    return manifest.to_dict()


@router.get(
    "/{user_id}/catalog/{content_type}/{catalog_id}.json",
    summary="Catalog for a user",
)
async def get_user_catalog(
    user_id: str,
    content_type: str,
    catalog_id: str,
    provider: AddonInterfaceProvider = Depends(get_addon_interface_provider),
) -> dict[str, Any]:
    response = await provider.handle_catalog(user_id, content_type, catalog_id)
    return response.model_dump(mode="json")


@router.get(
    "/{user_id}/{resource}/{content_type}/{item_id}.json",
    summary="Unsupported addon resources",
)
async def get_unsupported_resource(
    user_id: str, resource: str, content_type: str, item_id: str
) -> JSONResponse:
    # Only catalogs are aggregated; meta and stream stay with the upstreams
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": {
                "code": "RESOURCE_NOT_SUPPORTED",
                "message": f"Resource '{resource}' is not provided by this addon",
            }
        },
    )
