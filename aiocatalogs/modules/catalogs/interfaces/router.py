"""Configuration API routes."""

from fastapi import APIRouter, Depends, status

from aiocatalogs.core.interfaces.http.response import ApiResponse
from aiocatalogs.modules.catalogs.application.commands import (
    AddSourceFromUrlCommand,
    MoveDirection,
    MoveSourceCommand,
    RemoveSourceCommand,
    RenameSourceCommand,
    ToggleRandomizeCommand,
)
from aiocatalogs.modules.catalogs.application.dependencies import (
    get_add_source_from_url_handler,
    get_create_user_handler,
    get_move_source_handler,
    get_remove_source_handler,
    get_rename_source_handler,
    get_source_query_service,
    get_toggle_randomize_handler,
)
from aiocatalogs.modules.catalogs.application.handlers import (
    AddSourceFromUrlHandler,
    CreateUserHandler,
    MoveSourceHandler,
    RemoveSourceHandler,
    RenameSourceHandler,
    ToggleRandomizeHandler,
)
from aiocatalogs.modules.catalogs.application.services import SourceQueryService
from aiocatalogs.modules.catalogs.domain.entities import CatalogSource
from aiocatalogs.modules.catalogs.domain.exceptions import SourceUpdateFailedError
from aiocatalogs.modules.catalogs.interfaces.schemas import (
    AddSourceRequest,
    CatalogEntryResponse,
    CreateUserResponse,
    RenameSourceRequest,
    SourceHealthResponse,
    SourceResponse,
)

router = APIRouter(prefix="/users", tags=["sources"])


def _to_source_response(source: CatalogSource) -> SourceResponse:
    return SourceResponse(
        id=source.id,
        name=source.name,
        description=source.description,
        endpoint=source.endpoint,
        version=source.version,
        custom_name=source.custom_name,
        display_name=source.display_name,
        randomize=source.randomize,
        types=source.types,
        catalogs=[
            CatalogEntryResponse(id=c.id, type=c.type, name=c.name)
            for c in source.browsable_catalogs()
        ],
    )


@router.post(
    "",
    response_model=ApiResponse[CreateUserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Create an empty catalog configuration under a new user id",
)
async def create_user(
    handler: CreateUserHandler = Depends(get_create_user_handler),
) -> ApiResponse[CreateUserResponse]:
    user_id = await handler.handle()
    return ApiResponse.success(
        data=CreateUserResponse(
            user_id=user_id, manifest_url=f"/{user_id}/manifest.json"
        ),
        message="User created successfully",
        code=status.HTTP_201_CREATED,
    )


@router.get(
    "/{user_id}/sources",
    response_model=ApiResponse[list[SourceResponse]],
    summary="List sources",
    description="List the sources of a user in manifest order",
)
async def list_sources(
    user_id: str,
    service: SourceQueryService = Depends(get_source_query_service),
) -> ApiResponse[list[SourceResponse]]:
    sources = await service.list_sources(user_id)
    return ApiResponse.success(data=[_to_source_response(s) for s in sources])


@router.post(
    "/{user_id}/sources",
    response_model=ApiResponse[SourceResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add source",
    description=(
        "Fetch an addon manifest and register it. A source whose id is already "
        "registered is replaced at its current position."
    ),
)
async def add_source(
    user_id: str,
    request: AddSourceRequest,
    handler: AddSourceFromUrlHandler = Depends(get_add_source_from_url_handler),
    service: SourceQueryService = Depends(get_source_query_service),
) -> ApiResponse[SourceResponse]:
    await service.ensure_user(user_id)
    source = await handler.handle(
        AddSourceFromUrlCommand(user_id=user_id, url=request.url)
    )
    return ApiResponse.success(
        data=_to_source_response(source),
        message="Source added successfully",
        code=status.HTTP_201_CREATED,
    )


@router.delete(
    "/{user_id}/sources/{source_id}",
    response_model=ApiResponse[None],
    summary="Remove source",
)
async def remove_source(
    user_id: str,
    source_id: str,
    handler: RemoveSourceHandler = Depends(get_remove_source_handler),
    service: SourceQueryService = Depends(get_source_query_service),
) -> ApiResponse[None]:
    await service.ensure_user(user_id)
    removed = await handler.handle(
        RemoveSourceCommand(user_id=user_id, source_id=source_id)
    )
    if not removed:
        raise SourceUpdateFailedError("remove", source_id)
    return ApiResponse.success(message="Source removed")


async def _move(
    user_id: str,
    source_id: str,
    direction: MoveDirection,
    handler: MoveSourceHandler,
    service: SourceQueryService,
) -> list[SourceResponse]:
    await service.ensure_user(user_id)
    moved = await handler.handle(
        MoveSourceCommand(user_id=user_id, source_id=source_id, direction=direction)
    )
    if not moved:
        raise SourceUpdateFailedError(f"move {direction.value}", source_id)
    return [_to_source_response(s) for s in await service.list_sources(user_id)]


@router.post(
    "/{user_id}/sources/{source_id}/move-up",
    response_model=ApiResponse[list[SourceResponse]],
    summary="Move source up",
)
async def move_source_up(
    user_id: str,
    source_id: str,
    handler: MoveSourceHandler = Depends(get_move_source_handler),
    service: SourceQueryService = Depends(get_source_query_service),
) -> ApiResponse[list[SourceResponse]]:
    data = await _move(user_id, source_id, MoveDirection.UP, handler, service)
    return ApiResponse.success(data=data, message="Source moved up")


@router.post(
    "/{user_id}/sources/{source_id}/move-down",
    response_model=ApiResponse[list[SourceResponse]],
    summary="Move source down",
)
async def move_source_down(
    user_id: str,
    source_id: str,
    handler: MoveSourceHandler = Depends(get_move_source_handler),
    service: SourceQueryService = Depends(get_source_query_service),
) -> ApiResponse[list[SourceResponse]]:
    data = await _move(user_id, source_id, MoveDirection.DOWN, handler, service)
    return ApiResponse.success(data=data, message="Source moved down")


@router.patch(
    "/{user_id}/sources/{source_id}",
    response_model=ApiResponse[SourceResponse],
    summary="Rename source",
    description="Set a custom display name; an empty name restores the upstream name",
)
async def rename_source(
    user_id: str,
    source_id: str,
    request: RenameSourceRequest,
    handler: RenameSourceHandler = Depends(get_rename_source_handler),
    service: SourceQueryService = Depends(get_source_query_service),
) -> ApiResponse[SourceResponse]:
    await service.ensure_user(user_id)
    renamed = await handler.handle(
        RenameSourceCommand(user_id=user_id, source_id=source_id, name=request.name)
    )
    if not renamed:
        raise SourceUpdateFailedError("rename", source_id)
    source = await service.get_source(user_id, source_id)
    return ApiResponse.success(
        data=_to_source_response(source), message="Source renamed"
    )


@router.post(
    "/{user_id}/sources/{source_id}/toggle-randomize",
    response_model=ApiResponse[SourceResponse],
    summary="Toggle randomize",
    description="Switch shuffling of the catalog items of a source on or off",
)
async def toggle_randomize(
    user_id: str,
    source_id: str,
    handler: ToggleRandomizeHandler = Depends(get_toggle_randomize_handler),
    service: SourceQueryService = Depends(get_source_query_service),
) -> ApiResponse[SourceResponse]:
    await service.ensure_user(user_id)
    toggled = await handler.handle(
        ToggleRandomizeCommand(user_id=user_id, source_id=source_id)
    )
    if not toggled:
        raise SourceUpdateFailedError("toggle randomize for", source_id)
    source = await service.get_source(user_id, source_id)
    return ApiResponse.success(data=_to_source_response(source))


@router.get(
    "/{user_id}/sources/{source_id}/health",
    response_model=ApiResponse[SourceHealthResponse],
    summary="Check source health",
    description="Probe the manifest endpoint of a registered source",
)
async def check_source_health(
    user_id: str,
    source_id: str,
    service: SourceQueryService = Depends(get_source_query_service),
) -> ApiResponse[SourceHealthResponse]:
    health = await service.check_source_health(user_id, source_id)
    return ApiResponse.success(
        data=SourceHealthResponse(
            source_id=health.source_id,
            endpoint=health.endpoint,
            reachable=health.reachable,
        )
    )
