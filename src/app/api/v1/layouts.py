"""Layout endpoints - generation, versions, listing and in-place edits."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status
from starlette.requests import Request

from src.app.api.dependencies import (
    CurrentUser,
    GenerationServiceDep,
    LayoutServiceDep,
    OptionalUser,
    SearchServiceDep,
)
from src.app.core.rate_limit import generation_limit, limiter
from src.app.schemas.layout import (
    CategoryAssignment,
    CodeUpdate,
    GenerateFromImageRequest,
    GenerateRequest,
    GenerationResponse,
    ImproveRequest,
    LayoutRead,
    LayoutSummary,
    SharedLayoutSummary,
    VersionCreate,
    VisibilityUpdate,
)
from src.app.schemas.pagination import PaginatedResponse
from src.app.schemas.search import LayoutSearchParams
from src.app.services.generation_service import GenerationResult

router = APIRouter(prefix="/layouts", tags=["layouts"])

CursorQuery = Annotated[str | None, Query(description="Cursor for pagination")]
LimitQuery = Annotated[int, Query(ge=1, le=100, description="Max items to return")]


def _generation_response(result: GenerationResult) -> GenerationResponse:
    layout = result.layout
    return GenerationResponse(
        id=layout.id,
        html=layout.generated_code,
        title=layout.title,
        description=layout.description,
        version_number=layout.version_number,
        parent_layout_id=layout.parent_layout_id,
        fallback=result.fallback,
    )


# Generation


@router.post(
    "/generate",
    response_model=GenerationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Layout generated and stored as a new root (v1.0)"},
        404: {"description": "Category not found"},
        409: {"description": "A layout with this name already exists"},
        429: {"description": "Too many generation requests"},
    },
)
@limiter.limit(generation_limit)
async def generate_layout(
    request: Request,
    data: GenerateRequest,
    current_user: CurrentUser,
    service: GenerationServiceDep,
) -> GenerationResponse:
    """Generate a layout from a text description."""
    return _generation_response(await service.generate_from_description(current_user.id, data))


@router.post(
    "/generate-from-image",
    response_model=GenerationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Layout generated from the image"},
        409: {"description": "A layout with this name already exists"},
        422: {"description": "Invalid, oversized or unsupported image"},
    },
)
@limiter.limit(generation_limit)
async def generate_layout_from_image(
    request: Request,
    data: GenerateFromImageRequest,
    current_user: CurrentUser,
    service: GenerationServiceDep,
) -> GenerationResponse:
    """Generate a layout from a base64-encoded screenshot or mockup."""
    return _generation_response(await service.generate_from_image(current_user.id, data))


@router.post(
    "/{layout_id}/improve",
    response_model=GenerationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Improved code stored as a new version"},
        403: {"description": "Editor access required"},
        404: {"description": "Layout not found"},
    },
)
@limiter.limit(generation_limit)
async def improve_layout(
    request: Request,
    layout_id: UUID,
    data: ImproveRequest,
    current_user: CurrentUser,
    service: GenerationServiceDep,
) -> GenerationResponse:
    """Ask the model to improve a layout; the answer becomes a new version."""
    return _generation_response(await service.improve(current_user.id, layout_id, data))


# Listing


@router.get("", response_model=PaginatedResponse[LayoutSummary])
async def list_my_layouts(
    current_user: CurrentUser,
    service: LayoutServiceDep,
    cursor: CursorQuery = None,
    limit: LimitQuery = 20,
) -> PaginatedResponse[LayoutSummary]:
    """List the caller's layouts, newest first."""
    layouts, next_cursor, has_more = await service.list_mine(current_user.id, cursor, limit)
    return PaginatedResponse(
        items=[LayoutSummary.model_validate(n) for n in layouts],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get("/public", response_model=PaginatedResponse[LayoutSummary])
async def list_public_layouts(
    service: LayoutServiceDep,
    cursor: CursorQuery = None,
    limit: LimitQuery = 20,
) -> PaginatedResponse[LayoutSummary]:
    """Public gallery. No authentication required."""
    layouts, next_cursor, has_more = await service.list_public(cursor, limit)
    return PaginatedResponse(
        items=[LayoutSummary.model_validate(n) for n in layouts],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get("/shared", response_model=list[SharedLayoutSummary])
async def list_shared_layouts(
    current_user: CurrentUser, service: LayoutServiceDep
) -> list[SharedLayoutSummary]:
    """Layouts shared with the caller directly or through a team, with the caller's role."""
    shared = await service.list_shared_with_me(current_user.id)
    return [
        SharedLayoutSummary.model_validate(
            {**LayoutSummary.model_validate(layout).model_dump(), "role": role}
        )
        for layout, role in shared
    ]


@router.get("/search", response_model=list[LayoutSummary])
async def search_layouts(
    params: Annotated[LayoutSearchParams, Query()],
    current_user: CurrentUser,
    service: SearchServiceDep,
) -> list[LayoutSummary]:
    """Search the caller's layouts (or every accessible layout with scope=accessible).

    All given filters must match.
    """
    results = await service.search(current_user.id, params)
    return [LayoutSummary.model_validate(n) for n in results]


# Single layout


@router.get(
    "/{layout_id}",
    response_model=LayoutRead,
    responses={
        403: {"description": "No access to this layout"},
        404: {"description": "Layout not found"},
    },
)
async def get_layout(
    layout_id: UUID, user: OptionalUser, service: LayoutServiceDep
) -> LayoutRead:
    """Get a layout. Public layouts are readable without authentication."""
    layout, _ = await service.get_layout(user.id if user else None, layout_id)
    return LayoutRead.model_validate(layout)


@router.patch("/{layout_id}/visibility", response_model=LayoutRead)
async def set_visibility(
    layout_id: UUID,
    data: VisibilityUpdate,
    current_user: CurrentUser,
    service: LayoutServiceDep,
) -> LayoutRead:
    """Make a layout public or private. Requires admin access."""
    layout = await service.set_visibility(current_user.id, layout_id, data.is_public)
    return LayoutRead.model_validate(layout)


@router.patch("/{layout_id}/code", response_model=LayoutRead)
async def update_code(
    layout_id: UUID,
    data: CodeUpdate,
    current_user: CurrentUser,
    service: LayoutServiceDep,
) -> LayoutRead:
    """Save a draft edit of the code in place, without creating a version."""
    layout = await service.update_code(current_user.id, layout_id, data.generated_code)
    return LayoutRead.model_validate(layout)


@router.patch("/{layout_id}/category", response_model=LayoutRead)
async def set_category(
    layout_id: UUID,
    data: CategoryAssignment,
    current_user: CurrentUser,
    service: LayoutServiceDep,
) -> LayoutRead:
    layout = await service.set_category(current_user.id, layout_id, data.category_id)
    return LayoutRead.model_validate(layout)


# Versions


@router.post(
    "/{layout_id}/versions",
    response_model=LayoutRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Editor access required"},
        404: {"description": "Layout or category not found"},
    },
)
async def create_version(
    layout_id: UUID,
    data: VersionCreate,
    current_user: CurrentUser,
    service: LayoutServiceDep,
) -> LayoutRead:
    """Append a manual version under this layout."""
    version = await service.create_version(
        parent_layout_id=layout_id,
        actor_user_id=current_user.id,
        generated_code=data.generated_code,
        changes_description=data.changes_description,
        title=data.title,
        description=data.description,
        category_id=data.category_id,
        is_public=data.is_public,
    )
    return LayoutRead.model_validate(version)


@router.get("/{layout_id}/versions", response_model=list[LayoutSummary])
async def version_history(
    layout_id: UUID, user: OptionalUser, service: LayoutServiceDep
) -> list[LayoutSummary]:
    """Versions in this layout's chain the caller may see, newest first."""
    history = await service.get_version_history(user.id if user else None, layout_id)
    return [LayoutSummary.model_validate(n) for n in history]

