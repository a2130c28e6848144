"""Tag endpoints - the caller's own tags."""

from uuid import UUID

from fastapi import APIRouter, status

from src.app.api.dependencies import CurrentUser, OrganizationServiceDep
from src.app.schemas.organization import TagCreate, TagDeleteResponse, TagRead, TagUpdate

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=list[TagRead])
async def list_tags(current_user: CurrentUser, service: OrganizationServiceDep) -> list[TagRead]:
    tags = await service.list_tags(current_user.id)
    return [TagRead.model_validate(t) for t in tags]


@router.post(
    "",
    response_model=TagRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Tag created"},
        409: {"description": "A tag with this name already exists"},
    },
)
async def create_tag(
    data: TagCreate, current_user: CurrentUser, service: OrganizationServiceDep
) -> TagRead:
    tag = await service.create_tag(current_user.id, data)
    return TagRead.model_validate(tag)


@router.get("/{tag_id}", response_model=TagRead)
async def get_tag(
    tag_id: UUID, current_user: CurrentUser, service: OrganizationServiceDep
) -> TagRead:
    return TagRead.model_validate(await service.get_tag(current_user.id, tag_id))


@router.patch("/{tag_id}", response_model=TagRead)
async def update_tag(
    tag_id: UUID,
    data: TagUpdate,
    current_user: CurrentUser,
    service: OrganizationServiceDep,
) -> TagRead:
    return TagRead.model_validate(await service.update_tag(current_user.id, tag_id, data))


@router.delete(
    "/{tag_id}",
    response_model=TagDeleteResponse,
    responses={
        200: {
            "description": "Tag deleted, or it was already gone",
            "content": {
                "application/json": {"example": {"outcome": "deleted", "detached_layouts": 3}}
            },
        },
        404: {"description": "Tag belongs to another user"},
    },
)
async def delete_tag(
    tag_id: UUID, current_user: CurrentUser, service: OrganizationServiceDep
) -> TagDeleteResponse:
    """Delete a tag and detach it from every layout."""
    outcome, detached = await service.delete_tag(current_user.id, tag_id)
    return TagDeleteResponse(outcome=outcome, detached_layouts=detached)
