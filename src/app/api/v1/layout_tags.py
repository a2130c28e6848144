"""Tagging endpoints for a single layout."""

from uuid import UUID

from fastapi import APIRouter, status

from src.app.api.dependencies import CurrentUser, OptionalUser, OrganizationServiceDep
from src.app.core.logging import get_logger
from src.app.schemas.organization import TagRead
from src.app.services.organization_service import TagNotAttachedError

logger = get_logger(__name__)

router = APIRouter(prefix="/layouts/{layout_id}/tags", tags=["layouts"])


@router.get("", response_model=list[TagRead])
async def list_layout_tags(
    layout_id: UUID, user: OptionalUser, service: OrganizationServiceDep
) -> list[TagRead]:
    tags = await service.list_layout_tags(user.id if user else None, layout_id)
    return [TagRead.model_validate(t) for t in tags]


@router.put(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {"description": "Tag attached (or already attached)"},
        403: {"description": "Editor access required"},
        404: {"description": "Layout or tag not found"},
    },
)
async def attach_tag(
    layout_id: UUID, tag_id: UUID, current_user: CurrentUser, service: OrganizationServiceDep
) -> None:
    """Attach one of the caller's tags. Idempotent."""
    await service.attach_tag(current_user.id, layout_id, tag_id)


@router.delete(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {"description": "Tag detached (or was not attached)"},
        403: {"description": "Editor access required"},
        404: {"description": "Layout not found"},
    },
)
async def detach_tag(
    layout_id: UUID, tag_id: UUID, current_user: CurrentUser, service: OrganizationServiceDep
) -> None:
    """Detach a tag. Detaching a tag that is not attached still succeeds."""
    try:
        await service.detach_tag(current_user.id, layout_id, tag_id)
    except TagNotAttachedError:
        logger.info("Tag already detached", layout_id=str(layout_id), tag_id=str(tag_id))
