"""Comment endpoints for a single layout."""

from uuid import UUID

from fastapi import APIRouter, status

from src.app.api.dependencies import CommentServiceDep, CurrentUser, OptionalUser
from src.app.schemas.comment import CommentCreate, CommentRead

router = APIRouter(prefix="/layouts/{layout_id}/comments", tags=["comments"])


@router.get("", response_model=list[CommentRead])
async def list_comments(
    layout_id: UUID, user: OptionalUser, service: CommentServiceDep
) -> list[CommentRead]:
    """Comments on a layout, oldest first."""
    comments = await service.list_comments(user.id if user else None, layout_id)
    return [CommentRead.model_validate(c) for c in comments]


@router.post("", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
async def add_comment(
    layout_id: UUID,
    data: CommentCreate,
    current_user: CurrentUser,
    service: CommentServiceDep,
) -> CommentRead:
    comment = await service.add_comment(
        current_user.id, layout_id, data.comment, data.position_x, data.position_y
    )
    return CommentRead.model_validate(comment)


@router.post(
    "/{comment_id}/resolve",
    response_model=CommentRead,
    responses={
        403: {"description": "Only the author or a layout editor can resolve"},
        404: {"description": "Layout or comment not found"},
    },
)
async def resolve_comment(
    layout_id: UUID,
    comment_id: UUID,
    current_user: CurrentUser,
    service: CommentServiceDep,
) -> CommentRead:
    """Mark a comment resolved. Resolving twice is harmless."""
    comment = await service.resolve(current_user.id, layout_id, comment_id)
    return CommentRead.model_validate(comment)
