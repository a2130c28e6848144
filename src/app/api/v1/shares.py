"""Share endpoints for a single layout. All require admin access to the layout."""

from uuid import UUID

from fastapi import APIRouter, status

from src.app.api.dependencies import CurrentUser, SharingServiceDep
from src.app.schemas.sharing import ShareCreate, ShareRead

router = APIRouter(prefix="/layouts/{layout_id}/shares", tags=["sharing"])


@router.get("", response_model=list[ShareRead])
async def list_shares(
    layout_id: UUID, current_user: CurrentUser, service: SharingServiceDep
) -> list[ShareRead]:
    shares = await service.list_shares(current_user.id, layout_id)
    return [ShareRead.model_validate(s) for s in shares]


@router.post(
    "",
    response_model=ShareRead,
    responses={
        200: {"description": "Share created, or its permission updated"},
        403: {"description": "Admin access required"},
        404: {"description": "Layout, user or team not found"},
    },
)
async def share_layout(
    layout_id: UUID,
    data: ShareCreate,
    current_user: CurrentUser,
    service: SharingServiceDep,
) -> ShareRead:
    """Share with exactly one user or one team. Re-sharing updates the permission."""
    share = await service.share(
        current_user.id,
        layout_id,
        data.permissions,
        shared_with_user_id=data.shared_with_user_id,
        shared_with_team_id=data.shared_with_team_id,
    )
    return ShareRead.model_validate(share)


@router.delete("/{share_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_share(
    layout_id: UUID,
    share_id: UUID,
    current_user: CurrentUser,
    service: SharingServiceDep,
) -> None:
    await service.revoke(current_user.id, layout_id, share_id)
