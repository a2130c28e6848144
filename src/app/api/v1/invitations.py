"""Invitation endpoints for the invited user."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from src.app.api.dependencies import CurrentUser, InvitationServiceDep
from src.app.models import InvitationStatus
from src.app.schemas.team import InvitationRead, InvitationResponse

router = APIRouter(prefix="/invitations", tags=["invitations"])


@router.get("", response_model=list[InvitationRead])
async def list_received_invitations(
    current_user: CurrentUser,
    service: InvitationServiceDep,
    status: Annotated[InvitationStatus | None, Query(description="Filter by status")] = None,
) -> list[InvitationRead]:
    """Invitations sent to the caller, newest first."""
    invitations = await service.list_received(current_user.id, status)
    return [InvitationRead.model_validate(i) for i in invitations]


@router.post(
    "/{invitation_id}/respond",
    response_model=InvitationRead,
    responses={
        403: {"description": "Only the invited user can respond"},
        404: {"description": "Invitation not found"},
        409: {"description": "Invitation was already answered"},
    },
)
async def respond_to_invitation(
    invitation_id: UUID,
    data: InvitationResponse,
    current_user: CurrentUser,
    service: InvitationServiceDep,
) -> InvitationRead:
    """Accept or reject a pending invitation."""
    invitation = await service.respond(current_user.id, invitation_id, data.accept)
    return InvitationRead.model_validate(invitation)
