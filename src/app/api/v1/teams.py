"""Team endpoints - teams, members and team invitations."""

from uuid import UUID

from fastapi import APIRouter, status

from src.app.api.dependencies import CurrentUser, InvitationServiceDep, TeamServiceDep
from src.app.schemas.team import (
    InvitationCreate,
    InvitationRead,
    TeamCreate,
    TeamMemberCreate,
    TeamMemberRead,
    TeamRead,
)

router = APIRouter(prefix="/teams", tags=["teams"])


@router.post("", response_model=TeamRead, status_code=status.HTTP_201_CREATED)
async def create_team(
    data: TeamCreate, current_user: CurrentUser, service: TeamServiceDep
) -> TeamRead:
    """Create a team. The creator administers it without a membership row."""
    team = await service.create_team(current_user.id, data.name, data.description)
    return TeamRead.model_validate(team)


@router.get("", response_model=list[TeamRead])
async def list_my_teams(current_user: CurrentUser, service: TeamServiceDep) -> list[TeamRead]:
    """Teams the caller created or belongs to."""
    return [TeamRead.model_validate(t) for t in await service.list_my_teams(current_user.id)]


@router.get(
    "/{team_id}",
    response_model=TeamRead,
    responses={404: {"description": "Team not found or caller is not a member"}},
)
async def get_team(team_id: UUID, current_user: CurrentUser, service: TeamServiceDep) -> TeamRead:
    return TeamRead.model_validate(await service.get_team(current_user.id, team_id))


@router.delete(
    "/{team_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"description": "Only the creator can delete the team"}},
)
async def delete_team(team_id: UUID, current_user: CurrentUser, service: TeamServiceDep) -> None:
    """Delete a team with its memberships, invitations and team shares."""
    await service.delete_team(current_user.id, team_id)


# Members


@router.get("/{team_id}/members", response_model=list[TeamMemberRead])
async def list_members(
    team_id: UUID, current_user: CurrentUser, service: TeamServiceDep
) -> list[TeamMemberRead]:
    members = await service.list_members(current_user.id, team_id)
    return [TeamMemberRead.model_validate(m) for m in members]


@router.post(
    "/{team_id}/members",
    response_model=TeamMemberRead,
    responses={
        200: {"description": "Member added, or their role updated"},
        403: {"description": "Team admin required"},
        409: {"description": "The creator cannot be added as a member"},
    },
)
async def add_member(
    team_id: UUID,
    data: TeamMemberCreate,
    current_user: CurrentUser,
    service: TeamServiceDep,
) -> TeamMemberRead:
    member = await service.add_member(current_user.id, team_id, data.user_id, data.role)
    return TeamMemberRead.model_validate(member)


@router.delete("/{team_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    team_id: UUID, user_id: UUID, current_user: CurrentUser, service: TeamServiceDep
) -> None:
    """Remove a member. Members may remove themselves to leave the team."""
    await service.remove_member(current_user.id, team_id, user_id)


# Invitations


@router.post(
    "/{team_id}/invitations",
    response_model=InvitationRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Team admin (and layout admin, when a layout is bound) required"},
        409: {"description": "Already a member, or an invitation is already pending"},
    },
)
async def create_invitation(
    team_id: UUID,
    data: InvitationCreate,
    current_user: CurrentUser,
    service: InvitationServiceDep,
) -> InvitationRead:
    invitation = await service.create_invitation(
        current_user.id,
        team_id,
        data.invited_user_id,
        role=data.role,
        layout_id=data.layout_id,
        message=data.message,
    )
    return InvitationRead.model_validate(invitation)


@router.get("/{team_id}/invitations", response_model=list[InvitationRead])
async def list_team_invitations(
    team_id: UUID, current_user: CurrentUser, service: InvitationServiceDep
) -> list[InvitationRead]:
    invitations = await service.list_for_team(current_user.id, team_id)
    return [InvitationRead.model_validate(i) for i in invitations]
