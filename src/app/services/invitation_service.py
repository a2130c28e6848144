"""Invitation service - the team invitation state machine.

pending -> accepted | rejected, exactly once, by the invited user only.
"""

from uuid import UUID

from src.app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from src.app.core.logging import get_logger
from src.app.models import (
    AccessRole,
    InvitationStatus,
    SharedLayout,
    SharePermission,
    TeamInvitation,
    TeamMember,
    TeamRole,
)
from src.app.models.base import utc_now
from src.app.services.access_resolver import AccessResolver
from src.app.storage import Storage

logger = get_logger(__name__)


class InvitationService:
    """Service for team invitations."""

    def __init__(self, storage: Storage, access: AccessResolver):
        self.storage = storage
        self.access = access

    async def create_invitation(
        self,
        inviter_user_id: UUID,
        team_id: UUID,
        invited_user_id: UUID,
        role: TeamRole = TeamRole.MEMBER,
        layout_id: UUID | None = None,
        message: str | None = None,
    ) -> TeamInvitation:
        """Invite a user to a team, optionally pointing them at one layout.

        Raises:
            ForbiddenError: inviter is not a team admin, or lacks admin access
                to the bound layout.
            NotFoundError: team, invitee or layout does not exist.
            ConflictError: invitee already belongs to the team or already has
                a pending invitation to it.
        """
        async with self.storage.transaction():
            team = await self.access.require_team_admin(inviter_user_id, team_id)
            if await self.storage.users.get_by_id(invited_user_id) is None:
                raise NotFoundError(f"User {invited_user_id} not found")
            if layout_id is not None:
                await self.access.get_layout(inviter_user_id, layout_id, AccessRole.ADMIN)

            if team.created_by_user_id == invited_user_id or await self.storage.team_members.get(
                team.id, invited_user_id
            ):
                raise ConflictError("User is already a member of this team")
            if await self.storage.invitations.get_pending(team.id, invited_user_id):
                raise ConflictError("User already has a pending invitation to this team")

            invitation = TeamInvitation(
                team_id=team.id,
                invited_user_id=invited_user_id,
                invited_by_user_id=inviter_user_id,
                role=role.value,
                layout_id=layout_id,
                message=message,
            )
            self.storage.invitations.add(invitation)

        logger.info(
            "Invitation created",
            invitation_id=str(invitation.id),
            team_id=str(team_id),
            invited_user_id=str(invited_user_id),
            role=role.value,
        )
        return invitation

    async def list_received(
        self, user_id: UUID, status: InvitationStatus | None = None
    ) -> list[TeamInvitation]:
        return await self.storage.invitations.list_for_invitee(
            user_id, status.value if status else None
        )

    async def list_for_team(self, user_id: UUID, team_id: UUID) -> list[TeamInvitation]:
        team = await self.access.require_team_admin(user_id, team_id)
        return await self.storage.invitations.list_for_team(team.id)

    async def respond(self, user_id: UUID, invitation_id: UUID, accept: bool) -> TeamInvitation:
        """Accept or reject a pending invitation.

        Accepting upserts the membership with the invitation's role and, for a
        layout-bound invitation, grants the invitee a direct viewer share on
        that layout unless they already have one.
        """
        async with self.storage.transaction():
            invitation = await self.storage.invitations.get_by_id(invitation_id, for_update=True)
            if invitation is None:
                raise NotFoundError(f"Invitation {invitation_id} not found")
            if invitation.invited_user_id != user_id:
                raise ForbiddenError("Only the invited user can respond to this invitation")
            if not invitation.is_pending:
                raise ConflictError(f"Invitation has already been {invitation.status}")

            invitation.status = (
                InvitationStatus.ACCEPTED.value if accept else InvitationStatus.REJECTED.value
            )
            invitation.responded_at = utc_now()
            self.storage.invitations.add(invitation)

            if accept:
                await self._join(invitation)

        logger.info(
            "Invitation answered",
            invitation_id=str(invitation_id),
            team_id=str(invitation.team_id),
            status=invitation.status,
        )
        return invitation

    async def _join(self, invitation: TeamInvitation) -> None:
        member = await self.storage.team_members.get(
            invitation.team_id, invitation.invited_user_id
        )
        if member is None:
            member = TeamMember(
                team_id=invitation.team_id,
                user_id=invitation.invited_user_id,
                role=invitation.role,
            )
        else:
            member.role = invitation.role
        self.storage.team_members.add(member)

        if invitation.layout_id is None:
            return
        if await self.storage.layouts.get_by_id(invitation.layout_id) is None:
            logger.warning(
                "Invitation layout no longer exists",
                invitation_id=str(invitation.id),
                layout_id=str(invitation.layout_id),
            )
            return
        existing = await self.storage.shares.get_for_user(
            invitation.layout_id, invitation.invited_user_id
        )
        if existing is None:
            self.storage.shares.add(
                SharedLayout(
                    layout_id=invitation.layout_id,
                    shared_by_user_id=invitation.invited_by_user_id,
                    shared_with_user_id=invitation.invited_user_id,
                    permissions=SharePermission.VIEWER.value,
                )
            )
