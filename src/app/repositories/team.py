"""Repositories for teams, memberships and invitations."""

from uuid import UUID

from sqlalchemy import delete, or_
from sqlmodel import select

from src.app.models import InvitationStatus, Team, TeamInvitation, TeamMember
from src.app.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    model = Team

    async def list_for_user(self, user_id: UUID) -> list[Team]:
        """Teams the user created or belongs to, newest first."""
        member_of = select(TeamMember.team_id).where(TeamMember.user_id == user_id)
        return await self.all(
            select(Team)
            .where(
                or_(
                    Team.created_by_user_id == user_id,
                    Team.id.in_(member_of),  # type: ignore[attr-defined]
                )
            )
            .order_by(Team.created_at.desc())  # type: ignore[attr-defined]
        )


class TeamMemberRepository(BaseRepository[TeamMember]):
    model = TeamMember

    async def get(self, team_id: UUID, user_id: UUID) -> TeamMember | None:
        result = await self.session.execute(
            select(TeamMember).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_for_team(self, team_id: UUID) -> list[TeamMember]:
        return await self.all(
            select(TeamMember)
            .where(TeamMember.team_id == team_id)
            .order_by(TeamMember.joined_at)  # type: ignore[arg-type]
        )

    async def list_for_user(self, user_id: UUID) -> list[TeamMember]:
        return await self.all(select(TeamMember).where(TeamMember.user_id == user_id))

    async def delete_for_team(self, team_id: UUID) -> int:
        result = await self.session.execute(
            delete(TeamMember).where(TeamMember.team_id == team_id)  # type: ignore[arg-type]
        )
        return result.rowcount  # type: ignore[attr-defined, no-any-return]


class InvitationRepository(BaseRepository[TeamInvitation]):
    model = TeamInvitation

    async def get_by_id(self, id: UUID, for_update: bool = False) -> TeamInvitation | None:
        """Get an invitation by id.

        Args:
            id: The invitation id
            for_update: If True, locks the row until the transaction ends so
                concurrent responses cannot both see it pending
        """
        query = select(TeamInvitation).where(TeamInvitation.id == id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_pending(self, team_id: UUID, user_id: UUID) -> TeamInvitation | None:
        result = await self.session.execute(
            select(TeamInvitation).where(
                TeamInvitation.team_id == team_id,
                TeamInvitation.invited_user_id == user_id,
                TeamInvitation.status == InvitationStatus.PENDING.value,
            )
        )
        return result.scalars().first()

    async def list_for_invitee(
        self, user_id: UUID, status: str | None = None
    ) -> list[TeamInvitation]:
        query = select(TeamInvitation).where(TeamInvitation.invited_user_id == user_id)
        if status is not None:
            query = query.where(TeamInvitation.status == status)
        return await self.all(query.order_by(TeamInvitation.created_at.desc()))  # type: ignore[attr-defined]

    async def list_for_team(self, team_id: UUID) -> list[TeamInvitation]:
        return await self.all(
            select(TeamInvitation)
            .where(TeamInvitation.team_id == team_id)
            .order_by(TeamInvitation.created_at.desc())  # type: ignore[attr-defined]
        )

    async def delete_for_team(self, team_id: UUID) -> int:
        result = await self.session.execute(
            delete(TeamInvitation).where(TeamInvitation.team_id == team_id)  # type: ignore[arg-type]
        )
        return result.rowcount  # type: ignore[attr-defined, no-any-return]
