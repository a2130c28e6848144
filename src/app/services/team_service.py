"""Team service - teams and their memberships."""

from uuid import UUID

from src.app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from src.app.core.logging import get_logger
from src.app.models import Team, TeamMember, TeamRole
from src.app.services.access_resolver import AccessResolver
from src.app.storage import Storage

logger = get_logger(__name__)


class TeamService:
    """Team lifecycle and membership management."""

    def __init__(self, storage: Storage, access: AccessResolver):
        self.storage = storage
        self.access = access

    async def create_team(
        self, creator_user_id: UUID, name: str, description: str | None = None
    ) -> Team:
        """Create a team. The creator is its implicit admin, no membership row."""
        async with self.storage.transaction():
            team = Team(name=name, description=description, created_by_user_id=creator_user_id)
            self.storage.teams.add(team)

        logger.info("Team created", team_id=str(team.id), creator_user_id=str(creator_user_id))
        return team

    async def list_my_teams(self, user_id: UUID) -> list[Team]:
        """Teams the user created or belongs to, newest first."""
        return await self.storage.teams.list_for_user(user_id)

    async def get_team(self, user_id: UUID, team_id: UUID) -> Team:
        team, _ = await self.access.get_team(user_id, team_id)
        return team

    async def delete_team(self, user_id: UUID, team_id: UUID) -> None:
        """Delete a team with its members, invitations and team shares. Creator only."""
        async with self.storage.transaction():
            team, _ = await self.access.get_team(user_id, team_id)
            if team.created_by_user_id != user_id:
                raise ForbiddenError("Only the team creator can delete the team")

            members = await self.storage.team_members.delete_for_team(team.id)
            invitations = await self.storage.invitations.delete_for_team(team.id)
            shares = await self.storage.shares.delete_for_team(team.id)
            await self.storage.teams.delete(team)

        logger.info(
            "Team deleted",
            team_id=str(team_id),
            removed_members=members,
            removed_invitations=invitations,
            removed_shares=shares,
        )

    async def add_member(
        self, actor_user_id: UUID, team_id: UUID, user_id: UUID, role: TeamRole
    ) -> TeamMember:
        """Add a user to the team, or change the role of an existing member."""
        async with self.storage.transaction():
            team = await self.access.require_team_admin(actor_user_id, team_id)
            if team.created_by_user_id == user_id:
                raise ConflictError("The team creator is already the team admin")
            if await self.storage.users.get_by_id(user_id) is None:
                raise NotFoundError(f"User {user_id} not found")

            member = await self.storage.team_members.get(team.id, user_id)
            if member is None:
                member = TeamMember(team_id=team.id, user_id=user_id, role=role.value)
            else:
                member.role = role.value
            self.storage.team_members.add(member)

        logger.info(
            "Team member saved",
            team_id=str(team_id),
            user_id=str(user_id),
            role=role.value,
            actor_user_id=str(actor_user_id),
        )
        return member

    async def list_members(self, user_id: UUID, team_id: UUID) -> list[TeamMember]:
        team, _ = await self.access.get_team(user_id, team_id)
        return await self.storage.team_members.list_for_team(team.id)

    async def remove_member(self, actor_user_id: UUID, team_id: UUID, user_id: UUID) -> None:
        """Remove a member. Admins remove anyone; members may remove themselves."""
        async with self.storage.transaction():
            team, role = await self.access.get_team(actor_user_id, team_id)
            if actor_user_id != user_id and role is not TeamRole.ADMIN:
                raise ForbiddenError("Only team admins can remove other members")

            member = await self.storage.team_members.get(team.id, user_id)
            if member is None:
                raise NotFoundError(f"User {user_id} is not a member of this team")
            await self.storage.team_members.delete(member)

        logger.info(
            "Team member removed",
            team_id=str(team_id),
            user_id=str(user_id),
            actor_user_id=str(actor_user_id),
        )
