"""Access resolver - the single place where layout and team permissions are decided.

Effective role of a caller on a layout, in strict priority order:

1. owner of the layout -> OWNER
2. a direct share to the caller -> that share's permission (decides alone)
3. shares to teams the caller created or belongs to -> for each team the
   share permission capped by the caller's team role; the best team wins
4. public layout -> VIEWER (anonymous callers included)
5. otherwise NONE
"""

from uuid import UUID

from src.app.core.exceptions import ForbiddenError, NotFoundError
from src.app.core.logging import get_logger
from src.app.models import AccessRole, GeneratedLayout, SharePermission, Team, TeamRole
from src.app.storage import Storage

logger = get_logger(__name__)

SHARE_ROLES: dict[str, AccessRole] = {
    SharePermission.VIEWER.value: AccessRole.VIEWER,
    SharePermission.EDITOR.value: AccessRole.EDITOR,
    SharePermission.ADMIN.value: AccessRole.ADMIN,
}

# Highest layout role a team role can exercise through a team share
TEAM_ROLE_CAPS: dict[TeamRole, AccessRole] = {
    TeamRole.ADMIN: AccessRole.ADMIN,
    TeamRole.EDITOR: AccessRole.EDITOR,
    TeamRole.VIEWER: AccessRole.VIEWER,
    TeamRole.MEMBER: AccessRole.VIEWER,
}


def share_role(permissions: str) -> AccessRole:
    return SHARE_ROLES.get(permissions, AccessRole.NONE)


def weaker(a: AccessRole, b: AccessRole) -> AccessRole:
    return a if a.rank <= b.rank else b


class AccessResolver:
    """Resolves and enforces effective roles.

    One instance per request; resolutions and team roles are memoized so
    listing endpoints do not repeat the same lookups.
    """

    def __init__(self, storage: Storage):
        self.storage = storage
        self._roles: dict[tuple[UUID | None, UUID], AccessRole] = {}
        self._team_roles: dict[UUID, dict[UUID, TeamRole]] = {}

    async def team_roles_for(self, user_id: UUID) -> dict[UUID, TeamRole]:
        """Team id -> role for every team the user created or belongs to."""
        cached = self._team_roles.get(user_id)
        if cached is not None:
            return cached

        memberships = await self.storage.team_members.list_for_user(user_id)
        roles: dict[UUID, TeamRole] = {m.team_id: TeamRole(m.role) for m in memberships}
        for team in await self.storage.teams.list_for_user(user_id):
            if team.created_by_user_id == user_id:
                roles[team.id] = TeamRole.ADMIN

        self._team_roles[user_id] = roles
        return roles

    async def team_role(self, user_id: UUID, team: Team) -> TeamRole | None:
        """The creator counts as admin; outsiders get None."""
        if team.created_by_user_id == user_id:
            return TeamRole.ADMIN
        member = await self.storage.team_members.get(team.id, user_id)
        return TeamRole(member.role) if member else None

    async def resolve(self, user_id: UUID | None, layout: GeneratedLayout) -> AccessRole:
        key = (user_id, layout.id)
        cached = self._roles.get(key)
        if cached is not None:
            return cached

        role = await self._resolve(user_id, layout)
        self._roles[key] = role
        return role

    async def _resolve(self, user_id: UUID | None, layout: GeneratedLayout) -> AccessRole:
        granted = await self.granted_role(user_id, layout)
        if granted is not AccessRole.NONE:
            return granted
        return AccessRole.VIEWER if layout.is_public else AccessRole.NONE

    async def granted_role(self, user_id: UUID | None, layout: GeneratedLayout) -> AccessRole:
        """Role from ownership or shares alone, ignoring public visibility."""
        if user_id is None:
            return AccessRole.NONE

        if layout.owner_user_id == user_id:
            return AccessRole.OWNER

        direct = await self.storage.shares.get_for_user(layout.id, user_id)
        if direct is not None:
            return share_role(direct.permissions)

        team_roles = await self.team_roles_for(user_id)
        best = AccessRole.NONE
        if team_roles:
            for share in await self.storage.shares.list_for_layout(layout.id):
                if share.shared_with_team_id not in team_roles:
                    continue
                cap = TEAM_ROLE_CAPS[team_roles[share.shared_with_team_id]]
                candidate = weaker(share_role(share.permissions), cap)
                if candidate.rank > best.rank:
                    best = candidate
        return best

    async def require(
        self, user_id: UUID | None, layout: GeneratedLayout, minimum: AccessRole
    ) -> AccessRole:
        """Return the caller's role, or raise ForbiddenError if it is below `minimum`."""
        role = await self.resolve(user_id, layout)
        if not role.at_least(minimum):
            logger.info(
                "Layout access denied",
                layout_id=str(layout.id),
                user_id=str(user_id) if user_id else None,
                role=role.value,
                required=minimum.value,
            )
            raise ForbiddenError(f"This action requires {minimum.value} access to the layout")
        return role

    async def get_layout(
        self, user_id: UUID | None, layout_id: UUID, minimum: AccessRole = AccessRole.VIEWER
    ) -> tuple[GeneratedLayout, AccessRole]:
        """Load a layout and enforce `minimum` in one step."""
        layout = await self.storage.layouts.get_by_id(layout_id)
        if layout is None:
            raise NotFoundError(f"Layout {layout_id} not found")
        role = await self.require(user_id, layout, minimum)
        return layout, role

    async def get_team(self, user_id: UUID, team_id: UUID) -> tuple[Team, TeamRole]:
        """Load a team the caller belongs to. Outsiders get NotFound."""
        team = await self.storage.teams.get_by_id(team_id)
        if team is None:
            raise NotFoundError(f"Team {team_id} not found")
        role = await self.team_role(user_id, team)
        if role is None:
            raise NotFoundError(f"Team {team_id} not found")
        return team, role

    async def require_team_admin(self, user_id: UUID, team_id: UUID) -> Team:
        team, role = await self.get_team(user_id, team_id)
        if role is not TeamRole.ADMIN:
            raise ForbiddenError("Only team admins can manage this team")
        return team
