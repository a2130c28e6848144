"""Storage interface shared by the SQL and in-memory backends.

A `Storage` is one unit of work: it exposes a repository per entity and
owns the transaction. Services stage writes through the repositories and
call `commit()` once; constraint violations surface as `ConflictError`.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Collection
from contextlib import asynccontextmanager
from typing import Protocol
from uuid import UUID

from src.app.models import (
    Category,
    GeneratedLayout,
    LayoutComment,
    LayoutTag,
    SharedLayout,
    Tag,
    Team,
    TeamInvitation,
    TeamMember,
    User,
)
from src.app.models.enums import TagMatch
from src.app.repositories.base import Page
from src.app.repositories.layout import LayoutFilter

# Storage constraint name -> caller-facing message
CONSTRAINT_MESSAGES: dict[str, str] = {
    "ix_users_username": "Username is already taken",
    "ix_users_email": "Email is already registered",
    "uq_categories_owner_name": "A category with this name already exists",
    "uq_tags_owner_name": "A tag with this name already exists",
    "uq_layout_tags_layout_tag": "Tag is already attached to this layout",
    "uq_generated_layouts_owner_root_title": "A layout with this name already exists",
    "uq_team_members_team_user": "User is already a member of this team",
    "uq_shared_layouts_layout_user": "Layout is already shared with this user",
    "uq_shared_layouts_layout_team": "Layout is already shared with this team",
    "ck_shared_layouts_single_target": "A share targets exactly one user or one team",
}

GENERIC_CONFLICT_MESSAGE = "Request conflicts with existing data"


class UserStore(Protocol):
    async def get_by_id(self, id: UUID) -> User | None: ...
    async def get_by_email(self, email: str) -> User | None: ...
    async def get_by_username(self, username: str) -> User | None: ...
    def add(self, entity: User) -> None: ...


class LayoutStore(Protocol):
    async def get_by_id(self, id: UUID) -> GeneratedLayout | None: ...
    def add(self, entity: GeneratedLayout) -> None: ...
    async def get_root_by_title(
        self, owner_user_id: UUID, title: str
    ) -> GeneratedLayout | None: ...
    async def list_children(self, parent_ids: Collection[UUID]) -> list[GeneratedLayout]: ...
    async def list_by_ids(self, ids: Collection[UUID]) -> list[GeneratedLayout]: ...
    async def list_by_owner(
        self, owner_user_id: UUID, cursor: str | None, limit: int
    ) -> Page[GeneratedLayout]: ...
    async def list_public(self, cursor: str | None, limit: int) -> Page[GeneratedLayout]: ...
    async def search(self, layout_filter: LayoutFilter, limit: int) -> list[GeneratedLayout]: ...
    async def clear_category(self, category_id: UUID) -> int: ...


class CategoryStore(Protocol):
    async def get_by_id(self, id: UUID) -> Category | None: ...
    async def get_by_name(self, owner_user_id: UUID, name: str) -> Category | None: ...
    async def list_by_owner(self, owner_user_id: UUID) -> list[Category]: ...
    def add(self, entity: Category) -> None: ...
    async def delete(self, entity: Category) -> None: ...


class TagStore(Protocol):
    async def get_by_id(self, id: UUID) -> Tag | None: ...
    async def get_by_name(self, owner_user_id: UUID, name: str) -> Tag | None: ...
    async def list_by_owner(self, owner_user_id: UUID) -> list[Tag]: ...
    async def list_for_layout(self, layout_id: UUID) -> list[Tag]: ...
    def add(self, entity: Tag) -> None: ...
    async def delete(self, entity: Tag) -> None: ...


class LayoutTagStore(Protocol):
    async def get(self, layout_id: UUID, tag_id: UUID) -> LayoutTag | None: ...
    def add(self, entity: LayoutTag) -> None: ...
    async def delete(self, entity: LayoutTag) -> None: ...
    async def delete_for_tag(self, tag_id: UUID) -> int: ...


class TeamStore(Protocol):
    async def get_by_id(self, id: UUID) -> Team | None: ...
    async def list_for_user(self, user_id: UUID) -> list[Team]: ...
    def add(self, entity: Team) -> None: ...
    async def delete(self, entity: Team) -> None: ...


class TeamMemberStore(Protocol):
    async def get(self, team_id: UUID, user_id: UUID) -> TeamMember | None: ...
    async def list_for_team(self, team_id: UUID) -> list[TeamMember]: ...
    async def list_for_user(self, user_id: UUID) -> list[TeamMember]: ...
    def add(self, entity: TeamMember) -> None: ...
    async def delete(self, entity: TeamMember) -> None: ...
    async def delete_for_team(self, team_id: UUID) -> int: ...


class InvitationStore(Protocol):
    async def get_by_id(
        self, id: UUID, for_update: bool = False
    ) -> TeamInvitation | None: ...
    async def get_pending(self, team_id: UUID, user_id: UUID) -> TeamInvitation | None: ...
    async def list_for_invitee(
        self, user_id: UUID, status: str | None = None
    ) -> list[TeamInvitation]: ...
    async def list_for_team(self, team_id: UUID) -> list[TeamInvitation]: ...
    def add(self, entity: TeamInvitation) -> None: ...
    async def delete_for_team(self, team_id: UUID) -> int: ...


class ShareStore(Protocol):
    async def get_by_id(self, id: UUID) -> SharedLayout | None: ...
    async def get_for_user(self, layout_id: UUID, user_id: UUID) -> SharedLayout | None: ...
    async def get_for_team(self, layout_id: UUID, team_id: UUID) -> SharedLayout | None: ...
    async def list_for_layout(self, layout_id: UUID) -> list[SharedLayout]: ...
    async def list_for_recipient(
        self, user_id: UUID, team_ids: Collection[UUID]
    ) -> list[SharedLayout]: ...
    def add(self, entity: SharedLayout) -> None: ...
    async def delete(self, entity: SharedLayout) -> None: ...
    async def delete_for_team(self, team_id: UUID) -> int: ...


class CommentStore(Protocol):
    async def get_by_id(self, id: UUID) -> LayoutComment | None: ...
    async def list_for_layout(self, layout_id: UUID) -> list[LayoutComment]: ...
    def add(self, entity: LayoutComment) -> None: ...


class Storage(ABC):
    """One unit of work over every entity store.

    Mutated entities must be passed to their repository's `add()` again
    before `commit()`; the SQL backend tolerates it and the in-memory backend
    relies on it.
    """

    users: UserStore
    layouts: LayoutStore
    categories: CategoryStore
    tags: TagStore
    layout_tags: LayoutTagStore
    teams: TeamStore
    team_members: TeamMemberStore
    invitations: InvitationStore
    shares: ShareStore
    comments: CommentStore

    @abstractmethod
    async def commit(self) -> None:
        """Persist staged writes atomically. Raises ConflictError on constraint violation."""

    @abstractmethod
    async def rollback(self) -> None:
        """Discard staged writes and release chain locks."""

    @abstractmethod
    async def lock_version_chain(self, root_id: UUID) -> None:
        """Serialize version creation on one chain until commit or rollback."""

    @abstractmethod
    async def ping(self) -> None:
        """Raise if the backend is unreachable."""

    @abstractmethod
    async def close(self) -> None:
        """Release resources; uncommitted writes are discarded."""

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Commit when the block succeeds; roll back and re-raise otherwise."""
        try:
            yield
            await self.commit()
        except Exception:
            await self.rollback()
            raise
