"""In-memory storage backend.

Rows live in per-model dicts keyed by id inside a process-wide arena. A unit
of work stages puts and deletes; commit replays them on copies of the touched
tables, validates unique and check constraints, and only then swaps the
copies in, so a failed commit leaves the arena untouched. Reads return
detached copies and see the unit's own staged writes.
"""

import asyncio
from collections import defaultdict
from collections.abc import Callable, Collection, Hashable
from dataclasses import dataclass
from typing import Any, Literal
from uuid import UUID

from sqlmodel import SQLModel

from src.app.core.exceptions import ConflictError
from src.app.core.logging import get_logger
from src.app.models import (
    Category,
    GeneratedLayout,
    InvitationStatus,
    LayoutComment,
    LayoutTag,
    SharedLayout,
    Tag,
    Team,
    TeamInvitation,
    TeamMember,
    User,
)
from src.app.repositories.base import cursor_for, parse_cursor_value
from src.app.schemas.pagination import decode_cursor
from src.app.storage.base import CONSTRAINT_MESSAGES, LayoutFilter, Page, Storage, TagMatch

logger = get_logger(__name__)

type Table = dict[UUID, SQLModel]
type StagedOp = tuple[Literal["put", "delete"], type[SQLModel], UUID, SQLModel | None]
type RowKey = tuple[type[SQLModel], UUID]


def _clone[M: SQLModel](row: M) -> M:
    return type(row)(**row.model_dump())


@dataclass(frozen=True)
class UniqueKey:
    """A unique index; `key` returns None for rows the index does not cover."""

    name: str
    key: Callable[[Any], tuple[Hashable, ...] | None]


UNIQUE_KEYS: dict[type[SQLModel], list[UniqueKey]] = {
    User: [
        UniqueKey("ix_users_username", lambda r: (r.username,)),
        UniqueKey("ix_users_email", lambda r: (r.email,)),
    ],
    Category: [UniqueKey("uq_categories_owner_name", lambda r: (r.owner_user_id, r.name))],
    Tag: [UniqueKey("uq_tags_owner_name", lambda r: (r.owner_user_id, r.name))],
    LayoutTag: [UniqueKey("uq_layout_tags_layout_tag", lambda r: (r.layout_id, r.tag_id))],
    GeneratedLayout: [
        UniqueKey(
            "uq_generated_layouts_owner_root_title",
            lambda r: (r.owner_user_id, r.title) if r.parent_layout_id is None else None,
        )
    ],
    TeamMember: [UniqueKey("uq_team_members_team_user", lambda r: (r.team_id, r.user_id))],
    SharedLayout: [
        UniqueKey(
            "uq_shared_layouts_layout_user",
            lambda r: (r.layout_id, r.shared_with_user_id) if r.shared_with_user_id else None,
        ),
        UniqueKey(
            "uq_shared_layouts_layout_team",
            lambda r: (r.layout_id, r.shared_with_team_id) if r.shared_with_team_id else None,
        ),
    ],
}


def check_constraints(model: type[SQLModel], rows: Table) -> None:
    """Raise ConflictError if `rows` violates a constraint of `model`."""
    if model is SharedLayout:
        for row in rows.values():
            if (row.shared_with_user_id is None) == (row.shared_with_team_id is None):  # type: ignore[attr-defined]
                raise ConflictError(CONSTRAINT_MESSAGES["ck_shared_layouts_single_target"])

    for unique in UNIQUE_KEYS.get(model, []):
        seen: set[tuple[Hashable, ...]] = set()
        for row in rows.values():
            key = unique.key(row)
            if key is None:
                continue
            if key in seen:
                logger.info("Storage constraint violated", constraint=unique.name)
                raise ConflictError(CONSTRAINT_MESSAGES[unique.name])
            seen.add(key)


class MemoryArena:
    """Committed state shared by every unit of work in the process."""

    def __init__(self) -> None:
        self.tables: dict[type[SQLModel], Table] = {}
        self.commit_lock = asyncio.Lock()
        # Row locks exist only while some unit holds or waits for them
        self.row_locks: dict[RowKey, asyncio.Lock] = {}
        self._lock_users: dict[RowKey, int] = {}

    def table(self, model: type[SQLModel]) -> Table:
        return self.tables.get(model, {})

    async def acquire_row(self, key: RowKey) -> None:
        lock = self.row_locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            await lock.acquire()
        except BaseException:
            self._forget_row(key)
            raise

    def release_row(self, key: RowKey) -> None:
        self.row_locks[key].release()
        self._forget_row(key)

    def _forget_row(self, key: RowKey) -> None:
        users = self._lock_users[key] - 1
        if users:
            self._lock_users[key] = users
        else:
            del self._lock_users[key]
            del self.row_locks[key]

    def apply(self, ops: list[StagedOp]) -> None:
        """Apply staged operations all-or-nothing."""
        staged: dict[type[SQLModel], Table] = {}
        for kind, model, key, row in ops:
            if model not in staged:
                staged[model] = dict(self.table(model))
            if kind == "put" and row is not None:
                staged[model][key] = _clone(row)
            else:
                staged[model].pop(key, None)

        for model, rows in staged.items():
            check_constraints(model, rows)

        self.tables.update(staged)


class MemoryStorage(Storage):
    """Unit of work over a MemoryArena."""

    def __init__(self, arena: MemoryArena):
        self.arena = arena
        self._pending: list[StagedOp] = []
        self._held_rows: list[RowKey] = []
        self.users = MemoryUserStore(self)
        self.layouts = MemoryLayoutStore(self)
        self.categories = MemoryCategoryStore(self)
        self.tags = MemoryTagStore(self)
        self.layout_tags = MemoryLayoutTagStore(self)
        self.teams = MemoryTeamStore(self)
        self.team_members = MemoryTeamMemberStore(self)
        self.invitations = MemoryInvitationStore(self)
        self.shares = MemoryShareStore(self)
        self.comments = MemoryCommentStore(self)

    def view(self, model: type[SQLModel]) -> Table:
        """Committed rows of `model` overlaid with this unit's staged writes."""
        rows = self.arena.table(model)
        ops = [op for op in self._pending if op[1] is model]
        if not ops:
            return rows
        rows = dict(rows)
        for kind, _, key, row in ops:
            if kind == "put" and row is not None:
                rows[key] = row
            else:
                rows.pop(key, None)
        return rows

    def stage_put(self, entity: SQLModel) -> None:
        self._pending.append(("put", type(entity), entity.id, entity))  # type: ignore[attr-defined]

    def stage_delete(self, model: type[SQLModel], id: UUID) -> None:
        self._pending.append(("delete", model, id, None))

    async def commit(self) -> None:
        try:
            if self._pending:
                async with self.arena.commit_lock:
                    self.arena.apply(self._pending)
        finally:
            self._pending.clear()
            self._release_rows()

    async def rollback(self) -> None:
        self._pending.clear()
        self._release_rows()

    async def lock_version_chain(self, root_id: UUID) -> None:
        await self.lock_row(GeneratedLayout, root_id)

    async def lock_row(self, model: type[SQLModel], id: UUID) -> None:
        """Hold a per-row lock until commit or rollback, like SELECT ... FOR UPDATE."""
        key = (model, id)
        if key in self._held_rows:
            return
        await self.arena.acquire_row(key)
        self._held_rows.append(key)

    async def ping(self) -> None:
        return None

    async def close(self) -> None:
        await self.rollback()

    def _release_rows(self) -> None:
        while self._held_rows:
            self.arena.release_row(self._held_rows.pop())


class MemoryRepository[ModelType: SQLModel]:
    model: type[ModelType]

    def __init__(self, storage: MemoryStorage):
        self.storage = storage

    def _select(self, predicate: Callable[[ModelType], bool] | None = None) -> list[ModelType]:
        rows = self.storage.view(self.model).values()
        return [_clone(r) for r in rows if predicate is None or predicate(r)]  # type: ignore[arg-type, misc]

    def _first(self, predicate: Callable[[ModelType], bool]) -> ModelType | None:
        for row in self.storage.view(self.model).values():
            if predicate(row):  # type: ignore[arg-type]
                return _clone(row)  # type: ignore[return-value]
        return None

    def _delete_where(self, predicate: Callable[[ModelType], bool]) -> int:
        doomed = [r.id for r in self.storage.view(self.model).values() if predicate(r)]  # type: ignore[attr-defined, arg-type]
        for id in doomed:
            self.storage.stage_delete(self.model, id)
        return len(doomed)

    async def get_by_id(self, id: UUID) -> ModelType | None:
        row = self.storage.view(self.model).get(id)
        return _clone(row) if row is not None else None  # type: ignore[return-value]

    def add(self, entity: ModelType) -> None:
        self.storage.stage_put(entity)

    async def delete(self, entity: ModelType) -> None:
        self.storage.stage_delete(self.model, entity.id)  # type: ignore[attr-defined]


def _newest_first[M: SQLModel](rows: list[M], field: str = "created_at") -> list[M]:
    return sorted(rows, key=lambda r: getattr(r, field), reverse=True)


def _paginate[M: SQLModel](rows: list[M], cursor: str | None, limit: int) -> Page[M]:
    """Cursor pagination on created_at, mirroring BaseRepository.paginate."""
    if cursor:
        try:
            value = parse_cursor_value(decode_cursor(cursor))
            rows = [r for r in rows if r.created_at < value]  # type: ignore[attr-defined, operator]
        except (ValueError, TypeError):
            pass

    items = _newest_first(rows)[: limit + 1]
    has_more = len(items) > limit
    if has_more:
        items = items[:limit]

    next_cursor = None
    if has_more and items:
        next_cursor = cursor_for(items[-1].created_at)  # type: ignore[attr-defined]
    return items, next_cursor, has_more


class MemoryUserStore(MemoryRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        return self._first(lambda u: u.email == email)

    async def get_by_username(self, username: str) -> User | None:
        return self._first(lambda u: u.username == username)


class MemoryLayoutStore(MemoryRepository[GeneratedLayout]):
    model = GeneratedLayout

    async def get_root_by_title(self, owner_user_id: UUID, title: str) -> GeneratedLayout | None:
        return self._first(
            lambda n: n.owner_user_id == owner_user_id
            and n.title == title
            and n.parent_layout_id is None
        )

    async def list_children(self, parent_ids: Collection[UUID]) -> list[GeneratedLayout]:
        wanted = set(parent_ids)
        return self._select(lambda n: n.parent_layout_id in wanted)

    async def list_by_ids(self, ids: Collection[UUID]) -> list[GeneratedLayout]:
        wanted = set(ids)
        return _newest_first(self._select(lambda n: n.id in wanted))

    async def list_by_owner(
        self, owner_user_id: UUID, cursor: str | None, limit: int
    ) -> Page[GeneratedLayout]:
        return _paginate(self._select(lambda n: n.owner_user_id == owner_user_id), cursor, limit)

    async def list_public(self, cursor: str | None, limit: int) -> Page[GeneratedLayout]:
        return _paginate(self._select(lambda n: n.is_public), cursor, limit)

    async def search(self, layout_filter: LayoutFilter, limit: int) -> list[GeneratedLayout]:
        f = layout_filter
        tags_by_layout: dict[UUID, set[UUID]] = defaultdict(set)
        for link in self.storage.view(LayoutTag).values():
            tags_by_layout[link.layout_id].add(link.tag_id)  # type: ignore[attr-defined]
        wanted_tags = set(f.tag_ids)
        needle = f.text_query.lower() if f.text_query else None

        def matches(layout: GeneratedLayout) -> bool:
            if layout.owner_user_id != f.owner_user_id and layout.id not in f.extra_layout_ids:
                return False
            if f.category_id is not None and layout.category_id != f.category_id:
                return False
            if wanted_tags:
                present = tags_by_layout.get(layout.id, set())
                if f.tag_match is TagMatch.ALL and not wanted_tags <= present:
                    return False
                if f.tag_match is TagMatch.ANY and not wanted_tags & present:
                    return False
            if needle and needle not in layout.title.lower() and needle not in (
                layout.description or ""
            ).lower():
                return False
            if f.is_public is not None and layout.is_public != f.is_public:
                return False
            if f.created_from is not None and layout.created_at < f.created_from:
                return False
            if f.created_to is not None and layout.created_at > f.created_to:
                return False
            return True

        return _newest_first(self._select(matches))[:limit]

    async def clear_category(self, category_id: UUID) -> int:
        affected = self._select(lambda n: n.category_id == category_id)
        for layout in affected:
            layout.category_id = None
            self.add(layout)
        return len(affected)


class MemoryCommentStore(MemoryRepository[LayoutComment]):
    model = LayoutComment

    async def list_for_layout(self, layout_id: UUID) -> list[LayoutComment]:
        rows = self._select(lambda c: c.layout_id == layout_id)
        return sorted(rows, key=lambda c: c.created_at)


class MemoryCategoryStore(MemoryRepository[Category]):
    model = Category

    async def get_by_name(self, owner_user_id: UUID, name: str) -> Category | None:
        return self._first(lambda c: c.owner_user_id == owner_user_id and c.name == name)

    async def list_by_owner(self, owner_user_id: UUID) -> list[Category]:
        rows = self._select(lambda c: c.owner_user_id == owner_user_id)
        return sorted(rows, key=lambda c: c.name)


class MemoryTagStore(MemoryRepository[Tag]):
    model = Tag

    async def get_by_name(self, owner_user_id: UUID, name: str) -> Tag | None:
        return self._first(lambda t: t.owner_user_id == owner_user_id and t.name == name)

    async def list_by_owner(self, owner_user_id: UUID) -> list[Tag]:
        rows = self._select(lambda t: t.owner_user_id == owner_user_id)
        return sorted(rows, key=lambda t: t.name)

    async def list_for_layout(self, layout_id: UUID) -> list[Tag]:
        tag_ids = {
            link.tag_id  # type: ignore[attr-defined]
            for link in self.storage.view(LayoutTag).values()
            if link.layout_id == layout_id  # type: ignore[attr-defined]
        }
        return sorted(self._select(lambda t: t.id in tag_ids), key=lambda t: t.name)


class MemoryLayoutTagStore(MemoryRepository[LayoutTag]):
    model = LayoutTag

    async def get(self, layout_id: UUID, tag_id: UUID) -> LayoutTag | None:
        return self._first(lambda lt: lt.layout_id == layout_id and lt.tag_id == tag_id)

    async def delete_for_tag(self, tag_id: UUID) -> int:
        return self._delete_where(lambda lt: lt.tag_id == tag_id)


class MemoryTeamStore(MemoryRepository[Team]):
    model = Team

    async def list_for_user(self, user_id: UUID) -> list[Team]:
        member_of = {
            m.team_id  # type: ignore[attr-defined]
            for m in self.storage.view(TeamMember).values()
            if m.user_id == user_id  # type: ignore[attr-defined]
        }
        return _newest_first(
            self._select(lambda t: t.created_by_user_id == user_id or t.id in member_of)
        )


class MemoryTeamMemberStore(MemoryRepository[TeamMember]):
    model = TeamMember

    async def get(self, team_id: UUID, user_id: UUID) -> TeamMember | None:
        return self._first(lambda m: m.team_id == team_id and m.user_id == user_id)

    async def list_for_team(self, team_id: UUID) -> list[TeamMember]:
        rows = self._select(lambda m: m.team_id == team_id)
        return sorted(rows, key=lambda m: m.joined_at)

    async def list_for_user(self, user_id: UUID) -> list[TeamMember]:
        return self._select(lambda m: m.user_id == user_id)

    async def delete_for_team(self, team_id: UUID) -> int:
        return self._delete_where(lambda m: m.team_id == team_id)


class MemoryInvitationStore(MemoryRepository[TeamInvitation]):
    model = TeamInvitation

    async def get_by_id(self, id: UUID, for_update: bool = False) -> TeamInvitation | None:
        if for_update:
            await self.storage.lock_row(TeamInvitation, id)
        return await super().get_by_id(id)

    async def get_pending(self, team_id: UUID, user_id: UUID) -> TeamInvitation | None:
        return self._first(
            lambda i: i.team_id == team_id
            and i.invited_user_id == user_id
            and i.status == InvitationStatus.PENDING.value
        )

    async def list_for_invitee(
        self, user_id: UUID, status: str | None = None
    ) -> list[TeamInvitation]:
        return _newest_first(
            self._select(
                lambda i: i.invited_user_id == user_id and (status is None or i.status == status)
            )
        )

    async def list_for_team(self, team_id: UUID) -> list[TeamInvitation]:
        return _newest_first(self._select(lambda i: i.team_id == team_id))

    async def delete_for_team(self, team_id: UUID) -> int:
        return self._delete_where(lambda i: i.team_id == team_id)


class MemoryShareStore(MemoryRepository[SharedLayout]):
    model = SharedLayout

    async def get_for_user(self, layout_id: UUID, user_id: UUID) -> SharedLayout | None:
        return self._first(lambda s: s.layout_id == layout_id and s.shared_with_user_id == user_id)

    async def get_for_team(self, layout_id: UUID, team_id: UUID) -> SharedLayout | None:
        return self._first(lambda s: s.layout_id == layout_id and s.shared_with_team_id == team_id)

    async def list_for_layout(self, layout_id: UUID) -> list[SharedLayout]:
        rows = self._select(lambda s: s.layout_id == layout_id)
        return sorted(rows, key=lambda s: s.shared_at)

    async def list_for_recipient(
        self, user_id: UUID, team_ids: Collection[UUID]
    ) -> list[SharedLayout]:
        teams = set(team_ids)
        return self._select(
            lambda s: s.shared_with_user_id == user_id or s.shared_with_team_id in teams
        )

    async def delete_for_team(self, team_id: UUID) -> int:
        return self._delete_where(lambda s: s.shared_with_team_id == team_id)
