"""Repositories for the layout graph: layouts and their comments."""

from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import select, update

from src.app.models import GeneratedLayout, LayoutComment, LayoutTag
from src.app.models.enums import TagMatch
from src.app.repositories.base import BaseRepository, Page


def like_pattern(text: str) -> str:
    """Build a substring LIKE pattern with wildcards in `text` escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@dataclass(frozen=True)
class LayoutFilter:
    """Conjunctive layout predicates evaluated by the storage backend.

    Scope is the owner's layouts plus `extra_layout_ids` (layouts reachable
    through shares). Every other field narrows the scope when set.
    """

    owner_user_id: UUID
    extra_layout_ids: frozenset[UUID] = field(default_factory=frozenset)
    category_id: UUID | None = None
    tag_ids: tuple[UUID, ...] = ()
    tag_match: TagMatch = TagMatch.ALL
    text_query: str | None = None
    is_public: bool | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None


class LayoutRepository(BaseRepository[GeneratedLayout]):
    model = GeneratedLayout

    async def get_root_by_title(self, owner_user_id: UUID, title: str) -> GeneratedLayout | None:
        """Get the owner's root layout with exactly this title."""
        result = await self.session.execute(
            select(GeneratedLayout).where(
                GeneratedLayout.owner_user_id == owner_user_id,
                GeneratedLayout.title == title,
                GeneratedLayout.parent_layout_id.is_(None),  # type: ignore[union-attr]
            )
        )
        return result.scalar_one_or_none()

    async def list_children(self, parent_ids: Collection[UUID]) -> list[GeneratedLayout]:
        """Direct children of any of the given nodes."""
        if not parent_ids:
            return []
        return await self.all(
            select(GeneratedLayout).where(
                GeneratedLayout.parent_layout_id.in_(parent_ids)  # type: ignore[union-attr]
            )
        )

    async def list_by_ids(self, ids: Collection[UUID]) -> list[GeneratedLayout]:
        if not ids:
            return []
        return await self.all(
            select(GeneratedLayout)
            .where(GeneratedLayout.id.in_(ids))  # type: ignore[attr-defined]
            .order_by(GeneratedLayout.created_at.desc())  # type: ignore[attr-defined]
        )

    async def list_by_owner(
        self, owner_user_id: UUID, cursor: str | None, limit: int
    ) -> Page[GeneratedLayout]:
        query = select(GeneratedLayout).where(GeneratedLayout.owner_user_id == owner_user_id)
        return await self.paginate(query, cursor, limit, GeneratedLayout.created_at)

    async def list_public(self, cursor: str | None, limit: int) -> Page[GeneratedLayout]:
        query = select(GeneratedLayout).where(GeneratedLayout.is_public.is_(True))  # type: ignore[attr-defined]
        return await self.paginate(query, cursor, limit, GeneratedLayout.created_at)

    async def search(self, layout_filter: LayoutFilter, limit: int) -> list[GeneratedLayout]:
        """Apply every predicate of the filter in a single query, newest first."""
        f = layout_filter
        scope = GeneratedLayout.owner_user_id == f.owner_user_id
        if f.extra_layout_ids:
            scope = or_(scope, GeneratedLayout.id.in_(f.extra_layout_ids))  # type: ignore[attr-defined]
        query = select(GeneratedLayout).where(scope)

        if f.category_id is not None:
            query = query.where(GeneratedLayout.category_id == f.category_id)

        if f.tag_ids:
            wanted = set(f.tag_ids)
            tagged = (
                select(LayoutTag.layout_id)
                .where(LayoutTag.tag_id.in_(wanted))  # type: ignore[attr-defined]
                .group_by(LayoutTag.layout_id)
            )
            if f.tag_match is TagMatch.ALL:
                tagged = tagged.having(func.count(func.distinct(LayoutTag.tag_id)) == len(wanted))
            query = query.where(GeneratedLayout.id.in_(tagged))  # type: ignore[attr-defined]

        if f.text_query:
            pattern = like_pattern(f.text_query)
            query = query.where(
                or_(
                    GeneratedLayout.title.ilike(pattern, escape="\\"),  # type: ignore[attr-defined]
                    GeneratedLayout.description.ilike(pattern, escape="\\"),  # type: ignore[attr-defined]
                )
            )

        if f.is_public is not None:
            query = query.where(GeneratedLayout.is_public == f.is_public)
        if f.created_from is not None:
            query = query.where(GeneratedLayout.created_at >= f.created_from)
        if f.created_to is not None:
            query = query.where(GeneratedLayout.created_at <= f.created_to)

        query = query.order_by(GeneratedLayout.created_at.desc()).limit(limit)  # type: ignore[attr-defined]
        return await self.all(query)

    async def clear_category(self, category_id: UUID) -> int:
        """Detach every layout from a category. Returns affected row count."""
        result = await self.session.execute(
            update(GeneratedLayout)
            .where(GeneratedLayout.category_id == category_id)  # type: ignore[arg-type]
            .values(category_id=None)
        )
        return result.rowcount  # type: ignore[attr-defined, no-any-return]


class CommentRepository(BaseRepository[LayoutComment]):
    model = LayoutComment

    async def list_for_layout(self, layout_id: UUID) -> list[LayoutComment]:
        """Comments on one layout, oldest first."""
        return await self.all(
            select(LayoutComment)
            .where(LayoutComment.layout_id == layout_id)
            .order_by(LayoutComment.created_at)  # type: ignore[arg-type]
        )
