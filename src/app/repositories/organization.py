"""Repositories for categories, tags and layout-tag links."""

from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select

from src.app.models import Category, LayoutTag, Tag
from src.app.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    model = Category

    async def get_by_name(self, owner_user_id: UUID, name: str) -> Category | None:
        result = await self.session.execute(
            select(Category).where(Category.owner_user_id == owner_user_id, Category.name == name)
        )
        return result.scalar_one_or_none()

    async def list_by_owner(self, owner_user_id: UUID) -> list[Category]:
        return await self.all(
            select(Category)
            .where(Category.owner_user_id == owner_user_id)
            .order_by(Category.name)  # type: ignore[arg-type]
        )


class TagRepository(BaseRepository[Tag]):
    model = Tag

    async def get_by_name(self, owner_user_id: UUID, name: str) -> Tag | None:
        result = await self.session.execute(
            select(Tag).where(Tag.owner_user_id == owner_user_id, Tag.name == name)
        )
        return result.scalar_one_or_none()

    async def list_by_owner(self, owner_user_id: UUID) -> list[Tag]:
        return await self.all(
            select(Tag).where(Tag.owner_user_id == owner_user_id).order_by(Tag.name)  # type: ignore[arg-type]
        )

    async def list_for_layout(self, layout_id: UUID) -> list[Tag]:
        return await self.all(
            select(Tag)
            .join(LayoutTag, LayoutTag.tag_id == Tag.id)  # type: ignore[arg-type]
            .where(LayoutTag.layout_id == layout_id)
            .order_by(Tag.name)  # type: ignore[arg-type]
        )


class LayoutTagRepository(BaseRepository[LayoutTag]):
    model = LayoutTag

    async def get(self, layout_id: UUID, tag_id: UUID) -> LayoutTag | None:
        result = await self.session.execute(
            select(LayoutTag).where(LayoutTag.layout_id == layout_id, LayoutTag.tag_id == tag_id)
        )
        return result.scalar_one_or_none()

    async def delete_for_tag(self, tag_id: UUID) -> int:
        result = await self.session.execute(delete(LayoutTag).where(LayoutTag.tag_id == tag_id))  # type: ignore[arg-type]
        return result.rowcount  # type: ignore[attr-defined, no-any-return]
