"""Organization service - per-user categories, tags and layout tagging."""

from uuid import UUID

from src.app.core.exceptions import ConflictError, NotFoundError
from src.app.core.logging import get_logger
from src.app.models import AccessRole, Category, LayoutTag, Tag
from src.app.schemas.organization import (
    CategoryCreate,
    CategoryUpdate,
    DeleteOutcome,
    TagCreate,
    TagUpdate,
)
from src.app.services.access_resolver import AccessResolver
from src.app.storage import Storage

logger = get_logger(__name__)


class TagNotAttachedError(NotFoundError):
    """The layout does not carry the tag."""


class OrganizationService:
    """Categories and tags, always scoped to their owner.

    Another user's category or tag is reported as missing, never as forbidden.
    """

    def __init__(self, storage: Storage, access: AccessResolver):
        self.storage = storage
        self.access = access

    # Categories

    async def create_category(self, owner_user_id: UUID, data: CategoryCreate) -> Category:
        async with self.storage.transaction():
            if await self.storage.categories.get_by_name(owner_user_id, data.name):
                raise ConflictError("A category with this name already exists")
            category = Category(owner_user_id=owner_user_id, **data.model_dump())
            self.storage.categories.add(category)

        logger.info(
            "Category created", category_id=str(category.id), owner_user_id=str(owner_user_id)
        )
        return category

    async def list_categories(self, owner_user_id: UUID) -> list[Category]:
        return await self.storage.categories.list_by_owner(owner_user_id)

    async def get_category(self, owner_user_id: UUID, category_id: UUID) -> Category:
        category = await self.storage.categories.get_by_id(category_id)
        if category is None or category.owner_user_id != owner_user_id:
            raise NotFoundError(f"Category {category_id} not found")
        return category

    async def update_category(
        self, owner_user_id: UUID, category_id: UUID, data: CategoryUpdate
    ) -> Category:
        async with self.storage.transaction():
            category = await self.get_category(owner_user_id, category_id)
            changes = data.model_dump(exclude_unset=True, exclude_none=True)
            new_name = changes.get("name")
            if new_name and new_name != category.name:
                if await self.storage.categories.get_by_name(owner_user_id, new_name):
                    raise ConflictError("A category with this name already exists")
            for key, value in changes.items():
                setattr(category, key, value)
            self.storage.categories.add(category)

        logger.info("Category updated", category_id=str(category_id), fields=sorted(changes))
        return category

    async def delete_category(self, owner_user_id: UUID, category_id: UUID) -> int:
        """Delete a category; its layouts become uncategorized. Returns how many."""
        async with self.storage.transaction():
            category = await self.get_category(owner_user_id, category_id)
            cleared = await self.storage.layouts.clear_category(category.id)
            await self.storage.categories.delete(category)

        logger.info("Category deleted", category_id=str(category_id), cleared_layouts=cleared)
        return cleared

    # Tags

    async def create_tag(self, owner_user_id: UUID, data: TagCreate) -> Tag:
        async with self.storage.transaction():
            if await self.storage.tags.get_by_name(owner_user_id, data.name):
                raise ConflictError("A tag with this name already exists")
            tag = Tag(owner_user_id=owner_user_id, **data.model_dump())
            self.storage.tags.add(tag)

        logger.info("Tag created", tag_id=str(tag.id), owner_user_id=str(owner_user_id))
        return tag

    async def list_tags(self, owner_user_id: UUID) -> list[Tag]:
        return await self.storage.tags.list_by_owner(owner_user_id)

    async def get_tag(self, owner_user_id: UUID, tag_id: UUID) -> Tag:
        tag = await self.storage.tags.get_by_id(tag_id)
        if tag is None or tag.owner_user_id != owner_user_id:
            raise NotFoundError(f"Tag {tag_id} not found")
        return tag

    async def update_tag(self, owner_user_id: UUID, tag_id: UUID, data: TagUpdate) -> Tag:
        async with self.storage.transaction():
            tag = await self.get_tag(owner_user_id, tag_id)
            changes = data.model_dump(exclude_unset=True, exclude_none=True)
            new_name = changes.get("name")
            if new_name and new_name != tag.name:
                if await self.storage.tags.get_by_name(owner_user_id, new_name):
                    raise ConflictError("A tag with this name already exists")
            for key, value in changes.items():
                setattr(tag, key, value)
            self.storage.tags.add(tag)

        logger.info("Tag updated", tag_id=str(tag_id), fields=sorted(changes))
        return tag

    async def delete_tag(self, owner_user_id: UUID, tag_id: UUID) -> tuple[DeleteOutcome, int]:
        """Delete a tag and detach it everywhere.

        A tag that is already gone yields ALREADY_DELETED instead of an error,
        so repeated deletes are harmless. A tag owned by someone else is
        still NotFound.
        """
        async with self.storage.transaction():
            tag = await self.storage.tags.get_by_id(tag_id)
            if tag is None:
                logger.info("Tag already deleted", tag_id=str(tag_id))
                return DeleteOutcome.ALREADY_DELETED, 0
            if tag.owner_user_id != owner_user_id:
                raise NotFoundError(f"Tag {tag_id} not found")
            detached = await self.storage.layout_tags.delete_for_tag(tag.id)
            await self.storage.tags.delete(tag)

        logger.info("Tag deleted", tag_id=str(tag_id), detached_layouts=detached)
        return DeleteOutcome.DELETED, detached

    # Layout tagging

    async def list_layout_tags(self, user_id: UUID | None, layout_id: UUID) -> list[Tag]:
        await self.access.get_layout(user_id, layout_id, AccessRole.VIEWER)
        return await self.storage.tags.list_for_layout(layout_id)

    async def attach_tag(self, user_id: UUID, layout_id: UUID, tag_id: UUID) -> LayoutTag:
        """Attach a tag the caller owns. Re-attaching returns the existing join."""
        async with self.storage.transaction():
            await self.access.get_layout(user_id, layout_id, AccessRole.EDITOR)
            await self.get_tag(user_id, tag_id)

            existing = await self.storage.layout_tags.get(layout_id, tag_id)
            if existing is not None:
                return existing

            link = LayoutTag(layout_id=layout_id, tag_id=tag_id)
            self.storage.layout_tags.add(link)

        logger.info("Tag attached", layout_id=str(layout_id), tag_id=str(tag_id))
        return link

    async def detach_tag(self, user_id: UUID, layout_id: UUID, tag_id: UUID) -> None:
        """Remove one join row. Raises NotFoundError when the tag is not attached."""
        async with self.storage.transaction():
            await self.access.get_layout(user_id, layout_id, AccessRole.EDITOR)
            link = await self.storage.layout_tags.get(layout_id, tag_id)
            if link is None:
                raise TagNotAttachedError("Tag is not attached to this layout")
            await self.storage.layout_tags.delete(link)

        logger.info("Tag detached", layout_id=str(layout_id), tag_id=str(tag_id))
