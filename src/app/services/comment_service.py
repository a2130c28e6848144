"""Comment service."""

from uuid import UUID

from src.app.core.exceptions import ForbiddenError, NotFoundError
from src.app.core.logging import get_logger
from src.app.models import AccessRole, LayoutComment
from src.app.services.access_resolver import AccessResolver
from src.app.storage import Storage

logger = get_logger(__name__)


class CommentService:
    def __init__(self, storage: Storage, access: AccessResolver):
        self.storage = storage
        self.access = access

    async def add_comment(
        self,
        user_id: UUID,
        layout_id: UUID,
        comment: str,
        position_x: float | None = None,
        position_y: float | None = None,
    ) -> LayoutComment:
        async with self.storage.transaction():
            await self.access.get_layout(user_id, layout_id, AccessRole.VIEWER)
            entry = LayoutComment(
                layout_id=layout_id,
                user_id=user_id,
                comment=comment,
                position_x=position_x,
                position_y=position_y,
            )
            self.storage.comments.add(entry)

        logger.info("Comment added", layout_id=str(layout_id), comment_id=str(entry.id))
        return entry

    async def list_comments(self, user_id: UUID | None, layout_id: UUID) -> list[LayoutComment]:
        await self.access.get_layout(user_id, layout_id, AccessRole.VIEWER)
        return await self.storage.comments.list_for_layout(layout_id)

    async def resolve(self, user_id: UUID, layout_id: UUID, comment_id: UUID) -> LayoutComment:
        """Mark a comment resolved. One-way; resolving twice is a no-op.

        The author may resolve their own comment with read access; anyone
        else needs editor access to the layout.
        """
        async with self.storage.transaction():
            layout, role = await self.access.get_layout(user_id, layout_id, AccessRole.VIEWER)
            entry = await self.storage.comments.get_by_id(comment_id)
            if entry is None or entry.layout_id != layout.id:
                raise NotFoundError(f"Comment {comment_id} not found")
            if entry.user_id != user_id and not role.at_least(AccessRole.EDITOR):
                raise ForbiddenError("Only the author or a layout editor can resolve this comment")
            if entry.resolved:
                return entry

            entry.resolved = True
            self.storage.comments.add(entry)

        logger.info("Comment resolved", layout_id=str(layout_id), comment_id=str(comment_id))
        return entry
