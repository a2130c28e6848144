"""Relational storage backend (PostgreSQL through async SQLAlchemy)."""

from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from src.app.core.exceptions import ConflictError
from src.app.core.logging import get_logger
from src.app.models import GeneratedLayout
from src.app.repositories import (
    CategoryRepository,
    CommentRepository,
    InvitationRepository,
    LayoutRepository,
    LayoutTagRepository,
    ShareRepository,
    TagRepository,
    TeamMemberRepository,
    TeamRepository,
    UserRepository,
)
from src.app.storage.base import CONSTRAINT_MESSAGES, GENERIC_CONFLICT_MESSAGE, Storage

logger = get_logger(__name__)


def conflict_message(exc: IntegrityError) -> tuple[str | None, str]:
    """Map a constraint violation to (constraint name, caller-facing message)."""
    raw = str(exc.orig)
    for name, message in CONSTRAINT_MESSAGES.items():
        if name in raw:
            return name, message
    return None, GENERIC_CONFLICT_MESSAGE


class SqlStorage(Storage):
    """Unit of work bound to one AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.layouts = LayoutRepository(session)
        self.categories = CategoryRepository(session)
        self.tags = TagRepository(session)
        self.layout_tags = LayoutTagRepository(session)
        self.teams = TeamRepository(session)
        self.team_members = TeamMemberRepository(session)
        self.invitations = InvitationRepository(session)
        self.shares = ShareRepository(session)
        self.comments = CommentRepository(session)

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            constraint, message = conflict_message(e)
            logger.info("Storage constraint violated", constraint=constraint)
            raise ConflictError(message) from e

    async def rollback(self) -> None:
        await self.session.rollback()

    async def lock_version_chain(self, root_id: UUID) -> None:
        # Row lock on the root serializes numbering for the whole chain
        await self.session.execute(
            select(GeneratedLayout.id)
            .where(GeneratedLayout.id == root_id)
            .with_for_update()
        )

    async def ping(self) -> None:
        await self.session.execute(text("SELECT 1"))

    async def close(self) -> None:
        await self.session.close()
