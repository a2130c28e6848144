"""Repository for layout shares."""

from collections.abc import Collection
from uuid import UUID

from sqlalchemy import delete, or_
from sqlmodel import select

from src.app.models import SharedLayout
from src.app.repositories.base import BaseRepository


class ShareRepository(BaseRepository[SharedLayout]):
    model = SharedLayout

    async def get_for_user(self, layout_id: UUID, user_id: UUID) -> SharedLayout | None:
        result = await self.session.execute(
            select(SharedLayout).where(
                SharedLayout.layout_id == layout_id,
                SharedLayout.shared_with_user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_for_team(self, layout_id: UUID, team_id: UUID) -> SharedLayout | None:
        result = await self.session.execute(
            select(SharedLayout).where(
                SharedLayout.layout_id == layout_id,
                SharedLayout.shared_with_team_id == team_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_layout(self, layout_id: UUID) -> list[SharedLayout]:
        return await self.all(
            select(SharedLayout)
            .where(SharedLayout.layout_id == layout_id)
            .order_by(SharedLayout.shared_at)  # type: ignore[arg-type]
        )

    async def list_for_recipient(
        self, user_id: UUID, team_ids: Collection[UUID]
    ) -> list[SharedLayout]:
        """Shares targeting the user directly or any of the given teams."""
        target = SharedLayout.shared_with_user_id == user_id
        if team_ids:
            target = or_(target, SharedLayout.shared_with_team_id.in_(team_ids))  # type: ignore[union-attr]
        return await self.all(select(SharedLayout).where(target))

    async def delete_for_team(self, team_id: UUID) -> int:
        result = await self.session.execute(
            delete(SharedLayout).where(SharedLayout.shared_with_team_id == team_id)  # type: ignore[arg-type]
        )
        return result.rowcount  # type: ignore[attr-defined, no-any-return]
