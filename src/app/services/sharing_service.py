"""Sharing service - grant, list and revoke layout shares."""

from uuid import UUID

from src.app.core.exceptions import NotFoundError
from src.app.core.logging import get_logger
from src.app.models import AccessRole, SharedLayout, SharePermission
from src.app.services.access_resolver import AccessResolver
from src.app.storage import Storage

logger = get_logger(__name__)


class SharingService:
    """Shares apply to the layout they target only, not to its other versions."""

    def __init__(self, storage: Storage, access: AccessResolver):
        self.storage = storage
        self.access = access

    async def share(
        self,
        actor_user_id: UUID,
        layout_id: UUID,
        permissions: SharePermission,
        shared_with_user_id: UUID | None = None,
        shared_with_team_id: UUID | None = None,
    ) -> SharedLayout:
        """Share with one user or one team. Re-sharing updates the permission in place."""
        async with self.storage.transaction():
            layout, _ = await self.access.get_layout(actor_user_id, layout_id, AccessRole.ADMIN)

            if shared_with_user_id is not None:
                if await self.storage.users.get_by_id(shared_with_user_id) is None:
                    raise NotFoundError(f"User {shared_with_user_id} not found")
                existing = await self.storage.shares.get_for_user(layout.id, shared_with_user_id)
            else:
                if await self.storage.teams.get_by_id(shared_with_team_id) is None:
                    raise NotFoundError(f"Team {shared_with_team_id} not found")
                existing = await self.storage.shares.get_for_team(layout.id, shared_with_team_id)

            if existing is None:
                share = SharedLayout(
                    layout_id=layout.id,
                    shared_by_user_id=actor_user_id,
                    shared_with_user_id=shared_with_user_id,
                    shared_with_team_id=shared_with_team_id,
                    permissions=permissions.value,
                )
            else:
                share = existing
                share.permissions = permissions.value
                share.shared_by_user_id = actor_user_id
            self.storage.shares.add(share)

        logger.info(
            "Layout shared",
            layout_id=str(layout_id),
            share_id=str(share.id),
            shared_with_user_id=str(shared_with_user_id) if shared_with_user_id else None,
            shared_with_team_id=str(shared_with_team_id) if shared_with_team_id else None,
            permissions=permissions.value,
        )
        return share

    async def list_shares(self, actor_user_id: UUID, layout_id: UUID) -> list[SharedLayout]:
        await self.access.get_layout(actor_user_id, layout_id, AccessRole.ADMIN)
        return await self.storage.shares.list_for_layout(layout_id)

    async def revoke(self, actor_user_id: UUID, layout_id: UUID, share_id: UUID) -> None:
        async with self.storage.transaction():
            await self.access.get_layout(actor_user_id, layout_id, AccessRole.ADMIN)
            share = await self.storage.shares.get_by_id(share_id)
            if share is None or share.layout_id != layout_id:
                raise NotFoundError(f"Share {share_id} not found")
            await self.storage.shares.delete(share)

        logger.info("Layout share revoked", layout_id=str(layout_id), share_id=str(share_id))
