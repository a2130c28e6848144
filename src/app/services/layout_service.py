"""Layout graph service - roots, versions, history and in-place edits."""

from uuid import UUID

from src.app.core.exceptions import ConflictError, NotFoundError
from src.app.core.logging import get_logger
from src.app.models import (
    ROOT_VERSION_LABEL,
    AccessRole,
    GeneratedLayout,
    InputMethod,
)
from src.app.models.base import utc_now
from src.app.services.access_resolver import AccessResolver
from src.app.storage import Storage
from src.app.storage.base import Page

logger = get_logger(__name__)


def version_label(existing_versions: int) -> str:
    """Label for the next version of a chain that already has `existing_versions` non-root nodes."""
    return f"v1.{existing_versions + 1}"


class LayoutService:
    """Operations on the version graph.

    Roots are created by generation; every later change is either a new
    version node or one of the in-place edits (visibility, code draft,
    category).
    """

    def __init__(self, storage: Storage, access: AccessResolver):
        self.storage = storage
        self.access = access
        self._chains: dict[UUID, list[GeneratedLayout]] = {}

    async def ensure_title_available(self, owner_user_id: UUID, title: str) -> None:
        """Reject a root title the owner already uses (exact, case-sensitive match)."""
        if await self.storage.layouts.get_root_by_title(owner_user_id, title) is not None:
            raise ConflictError(f"A layout named '{title}' already exists")

    async def _check_category(self, owner_user_id: UUID, category_id: UUID) -> None:
        category = await self.storage.categories.get_by_id(category_id)
        if category is None or category.owner_user_id != owner_user_id:
            raise NotFoundError(f"Category {category_id} not found")

    async def create_root(
        self,
        *,
        owner_user_id: UUID,
        title: str,
        description: str,
        generated_code: str,
        input_method: InputMethod,
        additional_context: str | None = None,
        category_id: UUID | None = None,
        is_public: bool = False,
    ) -> GeneratedLayout:
        """Insert the head of a new version chain (v1.0)."""
        async with self.storage.transaction():
            await self.ensure_title_available(owner_user_id, title)
            if category_id is not None:
                await self._check_category(owner_user_id, category_id)

            layout = GeneratedLayout(
                title=title,
                description=description,
                generated_code=generated_code,
                input_method=input_method.value,
                additional_context=additional_context,
                owner_user_id=owner_user_id,
                category_id=category_id,
                is_public=is_public,
                version_number=ROOT_VERSION_LABEL,
            )
            self.storage.layouts.add(layout)

        logger.info(
            "Layout created",
            layout_id=str(layout.id),
            owner_user_id=str(owner_user_id),
            input_method=input_method.value,
        )
        return layout

    async def find_root(self, layout: GeneratedLayout) -> GeneratedLayout:
        """Walk parent pointers to the head of the chain.

        Stops at a node already seen (corrupt cycle) or at a dangling parent,
        treating the last reachable node as the root.
        """
        visited = {layout.id}
        node = layout
        while node.parent_layout_id is not None:
            if node.parent_layout_id in visited:
                logger.error("Version chain cycle detected", layout_id=str(layout.id))
                break
            parent = await self.storage.layouts.get_by_id(node.parent_layout_id)
            if parent is None:
                logger.warning("Version chain has a dangling parent", layout_id=str(node.id))
                break
            visited.add(parent.id)
            node = parent
        return node

    async def chain_nodes(self, root: GeneratedLayout) -> list[GeneratedLayout]:
        """Every node reachable from the root, breadth-first, root included."""
        nodes = [root]
        visited = {root.id}
        frontier = [root.id]
        while frontier:
            children = [
                child
                for child in await self.storage.layouts.list_children(frontier)
                if child.id not in visited
            ]
            visited.update(child.id for child in children)
            nodes.extend(children)
            frontier = [child.id for child in children]
        return nodes

    async def create_version(
        self,
        *,
        parent_layout_id: UUID,
        actor_user_id: UUID,
        generated_code: str,
        changes_description: str | None = None,
        input_method: InputMethod = InputMethod.MANUAL,
        title: str | None = None,
        description: str | None = None,
        category_id: UUID | None = None,
        is_public: bool | None = None,
    ) -> GeneratedLayout:
        """Append a version under `parent_layout_id`.

        The child belongs to the parent's owner and inherits title,
        description, category and visibility unless overridden. Numbering
        happens under the chain lock, inside the inserting transaction.
        """
        async with self.storage.transaction():
            parent, _ = await self.access.get_layout(
                actor_user_id, parent_layout_id, AccessRole.EDITOR
            )
            if category_id is not None:
                await self._check_category(parent.owner_user_id, category_id)

            root = await self.find_root(parent)
            await self.storage.lock_version_chain(root.id)
            chain = await self.chain_nodes(root)

            child = GeneratedLayout(
                title=title if title is not None else parent.title,
                description=description if description is not None else parent.description,
                generated_code=generated_code,
                input_method=input_method.value,
                additional_context=parent.additional_context,
                owner_user_id=parent.owner_user_id,
                category_id=category_id if category_id is not None else parent.category_id,
                is_public=is_public if is_public is not None else parent.is_public,
                parent_layout_id=parent.id,
                version_number=version_label(len(chain) - 1),
                changes_description=changes_description,
            )
            self.storage.layouts.add(child)

        self._chains.pop(root.id, None)
        logger.info(
            "Version created",
            layout_id=str(child.id),
            parent_layout_id=str(parent.id),
            root_layout_id=str(root.id),
            version_number=child.version_number,
            actor_user_id=str(actor_user_id),
        )
        return child

    async def get_version_history(
        self, user_id: UUID | None, layout_id: UUID
    ) -> list[GeneratedLayout]:
        """The chain containing `layout_id`, newest first.

        Ownership or a share on any member grants the whole chain. Callers
        who only reach the chain through public visibility see the public
        nodes and nothing else.
        """
        layout, _ = await self.access.get_layout(user_id, layout_id, AccessRole.VIEWER)
        root = await self.find_root(layout)
        chain = self._chains.get(root.id)
        if chain is None:
            chain = await self.chain_nodes(root)
            self._chains[root.id] = chain

        visible = chain
        if not await self._has_chain_grant(user_id, chain):
            visible = [
                node
                for node in chain
                if (await self.access.resolve(user_id, node)).at_least(AccessRole.VIEWER)
            ]
        return sorted(visible, key=lambda node: node.created_at, reverse=True)

    async def _has_chain_grant(self, user_id: UUID | None, chain: list[GeneratedLayout]) -> bool:
        for node in chain:
            if (await self.access.granted_role(user_id, node)).at_least(AccessRole.VIEWER):
                return True
        return False

    async def get_layout(
        self, user_id: UUID | None, layout_id: UUID
    ) -> tuple[GeneratedLayout, AccessRole]:
        return await self.access.get_layout(user_id, layout_id, AccessRole.VIEWER)

    async def set_visibility(
        self, user_id: UUID, layout_id: UUID, is_public: bool
    ) -> GeneratedLayout:
        async with self.storage.transaction():
            layout, _ = await self.access.get_layout(user_id, layout_id, AccessRole.ADMIN)
            layout.is_public = is_public
            layout.updated_at = utc_now()
            self.storage.layouts.add(layout)

        logger.info("Layout visibility changed", layout_id=str(layout_id), is_public=is_public)
        return layout

    async def update_code(
        self, user_id: UUID, layout_id: UUID, generated_code: str
    ) -> GeneratedLayout:
        """Overwrite the code body in place. A draft edit, not a version."""
        async with self.storage.transaction():
            layout, _ = await self.access.get_layout(user_id, layout_id, AccessRole.EDITOR)
            layout.generated_code = generated_code
            layout.updated_at = utc_now()
            self.storage.layouts.add(layout)

        logger.info("Layout code edited", layout_id=str(layout_id), user_id=str(user_id))
        return layout

    async def set_category(
        self, user_id: UUID, layout_id: UUID, category_id: UUID | None
    ) -> GeneratedLayout:
        async with self.storage.transaction():
            layout, _ = await self.access.get_layout(user_id, layout_id, AccessRole.EDITOR)
            if category_id is not None:
                await self._check_category(layout.owner_user_id, category_id)
            layout.category_id = category_id
            layout.updated_at = utc_now()
            self.storage.layouts.add(layout)

        logger.info(
            "Layout category changed",
            layout_id=str(layout_id),
            category_id=str(category_id) if category_id else None,
        )
        return layout

    async def list_mine(
        self, user_id: UUID, cursor: str | None, limit: int
    ) -> Page[GeneratedLayout]:
        return await self.storage.layouts.list_by_owner(user_id, cursor, limit)

    async def list_public(self, cursor: str | None, limit: int) -> Page[GeneratedLayout]:
        return await self.storage.layouts.list_public(cursor, limit)

    async def shared_layout_ids(self, user_id: UUID) -> set[UUID]:
        """Ids of layouts shared with the user directly or through their teams."""
        team_roles = await self.access.team_roles_for(user_id)
        shares = await self.storage.shares.list_for_recipient(user_id, list(team_roles))
        return {share.layout_id for share in shares}

    async def list_shared_with_me(
        self, user_id: UUID
    ) -> list[tuple[GeneratedLayout, AccessRole]]:
        """Layouts others shared with the caller, each with the caller's resolved role."""
        layouts = await self.storage.layouts.list_by_ids(await self.shared_layout_ids(user_id))
        shared: list[tuple[GeneratedLayout, AccessRole]] = []
        for layout in layouts:
            if layout.owner_user_id == user_id:
                continue
            role = await self.access.resolve(user_id, layout)
            if role.at_least(AccessRole.VIEWER):
                shared.append((layout, role))
        return shared
