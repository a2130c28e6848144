"""Tests for the layout version graph."""

import asyncio

import pytest

from src.app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from src.app.models import GeneratedLayout, InputMethod, SharePermission
from src.app.schemas.organization import CategoryCreate
from src.app.services.layout_service import version_label
from src.app.storage import MemoryStorage, get_memory_arena
from tests.factories import LayoutFactory
from tests.helpers import FakeGenerator, Services

pytestmark = pytest.mark.unit


async def _root(services, owner, title: str = "Landing v1", **kwargs) -> GeneratedLayout:
    return await services().layouts.create_root(
        owner_user_id=owner.id,
        title=title,
        description="Marketing landing page",
        generated_code="<main>v1.0</main>",
        input_method=InputMethod.TEXT,
        **kwargs,
    )


async def _version(services, parent: GeneratedLayout, actor, code: str) -> GeneratedLayout:
    return await services().layouts.create_version(
        parent_layout_id=parent.id, actor_user_id=actor.id, generated_code=code
    )


def test_version_label():
    assert version_label(0) == "v1.1"
    assert version_label(9) == "v1.10"


async def test_create_root_starts_chain(services, create_user):
    owner = await create_user()

    root = await _root(services, owner)

    assert root.parent_layout_id is None
    assert root.version_number == "v1.0"
    assert root.is_root


async def test_duplicate_root_title_conflicts_for_same_owner(services, create_user):
    owner = await create_user()
    other = await create_user()
    await _root(services, owner)

    with pytest.raises(ConflictError):
        await _root(services, owner)

    # Another user may reuse the title
    assert (await _root(services, other)).title == "Landing v1"


async def test_title_match_is_case_sensitive(services, create_user):
    owner = await create_user()
    await _root(services, owner)

    assert (await _root(services, owner, title="landing v1")).title == "landing v1"


async def test_versions_are_numbered_and_inherit_parent_fields(services, create_user):
    owner = await create_user()
    root = await _root(services, owner, is_public=True)

    first = await _version(services, root, owner, "<main>v1.1</main>")
    second = await _version(services, root, owner, "<main>v1.2</main>")

    assert [first.version_number, second.version_number] == ["v1.1", "v1.2"]
    for child in (first, second):
        assert child.parent_layout_id == root.id
        assert child.owner_user_id == owner.id
        assert child.title == root.title
        assert child.description == root.description
        assert child.is_public is True


async def test_version_overrides_replace_inherited_fields(services, create_user):
    owner = await create_user()
    root = await _root(services, owner, is_public=True)

    child = await services().layouts.create_version(
        parent_layout_id=root.id,
        actor_user_id=owner.id,
        generated_code="<main>dark</main>",
        title="Landing dark",
        is_public=False,
        changes_description="Dark theme",
    )

    assert child.title == "Landing dark"
    assert child.is_public is False
    assert child.changes_description == "Dark theme"


async def test_version_numbers_stay_unique_under_concurrency(services, create_user):
    owner = await create_user()
    root = await _root(services, owner)

    # Separate storage units, like concurrent requests
    async def create(n: int) -> GeneratedLayout:
        svc = Services(MemoryStorage(get_memory_arena()), FakeGenerator())
        return await svc.layouts.create_version(
            parent_layout_id=root.id, actor_user_id=owner.id, generated_code=f"<p>{n}</p>"
        )

    created = await asyncio.gather(*(create(n) for n in range(5)))

    labels = sorted(v.version_number for v in created)
    assert len(set(labels)) == 5


async def test_version_of_version_joins_root_chain(services, create_user):
    owner = await create_user()
    root = await _root(services, owner)
    child = await _version(services, root, owner, "<p>child</p>")

    grandchild = await _version(services, child, owner, "<p>grandchild</p>")

    assert grandchild.parent_layout_id == child.id
    assert grandchild.version_number == "v1.2"


async def test_history_is_newest_first_and_same_from_any_member(services, create_user):
    owner = await create_user()
    root = await _root(services, owner)
    first = await _version(services, root, owner, "<p>1</p>")
    second = await _version(services, root, owner, "<p>2</p>")
    nested = await _version(services, first, owner, "<p>3</p>")

    histories = [
        [n.id for n in await services().layouts.get_version_history(owner.id, member.id)]
        for member in (root, first, second, nested)
    ]

    assert histories[0] == [nested.id, second.id, first.id, root.id]
    assert all(h == histories[0] for h in histories)


async def test_history_excludes_other_chains(services, create_user):
    owner = await create_user()
    root = await _root(services, owner)
    other = await _root(services, owner, title="Pricing")
    await _version(services, other, owner, "<p>pricing v1.1</p>")

    history = await services().layouts.get_version_history(owner.id, root.id)

    assert [n.id for n in history] == [root.id]


async def test_history_survives_parent_cycle(services, storage, create_user):
    owner = await create_user()
    a = LayoutFactory.build(owner_user_id=owner.id, title="Cycle")
    b = LayoutFactory.build(owner_user_id=owner.id, title="Cycle", parent_layout_id=a.id)
    a.parent_layout_id = b.id
    storage.layouts.add(a)
    storage.layouts.add(b)
    await storage.commit()

    history = await services().layouts.get_version_history(owner.id, a.id)

    assert {n.id for n in history} <= {a.id, b.id}


@pytest.mark.parametrize("anonymous", [True, False])
async def test_public_root_does_not_reveal_private_versions(services, create_user, anonymous):
    owner = await create_user()
    stranger = None if anonymous else await create_user()
    root = await _root(services, owner)
    await services().layouts.create_version(
        parent_layout_id=root.id,
        actor_user_id=owner.id,
        generated_code="<p>secret</p>",
        title="Secret redesign",
        description="internal roadmap",
    )
    await services().layouts.set_visibility(owner.id, root.id, True)
    caller_id = stranger.id if stranger else None

    history = await services().layouts.get_version_history(caller_id, root.id)

    assert [n.id for n in history] == [root.id]


async def test_share_on_any_member_grants_whole_history(services, create_user):
    owner = await create_user()
    friend = await create_user()
    root = await _root(services, owner)
    version = await _version(services, root, owner, "<p>1</p>")
    await services().sharing.share(
        owner.id, version.id, SharePermission.VIEWER, shared_with_user_id=friend.id
    )

    history = await services().layouts.get_version_history(friend.id, version.id)

    assert [n.id for n in history] == [version.id, root.id]


async def test_create_version_requires_editor(services, create_user):
    owner = await create_user()
    viewer = await create_user()
    root = await _root(services, owner)
    await services().sharing.share(
        owner.id, root.id, SharePermission.VIEWER, shared_with_user_id=viewer.id
    )

    with pytest.raises(ForbiddenError):
        await _version(services, root, viewer, "<p>nope</p>")


async def test_editor_version_belongs_to_layout_owner(services, create_user):
    owner = await create_user()
    editor = await create_user()
    root = await _root(services, owner)
    await services().sharing.share(
        owner.id, root.id, SharePermission.EDITOR, shared_with_user_id=editor.id
    )

    child = await _version(services, root, editor, "<p>edited</p>")

    assert child.owner_user_id == owner.id


async def test_create_version_of_missing_parent(services, create_user):
    owner = await create_user()
    missing = LayoutFactory.build(owner_user_id=owner.id)

    with pytest.raises(NotFoundError):
        await _version(services, missing, owner, "<p>orphan</p>")


async def test_only_admin_or_owner_toggles_visibility(services, create_user):
    owner = await create_user()
    editor = await create_user()
    root = await _root(services, owner)
    await services().sharing.share(
        owner.id, root.id, SharePermission.EDITOR, shared_with_user_id=editor.id
    )

    with pytest.raises(ForbiddenError):
        await services().layouts.set_visibility(editor.id, root.id, True)

    updated = await services().layouts.set_visibility(owner.id, root.id, True)
    assert updated.is_public is True


async def test_update_code_edits_in_place(services, create_user):
    owner = await create_user()
    root = await _root(services, owner)

    await services().layouts.update_code(owner.id, root.id, "<main>draft</main>")

    layout, _ = await services().layouts.get_layout(owner.id, root.id)
    history = await services().layouts.get_version_history(owner.id, root.id)
    assert layout.generated_code == "<main>draft</main>"
    assert len(history) == 1


async def test_category_must_belong_to_owner(services, create_user):
    owner = await create_user()
    other = await create_user()
    root = await _root(services, owner)
    foreign = await services().organization.create_category(other.id, CategoryCreate(name="X"))

    with pytest.raises(NotFoundError):
        await services().layouts.set_category(owner.id, root.id, foreign.id)


async def test_shared_with_me_lists_role(services, create_user):
    owner = await create_user()
    friend = await create_user()
    root = await _root(services, owner)
    await services().sharing.share(
        owner.id, root.id, SharePermission.EDITOR, shared_with_user_id=friend.id
    )

    shared = await services().layouts.list_shared_with_me(friend.id)

    assert [(layout.id, role.value) for layout, role in shared] == [(root.id, "editor")]
    assert await services().layouts.list_shared_with_me(owner.id) == []
