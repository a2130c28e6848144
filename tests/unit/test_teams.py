"""Tests for teams, memberships and the invitation state machine."""

import asyncio
from uuid import uuid4

import pytest

from src.app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from src.app.models import AccessRole, InvitationStatus, SharePermission, TeamRole
from src.app.storage import MemoryStorage, get_memory_arena
from tests.factories import LayoutFactory
from tests.helpers import FakeGenerator, Services

pytestmark = pytest.mark.unit


@pytest.fixture
async def creator(create_user):
    return await create_user()


@pytest.fixture
async def invitee(create_user):
    return await create_user()


@pytest.fixture
async def team(services, creator):
    return await services().teams.create_team(creator.id, "Design", "Design team")


@pytest.fixture
async def layout(storage, creator):
    layout = LayoutFactory.build(owner_user_id=creator.id)
    storage.layouts.add(layout)
    await storage.commit()
    return layout


# Teams


async def test_list_my_teams_unions_created_and_joined(services, create_user, creator, team):
    member = await create_user()
    other = await services().teams.create_team(member.id, "Other")
    await services().teams.add_member(member.id, other.id, creator.id, TeamRole.VIEWER)

    teams = await services().teams.list_my_teams(creator.id)

    assert {t.id for t in teams} == {team.id, other.id}


async def test_add_member_upserts_role(services, creator, invitee, team):
    await services().teams.add_member(creator.id, team.id, invitee.id, TeamRole.VIEWER)
    await services().teams.add_member(creator.id, team.id, invitee.id, TeamRole.EDITOR)

    members = await services().teams.list_members(creator.id, team.id)

    assert [(m.user_id, m.role) for m in members] == [(invitee.id, TeamRole.EDITOR.value)]


async def test_creator_cannot_be_added_as_member(services, creator, team):
    with pytest.raises(ConflictError):
        await services().teams.add_member(creator.id, team.id, creator.id, TeamRole.ADMIN)


async def test_only_team_admins_manage_members(services, create_user, creator, invitee, team):
    editor = await create_user()
    await services().teams.add_member(creator.id, team.id, editor.id, TeamRole.EDITOR)

    with pytest.raises(ForbiddenError):
        await services().teams.add_member(editor.id, team.id, invitee.id, TeamRole.MEMBER)


async def test_member_can_leave_but_not_remove_others(
    services, create_user, creator, invitee, team
):
    other = await create_user()
    await services().teams.add_member(creator.id, team.id, invitee.id, TeamRole.MEMBER)
    await services().teams.add_member(creator.id, team.id, other.id, TeamRole.MEMBER)

    with pytest.raises(ForbiddenError):
        await services().teams.remove_member(invitee.id, team.id, other.id)

    await services().teams.remove_member(invitee.id, team.id, invitee.id)
    members = await services().teams.list_members(creator.id, team.id)
    assert [m.user_id for m in members] == [other.id]


async def test_delete_team_removes_members_and_shares(
    services, storage, creator, invitee, team, layout
):
    await services().teams.add_member(creator.id, team.id, invitee.id, TeamRole.EDITOR)
    await services().sharing.share(
        creator.id, layout.id, SharePermission.EDITOR, shared_with_team_id=team.id
    )

    await services().teams.delete_team(creator.id, team.id)

    assert await storage.teams.get_by_id(team.id) is None
    assert await storage.team_members.list_for_team(team.id) == []
    assert await services().access.resolve(invitee.id, layout) is AccessRole.NONE


async def test_only_creator_deletes_team(services, creator, invitee, team):
    await services().teams.add_member(creator.id, team.id, invitee.id, TeamRole.ADMIN)

    with pytest.raises(ForbiddenError):
        await services().teams.delete_team(invitee.id, team.id)


# Invitations


async def test_accept_creates_membership_and_viewer_share(
    services, storage, creator, invitee, team, layout
):
    invitation = await services().invitations.create_invitation(
        creator.id, team.id, invitee.id, role=TeamRole.EDITOR, layout_id=layout.id
    )

    answered = await services().invitations.respond(invitee.id, invitation.id, accept=True)

    assert answered.status == InvitationStatus.ACCEPTED.value
    assert answered.responded_at is not None
    member = await storage.team_members.get(team.id, invitee.id)
    assert member.role == TeamRole.EDITOR.value
    assert await services().access.resolve(invitee.id, layout) is AccessRole.VIEWER


async def test_accept_keeps_existing_direct_share(services, creator, invitee, team, layout):
    await services().sharing.share(
        creator.id, layout.id, SharePermission.EDITOR, shared_with_user_id=invitee.id
    )
    invitation = await services().invitations.create_invitation(
        creator.id, team.id, invitee.id, layout_id=layout.id
    )

    await services().invitations.respond(invitee.id, invitation.id, accept=True)

    assert await services().access.resolve(invitee.id, layout) is AccessRole.EDITOR


async def test_reject_scenario(services, storage, creator, invitee, team, layout):
    invitation = await services().invitations.create_invitation(
        creator.id, team.id, invitee.id, role=TeamRole.EDITOR, layout_id=layout.id
    )

    rejected = await services().invitations.respond(invitee.id, invitation.id, accept=False)

    assert rejected.status == InvitationStatus.REJECTED.value
    assert await storage.team_members.get(team.id, invitee.id) is None
    assert await services().access.resolve(invitee.id, layout) is AccessRole.NONE
    with pytest.raises(ConflictError):
        await services().invitations.respond(invitee.id, invitation.id, accept=True)


@pytest.mark.parametrize("accept", [True, False])
async def test_responses_are_terminal(services, storage, creator, invitee, team, accept):
    invitation = await services().invitations.create_invitation(creator.id, team.id, invitee.id)
    await services().invitations.respond(invitee.id, invitation.id, accept=accept)

    for again in (True, False):
        with pytest.raises(ConflictError):
            await services().invitations.respond(invitee.id, invitation.id, accept=again)

    members = await storage.team_members.list_for_team(team.id)
    assert len(members) == (1 if accept else 0)


async def test_response_waits_for_locked_invitation(services, storage, creator, invitee, team):
    invitation = await services().invitations.create_invitation(creator.id, team.id, invitee.id)
    first = MemoryStorage(get_memory_arena())
    held = await first.invitations.get_by_id(invitation.id, for_update=True)

    # A second request arrives while the first still holds the row
    second = Services(MemoryStorage(get_memory_arena()), FakeGenerator())
    reject = asyncio.create_task(second.invitations.respond(invitee.id, invitation.id, False))
    await asyncio.sleep(0)
    assert not reject.done()

    held.status = InvitationStatus.ACCEPTED.value
    first.invitations.add(held)
    await first.commit()

    with pytest.raises(ConflictError):
        await reject
    stored = await storage.invitations.get_by_id(invitation.id)
    assert stored.status == InvitationStatus.ACCEPTED.value


async def test_only_invitee_may_respond(services, create_user, creator, invitee, team):
    invitation = await services().invitations.create_invitation(creator.id, team.id, invitee.id)

    with pytest.raises(ForbiddenError):
        await services().invitations.respond(creator.id, invitation.id, accept=True)


async def test_duplicate_pending_invitation_conflicts(services, creator, invitee, team):
    await services().invitations.create_invitation(creator.id, team.id, invitee.id)

    with pytest.raises(ConflictError):
        await services().invitations.create_invitation(creator.id, team.id, invitee.id)


async def test_reinvite_after_rejection(services, creator, invitee, team):
    first = await services().invitations.create_invitation(creator.id, team.id, invitee.id)
    await services().invitations.respond(invitee.id, first.id, accept=False)

    second = await services().invitations.create_invitation(creator.id, team.id, invitee.id)

    assert second.status == InvitationStatus.PENDING.value


async def test_cannot_invite_existing_member(services, creator, invitee, team):
    await services().teams.add_member(creator.id, team.id, invitee.id, TeamRole.MEMBER)

    with pytest.raises(ConflictError):
        await services().invitations.create_invitation(creator.id, team.id, invitee.id)


async def test_layout_bound_invitation_needs_layout_admin(
    services, storage, create_user, creator, invitee, team
):
    stranger = await create_user()
    foreign = LayoutFactory.build(owner_user_id=stranger.id)
    storage.layouts.add(foreign)
    await storage.commit()

    with pytest.raises(ForbiddenError):
        await services().invitations.create_invitation(
            creator.id, team.id, invitee.id, layout_id=foreign.id
        )


async def test_invite_unknown_user(services, creator, team):
    with pytest.raises(NotFoundError):
        await services().invitations.create_invitation(creator.id, team.id, uuid4())


async def test_list_received_filters_by_status(services, create_user, creator, invitee, team):
    other_team = await services().teams.create_team(creator.id, "Other")
    pending = await services().invitations.create_invitation(creator.id, team.id, invitee.id)
    answered = await services().invitations.create_invitation(
        creator.id, other_team.id, invitee.id
    )
    await services().invitations.respond(invitee.id, answered.id, accept=True)

    only_pending = await services().invitations.list_received(
        invitee.id, InvitationStatus.PENDING
    )
    everything = await services().invitations.list_received(invitee.id)

    assert [i.id for i in only_pending] == [pending.id]
    assert {i.id for i in everything} == {pending.id, answered.id}
