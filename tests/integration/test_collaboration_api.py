"""Teams, invitations, shares and comments over HTTP."""

import pytest

pytestmark = pytest.mark.integration

API = "/api/v1"


async def _layout(client, headers, name: str = "Shared page") -> dict:
    response = await client.post(
        f"{API}/layouts/generate",
        json={"description": "collab", "layout_name": name},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


async def _team(client, headers, name: str = "Design") -> dict:
    response = await client.post(f"{API}/teams", json={"name": name}, headers=headers)
    assert response.status_code == 201
    return response.json()


async def test_rejected_invitation_grants_nothing(client, register):
    _, a = await register("owner")
    user_b, b = await register("invitee")
    layout = await _layout(client, a)
    team = await _team(client, a)

    invited = await client.post(
        f"{API}/teams/{team['id']}/invitations",
        json={"invited_user_id": user_b["id"], "role": "editor", "layout_id": layout["id"]},
        headers=a,
    )
    assert invited.status_code == 201
    invitation = invited.json()

    pending = await client.get(f"{API}/invitations", params={"status": "pending"}, headers=b)
    assert [i["id"] for i in pending.json()] == [invitation["id"]]

    rejected = await client.post(
        f"{API}/invitations/{invitation['id']}/respond", json={"accept": False}, headers=b
    )
    assert rejected.json()["status"] == "rejected"
    assert rejected.json()["responded_at"] is not None

    members = await client.get(f"{API}/teams/{team['id']}/members", headers=a)
    assert members.json() == []
    assert (await client.get(f"{API}/layouts/{layout['id']}", headers=b)).status_code == 403

    again = await client.post(
        f"{API}/invitations/{invitation['id']}/respond", json={"accept": True}, headers=b
    )
    assert again.status_code == 409


async def test_accepted_invitation_grants_team_access(client, register):
    _, a = await register()
    user_b, b = await register()
    layout = await _layout(client, a)
    team = await _team(client, a)

    invitation = (
        await client.post(
            f"{API}/teams/{team['id']}/invitations",
            json={"invited_user_id": user_b["id"], "role": "editor", "layout_id": layout["id"]},
            headers=a,
        )
    ).json()
    accepted = await client.post(
        f"{API}/invitations/{invitation['id']}/respond", json={"accept": True}, headers=b
    )
    assert accepted.json()["status"] == "accepted"

    members = (await client.get(f"{API}/teams/{team['id']}/members", headers=a)).json()
    assert [(m["user_id"], m["role"]) for m in members] == [(user_b["id"], "editor")]
    assert (await client.get(f"{API}/layouts/{layout['id']}", headers=b)).status_code == 200

    shared = (await client.get(f"{API}/layouts/shared", headers=b)).json()
    assert [(s["id"], s["role"]) for s in shared] == [(layout["id"], "viewer")]


async def test_team_share_is_capped_by_team_role(client, register):
    _, a = await register()
    user_b, b = await register()
    layout = await _layout(client, a)
    team = await _team(client, a)
    await client.post(
        f"{API}/teams/{team['id']}/members",
        json={"user_id": user_b["id"], "role": "member"},
        headers=a,
    )

    shared = await client.post(
        f"{API}/layouts/{layout['id']}/shares",
        json={"shared_with_team_id": team["id"], "permissions": "admin"},
        headers=a,
    )
    assert shared.status_code == 200

    assert (await client.get(f"{API}/layouts/{layout['id']}", headers=b)).status_code == 200
    edit = await client.patch(
        f"{API}/layouts/{layout['id']}/code", json={"generated_code": "<p>x</p>"}, headers=b
    )
    assert edit.status_code == 403


async def test_share_upsert_list_and_revoke(client, register):
    _, a = await register()
    user_b, b = await register()
    layout = await _layout(client, a)
    url = f"{API}/layouts/{layout['id']}/shares"

    first = await client.post(
        url, json={"shared_with_user_id": user_b["id"], "permissions": "viewer"}, headers=a
    )
    second = await client.post(
        url, json={"shared_with_user_id": user_b["id"], "permissions": "editor"}, headers=a
    )

    assert first.json()["id"] == second.json()["id"]
    listed = (await client.get(url, headers=a)).json()
    assert [(s["id"], s["permissions"]) for s in listed] == [(first.json()["id"], "editor")]

    edit = await client.patch(
        f"{API}/layouts/{layout['id']}/code", json={"generated_code": "<p>b</p>"}, headers=b
    )
    assert edit.status_code == 200
    assert (await client.get(url, headers=b)).status_code == 403

    revoked = await client.delete(f"{url}/{first.json()['id']}", headers=a)
    assert revoked.status_code == 204
    assert (await client.get(f"{API}/layouts/{layout['id']}", headers=b)).status_code == 403


async def test_share_needs_exactly_one_target(client, register):
    _, a = await register()
    layout = await _layout(client, a)

    response = await client.post(f"{API}/layouts/{layout['id']}/shares", json={}, headers=a)

    assert response.status_code == 422


async def test_comments_create_list_and_resolve(client, register):
    _, a = await register()
    user_b, b = await register()
    layout = await _layout(client, a)
    await client.post(
        f"{API}/layouts/{layout['id']}/shares",
        json={"shared_with_user_id": user_b["id"], "permissions": "viewer"},
        headers=a,
    )
    url = f"{API}/layouts/{layout['id']}/comments"

    created = await client.post(
        url, json={"comment": "Bigger logo", "position_x": 10.5, "position_y": 4}, headers=b
    )
    assert created.status_code == 201
    comment = created.json()
    assert comment["resolved"] is False

    listed = (await client.get(url, headers=a)).json()
    assert [c["id"] for c in listed] == [comment["id"]]

    resolved = await client.post(f"{url}/{comment['id']}/resolve", headers=a)
    assert resolved.json()["resolved"] is True
    again = await client.post(f"{url}/{comment['id']}/resolve", headers=b)
    assert again.json()["resolved"] is True


async def test_outsider_cannot_see_team(client, register):
    _, a = await register()
    _, b = await register()
    team = await _team(client, a)

    response = await client.get(f"{API}/teams/{team['id']}", headers=b)

    assert response.status_code == 404
