"""End-to-end layout scenarios over HTTP."""

import pytest

pytestmark = pytest.mark.integration

API = "/api/v1"


async def test_landing_versions_search_and_publish(client, register):
    _, a = await register("author")

    created = await client.post(
        f"{API}/layouts/generate",
        json={"description": "Landing page for a bakery", "layout_name": "Landing v1"},
        headers=a,
    )
    assert created.status_code == 201
    root = created.json()
    assert (root["version_number"], root["fallback"]) == ("v1.0", False)

    versions = []
    for feedback in (None, "Warmer colors"):
        body = {"feedback": feedback} if feedback else {}
        response = await client.post(f"{API}/layouts/{root['id']}/improve", json=body, headers=a)
        assert response.status_code == 201
        versions.append(response.json())

    assert [v["version_number"] for v in versions] == ["v1.1", "v1.2"]
    assert all(v["parent_layout_id"] == root["id"] for v in versions)

    found = await client.get(f"{API}/layouts/search", params={"q": "Landing"}, headers=a)
    assert {n["id"] for n in found.json()} == {root["id"], *(v["id"] for v in versions)}
    assert all(n["owner_user_id"] == found.json()[0]["owner_user_id"] for n in found.json())

    public = await client.get(
        f"{API}/layouts/search", params={"q": "Landing", "is_public": "true"}, headers=a
    )
    assert public.json() == []

    toggled = await client.patch(
        f"{API}/layouts/{root['id']}/visibility", json={"is_public": True}, headers=a
    )
    assert toggled.json()["is_public"] is True

    gallery = await client.get(f"{API}/layouts/public")
    assert [n["id"] for n in gallery.json()["items"]] == [root["id"]]

    history = await client.get(f"{API}/layouts/{versions[0]['id']}/versions", headers=a)
    assert [n["version_number"] for n in history.json()] == ["v1.2", "v1.1", "v1.0"]


async def test_anonymous_history_of_public_root_hides_private_versions(client, register):
    _, a = await register()
    root = (
        await client.post(
            f"{API}/layouts/generate",
            json={"description": "landing", "layout_name": "Landing v1"},
            headers=a,
        )
    ).json()
    secret = await client.post(
        f"{API}/layouts/{root['id']}/versions",
        json={
            "generated_code": "<p>secret</p>",
            "title": "Secret redesign",
            "description": "internal roadmap",
        },
        headers=a,
    )
    await client.patch(
        f"{API}/layouts/{root['id']}/visibility", json={"is_public": True}, headers=a
    )

    assert (await client.get(f"{API}/layouts/{secret.json()['id']}")).status_code == 403
    history = await client.get(f"{API}/layouts/{root['id']}/versions")
    assert history.status_code == 200
    assert [n["id"] for n in history.json()] == [root["id"]]
    assert all(n["title"] != "Secret redesign" for n in history.json())


async def test_duplicate_layout_name_conflicts(client, register):
    _, a = await register()
    body = {"description": "page", "layout_name": "Home"}

    assert (await client.post(f"{API}/layouts/generate", json=body, headers=a)).status_code == 201
    response = await client.post(f"{API}/layouts/generate", json=body, headers=a)

    assert response.status_code == 409
    assert response.json()["request_id"]


async def test_generation_failure_returns_placeholder(client, register, generator):
    _, a = await register()
    generator.fail = True

    response = await client.post(
        f"{API}/layouts/generate", json={"description": "anything"}, headers=a
    )

    assert response.status_code == 201
    assert response.json()["fallback"] is True
    mine = await client.get(f"{API}/layouts", headers=a)
    assert [n["id"] for n in mine.json()["items"]] == [response.json()["id"]]


async def test_invalid_image_is_rejected(client, register):
    _, a = await register()

    response = await client.post(
        f"{API}/layouts/generate-from-image", json={"image_base64": "aGVsbG8="}, headers=a
    )

    assert response.status_code == 422


async def test_manual_version_and_draft_edit(client, register):
    _, a = await register()
    root = (
        await client.post(f"{API}/layouts/generate", json={"description": "blog"}, headers=a)
    ).json()

    draft = await client.patch(
        f"{API}/layouts/{root['id']}/code", json={"generated_code": "<p>draft</p>"}, headers=a
    )
    version = await client.post(
        f"{API}/layouts/{root['id']}/versions",
        json={"generated_code": "<p>v2</p>", "changes_description": "Rewrite"},
        headers=a,
    )

    assert draft.json()["version_number"] == "v1.0"
    assert draft.json()["generated_code"] == "<p>draft</p>"
    assert version.status_code == 201
    assert version.json()["version_number"] == "v1.1"


async def test_private_layout_is_forbidden_to_others(client, register):
    _, a = await register()
    _, b = await register()
    root = (
        await client.post(f"{API}/layouts/generate", json={"description": "secret"}, headers=a)
    ).json()

    assert (await client.get(f"{API}/layouts/{root['id']}", headers=b)).status_code == 403
    assert (await client.get(f"{API}/layouts/{root['id']}")).status_code == 403
