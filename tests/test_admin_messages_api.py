"""Admin message API tests — create, list, merge-on-absence update, delete."""

import uuid

import pytest

DOC = {"type": "doc", "content": [{"type": "paragraph", "content": [{"type": "text", "text": "hi"}]}]}


async def _read(client, message_id, password=None):
    body = {} if password is None else {"password": password}
    return await client.post(f"/api/v1/message/{message_id}", json=body)


# ═══════════════════════════════════════════════════════════
# Create / list
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_message_returns_summary(create_message, project):
    msg = await create_message(content=DOC, hint="our song", **{"from": "A", "to": "B"})
    assert msg["project_id"] == project["id"]
    assert msg["hint"] == "our song"
    assert msg["from"] == "A"
    assert msg["to"] == "B"
    assert "content" not in msg
    assert "password_hash" not in msg


@pytest.mark.asyncio
async def test_create_with_client_chosen_id(client, create_message, owner_headers, project):
    msg = await create_message(message_id="birthday-2026", content=DOC)
    assert msg["id"] == "birthday-2026"

    r = await client.post(
        f"/api/v1/admin/message/{project['id']}",
        json={"message_id": "birthday-2026"},
        headers=owner_headers,
    )
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_create_rejects_unsafe_id(client, owner_headers, project):
    r = await client.post(
        f"/api/v1/admin/message/{project['id']}",
        json={"message_id": "../../etc/passwd"},
        headers=owner_headers,
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_create_with_empty_initial_password_is_public(client, create_message):
    msg = await create_message(content=DOC, initial_password="")
    r = await _read(client, msg["id"])
    assert r.status_code == 200
    assert r.json()["content"] == DOC


@pytest.mark.asyncio
async def test_list_messages_oldest_first(client, create_message, owner_headers, project):
    first = await create_message(message_id="m-1")
    second = await create_message(message_id="m-2")

    r = await client.get(
        f"/api/v1/admin/message/list/{project['id']}", headers=owner_headers
    )
    assert r.status_code == 200
    assert [m["id"] for m in r.json()] == [first["id"], second["id"]]
    assert all("content" not in m for m in r.json())


@pytest.mark.asyncio
async def test_admin_routes_require_ownership(client, stranger_headers, project):
    r = await client.get(
        f"/api/v1/admin/message/list/{project['id']}", headers=stranger_headers
    )
    assert r.status_code == 403

    r = await client.post(
        f"/api/v1/admin/message/{project['id']}", json={}, headers=stranger_headers
    )
    assert r.status_code == 403


# ═══════════════════════════════════════════════════════════
# Update (merge-on-absence)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_update_hint_only_keeps_everything_else(
    client, create_message, owner_headers, project
):
    msg = await create_message(
        content=DOC, initial_password="secret", **{"from": "A", "to": "B"}
    )
    r = await client.patch(
        f"/api/v1/admin/message/{project['id']}/{msg['id']}",
        json={"hint": "new hint"},
        headers=owner_headers,
    )
    assert r.status_code == 200
    assert r.json() == {"message": "Message updated successfully"}

    # Old password still works, content untouched
    r = await _read(client, msg["id"], "secret")
    assert r.status_code == 200
    data = r.json()
    assert data["content"] == DOC
    assert data["hint"] == "new hint"
    assert data["from"] == "A"
    assert data["to"] == "B"


@pytest.mark.asyncio
async def test_update_explicit_null_content_clears_it(
    client, create_message, owner_headers, project
):
    msg = await create_message(content=DOC)
    r = await client.patch(
        f"/api/v1/admin/message/{project['id']}/{msg['id']}",
        json={"content": None},
        headers=owner_headers,
    )
    assert r.status_code == 200

    r = await _read(client, msg["id"])
    assert r.json()["content"] is None


@pytest.mark.asyncio
async def test_admin_can_reset_password_without_old_one(
    client, create_message, owner_headers, project
):
    msg = await create_message(content=DOC, initial_password="old")
    r = await client.patch(
        f"/api/v1/admin/message/{project['id']}/{msg['id']}",
        json={"password": "new"},
        headers=owner_headers,
    )
    assert r.status_code == 200

    assert (await _read(client, msg["id"], "old")).status_code == 401
    assert (await _read(client, msg["id"], "new")).status_code == 200


@pytest.mark.asyncio
async def test_admin_can_protect_a_public_message(
    client, create_message, owner_headers, project
):
    msg = await create_message(content=DOC)
    await client.patch(
        f"/api/v1/admin/message/{project['id']}/{msg['id']}",
        json={"password": "now-secret"},
        headers=owner_headers,
    )
    assert (await _read(client, msg["id"])).status_code == 401


@pytest.mark.asyncio
async def test_update_with_blank_password_leaves_password(
    client, create_message, owner_headers, project
):
    msg = await create_message(content=DOC, initial_password="secret")
    r = await client.patch(
        f"/api/v1/admin/message/{project['id']}/{msg['id']}",
        json={"password": ""},
        headers=owner_headers,
    )
    assert r.status_code == 200
    assert (await _read(client, msg["id"], "secret")).status_code == 200


@pytest.mark.asyncio
async def test_update_missing_message(client, owner_headers, project):
    r = await client.patch(
        f"/api/v1/admin/message/{project['id']}/nope",
        json={"hint": "x"},
        headers=owner_headers,
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_cannot_update_message_of_another_project(
    client, create_message, make_headers
):
    msg = await create_message(content=DOC)

    # A different owner with their own project
    other = make_headers(uuid.uuid4())
    r = await client.post("/api/v1/project", json={"name": "other"}, headers=other)
    other_project = r.json()["id"]

    r = await client.patch(
        f"/api/v1/admin/message/{other_project}/{msg['id']}",
        json={"hint": "pwned"},
        headers=other,
    )
    assert r.status_code == 404

    r = await client.delete(
        f"/api/v1/admin/message/{other_project}/{msg['id']}", headers=other
    )
    assert r.status_code == 404


# ═══════════════════════════════════════════════════════════
# Delete
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_delete_message(client, create_message, owner_headers, project):
    msg = await create_message(content=DOC)
    r = await client.delete(
        f"/api/v1/admin/message/{project['id']}/{msg['id']}", headers=owner_headers
    )
    assert r.status_code == 200

    r = await client.delete(
        f"/api/v1/admin/message/{project['id']}/{msg['id']}", headers=owner_headers
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_delete_all_messages_is_idempotent(
    client, create_message, owner_headers, project
):
    await create_message(content=DOC)
    await create_message(content=DOC)

    for _ in range(2):
        r = await client.delete(
            f"/api/v1/admin/message/{project['id']}", headers=owner_headers
        )
        assert r.status_code == 200

    r = await client.get(
        f"/api/v1/admin/message/list/{project['id']}", headers=owner_headers
    )
    assert r.json() == []
