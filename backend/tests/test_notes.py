# tests/test_notes.py
from __future__ import annotations

from datetime import datetime

import pytest


async def create_note(client, headers, title="T", content="C") -> dict:
    r = await client.post("/notes", json={"title": title, "content": content}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


# ---------------------------------------------------------
# Authentication
# ---------------------------------------------------------
@pytest.mark.asyncio
async def test_list_without_token_is_401(client):
    r = await client.get("/notes")

    assert r.status_code == 401
    assert r.json() == {"error": "Authentication required"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "header",
    [
        "Bearer not-a-jwt",
        "Bearer ",
        "Basic YWRtaW46cGFzc3dvcmQ=",
        "garbage",
    ],
)
async def test_bad_authorization_header_is_401(client, header):
    r = await client.get("/notes", headers={"Authorization": header})

    assert r.status_code == 401
    assert r.json() == {"error": "Authentication required"}


@pytest.mark.asyncio
async def test_write_routes_require_token(client):
    assert (await client.post("/notes", json={"title": "a", "content": "b"})).status_code == 401
    assert (await client.put("/notes/1", json={"title": "a", "content": "b"})).status_code == 401
    assert (await client.delete("/notes/1")).status_code == 401
    assert (await client.get("/notes/1")).status_code == 401


# ---------------------------------------------------------
# CRUD
# ---------------------------------------------------------
@pytest.mark.asyncio
async def test_create_returns_stored_note(client, acme_admin):
    note = await create_note(client, acme_admin, title="Hello", content="World")

    assert note["title"] == "Hello"
    assert note["content"] == "World"
    assert isinstance(note["id"], int)
    assert note["created_at"]
    assert note["updated_at"]

    me = (await client.get("/auth/me", headers=acme_admin)).json()
    assert note["tenant_id"] == me["tenant_id"]
    assert note["user_id"] == me["id"]


@pytest.mark.asyncio
async def test_round_trip_create_get_update(client, acme_admin):
    created = await create_note(client, acme_admin, title="T", content="C")

    r = await client.get(f"/notes/{created['id']}", headers=acme_admin)
    assert r.status_code == 200
    assert r.json()["title"] == "T"
    assert r.json()["content"] == "C"

    r = await client.put(f"/notes/{created['id']}", json={"title": "T2", "content": "C2"}, headers=acme_admin)
    assert r.status_code == 200

    fetched = (await client.get(f"/notes/{created['id']}", headers=acme_admin)).json()
    assert fetched["title"] == "T2"
    assert fetched["content"] == "C2"
    assert datetime.fromisoformat(fetched["updated_at"]) > datetime.fromisoformat(fetched["created_at"])


@pytest.mark.asyncio
async def test_list_is_newest_first(client, acme_admin):
    first = await create_note(client, acme_admin, title="first")
    second = await create_note(client, acme_admin, title="second")
    third = await create_note(client, acme_admin, title="third")

    r = await client.get("/notes", headers=acme_admin)

    assert r.status_code == 200
    assert [n["id"] for n in r.json()] == [third["id"], second["id"], first["id"]]


@pytest.mark.asyncio
async def test_member_can_edit_and_delete_admins_note(client, acme_admin, acme_member):
    note = await create_note(client, acme_admin)

    r = await client.put(f"/notes/{note['id']}", json={"title": "edited", "content": "by member"}, headers=acme_member)
    assert r.status_code == 200
    assert r.json()["title"] == "edited"

    r = await client.delete(f"/notes/{note['id']}", headers=acme_member)
    assert r.status_code == 200
    assert r.json() == {"message": "Note deleted successfully"}


@pytest.mark.asyncio
async def test_second_delete_is_404(client, acme_admin):
    note = await create_note(client, acme_admin)

    assert (await client.delete(f"/notes/{note['id']}", headers=acme_admin)).status_code == 200

    r = await client.delete(f"/notes/{note['id']}", headers=acme_admin)
    assert r.status_code == 404
    assert r.json() == {"error": "Note not found"}


@pytest.mark.asyncio
async def test_unknown_note_is_404(client, acme_admin):
    r = await client.get("/notes/999", headers=acme_admin)
    assert r.status_code == 404
    assert r.json() == {"error": "Note not found"}

    r = await client.delete("/notes/999", headers=acme_admin)
    assert r.status_code == 404

    r = await client.put("/notes/999", json={"title": "a", "content": "b"}, headers=acme_admin)
    assert r.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("raw_id", ["abc", "0", "-1", "99999999999999999999"])
async def test_non_integer_or_out_of_range_id_is_404(client, acme_admin, raw_id):
    r = await client.get(f"/notes/{raw_id}", headers=acme_admin)
    assert r.status_code == 404


# ---------------------------------------------------------
# Validation
# ---------------------------------------------------------
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {},
        {"title": "only title"},
        {"content": "only content"},
        {"title": "", "content": "x"},
        {"title": None, "content": None},
    ],
)
async def test_create_requires_title_and_content(client, acme_admin, body):
    r = await client.post("/notes", json=body, headers=acme_admin)

    assert r.status_code == 400
    assert r.json() == {"error": "Title and content are required"}


@pytest.mark.asyncio
async def test_create_with_wrong_types_is_400(client, acme_admin):
    r = await client.post("/notes", json={"title": 1, "content": ["x"]}, headers=acme_admin)

    assert r.status_code == 400
    assert "error" in r.json()


@pytest.mark.asyncio
async def test_create_without_body_is_400(client, acme_admin):
    r = await client.post("/notes", headers=acme_admin)

    assert r.status_code == 400
    assert "error" in r.json()


@pytest.mark.asyncio
async def test_update_rejects_partial_body(client, acme_admin):
    note = await create_note(client, acme_admin)

    r = await client.put(f"/notes/{note['id']}", json={"title": "only title"}, headers=acme_admin)
    assert r.status_code == 400

    unchanged = (await client.get(f"/notes/{note['id']}", headers=acme_admin)).json()
    assert unchanged["title"] == note["title"]


@pytest.mark.asyncio
async def test_rejected_create_does_not_consume_quota(client, acme_admin):
    for _ in range(3):
        r = await client.post("/notes", json={"title": "", "content": ""}, headers=acme_admin)
        assert r.status_code == 400

    for i in range(3):
        await create_note(client, acme_admin, title=f"n{i}")


# ---------------------------------------------------------
# Tenant isolation
# ---------------------------------------------------------
@pytest.mark.asyncio
async def test_other_tenant_cannot_see_or_touch_note(client, acme_admin, globex_admin, globex_member):
    note = await create_note(client, acme_admin, title="acme secret")
    note_id = note["id"]

    for headers in (globex_admin, globex_member):
        r = await client.get(f"/notes/{note_id}", headers=headers)
        assert r.status_code == 404
        assert r.json() == {"error": "Note not found"}

        r = await client.put(f"/notes/{note_id}", json={"title": "pwned", "content": "x"}, headers=headers)
        assert r.status_code == 404

        r = await client.delete(f"/notes/{note_id}", headers=headers)
        assert r.status_code == 404

        listed = (await client.get("/notes", headers=headers)).json()
        assert note_id not in [n["id"] for n in listed]

    still_there = (await client.get(f"/notes/{note_id}", headers=acme_admin)).json()
    assert still_there["title"] == "acme secret"


@pytest.mark.asyncio
async def test_cross_tenant_and_unknown_ids_look_identical(client, acme_admin, globex_admin):
    note = await create_note(client, acme_admin)

    cross = await client.get(f"/notes/{note['id']}", headers=globex_admin)
    unknown = await client.get("/notes/999", headers=globex_admin)

    assert cross.status_code == unknown.status_code == 404
    assert cross.json() == unknown.json()


@pytest.mark.asyncio
async def test_list_only_returns_own_tenant(client, acme_admin, globex_admin):
    await create_note(client, acme_admin, title="a1")
    await create_note(client, acme_admin, title="a2")
    await create_note(client, globex_admin, title="g1")

    acme_titles = {n["title"] for n in (await client.get("/notes", headers=acme_admin)).json()}
    globex_titles = {n["title"] for n in (await client.get("/notes", headers=globex_admin)).json()}

    assert acme_titles == {"a1", "a2"}
    assert globex_titles == {"g1"}


@pytest.mark.asyncio
async def test_whitespace_title_and_content_are_kept(client, acme_admin):
    note = await create_note(client, acme_admin, title=" ", content="   ")

    assert note["title"] == " "
    assert note["content"] == "   "


@pytest.mark.asyncio
async def test_long_title_is_stored_whole(client, acme_admin):
    title = "t" * 5000
    note = await create_note(client, acme_admin, title=title)

    fetched = (await client.get(f"/notes/{note['id']}", headers=acme_admin)).json()
    assert fetched["title"] == title


@pytest.mark.asyncio
async def test_repeated_bearer_prefix_or_quoted_token_is_401(client, acme_admin):
    token = acme_admin["Authorization"].removeprefix("Bearer ")

    for header in (f"Bearer Bearer {token}", f'Bearer "{token}"'):
        r = await client.get("/notes", headers={"Authorization": header})
        assert r.status_code == 401
        assert r.json() == {"error": "Authentication required"}


@pytest.mark.asyncio
async def test_token_for_deleted_tenant_is_401(client, db, globex_admin):
    from sqlalchemy import delete

    from tenant_notes.models.tenant import Tenant

    await db.execute(delete(Tenant).where(Tenant.slug == "globex"))
    await db.commit()

    r = await client.post("/notes", json={"title": "x", "content": "y"}, headers=globex_admin)
    assert r.status_code == 401
    assert r.json() == {"error": "Authentication required"}

    r = await client.get("/tenants/current", headers=globex_admin)
    assert r.status_code == 401
