"""REST API tests through the ASGI app."""

import pytest

from friendgraph.server.db import FriendshipTable, UserTable


async def create(api_client, username, age=25, hobbies=("reading",)):
    resp = await api_client.post("/api/users", json={
        "username": username, "age": age, "hobbies": list(hobbies),
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


async def link(api_client, user_id, friend_id):
    return await api_client.post(f"/api/users/{user_id}/link", json={"friend_id": friend_id})


async def unlink(api_client, user_id, friend_id):
    return await api_client.request(
        "DELETE", f"/api/users/{user_id}/unlink", json={"friend_id": friend_id}
    )


@pytest.mark.asyncio
async def test_root_page(api_client):
    resp = await api_client.get("/")

    assert resp.status_code == 200
    assert "FriendGraph is Running" in resp.text


@pytest.mark.asyncio
async def test_complete_user_lifecycle(api_client):
    alice = await create(api_client, "alice", 25, ["reading", "gaming"])
    assert alice["username"] == "alice"
    assert len(alice["hobbies"]) == 2

    resp = await api_client.get(f"/api/users/{alice['id']}")
    assert resp.status_code == 200
    assert resp.json()["username"] == "alice"

    resp = await api_client.put(f"/api/users/{alice['id']}", json={"age": 26})
    assert resp.status_code == 200
    assert resp.json()["age"] == 26
    assert resp.json()["hobbies"] == ["reading", "gaming"]

    resp = await api_client.delete(f"/api/users/{alice['id']}")
    assert resp.status_code == 204

    resp = await api_client.get(f"/api/users/{alice['id']}")
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "not_found"


@pytest.mark.asyncio
async def test_friendship_workflow(api_client):
    alice = await create(api_client, "alice", 25, ["reading", "gaming"])
    bob = await create(api_client, "bob", 30, ["gaming", "hiking"])

    resp = await link(api_client, alice["id"], bob["id"])
    assert resp.status_code == 200
    assert resp.json()["friends"] == [bob["id"]]
    assert resp.json()["popularity_score"] == 1.5

    resp = await api_client.get(f"/api/users/{bob['id']}")
    assert resp.json()["friends"] == [alice["id"]]

    resp = await api_client.delete(f"/api/users/{alice['id']}")
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "has_friends"

    resp = await unlink(api_client, alice["id"], bob["id"])
    assert resp.status_code == 200
    assert resp.json()["friends"] == []

    resp = await api_client.delete(f"/api/users/{alice['id']}")
    assert resp.status_code == 204


@pytest.mark.asyncio
async def test_duplicate_username_conflict(api_client):
    await create(api_client, "alice")

    resp = await api_client.post("/api/users", json={
        "username": "alice", "age": 40, "hobbies": ["chess"],
    })

    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "duplicate_username"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"username": "", "age": 25, "hobbies": ["reading"]},
    {"username": "alice", "age": 0, "hobbies": ["reading"]},
    {"username": "alice", "age": 151, "hobbies": ["reading"]},
    {"username": "alice", "age": 25, "hobbies": []},
    {"username": "alice", "age": 25},
])
async def test_invalid_create_payload(api_client, payload):
    resp = await api_client.post("/api/users", json=payload)

    assert resp.status_code == 422
    assert (await api_client.get("/api/users")).json() == []


@pytest.mark.asyncio
async def test_link_errors(api_client):
    alice = await create(api_client, "alice")
    bob = await create(api_client, "bob")

    resp = await link(api_client, alice["id"], alice["id"])
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "self_link"

    resp = await link(api_client, alice["id"], "ghost")
    assert resp.status_code == 404

    assert (await link(api_client, alice["id"], bob["id"])).status_code == 200
    resp = await link(api_client, bob["id"], alice["id"])
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "already_linked"

    assert (await unlink(api_client, alice["id"], bob["id"])).status_code == 200
    resp = await unlink(api_client, alice["id"], bob["id"])
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "not_linked"

    resp = await unlink(api_client, alice["id"], alice["id"])
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "not_linked"


@pytest.mark.asyncio
async def test_graph_has_no_duplicate_edges(api_client):
    a = await create(api_client, "a")
    b = await create(api_client, "b")
    c = await create(api_client, "c")
    await link(api_client, a["id"], b["id"])
    await link(api_client, b["id"], c["id"])

    resp = await api_client.get("/api/graph")

    assert resp.status_code == 200
    data = resp.json()
    assert len(data["users"]) == 3
    assert len(data["relationships"]) == 2
    for rel in data["relationships"]:
        assert rel["user_id1"] < rel["user_id2"]


@pytest.mark.asyncio
async def test_hobby_suggestions(api_client):
    await create(api_client, "alice", hobbies=["reading", "gaming"])
    await create(api_client, "bob", hobbies=["gaming", "hiking"])

    resp = await api_client.get("/api/hobbies")

    assert resp.json() == ["gaming", "hiking", "reading"]


@pytest.mark.asyncio
async def test_store_failure_maps_to_503(api_client):
    FriendshipTable.drop_table()
    UserTable.drop_table()

    resp = await api_client.get("/api/users")

    assert resp.status_code == 503
    assert resp.json()["detail"]["code"] == "store_unavailable"
