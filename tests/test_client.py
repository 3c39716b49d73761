"""Client SDK tests against the in-process ASGI app."""

import pytest
import pytest_asyncio
from httpx import ASGITransport

from friendgraph.client import ApiError, Client


@pytest_asyncio.fixture
async def client(app):
    async with Client("test", transport=ASGITransport(app=app)) as c:
        yield c


@pytest.mark.asyncio
async def test_walkthrough(client):
    alice = await client.create_user("alice", 25, ["reading", "gaming"])
    bob = await client.create_user("bob", 30, ["gaming", "hiking"])

    alice = await client.link(alice.id, bob.id)
    assert alice.friends == [bob.id]
    assert alice.popularity_score == 1.5
    assert alice.created_at is not None

    graph = await client.graph()
    assert len(graph.users) == 2
    assert len(graph.edges) == 1

    with pytest.raises(ApiError) as exc_info:
        await client.delete_user(alice.id)
    assert exc_info.value.status_code == 409
    assert exc_info.value.code == "has_friends"

    bob = await client.unlink(bob.id, alice.id)
    assert bob.friends == []
    await client.delete_user(alice.id)

    assert [u.username for u in await client.list_users()] == ["bob"]


@pytest.mark.asyncio
async def test_update_sends_only_given_fields(client):
    alice = await client.create_user("alice", 25, ["reading"])

    updated = await client.update_user(alice.id, username="alicia")

    assert updated.username == "alicia"
    assert updated.age == 25
    assert (await client.get_user(alice.id)).username == "alicia"


@pytest.mark.asyncio
async def test_validation_error_surfaces_message(client):
    with pytest.raises(ApiError) as exc_info:
        await client.create_user("alice", 200, ["reading"])

    assert exc_info.value.status_code == 422
    assert exc_info.value.code is None


@pytest.mark.asyncio
async def test_hobbies(client):
    await client.create_user("alice", 25, ["reading", "gaming"])

    assert await client.hobbies() == ["gaming", "reading"]
