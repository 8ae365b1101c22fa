import asyncio
import uuid

import pytest


pytestmark = pytest.mark.asyncio


async def open_chat(client, headers, participant_id):
    return await client.post(
        "/api/v1/chat",
        json={"participantId": str(participant_id)},
        headers=headers,
    )


async def test_get_or_create_is_symmetric(client, login_as):
    alice, alice_headers = await login_as("client")
    bob, bob_headers = await login_as("counselor")

    first = await open_chat(client, alice_headers, bob.id)
    assert first.status_code == 201
    chat = first.json()["data"]
    assert sorted(chat["participantIds"]) == sorted([str(alice.id), str(bob.id)])
    assert chat["lastMessage"] is None

    again = await open_chat(client, bob_headers, alice.id)
    assert again.status_code == 200
    assert again.json()["data"]["id"] == chat["id"]


async def test_open_chat_errors(client, login_as):
    me, headers = await login_as("client")

    resp = await open_chat(client, headers, uuid.uuid4())
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "PARTICIPANT_NOT_FOUND"

    resp = await open_chat(client, headers, me.id)
    assert resp.status_code == 400


async def test_messages_flow(client, login_as):
    alice, alice_headers = await login_as("client")
    bob, bob_headers = await login_as("counselor")
    chat_id = (await open_chat(client, alice_headers, bob.id)).json()["data"]["id"]
    url = f"/api/v1/chat/{chat_id}/messages"

    resp = await client.post(url, json={"content": "Hello"}, headers=alice_headers)
    assert resp.status_code == 201
    assert resp.json()["data"]["senderId"] == str(alice.id)
    await client.post(url, json={"content": "Hi, how are you?"}, headers=bob_headers)

    resp = await client.get(url, headers=alice_headers)
    assert resp.status_code == 200
    assert [m["content"] for m in resp.json()["data"]] == ["Hello", "Hi, how are you?"]

    resp = await client.get("/api/v1/chat", headers=alice_headers)
    chats = resp.json()["data"]
    assert len(chats) == 1
    assert chats[0]["lastMessage"]["content"] == "Hi, how are you?"
    assert chats[0]["lastMessage"]["senderId"] == str(bob.id)


async def test_empty_message_rejected(client, login_as):
    alice, alice_headers = await login_as("client")
    bob, _ = await login_as("counselor")
    chat_id = (await open_chat(client, alice_headers, bob.id)).json()["data"]["id"]

    resp = await client.post(f"/api/v1/chat/{chat_id}/messages", json={"content": "  "}, headers=alice_headers)
    assert resp.status_code == 400


async def test_non_participant_forbidden(client, login_as):
    alice, alice_headers = await login_as("client")
    bob, _ = await login_as("counselor")
    _, eve_headers = await login_as("client")
    chat_id = (await open_chat(client, alice_headers, bob.id)).json()["data"]["id"]
    url = f"/api/v1/chat/{chat_id}/messages"

    assert (await client.get(url, headers=eve_headers)).status_code == 403
    assert (await client.post(url, json={"content": "hi"}, headers=eve_headers)).status_code == 403
    assert (await client.get(f"/api/v1/chat/{uuid.uuid4()}/messages", headers=eve_headers)).status_code == 404


async def test_chat_list_most_recent_first(client, login_as):
    alice, alice_headers = await login_as("client")
    bob, _ = await login_as("counselor")
    carol, _ = await login_as("counselor")

    with_bob = (await open_chat(client, alice_headers, bob.id)).json()["data"]["id"]
    with_carol = (await open_chat(client, alice_headers, carol.id)).json()["data"]["id"]
    await client.post(f"/api/v1/chat/{with_bob}/messages", json={"content": "ping"}, headers=alice_headers)

    resp = await client.get("/api/v1/chat", headers=alice_headers)
    assert [c["id"] for c in resp.json()["data"]] == [with_bob, with_carol]


async def test_concurrent_open_returns_same_chat(client, login_as):
    alice, alice_headers = await login_as("client")
    bob, bob_headers = await login_as("counselor")

    r1, r2 = await asyncio.gather(
        open_chat(client, alice_headers, bob.id),
        open_chat(client, bob_headers, alice.id),
    )
    assert r1.json()["data"]["id"] == r2.json()["data"]["id"]
    assert sorted([r1.status_code, r2.status_code]) == [200, 201]
