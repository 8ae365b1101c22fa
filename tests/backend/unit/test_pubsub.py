"""
Unit tests for core.pubsub module.
Tests per-user subscription, unsubscription, and event publishing.
"""
import asyncio
import json

import pytest
from app.core.pubsub import Channel, APPOINTMENT_NEW, APPOINTMENT_STATUS


class MockWebSocket:
    """Mock WebSocket for testing."""

    def __init__(self):
        self.sent_texts = []

    async def send_text(self, text: str):
        self.sent_texts.append(text)


class DeadWebSocket:
    async def send_text(self, text: str):
        raise RuntimeError("Connection closed")


class TestChannelSubscription:
    """Tests for subscription and unsubscription."""

    def test_subscribe_registers_socket(self):
        channel = Channel()
        ws = MockWebSocket()
        asyncio.run(channel.subscribe("user-1", ws))
        assert channel.subscriber_count("user-1") == 1

    def test_multiple_sockets_same_user(self):
        channel = Channel()
        asyncio.run(channel.subscribe("user-1", MockWebSocket()))
        asyncio.run(channel.subscribe("user-1", MockWebSocket()))
        assert channel.subscriber_count("user-1") == 2

    def test_unsubscribe_removes_socket_and_empty_topic(self):
        channel = Channel()
        ws = MockWebSocket()
        asyncio.run(channel.subscribe("user-1", ws))
        channel.unsubscribe("user-1", ws)
        assert channel.subscriber_count("user-1") == 0
        assert "user-1" not in channel._topics

    def test_unsubscribe_unknown_does_not_error(self):
        Channel().unsubscribe("nobody", MockWebSocket())

    def test_user_ids_are_normalized_to_strings(self):
        import uuid
        channel = Channel()
        uid = uuid.uuid4()
        asyncio.run(channel.subscribe(uid, MockWebSocket()))
        assert channel.subscriber_count(str(uid)) == 1


class TestChannelPublishing:
    """Tests for event publishing."""

    @pytest.mark.asyncio
    async def test_publish_wraps_event_and_payload(self):
        channel = Channel()
        ws = MockWebSocket()
        await channel.subscribe("user-1", ws)

        delivered = await channel.publish("user-1", APPOINTMENT_NEW, {"id": "a1"})

        assert delivered == 1
        assert json.loads(ws.sent_texts[0]) == {"event": "appointment:new", "data": {"id": "a1"}}

    @pytest.mark.asyncio
    async def test_publish_only_reaches_target_user(self):
        channel = Channel()
        ws1, ws2 = MockWebSocket(), MockWebSocket()
        await channel.subscribe("user-1", ws1)
        await channel.subscribe("user-2", ws2)

        await channel.publish("user-1", APPOINTMENT_STATUS, {"status": "approved"})

        assert len(ws1.sent_texts) == 1
        assert ws2.sent_texts == []

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self):
        assert await Channel().publish("nobody", APPOINTMENT_NEW, {}) == 0

    @pytest.mark.asyncio
    async def test_dead_socket_is_dropped_without_raising(self):
        channel = Channel()
        live, dead = MockWebSocket(), DeadWebSocket()
        await channel.subscribe("user-1", live)
        await channel.subscribe("user-1", dead)

        delivered = await channel.publish("user-1", APPOINTMENT_NEW, {"id": "a1"})

        assert delivered == 1
        assert channel.subscriber_count("user-1") == 1
        assert len(live.sent_texts) == 1
