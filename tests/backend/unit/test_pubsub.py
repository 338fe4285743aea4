"""
Unit tests for core.pubsub module.
Tests group channel subscription, disconnect cleanup and message broadcasting.
"""
import json
import uuid

import pytest
from tripchat.core.pubsub import (
    Broadcaster,
    Connect,
    Disconnect,
    Publish,
    Subscribe,
    channel_name,
)


class MockWebSocket:
    """Mock WebSocket for testing."""

    def __init__(self):
        self.sent_texts = []

    async def send_text(self, text: str):
        self.sent_texts.append(text)

    def events(self):
        return [json.loads(t) for t in self.sent_texts]


class BrokenWebSocket(MockWebSocket):
    async def send_text(self, text: str):
        raise RuntimeError("Connection closed")


pytestmark = pytest.mark.asyncio

MESSAGE = {"sender": "a@x.com", "text": "Hello", "timestamp": "2026-01-01T00:00:00+00:00"}


class TestSubscription:
    async def test_connect_returns_socket_id(self):
        b = Broadcaster()
        sid = await b.connect(MockWebSocket())
        assert isinstance(sid, str) and sid

    async def test_connect_uses_given_socket_id(self):
        b = Broadcaster()
        assert await b.connect(MockWebSocket(), socket_id="s1") == "s1"

    async def test_subscribe_adds_socket_to_channel(self):
        b = Broadcaster()
        sid = await b.connect(MockWebSocket())
        await b.subscribe(sid, "group-1")
        assert b.subscribers("group-1") == {sid}

    async def test_subscribe_unknown_socket_raises(self):
        b = Broadcaster()
        with pytest.raises(KeyError):
            await b.subscribe("missing", "group-1")

    async def test_socket_can_join_several_groups(self):
        b = Broadcaster()
        sid = await b.connect(MockWebSocket())
        await b.subscribe(sid, "group-1")
        await b.subscribe(sid, "group-2")
        assert sid in b.subscribers("group-1")
        assert sid in b.subscribers("group-2")

    async def test_unsubscribe_all_removes_every_subscription(self):
        b = Broadcaster()
        sid = await b.connect(MockWebSocket())
        other = await b.connect(MockWebSocket())
        await b.subscribe(sid, "group-1")
        await b.subscribe(sid, "group-2")
        await b.subscribe(other, "group-2")

        await b.unsubscribe_all(sid)

        assert b.subscribers("group-1") == set()
        assert b.subscribers("group-2") == {other}

    async def test_unsubscribe_all_unknown_socket_does_not_error(self):
        b = Broadcaster()
        await b.unsubscribe_all("never-connected")

    async def test_uuid_channels_ignore_case(self):
        b = Broadcaster()
        gid = uuid.uuid4()
        sid = await b.connect(MockWebSocket())
        await b.subscribe(sid, str(gid).upper())
        assert b.subscribers(str(gid)) == {sid}

    async def test_channel_name_keeps_non_uuid_ids(self):
        assert channel_name("trip-paris") == "trip-paris"


class TestPublishing:
    async def test_publish_sends_to_all_subscribers(self):
        b = Broadcaster()
        ws1, ws2 = MockWebSocket(), MockWebSocket()
        await b.subscribe(await b.connect(ws1), "group-1")
        await b.subscribe(await b.connect(ws2), "group-1")

        delivered = await b.publish("group-1", MESSAGE)

        assert delivered == 2
        expected = {"type": "newMessage", "groupId": "group-1", "message": MESSAGE}
        assert ws1.events() == [expected]
        assert ws2.events() == [expected]

    async def test_publish_only_reaches_joined_group(self):
        b = Broadcaster()
        ws1, ws2, idle = MockWebSocket(), MockWebSocket(), MockWebSocket()
        await b.subscribe(await b.connect(ws1), "group-1")
        await b.subscribe(await b.connect(ws2), "group-2")
        await b.connect(idle)

        await b.publish("group-1", MESSAGE)

        assert len(ws1.sent_texts) == 1
        assert ws2.sent_texts == []
        assert idle.sent_texts == []

    async def test_publish_without_subscribers(self):
        b = Broadcaster()
        assert await b.publish("group-empty", MESSAGE) == 0

    async def test_no_replay_for_late_joiner(self):
        b = Broadcaster()
        early, late = MockWebSocket(), MockWebSocket()
        await b.subscribe(await b.connect(early), "group-1")
        await b.publish("group-1", {**MESSAGE, "text": "first"})

        await b.subscribe(await b.connect(late), "group-1")
        await b.publish("group-1", {**MESSAGE, "text": "second"})

        assert [e["message"]["text"] for e in early.events()] == ["first", "second"]
        assert [e["message"]["text"] for e in late.events()] == ["second"]

    async def test_publish_preserves_order(self):
        b = Broadcaster()
        ws = MockWebSocket()
        await b.subscribe(await b.connect(ws), "group-1")
        for i in range(5):
            await b.publish("group-1", {**MESSAGE, "text": f"m{i}"})
        assert [e["message"]["text"] for e in ws.events()] == [f"m{i}" for i in range(5)]

    async def test_failed_socket_is_dropped(self):
        b = Broadcaster()
        ok, broken = MockWebSocket(), BrokenWebSocket()
        ok_id = await b.connect(ok)
        broken_id = await b.connect(broken)
        await b.subscribe(ok_id, "group-1")
        await b.subscribe(broken_id, "group-1")

        delivered = await b.publish("group-1", MESSAGE)

        assert delivered == 1
        assert len(ok.sent_texts) == 1
        assert b.subscribers("group-1") == {ok_id}

    async def test_disconnected_socket_receives_nothing(self):
        b = Broadcaster()
        ws = MockWebSocket()
        sid = await b.connect(ws)
        await b.subscribe(sid, "group-1")
        await b.unsubscribe_all(sid)

        await b.publish("group-1", MESSAGE)
        assert ws.sent_texts == []

    async def test_close_forgets_everything(self):
        b = Broadcaster()
        ws = MockWebSocket()
        await b.subscribe(await b.connect(ws), "group-1")
        b.close()
        assert await b.publish("group-1", MESSAGE) == 0


class TestDispatch:
    async def test_events_drive_the_same_state(self):
        b = Broadcaster()
        ws = MockWebSocket()
        assert await b.dispatch(Connect("s1", ws)) == "s1"
        await b.dispatch(Subscribe("s1", "group-1"))
        assert await b.dispatch(Publish("group-1", {"type": "ping"})) == 1
        await b.dispatch(Disconnect("s1"))
        assert b.subscribers("group-1") == set()
        assert ws.events() == [{"type": "ping"}]

    async def test_unknown_event_rejected(self):
        b = Broadcaster()
        with pytest.raises(TypeError):
            await b.dispatch("subscribe")
