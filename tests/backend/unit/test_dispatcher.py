"""
Unit tests for services.dispatcher.
The store is faked so that only the persist-then-broadcast logic is exercised.
"""
import datetime as dt
import json
from types import SimpleNamespace

import pytest

from app.core.errors import StoreError, ValidationError
from app.core.pubsub import Channel, normalize_identity
from app.services.dispatcher import Dispatcher, parse_send_request


class MockWebSocket:
    def __init__(self):
        self.sent_texts = []

    async def send_text(self, text: str):
        self.sent_texts.append(text)

    def events(self):
        return [json.loads(t) for t in self.sent_texts]


class FakeStore:
    """Records append() calls and hands back numbered records."""

    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def append(self, sender, receiver, content, receiver_type="user"):
        self.calls.append((sender, receiver, content, receiver_type))
        if self.error:
            raise self.error
        if receiver is None or not str(receiver).strip():
            raise ValidationError("receiver is required", field="receiver")
        if content is None or not content.strip():
            raise ValidationError("content is required", field="content")
        return SimpleNamespace(
            id=len(self.calls),
            sender=normalize_identity(sender),
            receiver=normalize_identity(receiver),
            receiver_type=receiver_type,
            content=content,
            created_at=dt.datetime(2026, 10, 19, 12, 0, len(self.calls)),
        )


@pytest.fixture
def channel():
    return Channel()


class TestBroadcast:

    @pytest.mark.asyncio
    async def test_fan_out_reaches_every_session_once(self, channel):
        """Two sessions of u1 and one of u2 each receive the message exactly once."""
        a1, a2, b1, other = MockWebSocket(), MockWebSocket(), MockWebSocket(), MockWebSocket()
        await channel.join("u1", a1)
        await channel.join("u1", a2)
        await channel.join("u2", b1)
        await channel.join("u3", other)
        dispatcher = Dispatcher(FakeStore(), channel)

        record = await dispatcher.dispatch("u1", {"receiver": "u2", "message": "hi"})

        assert record["sender"] == "u1"
        assert record["receiver"] == "u2"
        assert record["content"] == "hi"
        assert record["createdAt"].endswith("Z")
        for ws in (a1, a2, b1):
            assert ws.events() == [{"event": "receive_message", "data": record}]
        assert other.sent_texts == []

    @pytest.mark.asyncio
    async def test_receiver_room_is_notified_before_sender_room(self, channel):
        order = []

        class Tracking(MockWebSocket):
            def __init__(self, name):
                super().__init__()
                self.name = name

            async def send_text(self, text):
                order.append(self.name)

        await channel.join("u1", Tracking("sender"))
        await channel.join("u2", Tracking("receiver"))
        await Dispatcher(FakeStore(), channel).dispatch("u1", {"receiver": "u2", "content": "hi"})

        assert order == ["receiver", "sender"]

    @pytest.mark.asyncio
    async def test_numeric_receiver_reaches_string_room(self, channel):
        ws = MockWebSocket()
        await channel.join("42", ws)
        await Dispatcher(FakeStore(), channel).dispatch(7, {"receiver": 42, "content": "hi"})
        assert len(ws.events()) == 1

    @pytest.mark.asyncio
    async def test_message_to_self_is_delivered_once(self, channel):
        ws = MockWebSocket()
        await channel.join("u1", ws)
        await Dispatcher(FakeStore(), channel).dispatch("u1", {"receiver": "u1", "content": "note"})
        assert len(ws.events()) == 1

    @pytest.mark.asyncio
    async def test_offline_receiver_still_persists(self, channel):
        store = FakeStore()
        record = await Dispatcher(store, channel).dispatch("u1", {"receiver": "u2", "content": "later"})
        assert len(store.calls) == 1
        assert record["id"] == "1"

    @pytest.mark.asyncio
    async def test_content_wins_over_message(self, channel):
        store = FakeStore()
        await Dispatcher(store, channel).dispatch(
            "u1", {"receiver": "u2", "content": "new", "message": "old"}
        )
        assert store.calls[0][2] == "new"


class TestFailures:

    @pytest.mark.asyncio
    async def test_validation_error_broadcasts_nothing(self, channel):
        ws = MockWebSocket()
        await channel.join("u1", ws)
        dispatcher = Dispatcher(FakeStore(), channel)

        with pytest.raises(ValidationError) as exc:
            await dispatcher.dispatch("u1", {"receiver": "u2"})

        assert exc.value.field == "content"
        assert ws.sent_texts == []

    @pytest.mark.asyncio
    async def test_store_error_propagates(self, channel):
        ws = MockWebSocket()
        await channel.join("u2", ws)
        dispatcher = Dispatcher(FakeStore(error=StoreError()), channel)

        with pytest.raises(StoreError):
            await dispatcher.dispatch("u1", {"receiver": "u2", "content": "hi"})
        assert ws.sent_texts == []

    @pytest.mark.asyncio
    async def test_bad_receiver_type_never_reaches_store(self, channel):
        store = FakeStore()
        with pytest.raises(ValidationError) as exc:
            await Dispatcher(store, channel).dispatch(
                "u1", {"receiver": "u2", "content": "hi", "receiverType": "robot"}
            )
        assert exc.value.field == "receiverType"
        assert store.calls == []


class TestParseSendRequest:

    @pytest.mark.parametrize("payload", [None, "hi", ["u2", "hi"]])
    def test_non_object_payload(self, payload):
        with pytest.raises(ValidationError):
            parse_send_request(payload)

    def test_defaults(self):
        body = parse_send_request({"receiver": "u2", "message": "hi"})
        assert body.receiverType == "user"
        assert body.text() == "hi"
        assert body.clientId is None
