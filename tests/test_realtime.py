"""Tests for realtime event publishing and the WebSocket endpoint."""

import asyncio
from datetime import date, datetime
from types import SimpleNamespace
from typing import get_type_hints
from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import RecordingConnection
from starlette.websockets import WebSocketDisconnect

from taskboard.schemas.auth import IdentityClaim
from taskboard.services.realtime import (
    BroadcastPublisher,
    ConnectionRegistry,
    EventPublisher,
    TaskEvent,
    TaskEventType,
    WebSocketConnection,
    new_comment_event,
    task_created_event,
    task_deleted_event,
    task_updated_event,
)


class FailingConnection(RecordingConnection):
    def deliver(self, envelope: dict) -> None:
        raise ConnectionError("socket gone")


def event(n: int) -> TaskEvent:
    return task_deleted_event(f"task-{n}")


class TestTaskEventType:
    """Tests for TaskEventType enum."""

    def test_event_names(self):
        assert TaskEventType.TASK_CREATED == "task_created"
        assert TaskEventType.TASK_UPDATED == "task_updated"
        assert TaskEventType.TASK_DELETED == "task_deleted"
        assert TaskEventType.NEW_COMMENT == "new_comment"


class TestEventEnvelopes:
    def test_envelope_shape(self):
        assert task_deleted_event("t1").envelope() == {
            "event": "task_deleted",
            "data": {"task_id": "t1"},
        }

    def test_task_created_payload(self):
        task = SimpleNamespace(
            task_id="t1",
            title="Write spec",
            status="pending",
            due_date=date(2030, 1, 15),
            creator_id="u1",
        )
        assert task_created_event(task).envelope()["data"] == {
            "task_id": "t1",
            "title": "Write spec",
            "status": "pending",
            "due_date": "2030-01-15",
            "creator_id": "u1",
        }

    def test_task_updated_payload(self):
        envelope = task_updated_event(
            "t1", {"status": "completed"}, datetime(2030, 1, 1, 12, 0)
        ).envelope()
        assert envelope["event"] == "task_updated"
        assert envelope["data"]["updated_fields"] == {"status": "completed"}
        assert envelope["data"]["updated_at"].startswith("2030-01-01T12:00")

    def test_new_comment_payload(self):
        comment = SimpleNamespace(
            comment_id="c1",
            task_id="t1",
            user_id="u1",
            comment_text="Looks good",
            created_at=datetime(2030, 1, 1, 9, 30),
        )
        data = new_comment_event(comment).envelope()["data"]
        assert data["comment_id"] == "c1"
        assert data["comment_text"] == "Looks good"
        assert set(data) == {"comment_id", "task_id", "user_id", "comment_text", "created_at"}


class TestConnectionRegistry:
    def test_register_and_unregister(self):
        registry = ConnectionRegistry()
        connection = RecordingConnection()

        registry.register(connection)
        assert connection.connection_id in registry
        assert len(registry) == 1

        assert registry.unregister(connection.connection_id) is True
        assert connection.connection_id not in registry
        assert len(registry) == 0

    def test_unregister_unknown_is_noop(self):
        assert ConnectionRegistry().unregister("missing") is False

    def test_connection_ids_are_unique(self):
        assert RecordingConnection().connection_id != RecordingConnection().connection_id

    def test_snapshot_is_a_copy(self):
        registry = ConnectionRegistry()
        first = RecordingConnection()
        registry.register(first)

        snapshot = registry.snapshot()
        registry.register(RecordingConnection())

        assert snapshot == [first]
        assert len(registry.snapshot()) == 2


class TestBroadcastPublisher:
    def test_every_connection_sees_every_event(self):
        registry = ConnectionRegistry()
        connections = [RecordingConnection() for _ in range(3)]
        for connection in connections:
            registry.register(connection)
        publisher = BroadcastPublisher(registry)

        for n in range(5):
            publisher.publish(event(n))

        expected = [event(n).envelope() for n in range(5)]
        for connection in connections:
            assert connection.received == expected

    def test_disconnected_connection_stops_receiving(self):
        registry = ConnectionRegistry()
        staying, leaving = RecordingConnection(), RecordingConnection()
        registry.register(staying)
        registry.register(leaving)
        publisher = BroadcastPublisher(registry)

        publisher.publish(event(1))
        publisher.publish(event(2))
        registry.unregister(leaving.connection_id)
        publisher.publish(event(3))

        assert [e["data"]["task_id"] for e in leaving.received] == ["task-1", "task-2"]
        assert [e["data"]["task_id"] for e in staying.received] == ["task-1", "task-2", "task-3"]

    def test_failing_connection_does_not_affect_others(self):
        registry = ConnectionRegistry()
        before, broken, after = RecordingConnection(), FailingConnection(), RecordingConnection()
        for connection in (before, broken, after):
            registry.register(connection)

        delivered = BroadcastPublisher(registry).publish(event(1))

        assert delivered == 2
        assert len(before.received) == 1
        assert len(after.received) == 1

    def test_publish_with_no_connections(self):
        assert BroadcastPublisher(ConnectionRegistry()).publish(event(1)) == 0

    def test_publishers_report_delivery_count(self):
        assert get_type_hints(EventPublisher.publish)["return"] is int
        assert get_type_hints(BroadcastPublisher.publish)["return"] is int

    def test_subscription_narrows_event_types(self):
        registry = ConnectionRegistry()
        comments_only = RecordingConnection(subscribed_event_types={TaskEventType.NEW_COMMENT})
        registry.register(comments_only)

        BroadcastPublisher(registry).publish(event(1))

        assert comments_only.received == []


class TestWebSocketConnection:
    IDENTITY = IdentityClaim(user_id="u1", email="u1@example.com", display_name="U1", role="user")

    @pytest.mark.asyncio
    async def test_delivered_envelopes_are_sent_in_order(self):
        websocket = MagicMock()
        sent = []

        async def send_json(envelope):
            sent.append(envelope)
            if len(sent) == 2:
                raise WebSocketDisconnect()

        websocket.send_json = send_json
        connection = WebSocketConnection(websocket, self.IDENTITY, asyncio.get_running_loop())

        connection.deliver({"event": "task_deleted", "data": {"task_id": "a"}})
        connection.deliver({"event": "task_deleted", "data": {"task_id": "b"}})

        with pytest.raises(WebSocketDisconnect):
            await asyncio.wait_for(connection.send_pending(), timeout=1)
        assert [e["data"]["task_id"] for e in sent] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_full_queue_drops_events(self):
        websocket = MagicMock()
        websocket.send_json = AsyncMock()
        connection = WebSocketConnection(
            websocket, self.IDENTITY, asyncio.get_running_loop(), queue_size=1
        )

        connection.deliver({"event": "task_deleted", "data": {"task_id": "a"}})
        connection.deliver({"event": "task_deleted", "data": {"task_id": "b"}})
        await asyncio.sleep(0)

        assert connection._queue.qsize() == 1
        assert connection._queue.get_nowait()["data"]["task_id"] == "a"


class TestWebSocketEndpoint:
    """Tests for the WebSocket endpoint."""

    def test_requires_token(self, client, registry):
        with pytest.raises(WebSocketDisconnect), client.websocket_connect("/api/ws"):
            pass
        assert len(registry) == 0

    def test_rejects_invalid_token(self, client, registry):
        with (
            pytest.raises(WebSocketDisconnect),
            client.websocket_connect("/api/ws?token=invalid_token"),
        ):
            pass
        assert len(registry) == 0

    def test_rejects_unknown_event_type(self, client, auth_headers):
        with (
            pytest.raises(WebSocketDisconnect),
            client.websocket_connect(f"/api/ws?token={auth_headers.token}&events=bogus"),
        ):
            pass

    def test_receives_task_created(self, client, auth_headers):
        with client.websocket_connect(f"/api/ws?token={auth_headers.token}") as websocket:
            response = client.post("/api/tasks", headers=auth_headers, json={"title": "Live"})
            assert response.status_code == 201

            message = websocket.receive_json()

        assert message["event"] == "task_created"
        assert message["data"]["task_id"] == response.json()["task"]["task_id"]
        assert message["data"]["title"] == "Live"
        assert message["data"]["creator_id"] == auth_headers.user_id

    def test_authorization_header_handshake(self, client, auth_headers, other_headers):
        with client.websocket_connect("/api/ws", headers=dict(other_headers)) as websocket:
            client.post("/api/tasks", headers=auth_headers, json={"title": "Someone else's"})
            message = websocket.receive_json()

        # Broadcast is unfiltered: other users' tasks arrive too
        assert message["event"] == "task_created"
        assert message["data"]["creator_id"] == auth_headers.user_id

    def test_event_filter(self, client, auth_headers):
        task = client.post("/api/tasks", headers=auth_headers, json={"title": "Filtered"}).json()
        task_id = task["task"]["task_id"]

        url = f"/api/ws?token={auth_headers.token}&events=new_comment"
        with client.websocket_connect(url) as websocket:
            client.put(f"/api/tasks/{task_id}", headers=auth_headers, json={"status": "completed"})
            client.post(
                f"/api/tasks/{task_id}/comments",
                headers=auth_headers,
                json={"comment_text": "done"},
            )
            message = websocket.receive_json()

        assert message["event"] == "new_comment"

    def test_binary_frames_are_ignored(self, client, auth_headers):
        with client.websocket_connect(f"/api/ws?token={auth_headers.token}") as websocket:
            websocket.send_bytes(b"\x00\x01")
            websocket.send_text("pong")
            client.post("/api/tasks", headers=auth_headers, json={"title": "Still live"})

            message = websocket.receive_json()

        assert message["event"] == "task_created"
        assert message["data"]["title"] == "Still live"

    def test_disconnect_unregisters(self, client, auth_headers, registry):
        with client.websocket_connect(f"/api/ws?token={auth_headers.token}"):
            assert len(registry) == 1
        assert len(registry) == 0
