"""Real-time event distribution to connected clients.

Handlers describe what happened as a ``TaskEvent`` and hand it to an
``EventPublisher``. The broadcast publisher delivers the event envelope to
every connection in a ``ConnectionRegistry``. Delivery is best-effort: a
connection that fails to take an event is logged and skipped.
"""

import asyncio
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from fastapi import WebSocket

from taskboard.schemas.auth import IdentityClaim
from taskboard.schemas.events import (
    EventEnvelope,
    NewCommentData,
    TaskCreatedData,
    TaskDeletedData,
    TaskUpdatedData,
)

logger = logging.getLogger(__name__)


class TaskEventType(StrEnum):
    """Event types pushed to realtime connections."""

    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_DELETED = "task_deleted"
    NEW_COMMENT = "new_comment"


@dataclass(frozen=True)
class TaskEvent:
    """A domain event produced by a successful mutation."""

    event_type: TaskEventType
    data: dict[str, Any] = field(default_factory=dict)

    def envelope(self) -> dict[str, Any]:
        return EventEnvelope(event=self.event_type.value, data=self.data).model_dump(mode="json")


def task_created_event(task) -> TaskEvent:
    data = TaskCreatedData(
        task_id=task.task_id,
        title=task.title,
        status=task.status,
        due_date=task.due_date,
        creator_id=task.creator_id,
    )
    return TaskEvent(TaskEventType.TASK_CREATED, data.model_dump(mode="json"))


def task_updated_event(task_id: str, updated_fields: dict[str, Any], updated_at) -> TaskEvent:
    data = TaskUpdatedData(task_id=task_id, updated_fields=updated_fields, updated_at=updated_at)
    return TaskEvent(TaskEventType.TASK_UPDATED, data.model_dump(mode="json"))


def task_deleted_event(task_id: str) -> TaskEvent:
    return TaskEvent(TaskEventType.TASK_DELETED, TaskDeletedData(task_id=task_id).model_dump(mode="json"))


def new_comment_event(comment) -> TaskEvent:
    data = NewCommentData.model_validate(comment, from_attributes=True)
    return TaskEvent(TaskEventType.NEW_COMMENT, data.model_dump(mode="json"))


class RealtimeConnection(ABC):
    """An authenticated client that receives event envelopes."""

    def __init__(
        self,
        identity: IdentityClaim,
        subscribed_event_types: Iterable[TaskEventType] | None = None,
    ) -> None:
        self.connection_id = str(uuid.uuid4())
        self.identity = identity
        self.subscribed_event_types = frozenset(
            subscribed_event_types if subscribed_event_types is not None else TaskEventType
        )

    def wants(self, event_type: TaskEventType) -> bool:
        return event_type in self.subscribed_event_types

    @abstractmethod
    def deliver(self, envelope: dict[str, Any]) -> None:
        """Hand an envelope to the client without waiting for it to be sent."""


class WebSocketConnection(RealtimeConnection):
    """Connection backed by a WebSocket.

    ``deliver`` may be called from any thread; envelopes are queued on the
    connection's event loop and written by ``send_pending``.
    """

    def __init__(
        self,
        websocket: WebSocket,
        identity: IdentityClaim,
        loop: asyncio.AbstractEventLoop,
        subscribed_event_types: Iterable[TaskEventType] | None = None,
        queue_size: int = 100,
    ) -> None:
        super().__init__(identity, subscribed_event_types)
        self.websocket = websocket
        self._loop = loop
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=queue_size)

    def deliver(self, envelope: dict[str, Any]) -> None:
        self._loop.call_soon_threadsafe(self._enqueue, envelope)

    def _enqueue(self, envelope: dict[str, Any]) -> None:
        try:
            self._queue.put_nowait(envelope)
        except asyncio.QueueFull:
            logger.warning(
                f"Dropping {envelope.get('event')} for connection {self.connection_id}: queue full"
            )

    async def send_pending(self) -> None:
        """Write queued envelopes to the socket until sending fails."""
        while True:
            envelope = await self._queue.get()
            await self.websocket.send_json(envelope)


class ConnectionRegistry:
    """Live realtime connections keyed by connection id.

    Registration and removal are serialized by a lock. Readers take a snapshot
    and never hold the lock while delivering.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._connections: dict[str, RealtimeConnection] = {}

    def register(self, connection: RealtimeConnection) -> None:
        with self._lock:
            self._connections[connection.connection_id] = connection
        logger.info(
            f"Realtime connection registered: id={connection.connection_id} "
            f"user={connection.identity.user_id}"
        )

    def unregister(self, connection_id: str) -> bool:
        with self._lock:
            removed = self._connections.pop(connection_id, None)
        if removed is not None:
            logger.info(f"Realtime connection removed: id={connection_id}")
        return removed is not None

    def snapshot(self) -> list[RealtimeConnection]:
        with self._lock:
            return list(self._connections.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def __contains__(self, connection_id: object) -> bool:
        with self._lock:
            return connection_id in self._connections


class EventPublisher(ABC):
    """Where handlers send domain events after a successful mutation."""

    @abstractmethod
    def publish(self, event: TaskEvent) -> int: ...


class BroadcastPublisher(EventPublisher):
    """Deliver every event to every registered connection."""

    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry

    def publish(self, event: TaskEvent) -> int:
        """Broadcast an event. Returns the number of connections it was handed to."""
        envelope = event.envelope()
        delivered = 0
        for connection in self.registry.snapshot():
            if not connection.wants(event.event_type):
                continue
            try:
                connection.deliver(envelope)
                delivered += 1
            except Exception as e:
                # Don't fail the request or the other connections if one delivery fails
                logger.error(
                    f"Failed to deliver {event.event_type} to connection "
                    f"{connection.connection_id}: {e}"
                )
        logger.debug(f"Published {event.event_type} to {delivered} connection(s)")
        return delivered
