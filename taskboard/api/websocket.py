"""WebSocket endpoint for realtime task events."""

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from taskboard.config import get_settings
from taskboard.errors import InvalidInput, InvalidToken
from taskboard.services.auth import verify_token
from taskboard.services.realtime import ConnectionRegistry, TaskEventType, WebSocketConnection

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

# Close codes sent before the handshake is accepted
CLOSE_UNAUTHENTICATED = 4001
CLOSE_BAD_REQUEST = 4400


def extract_handshake_token(websocket: WebSocket) -> str | None:
    """Get the session token from the handshake.

    The Authorization header is checked first; browsers can't set headers on
    WebSocket requests, so a ``token`` query parameter is accepted as fallback.
    """
    authorization = websocket.headers.get("authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return websocket.query_params.get("token") or None


def parse_event_types(raw: str | None) -> set[TaskEventType] | None:
    """Parse a comma-separated ``events`` query value. None means all events."""
    if not raw:
        return None
    event_types = set()
    for name in raw.split(","):
        name = name.strip()
        if not name:
            continue
        try:
            event_types.add(TaskEventType(name))
        except ValueError as e:
            raise InvalidInput(f"Unknown event type: {name}") from e
    return event_types


@router.websocket("/api/ws")
async def realtime_events(websocket: WebSocket) -> None:
    """Stream task events to an authenticated client.

    The connection is registered only after its token verifies; a failed check
    closes the socket before it is accepted.
    """
    settings = get_settings()
    registry: ConnectionRegistry = websocket.app.state.registry

    token = extract_handshake_token(websocket)
    if not token:
        await websocket.close(code=CLOSE_UNAUTHENTICATED, reason="Token missing")
        return
    try:
        identity = verify_token(token)
    except InvalidToken:
        await websocket.close(code=CLOSE_UNAUTHENTICATED, reason="Invalid token")
        return
    try:
        event_types = parse_event_types(websocket.query_params.get("events"))
    except InvalidInput as e:
        await websocket.close(code=CLOSE_BAD_REQUEST, reason=e.message)
        return

    connection = WebSocketConnection(
        websocket,
        identity,
        asyncio.get_running_loop(),
        subscribed_event_types=event_types,
        queue_size=settings.ws_queue_size,
    )
    # Registered before accept: events published during the handshake wait in the queue
    registry.register(connection)

    async def handle_ping() -> None:
        """Send periodic pings to keep connection alive."""
        while True:
            await asyncio.sleep(settings.ws_ping_interval_seconds)
            await websocket.send_json({"event": "ping"})

    async def handle_client() -> None:
        """Drain incoming frames (pongs, text or binary) until the client goes away."""
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                return

    tasks: list[asyncio.Task] = []
    try:
        await websocket.accept()
        tasks = [
            asyncio.create_task(connection.send_pending()),
            asyncio.create_task(handle_ping()),
            asyncio.create_task(handle_client()),
        ]
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.warning(f"WebSocket {connection.connection_id} closed on error: {exc}")
    except WebSocketDisconnect:
        pass
    finally:
        for task in tasks:
            task.cancel()
        registry.unregister(connection.connection_id)
        logger.info(f"WebSocket disconnected: user={identity.user_id}")
