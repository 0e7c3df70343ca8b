"""
Audit event WebSocket.

WS /api/ws - server push of audit events

Every event published on the notifier is forwarded to all open sockets.
Clients may send "ping" and receive a "pong" message back.
"""
import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from api.dependencies import get_connection_manager
from orchestration.bus import ALL_EVENTS, NotifierProtocol
from orchestration.events import Event

logger = logging.getLogger(__name__)

router = APIRouter()

SEND_TIMEOUT_SECONDS = 2.0


class ConnectionManager:
    """
    Manages WebSocket connections for audit updates.

    Subscribes to every notifier event on creation. Sends go out to all
    sockets concurrently; a socket whose send fails or takes longer than
    ``send_timeout`` seconds is dropped. Delivery is never retried.
    """

    def __init__(self, notifier: NotifierProtocol, send_timeout: float = SEND_TIMEOUT_SECONDS):
        self.active_connections: Dict[str, WebSocket] = {}
        self.send_timeout = send_timeout
        notifier.subscribe(ALL_EVENTS, self.broadcast)

    async def connect(self, client_id: str, websocket: WebSocket):
        """Accept and register WebSocket connection"""
        await websocket.accept()
        self.active_connections[client_id] = websocket
        logger.info(f"Audit feed client connected: {client_id} (total: {len(self.active_connections)})")

    def disconnect(self, client_id: str):
        """Remove WebSocket connection"""
        if client_id in self.active_connections:
            del self.active_connections[client_id]
            logger.info(f"Audit feed client disconnected: {client_id} (total: {len(self.active_connections)})")

    async def broadcast(self, event: Event):
        if not self.active_connections:
            return

        message = event.to_dict()
        clients = list(self.active_connections.items())
        results = await asyncio.gather(
            *(self._send(client_id, websocket, message) for client_id, websocket in clients)
        )

        for (client_id, _), delivered in zip(clients, results):
            if not delivered:
                logger.warning(f"Dropping client {client_id} after failed {event.type.value} delivery")
                self.disconnect(client_id)

    async def _send(self, client_id: str, websocket: WebSocket, message: dict) -> bool:
        try:
            await asyncio.wait_for(websocket.send_json(message), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Send to client {client_id} timed out after {self.send_timeout:g}s")
            return False
        except Exception as e:
            logger.warning(f"Failed to send to client {client_id}: {e}")
            return False
        return True


@router.websocket("/ws")
async def websocket_audit_feed(
    websocket: WebSocket,
    manager: ConnectionManager = Depends(get_connection_manager),
):
    """
    WebSocket audit event stream.

    Client connection lifecycle:
    1. Connect
    2. Listen - receive audit_started, step_started, step_completed, ...
    3. Disconnect - cleanup
    """
    client_id = str(uuid.uuid4())

    await manager.connect(client_id, websocket)

    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_json({
                    "type": "pong",
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                })

    except WebSocketDisconnect:
        manager.disconnect(client_id)
    except Exception as e:
        logger.error(f"WebSocket error for client {client_id}: {e}", exc_info=True)
        manager.disconnect(client_id)
