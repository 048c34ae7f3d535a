"""WebSocket subscriptions and room change fan-out."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

SUBSCRIBE_MESSAGE = "JOIN_ROOM"
UPDATE_MESSAGE = "UPDATE_ROOM"


class RoomNotifier:
    """Tracks which socket watches which room code.

    Messages are invalidation hints only: subscribers re-fetch their own
    view over HTTP, so nothing personalized is ever sent here.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[WebSocket, str | None] = {}

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._subscriptions[websocket] = None

    def subscribe(self, websocket: WebSocket, code: str) -> None:
        self._subscriptions[websocket] = code.strip().upper()
        logger.debug("Socket subscribed to room %s", self._subscriptions[websocket])

    def disconnect(self, websocket: WebSocket) -> None:
        self._subscriptions.pop(websocket, None)

    def subscription(self, websocket: WebSocket) -> str | None:
        return self._subscriptions.get(websocket)

    def subscribers(self, code: str) -> list[WebSocket]:
        return [websocket for websocket, subscribed in self._subscriptions.items() if subscribed == code]

    def handle_message(self, websocket: WebSocket, message: Any) -> None:
        """Apply a client message; anything but a well-formed subscribe is ignored."""
        if not isinstance(message, dict) or message.get("type") != SUBSCRIBE_MESSAGE:
            logger.debug("Ignoring websocket message %r", message)
            return
        payload = message.get("payload")
        code = payload.get("code") if isinstance(payload, dict) else None
        if not isinstance(code, str) or code.strip() == "":
            logger.debug("Ignoring subscribe message without a room code")
            return
        self.subscribe(websocket, code)

    async def broadcast(self, code: str, status: str, player_count: int) -> None:
        message = {
            "type": UPDATE_MESSAGE,
            "payload": {"code": code, "status": status, "playerCount": player_count},
        }
        stale_connections: list[WebSocket] = []
        for websocket in self.subscribers(code):
            try:
                await websocket.send_json(message)
            except (RuntimeError, OSError, WebSocketDisconnect):
                stale_connections.append(websocket)
        for websocket in stale_connections:
            logger.debug("Dropping closed socket from room %s", code)
            self.disconnect(websocket)
