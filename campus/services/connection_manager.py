from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import WebSocket, WebSocketDisconnect

from ..schemas import ServerMessage

logger = logging.getLogger(__name__)

KICK_CLOSE_CODE = 4000

# Errors raised by a websocket whose peer has already gone away.
SEND_ERRORS = (RuntimeError, WebSocketDisconnect)


class ConnectionManager:
    """Track active websocket connections per session."""

    def __init__(self) -> None:
        self._connections: Dict[str, WebSocket] = {}

    def attach(self, session_id: str, ws: WebSocket) -> None:
        self._connections[session_id] = ws

    def detach(self, session_id: str) -> None:
        self._connections.pop(session_id, None)

    def get(self, session_id: str) -> WebSocket | None:
        return self._connections.get(session_id)

    def get_all_connected_session_ids(self) -> List[str]:
        return list(self._connections.keys())

    async def send(self, session_id: str, message: Dict[str, object]) -> bool:
        ws = self._connections.get(session_id)
        if not ws:
            return False
        try:
            await ws.send_json(message)
        except SEND_ERRORS:
            # The session's own endpoint removes its player once the receive
            # side notices; stop sending to it in the meantime.
            logger.debug("Dropping dead connection %s", session_id)
            self.detach(session_id)
            return False
        return True

    async def send_to_all(self, message: Dict[str, object]) -> None:
        """Send a message to every connected session, joined or not."""
        for session_id in self.get_all_connected_session_ids():
            await self.send(session_id, message)

    async def kick(self, session_id: str, reason: str) -> None:
        ws = self._connections.pop(session_id, None)
        if not ws:
            return
        logger.info("Kicking session %s: %s", session_id, reason)
        try:
            await ws.send_json(
                ServerMessage(type="kicked", data={"reason": reason}).model_dump()
            )
            await ws.close(code=KICK_CLOSE_CODE, reason=reason)
        except SEND_ERRORS:
            logger.debug("Session %s was gone before the kick landed", session_id)
