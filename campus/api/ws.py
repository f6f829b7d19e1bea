from __future__ import annotations

import json
import logging
import uuid

from fastapi import WebSocket, WebSocketDisconnect

from ..commands.base import CommandResult
from ..commands.parser import parse_client_message
from ..commands.router import CommandRouter
from ..services.connection_manager import ConnectionManager
from ..services.game_service import GameService

logger = logging.getLogger(__name__)


async def deliver_result(
    ws: WebSocket,
    session_id: str,
    result: CommandResult,
    connections: ConnectionManager,
) -> bool:
    """Send replies and broadcasts; returns False once this session was kicked."""
    for reply in result.replies:
        await ws.send_json(reply.model_dump())
    for message in result.broadcasts:
        await connections.send_to_all(message.model_dump())
    still_connected = True
    for kick in result.kicks:
        await connections.kick(kick.session_id, kick.reason)
        if kick.session_id == session_id:
            still_connected = False
    return still_connected


def create_websocket_endpoint(game: GameService, connections: ConnectionManager):
    router = CommandRouter(game)

    async def websocket_endpoint(ws: WebSocket) -> None:
        await ws.accept()
        session_id = uuid.uuid4().hex
        game.connect(session_id)
        connections.attach(session_id, ws)

        try:
            while True:
                frame = await ws.receive()
                if frame["type"] == "websocket.disconnect":
                    break
                text = frame.get("text")
                if text is None:
                    # Binary frames are not part of the protocol.
                    continue
                try:
                    raw = json.loads(text)
                except json.JSONDecodeError:
                    continue
                command = parse_client_message(raw)
                if command is None:
                    continue
                result = await router.dispatch(session_id, command)
                if not await deliver_result(ws, session_id, result, connections):
                    break
        except WebSocketDisconnect:
            logger.debug("Session %s closed its connection", session_id)
        finally:
            game.disconnect(session_id)
            connections.detach(session_id)

    return websocket_endpoint
