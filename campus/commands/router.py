from __future__ import annotations

from typing import Dict

from ..schemas import (
    ActionPayload,
    ChatPayload,
    EnterRoomPayload,
    EnterSubroomPayload,
    EquipPayload,
    InputPayload,
    JoinPayload,
    ServerMessage,
)
from ..services.game_service import GameService
from ..services.ticker import DUPLICATE_NAME_REASON
from .base import CommandHandler, CommandInput, CommandResult, Kick


class CommandRouter:
    """Map parsed client messages to handler callables."""

    def __init__(self, game: GameService) -> None:
        self.game = game
        self._handlers: Dict[str, CommandHandler] = {
            "join": join_handler,
            "input": input_handler,
            "chat": chat_handler,
            "equip": equip_handler,
            "clearEquip": clear_equip_handler,
            "enterRoom": enter_room_handler,
            "enterSubroom": enter_subroom_handler,
            "leaveRoom": leave_room_handler,
            "action": action_handler,
        }

    async def dispatch(self, session_id: str, command: CommandInput) -> CommandResult:
        handler = self._handlers.get(command.action)
        if not handler:
            return CommandResult()
        return await handler(self.game, session_id, command)


def _room_changed(space) -> ServerMessage:
    return ServerMessage(type="roomChanged", data=space.to_dict())


async def join_handler(
    game: GameService,
    session_id: str,
    command: CommandInput,
) -> CommandResult:
    payload: JoinPayload = command.payload
    result = game.join(session_id, payload.name)
    if result is None:
        return CommandResult()
    if not result.accepted:
        return CommandResult(
            kicks=[Kick(sid, DUPLICATE_NAME_REASON) for sid in result.evicted]
        )
    return CommandResult(
        replies=[ServerMessage(type="init", data=game.init_payload(session_id))]
    )


async def input_handler(
    game: GameService,
    session_id: str,
    command: CommandInput,
) -> CommandResult:
    payload: InputPayload = command.payload
    game.world.set_input(
        session_id, payload.up, payload.down, payload.left, payload.right
    )
    return CommandResult()


async def chat_handler(
    game: GameService,
    session_id: str,
    command: CommandInput,
) -> CommandResult:
    payload: ChatPayload = command.payload
    # Accepted chat rides along in the next snapshot.
    game.post_chat(session_id, payload.text)
    return CommandResult()


async def equip_handler(
    game: GameService,
    session_id: str,
    command: CommandInput,
) -> CommandResult:
    payload: EquipPayload = command.payload
    game.world.equip(session_id, payload.kind)
    return CommandResult()


async def clear_equip_handler(
    game: GameService,
    session_id: str,
    command: CommandInput,
) -> CommandResult:
    game.world.clear_equip(session_id)
    return CommandResult()


async def enter_room_handler(
    game: GameService,
    session_id: str,
    command: CommandInput,
) -> CommandResult:
    payload: EnterRoomPayload = command.payload
    space = game.world.enter_room(session_id, payload.roomId)
    if space is None:
        return CommandResult()
    return CommandResult(replies=[_room_changed(space)])


async def enter_subroom_handler(
    game: GameService,
    session_id: str,
    command: CommandInput,
) -> CommandResult:
    payload: EnterSubroomPayload = command.payload
    space = game.world.enter_subroom(session_id, payload.roomId, payload.subroomId)
    if space is None:
        return CommandResult()
    return CommandResult(replies=[_room_changed(space)])


async def leave_room_handler(
    game: GameService,
    session_id: str,
    command: CommandInput,
) -> CommandResult:
    space = game.world.leave_room(session_id)
    if space is None:
        return CommandResult()
    return CommandResult(replies=[_room_changed(space)])


async def action_handler(
    game: GameService,
    session_id: str,
    command: CommandInput,
) -> CommandResult:
    payload: ActionPayload = command.payload
    outcome = game.world.perform_action(
        session_id,
        payload.kind,
        (payload.target.x, payload.target.y),
        payload.correlationId,
    )
    if outcome is None:
        return CommandResult()
    event, hits = outcome
    broadcasts = [ServerMessage(type="action", data=event.to_payload())]
    broadcasts.extend(ServerMessage(type="hit", data=hit.to_payload()) for hit in hits)
    return CommandResult(broadcasts=broadcasts)
