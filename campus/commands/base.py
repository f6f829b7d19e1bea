from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol

from pydantic import BaseModel

from ..schemas import ServerMessage
from ..services.game_service import GameService


@dataclass(frozen=True)
class CommandInput:
    action: str
    payload: BaseModel


@dataclass(frozen=True)
class Kick:
    session_id: str
    reason: str


@dataclass
class CommandResult:
    replies: List[ServerMessage] = field(default_factory=list)
    broadcasts: List[ServerMessage] = field(default_factory=list)
    kicks: List[Kick] = field(default_factory=list)


class CommandHandler(Protocol):
    async def __call__(
        self,
        game: GameService,
        session_id: str,
        command: CommandInput,
    ) -> CommandResult: ...
