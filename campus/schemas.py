from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator


class ClientMessage(BaseModel):
    type: str
    data: Dict[str, Any] = {}

    @field_validator("data", mode="before")
    @classmethod
    def _default_data(cls, value: Any) -> Any:
        return {} if value is None else value


class ServerMessage(BaseModel):
    type: str
    data: Dict[str, Any]


class JoinPayload(BaseModel):
    name: Any = None


class InputPayload(BaseModel):
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    @field_validator("up", "down", "left", "right", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        return bool(value)


class ChatPayload(BaseModel):
    text: Any = None


class EquipPayload(BaseModel):
    kind: str


class EnterRoomPayload(BaseModel):
    roomId: str


class EnterSubroomPayload(BaseModel):
    roomId: str
    subroomId: str


class TargetPoint(BaseModel):
    x: float
    y: float


class ActionPayload(BaseModel):
    kind: str
    target: TargetPoint
    correlationId: Optional[str] = None

    @field_validator("correlationId", mode="before")
    @classmethod
    def _opaque(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)


class EmptyPayload(BaseModel):
    pass


class WorldDescriptor(BaseModel):
    width: float
    height: float
    spawn: Dict[str, float]
    obstacles: list
    rooms: list


class PlayerDebug(BaseModel):
    id: str
    name: Optional[str]
    active: bool
    roomId: Optional[str]
    subroomId: Optional[str]
    x: float
    y: float
    equipped: Optional[str]
    knockback: Dict[str, float]
