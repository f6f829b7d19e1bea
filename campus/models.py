from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}


@dataclass(frozen=True)
class Obstacle:
    x: float
    y: float
    w: float
    h: float
    label: str = ""
    solid: bool = True

    def to_dict(self) -> Dict[str, object]:
        return {
            "x": self.x,
            "y": self.y,
            "w": self.w,
            "h": self.h,
            "label": self.label,
            "solid": self.solid,
        }


@dataclass(frozen=True)
class Interior:
    width: float
    height: float
    background: str
    spawn: Tuple[float, float]
    objects: Tuple[Dict[str, Any], ...] = ()

    def to_dict(self) -> Dict[str, object]:
        return {
            "w": self.width,
            "h": self.height,
            "bg": self.background,
            "objects": list(self.objects),
            "spawn": {"x": self.spawn[0], "y": self.spawn[1]},
        }


@dataclass(frozen=True)
class SubroomDefinition:
    id: str
    name: str
    interior: Interior


@dataclass(frozen=True)
class RoomDefinition:
    id: str
    name: str
    enter: Rect
    interior: Interior
    subrooms: Dict[str, SubroomDefinition] = field(default_factory=dict)


@dataclass(frozen=True)
class SpaceLocator:
    """Which coordinate frame a player occupies: campus, a room, or a subroom."""

    room_id: Optional[str] = None
    subroom_id: Optional[str] = None

    @property
    def is_campus(self) -> bool:
        return self.room_id is None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"roomId": self.room_id, "subroomId": self.subroom_id}


CAMPUS = SpaceLocator()


@dataclass
class WorldConfig:
    """Static campus layout. Built once by the loader and never mutated."""

    width: float
    height: float
    spawn: Tuple[float, float]
    obstacles: List[Obstacle]
    rooms: Dict[str, RoomDefinition]

    def get_room(self, room_id: Optional[str]) -> Optional[RoomDefinition]:
        if room_id is None:
            return None
        return self.rooms.get(room_id)

    def get_subroom(
        self, room_id: Optional[str], subroom_id: Optional[str]
    ) -> Optional[SubroomDefinition]:
        room = self.get_room(room_id)
        if not room or subroom_id is None:
            return None
        return room.subrooms.get(subroom_id)

    def resolves(self, space: SpaceLocator) -> bool:
        if space.is_campus:
            return space.subroom_id is None
        if space.subroom_id is None:
            return self.get_room(space.room_id) is not None
        return self.get_subroom(space.room_id, space.subroom_id) is not None

    def interior_for(self, space: SpaceLocator) -> Optional[Interior]:
        if space.is_campus:
            return None
        if space.subroom_id is not None:
            return self.get_subroom(space.room_id, space.subroom_id).interior
        return self.rooms[space.room_id].interior

    def bounds_for(self, space: SpaceLocator) -> Tuple[float, float]:
        interior = self.interior_for(space)
        if interior is None:
            return self.width, self.height
        return interior.width, interior.height

    def spawn_for(self, space: SpaceLocator) -> Tuple[float, float]:
        interior = self.interior_for(space)
        if interior is None:
            return self.spawn
        return interior.spawn

    def solid_obstacles(self) -> List[Obstacle]:
        return [o for o in self.obstacles if o.solid]

    def to_descriptor(self) -> Dict[str, object]:
        return {
            "width": self.width,
            "height": self.height,
            "spawn": {"x": self.spawn[0], "y": self.spawn[1]},
            "obstacles": [o.to_dict() for o in self.obstacles],
            "rooms": [
                {
                    "id": room.id,
                    "name": room.name,
                    "enter": room.enter.to_dict(),
                    "interior": room.interior.to_dict(),
                    "subrooms": [
                        {
                            "id": sub.id,
                            "name": sub.name,
                            "interior": sub.interior.to_dict(),
                        }
                        for sub in room.subrooms.values()
                    ],
                }
                for room in self.rooms.values()
            ],
        }


@dataclass
class InputState:
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False


@dataclass
class ChatMessage:
    text: str
    ts: float


@dataclass
class PlayerState:
    player_id: str
    color: str
    connected_seq: int
    name: Optional[str] = None
    joined_seq: Optional[int] = None
    space: SpaceLocator = CAMPUS
    x: float = 0.0
    y: float = 0.0
    rx: float = 0.0
    ry: float = 0.0
    campus_knockback: Tuple[float, float] = (0.0, 0.0)
    interior_knockback: Tuple[float, float] = (0.0, 0.0)
    input: InputState = field(default_factory=InputState)
    equipped: Optional[str] = None
    chat: Optional[ChatMessage] = None
    last_chat_at: Optional[float] = None
    last_hit_at: Optional[float] = None

    @property
    def active(self) -> bool:
        return self.name is not None

    def position(self) -> Tuple[float, float]:
        if self.space.is_campus:
            return self.x, self.y
        return self.rx, self.ry

    def set_position(self, x: float, y: float) -> None:
        if self.space.is_campus:
            self.x, self.y = x, y
        else:
            self.rx, self.ry = x, y

    def knockback(self) -> Tuple[float, float]:
        if self.space.is_campus:
            return self.campus_knockback
        return self.interior_knockback

    def set_knockback(self, vx: float, vy: float) -> None:
        if self.space.is_campus:
            self.campus_knockback = (vx, vy)
        else:
            self.interior_knockback = (vx, vy)

    def add_knockback(self, vx: float, vy: float) -> None:
        kx, ky = self.knockback()
        self.set_knockback(kx + vx, ky + vy)

    def reset_knockback(self) -> None:
        self.campus_knockback = (0.0, 0.0)
        self.interior_knockback = (0.0, 0.0)


def to_millis(ts: float) -> int:
    return int(round(ts * 1000))


@dataclass
class ActionEvent:
    kind: str
    player_id: str
    space: SpaceLocator
    origin: Tuple[float, float]
    target: Tuple[float, float]
    ts: float
    correlation_id: Optional[str] = None

    def to_payload(self) -> Dict[str, object]:
        return {
            "kind": self.kind,
            "playerId": self.player_id,
            "space": self.space.to_dict(),
            "origin": {"x": self.origin[0], "y": self.origin[1]},
            "target": {"x": self.target[0], "y": self.target[1]},
            "serverTimestamp": to_millis(self.ts),
            "correlationId": self.correlation_id,
        }


@dataclass
class HitEvent:
    victim_id: str
    attacker_id: str
    space: SpaceLocator
    direction: Tuple[float, float]
    ts: float

    def to_payload(self) -> Dict[str, object]:
        return {
            "victimId": self.victim_id,
            "attackerId": self.attacker_id,
            "space": self.space.to_dict(),
            "direction": {"x": self.direction[0], "y": self.direction[1]},
            "serverTimestamp": to_millis(self.ts),
        }
