from __future__ import annotations

import copy
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..config import DEFAULT_PLAYER_RADIUS
from ..models import (
    Interior,
    Obstacle,
    Rect,
    RoomDefinition,
    SubroomDefinition,
    WorldConfig,
)
from .defaults import (
    DEFAULT_CAMPUS_HEIGHT,
    DEFAULT_CAMPUS_WIDTH,
    DEFAULT_INTERIOR_HEIGHT,
    DEFAULT_INTERIOR_WIDTH,
    DEFAULT_LAYOUT,
    DEFAULT_SPAWN,
)

logger = logging.getLogger(__name__)

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT = re.compile(r"(^|\s)//[^\n\r]*")


class WorldConfigError(ValueError):
    """Raised when campus data is structurally inconsistent."""


def strip_comments(raw: str) -> str:
    cleaned = _BLOCK_COMMENT.sub("", raw)
    return _LINE_COMMENT.sub(r"\1", cleaned)


def hash_hue(text: str) -> int:
    """Stable 0..359 hue for a string, matching the browser client's hashing."""
    h = 0
    for ch in text:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h) % 360


class WorldLoader:
    """Load the campus layout from disk, falling back to the built-in layout."""

    def __init__(
        self, world_file: Optional[Path], player_radius: float = DEFAULT_PLAYER_RADIUS
    ) -> None:
        self.world_file = world_file
        self.player_radius = player_radius

    def load(self) -> WorldConfig:
        data = self._read_file()
        if data is None:
            data = copy.deepcopy(DEFAULT_LAYOUT)
        return build_world(data, self.player_radius)

    def _read_file(self) -> Optional[Dict[str, Any]]:
        if self.world_file is None:
            return None
        if not self.world_file.exists():
            logger.warning(
                "World file %s not found; using default layout", self.world_file
            )
            return None
        try:
            with open(self.world_file, "r", encoding="utf-8") as f:
                data = json.loads(strip_comments(f.read()))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(
                "Could not read world file %s (%s); using default layout",
                self.world_file,
                exc,
            )
            return None
        if not isinstance(data, dict):
            logger.warning(
                "World file %s is not a JSON object; using default layout",
                self.world_file,
            )
            return None
        return data


def build_world(
    data: Mapping[str, Any], player_radius: float = DEFAULT_PLAYER_RADIUS
) -> WorldConfig:
    # Every space must fit an avatar.
    min_extent = 2 * player_radius
    width = _extent(data.get("width", DEFAULT_CAMPUS_WIDTH), "campus width", min_extent)
    height = _extent(
        data.get("height", DEFAULT_CAMPUS_HEIGHT), "campus height", min_extent
    )

    spawn_raw = data.get("spawn") or {}
    spawn = (
        float(spawn_raw.get("x", min(DEFAULT_SPAWN[0], width / 2))),
        float(spawn_raw.get("y", min(DEFAULT_SPAWN[1], height / 2))),
    )
    _check_inside(spawn, width, height, "campus spawn")

    obstacles: List[Obstacle] = []
    for o in data.get("obstacles") or []:
        obstacles.append(
            Obstacle(
                x=float(o.get("x", 0)),
                y=float(o.get("y", 0)),
                w=_positive(o.get("w"), "obstacle width"),
                h=_positive(o.get("h"), "obstacle height"),
                label=str(o.get("label") or ""),
                solid=bool(o.get("solid", True)),
            )
        )

    rooms_raw = data.get("rooms")
    if isinstance(rooms_raw, list) and rooms_raw:
        rooms = _build_explicit_rooms(rooms_raw, min_extent)
    else:
        rooms = _build_implicit_rooms(obstacles, min_extent)

    logger.info(
        "Loaded campus %sx%s with %d obstacle(s) and %d room(s)",
        width,
        height,
        len(obstacles),
        len(rooms),
    )
    return WorldConfig(
        width=width,
        height=height,
        spawn=spawn,
        obstacles=obstacles,
        rooms=rooms,
    )


def _build_explicit_rooms(
    rooms_raw: List[Dict[str, Any]], min_extent: float
) -> Dict[str, RoomDefinition]:
    rooms: Dict[str, RoomDefinition] = {}
    for i, r in enumerate(rooms_raw):
        room_id = str(r.get("id") or f"room_{i}")
        if room_id in rooms:
            raise WorldConfigError(f"Duplicate room id: {room_id}")
        name = str(r.get("name") or r.get("id") or f"Room {i + 1}")
        enter_raw = r.get("enter") or {}
        enter = Rect(
            x=float(enter_raw.get("x", 0)),
            y=float(enter_raw.get("y", 0)),
            w=float(enter_raw.get("w", 0)),
            h=float(enter_raw.get("h", 0)),
        )

        subrooms: Dict[str, SubroomDefinition] = {}
        for j, s in enumerate(r.get("subrooms") or []):
            sub_id = str(s.get("id") or f"sub_{j}")
            if sub_id in subrooms:
                raise WorldConfigError(
                    f"Duplicate subroom id {sub_id} in room {room_id}"
                )
            sub_name = str(s.get("name") or s.get("id") or f"{name} {j + 1}")
            subrooms[sub_id] = SubroomDefinition(
                id=sub_id,
                name=sub_name,
                interior=_build_interior(s.get("interior"), sub_name, min_extent),
            )

        rooms[room_id] = RoomDefinition(
            id=room_id,
            name=name,
            enter=enter,
            interior=_build_interior(r.get("interior"), name, min_extent),
            subrooms=subrooms,
        )
    return rooms


def _build_implicit_rooms(
    obstacles: List[Obstacle], min_extent: float
) -> Dict[str, RoomDefinition]:
    rooms: Dict[str, RoomDefinition] = {}
    for i, o in enumerate(obstacles):
        name = o.label or f"Room {i + 1}"
        room_id = f"auto_{i}"
        rooms[room_id] = RoomDefinition(
            id=room_id,
            name=name,
            enter=Rect(o.x, o.y, o.w, o.h),
            interior=_build_interior(None, name, min_extent),
        )
    return rooms


def _build_interior(
    raw: Optional[Mapping[str, Any]], name: str, min_extent: float
) -> Interior:
    raw = raw or {}
    width = _extent(
        raw.get("w", raw.get("width", DEFAULT_INTERIOR_WIDTH)),
        f"{name} interior width",
        min_extent,
    )
    height = _extent(
        raw.get("h", raw.get("height", DEFAULT_INTERIOR_HEIGHT)),
        f"{name} interior height",
        min_extent,
    )
    spawn_raw = raw.get("spawn") or {}
    spawn = (
        float(spawn_raw.get("x", width // 2)),
        float(spawn_raw.get("y", height // 2)),
    )
    _check_inside(spawn, width, height, f"{name} spawn")
    objects = raw.get("objects")
    return Interior(
        width=width,
        height=height,
        background=str(raw.get("bg") or f"hsl({hash_hue(name)} 35% 20%)"),
        spawn=spawn,
        objects=tuple(objects) if isinstance(objects, list) else (),
    )


def _positive(value: Any, what: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise WorldConfigError(f"{what} must be a number, got {value!r}") from None
    if number <= 0:
        raise WorldConfigError(f"{what} must be positive, got {number}")
    return number


def _extent(value: Any, what: str, minimum: float) -> float:
    number = _positive(value, what)
    if number < minimum:
        raise WorldConfigError(f"{what} {number} is smaller than an avatar ({minimum})")
    return number


def _check_inside(point: Tuple[float, float], width: float, height: float, what: str) -> None:
    x, y = point
    if not (0 <= x <= width and 0 <= y <= height):
        raise WorldConfigError(f"{what} ({x}, {y}) lies outside {width}x{height}")
