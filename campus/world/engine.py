from __future__ import annotations

import logging
import math
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..config import MELEE_TOY, TOY_KINDS, ChatSettings, PhysicsSettings
from ..models import (
    CAMPUS,
    ActionEvent,
    HitEvent,
    InputState,
    PlayerState,
    SpaceLocator,
    WorldConfig,
    to_millis,
)
from ..sessions import SessionStore
from .physics import (
    angular_difference,
    clamp,
    clamp_to_bounds,
    decay_knockback,
    movement_direction,
    push_out_x,
    push_out_y,
)

logger = logging.getLogger(__name__)


class WorldEngine:
    """Authoritative simulation state: movement, room transitions, toys and hits.

    Every method runs to completion without awaiting, so handlers and the
    tick never interleave on a player record while they share one event loop.
    """

    def __init__(
        self,
        config: WorldConfig,
        store: SessionStore,
        physics: Optional[PhysicsSettings] = None,
        chat: Optional[ChatSettings] = None,
        toys: Sequence[str] = TOY_KINDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.store = store
        self.physics = physics or PhysicsSettings()
        self.chat = chat or ChatSettings()
        self.toys = tuple(toys)
        self.clock = clock
        self._solids = config.solid_obstacles()

    def _active(self, player_id: str) -> Optional[PlayerState]:
        player = self.store.get_session(player_id)
        if not player or not player.active:
            return None
        return player

    def place_on_campus(self, player: PlayerState) -> None:
        player.space = CAMPUS
        player.x, player.y = self.config.spawn
        player.reset_knockback()

    def set_input(
        self, player_id: str, up: bool, down: bool, left: bool, right: bool
    ) -> bool:
        player = self.store.get_session(player_id)
        if not player:
            return False
        player.input = InputState(
            up=bool(up), down=bool(down), left=bool(left), right=bool(right)
        )
        return True

    def equip(self, player_id: str, kind: str) -> bool:
        player = self._active(player_id)
        if not player or kind not in self.toys:
            return False
        player.equipped = kind
        return True

    def clear_equip(self, player_id: str) -> bool:
        player = self._active(player_id)
        if not player:
            return False
        player.equipped = None
        return True

    def enter_room(self, player_id: str, room_id: str) -> Optional[SpaceLocator]:
        return self._move_to_space(player_id, SpaceLocator(room_id=room_id))

    def enter_subroom(
        self, player_id: str, room_id: str, subroom_id: str
    ) -> Optional[SpaceLocator]:
        return self._move_to_space(
            player_id, SpaceLocator(room_id=room_id, subroom_id=subroom_id)
        )

    def leave_room(self, player_id: str) -> Optional[SpaceLocator]:
        # Campus coordinates are kept while indoors, so leaving puts the
        # player back where they entered.
        player = self._active(player_id)
        if not player:
            return None
        player.space = CAMPUS
        player.reset_knockback()
        return CAMPUS

    def _move_to_space(
        self, player_id: str, space: SpaceLocator
    ) -> Optional[SpaceLocator]:
        player = self._active(player_id)
        if not player or not self.config.resolves(space):
            return None
        player.space = space
        player.set_position(*self.config.spawn_for(space))
        player.reset_knockback()
        return space

    def perform_action(
        self,
        player_id: str,
        kind: str,
        target: Tuple[float, float],
        correlation_id: Optional[str] = None,
    ) -> Optional[Tuple[ActionEvent, List[HitEvent]]]:
        player = self._active(player_id)
        if not player or player.equipped is None or kind != player.equipped:
            logger.debug("Dropping %s action from %s", kind, player_id)
            return None

        now = self.clock()
        width, height = self.config.bounds_for(player.space)
        origin = player.position()
        clamped = (clamp(target[0], 0, width), clamp(target[1], 0, height))
        event = ActionEvent(
            kind=kind,
            player_id=player.player_id,
            space=player.space,
            origin=origin,
            target=clamped,
            ts=now,
            correlation_id=correlation_id,
        )
        hits: List[HitEvent] = []
        if kind == MELEE_TOY:
            hits = self.resolve_hits(player, origin, clamped, now)
        return event, hits

    def resolve_hits(
        self,
        attacker: PlayerState,
        origin: Tuple[float, float],
        target: Tuple[float, float],
        now: float,
    ) -> List[HitEvent]:
        """Cone-and-range melee test against everyone sharing the attacker's space."""
        phys = self.physics
        ox, oy = origin
        facing = math.atan2(target[1] - oy, target[0] - ox)
        half_arc = phys.bat_arc / 2
        hits: List[HitEvent] = []

        for victim in self.store.active_players():
            if victim.player_id == attacker.player_id or victim.space != attacker.space:
                continue
            vx, vy = victim.position()
            dx = vx - ox
            dy = vy - oy
            distance = math.hypot(dx, dy)
            if distance > phys.bat_range:
                continue
            if distance > 0 and angular_difference(math.atan2(dy, dx), facing) > half_arc:
                continue
            if (
                victim.last_hit_at is not None
                and now - victim.last_hit_at < phys.hit_cooldown
            ):
                continue

            victim.last_hit_at = now
            if distance > 0:
                direction = (dx / distance, dy / distance)
            else:
                direction = (math.cos(facing), math.sin(facing))
            victim.add_knockback(
                direction[0] * phys.knockback_speed,
                direction[1] * phys.knockback_speed,
            )
            logger.debug("%s hit %s", attacker.player_id, victim.player_id)
            hits.append(
                HitEvent(
                    victim_id=victim.player_id,
                    attacker_id=attacker.player_id,
                    space=attacker.space,
                    direction=direction,
                    ts=now,
                )
            )
        return hits

    def tick(self) -> Dict[str, object]:
        for player in self.store.active_players():
            self._step_player(player)
        return self.snapshot()

    def _step_player(self, player: PlayerState) -> None:
        phys = self.physics
        dt = phys.dt
        radius = phys.player_radius
        dx, dy = movement_direction(player.input)
        speed = phys.campus_speed if player.space.is_campus else phys.interior_speed
        kvx, kvy = player.knockback()
        step_x = (dx * speed + kvx) * dt
        step_y = (dy * speed + kvy) * dt
        x, y = player.position()
        width, height = self.config.bounds_for(player.space)

        if player.space.is_campus and self._solids:
            x = push_out_x(x + step_x, y, radius, self._solids)
            y = push_out_y(x, y + step_y, radius, self._solids)
            x, y = clamp_to_bounds(x, y, width, height, radius)
        else:
            x, y = clamp_to_bounds(x + step_x, y + step_y, width, height, radius)

        player.set_position(x, y)
        player.set_knockback(
            *decay_knockback(kvx, kvy, phys.knockback_friction, phys.knockback_epsilon)
        )

    def snapshot(self) -> Dict[str, object]:
        now = self.clock()
        players = []
        for player in self.store.active_players():
            if player.chat and now - player.chat.ts >= self.chat.lifetime:
                player.chat = None
            x, y = player.position()
            players.append(
                {
                    "id": player.player_id,
                    "name": player.name,
                    "color": player.color,
                    "x": round(x, 2),
                    "y": round(y, 2),
                    "roomId": player.space.room_id,
                    "subroomId": player.space.subroom_id,
                    "equipped": player.equipped,
                    "chat": (
                        {"text": player.chat.text, "ts": to_millis(player.chat.ts)}
                        if player.chat
                        else None
                    ),
                }
            )
        return {"serverTimestamp": to_millis(now), "players": players}
