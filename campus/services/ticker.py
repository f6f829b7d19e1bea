from __future__ import annotations

import asyncio
import logging
from typing import List

from ..schemas import ServerMessage
from ..world.engine import WorldEngine
from .connection_manager import ConnectionManager
from .game_service import GameService

logger = logging.getLogger(__name__)

DUPLICATE_NAME_REASON = "duplicate_name"


class TickDriver:
    """Fixed-rate simulation driver. `step()` advances exactly one tick."""

    def __init__(self, world: WorldEngine, connections: ConnectionManager) -> None:
        self.world = world
        self.connections = connections
        self.ticks = 0

    def step(self) -> ServerMessage:
        snapshot = self.world.tick()
        self.ticks += 1
        return ServerMessage(type="state", data=snapshot)

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self.world.physics.dt
        deadline = loop.time()
        while True:
            try:
                message = self.step()
                await self.connections.send_to_all(message.model_dump())
            except Exception:
                logger.exception("Tick %d failed", self.ticks)
            deadline += interval
            delay = deadline - loop.time()
            if delay < 0:
                # Fell behind; resync instead of bursting catch-up ticks.
                deadline = loop.time()
                delay = 0
            await asyncio.sleep(delay)


class DuplicateSweeper:
    """Periodically evicts sessions that ended up sharing a name."""

    def __init__(
        self, game: GameService, connections: ConnectionManager, interval: float
    ) -> None:
        self.game = game
        self.connections = connections
        self.interval = interval

    async def sweep_once(self) -> List[str]:
        evicted = self.game.sweep_duplicates()
        for session_id in evicted:
            await self.connections.kick(session_id, DUPLICATE_NAME_REASON)
        return evicted

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.sweep_once()
            except Exception:
                logger.exception("Duplicate name sweep failed")
