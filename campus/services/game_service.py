from __future__ import annotations

import logging
import random
from typing import List, Optional

from ..config import Settings
from ..models import ChatMessage, PlayerState
from ..sessions import SessionStore
from ..world.engine import WorldEngine
from .chat import ChatThrottle
from .identity import ClaimResult, NameRegistry

logger = logging.getLogger(__name__)


class GameService:
    """High-level facade exposing operations used by HTTP and websocket layers."""

    def __init__(
        self,
        world: WorldEngine,
        sessions: SessionStore,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.world = world
        self.sessions = sessions
        self.settings = settings or Settings()
        self.names = NameRegistry(sessions, self.settings.identity)
        self.chat = ChatThrottle(self.settings.chat)
        self._rng = rng or random.Random()

    def random_color(self) -> str:
        return f"hsl({self._rng.randrange(360)} 70% 60%)"

    def connect(self, session_id: str) -> PlayerState:
        player = self.sessions.create_session(session_id, self.random_color())
        logger.info("Session %s connected", session_id)
        return player

    def disconnect(self, session_id: str) -> None:
        player = self.sessions.remove_session(session_id)
        if player:
            logger.info("Session %s (%s) disconnected", session_id, player.name)

    def get_player(self, session_id: str) -> Optional[PlayerState]:
        return self.sessions.get_session(session_id)

    def join(self, session_id: str, raw_name: object) -> Optional[ClaimResult]:
        player = self.sessions.get_session(session_id)
        if not player or player.active:
            return None
        result = self.names.claim(player, raw_name)
        if result.accepted:
            self.world.place_on_campus(player)
            logger.info("Session %s joined as %r", session_id, result.name)
        else:
            self.evict(result.evicted)
        return result

    def sweep_duplicates(self) -> List[str]:
        evicted = self.names.sweep()
        self.evict(evicted)
        return evicted

    def evict(self, session_ids: List[str]) -> None:
        # Removal happens before any await so the next tick never sees them.
        for sid in session_ids:
            self.sessions.remove_session(sid)

    def post_chat(self, session_id: str, raw: object) -> Optional[ChatMessage]:
        player = self.sessions.get_session(session_id)
        if not player or not player.active:
            return None
        return self.chat.apply(player, raw, self.world.clock())

    def init_payload(self, session_id: str) -> dict:
        return {
            "sessionId": session_id,
            "world": self.world.config.to_descriptor(),
            "radius": self.world.physics.player_radius,
            "toys": list(self.world.toys),
        }
