from __future__ import annotations

import itertools
from typing import Dict, List, Optional

from .models import PlayerState


class SessionStore:
    """In-memory repository of player records keyed by session id."""

    def __init__(self) -> None:
        self._by_session: Dict[str, PlayerState] = {}
        self._sequence = itertools.count(1)

    def next_sequence(self) -> int:
        return next(self._sequence)

    def create_session(self, session_id: str, color: str) -> PlayerState:
        player = PlayerState(
            player_id=session_id,
            color=color,
            connected_seq=self.next_sequence(),
        )
        self._by_session[session_id] = player
        return player

    def get_session(self, session_id: str) -> Optional[PlayerState]:
        return self._by_session.get(session_id)

    def remove_session(self, session_id: str) -> Optional[PlayerState]:
        return self._by_session.pop(session_id, None)

    def all_sessions(self) -> List[PlayerState]:
        return sorted(self._by_session.values(), key=lambda p: p.connected_seq)

    def active_players(self) -> List[PlayerState]:
        return [p for p in self.all_sessions() if p.active]
