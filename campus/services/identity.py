from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..config import IdentitySettings
from ..models import PlayerState
from ..sessions import SessionStore

logger = logging.getLogger(__name__)

# Letters, digits, space, hyphen, apostrophe, period.
_DISALLOWED_NAME_CHARS = re.compile(r"[^\w \-'.]|_")
_WHITESPACE = re.compile(r"\s+")


def sanitize_name(raw: object, max_length: int = 16, default: str = "Student") -> str:
    if not isinstance(raw, str):
        return default
    cleaned = _DISALLOWED_NAME_CHARS.sub("", _WHITESPACE.sub(" ", raw))
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()[:max_length].strip()
    return cleaned or default


def normalize_name(name: str) -> str:
    """Key used for uniqueness: case-insensitive, whitespace ignored."""
    return "".join(name.split()).casefold()


@dataclass
class ClaimResult:
    name: str
    accepted: bool
    evicted: List[str] = field(default_factory=list)


class NameRegistry:
    """Enforces unique display names across active sessions.

    The earliest holder of a name keeps it; later claimants and any
    residual duplicates are reported for eviction.
    """

    def __init__(
        self, store: SessionStore, settings: Optional[IdentitySettings] = None
    ) -> None:
        self.store = store
        self.settings = settings or IdentitySettings()

    def sanitize(self, raw: object) -> str:
        return sanitize_name(
            raw, self.settings.name_max_length, self.settings.default_name
        )

    def holders(self, name: str) -> List[PlayerState]:
        key = normalize_name(name)
        matches = [
            p for p in self.store.active_players() if normalize_name(p.name) == key
        ]
        return sorted(matches, key=_holder_order)

    def claim(self, player: PlayerState, raw_name: object) -> ClaimResult:
        name = self.sanitize(raw_name)
        holders = [p for p in self.holders(name) if p.player_id != player.player_id]
        if not holders:
            player.name = name
            player.joined_seq = self.store.next_sequence()
            return ClaimResult(name=name, accepted=True)

        owner, residual = holders[0], holders[1:]
        evicted = [p.player_id for p in residual] + [player.player_id]
        logger.info(
            "Name %r already held by %s; evicting %s",
            name,
            owner.player_id,
            ", ".join(evicted),
        )
        return ClaimResult(name=name, accepted=False, evicted=evicted)

    def sweep(self) -> List[str]:
        """Return session ids of every non-owner sharing a name with an earlier holder."""
        groups: Dict[str, List[PlayerState]] = {}
        for player in self.store.active_players():
            groups.setdefault(normalize_name(player.name), []).append(player)

        evicted: List[str] = []
        for members in groups.values():
            if len(members) < 2:
                continue
            members.sort(key=_holder_order)
            evicted.extend(p.player_id for p in members[1:])
        if evicted:
            logger.info("Duplicate sweep evicting %s", ", ".join(evicted))
        return evicted


def _holder_order(player: PlayerState):
    return (player.joined_seq or 0, player.connected_seq)
