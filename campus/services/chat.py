from __future__ import annotations

import unicodedata
from typing import Optional

from ..config import ChatSettings
from ..models import ChatMessage, PlayerState

# Letters, numbers, punctuation and space separators.
_ALLOWED_CATEGORY_PREFIXES = ("L", "N", "P")


def sanitize_chat(raw: object, max_length: int = 140) -> str:
    text = "" if raw is None else str(raw)
    text = text.strip()
    if not text:
        return ""
    kept = [
        ch
        for ch in text
        if unicodedata.category(ch).startswith(_ALLOWED_CATEGORY_PREFIXES)
        or unicodedata.category(ch) == "Zs"
    ]
    return "".join(kept)[:max_length]


class ChatThrottle:
    """Rate-limits and sanitises the transient chat bubble on a player record."""

    def __init__(self, settings: Optional[ChatSettings] = None) -> None:
        self.settings = settings or ChatSettings()

    def apply(self, player: PlayerState, raw: object, now: float) -> Optional[ChatMessage]:
        if (
            player.last_chat_at is not None
            and now - player.last_chat_at < self.settings.cooldown
        ):
            return None
        text = sanitize_chat(raw, self.settings.max_length)
        if not text:
            return None
        player.chat = ChatMessage(text=text, ts=now)
        player.last_chat_at = now
        return player.chat
