from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError

from ..schemas import (
    ActionPayload,
    ChatPayload,
    ClientMessage,
    EmptyPayload,
    EnterRoomPayload,
    EnterSubroomPayload,
    EquipPayload,
    InputPayload,
    JoinPayload,
)
from .base import CommandInput

logger = logging.getLogger(__name__)

PAYLOADS: Dict[str, Type[BaseModel]] = {
    "join": JoinPayload,
    "input": InputPayload,
    "chat": ChatPayload,
    "equip": EquipPayload,
    "clearEquip": EmptyPayload,
    "enterRoom": EnterRoomPayload,
    "enterSubroom": EnterSubroomPayload,
    "leaveRoom": EmptyPayload,
    "action": ActionPayload,
}


def parse_client_message(raw: Any) -> Optional[CommandInput]:
    """Validate an inbound frame; malformed or unknown frames yield None."""
    try:
        message = ClientMessage.model_validate(raw)
    except ValidationError:
        logger.debug("Dropping malformed frame: %r", raw)
        return None
    payload_model = PAYLOADS.get(message.type)
    if payload_model is None:
        logger.debug("Dropping unknown message type %r", message.type)
        return None
    try:
        payload = payload_model.model_validate(message.data)
    except ValidationError:
        logger.debug("Dropping invalid %s payload: %r", message.type, message.data)
        return None
    return CommandInput(action=message.type, payload=payload)
