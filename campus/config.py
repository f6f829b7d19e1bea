from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, Field


BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"

TOY_KINDS: Tuple[str, ...] = ("bat", "ball", "frisbee")
MELEE_TOY = "bat"
DEFAULT_PLAYER_RADIUS = 18.0


class PhysicsSettings(BaseModel):
    tick_rate: int = 20
    campus_speed: float = 180.0
    interior_speed: float = 180.0
    player_radius: float = DEFAULT_PLAYER_RADIUS
    knockback_friction: float = 0.90
    knockback_speed: float = 420.0
    # Residual knockback below this speed is snapped to zero.
    knockback_epsilon: float = 1e-3
    bat_range: float = 80.0
    bat_arc: float = math.radians(110)
    hit_cooldown: float = 0.5

    @property
    def dt(self) -> float:
        return 1.0 / self.tick_rate


class ChatSettings(BaseModel):
    max_length: int = 140
    cooldown: float = 0.6
    lifetime: float = 5.0


class IdentitySettings(BaseModel):
    name_max_length: int = 16
    default_name: str = "Student"


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    world_file: Optional[Path] = DATA_DIR / "campus.json"
    log_level: str = "INFO"
    sweep_interval: float = 15.0
    toys: Tuple[str, ...] = TOY_KINDS
    physics: PhysicsSettings = Field(default_factory=PhysicsSettings)
    chat: ChatSettings = Field(default_factory=ChatSettings)
    identity: IdentitySettings = Field(default_factory=IdentitySettings)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from environment variables, falling back to defaults."""
    env = os.environ if env is None else env
    settings = Settings()

    port = env.get("CAMPUS_PORT") or env.get("PORT")
    if port:
        settings.port = int(port)
    if env.get("CAMPUS_HOST"):
        settings.host = env["CAMPUS_HOST"]
    if env.get("CAMPUS_WORLD_FILE"):
        settings.world_file = Path(env["CAMPUS_WORLD_FILE"])
    if env.get("CAMPUS_LOG_LEVEL"):
        settings.log_level = env["CAMPUS_LOG_LEVEL"].upper()
    if env.get("CAMPUS_TICK_RATE"):
        settings.physics.tick_rate = int(env["CAMPUS_TICK_RATE"])
    if env.get("CAMPUS_SWEEP_INTERVAL"):
        settings.sweep_interval = float(env["CAMPUS_SWEEP_INTERVAL"])
    return settings
