from .engine import WorldEngine
from .loader import WorldConfigError, WorldLoader, build_world

__all__ = ["WorldEngine", "WorldConfigError", "WorldLoader", "build_world"]
