"""Pure geometry helpers for the simulation tick and melee hit tests."""

from __future__ import annotations

import math
from typing import Iterable, Tuple

from ..models import InputState, Obstacle

_DIAGONAL = 1 / math.sqrt(2)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def movement_direction(inp: InputState) -> Tuple[float, float]:
    """Unit vector from the four direction flags; (0, 0) when idle or cancelled out."""
    dx = 0.0
    dy = 0.0
    if inp.left:
        dx -= 1
    if inp.right:
        dx += 1
    if inp.up:
        dy -= 1
    if inp.down:
        dy += 1
    if dx and dy:
        return dx * _DIAGONAL, dy * _DIAGONAL
    return dx, dy


def clamp_to_bounds(
    x: float, y: float, width: float, height: float, radius: float
) -> Tuple[float, float]:
    return (
        clamp(x, radius, width - radius),
        clamp(y, radius, height - radius),
    )


def circle_overlaps_rect(x: float, y: float, radius: float, rect: Obstacle) -> bool:
    nearest_x = clamp(x, rect.x, rect.x + rect.w)
    nearest_y = clamp(y, rect.y, rect.y + rect.h)
    dx = x - nearest_x
    dy = y - nearest_y
    return dx * dx + dy * dy < radius * radius


def push_out_x(x: float, y: float, radius: float, obstacles: Iterable[Obstacle]) -> float:
    for ob in obstacles:
        if circle_overlaps_rect(x, y, radius, ob):
            left = ob.x - radius
            right = ob.x + ob.w + radius
            x = left if abs(x - left) <= abs(x - right) else right
    return x


def push_out_y(x: float, y: float, radius: float, obstacles: Iterable[Obstacle]) -> float:
    for ob in obstacles:
        if circle_overlaps_rect(x, y, radius, ob):
            top = ob.y - radius
            bottom = ob.y + ob.h + radius
            y = top if abs(y - top) <= abs(y - bottom) else bottom
    return y


def decay_knockback(
    vx: float, vy: float, friction: float, epsilon: float
) -> Tuple[float, float]:
    vx *= friction
    vy *= friction
    if math.hypot(vx, vy) < epsilon:
        return 0.0, 0.0
    return vx, vy


def angular_difference(a: float, b: float) -> float:
    """Smallest absolute difference between two angles, in [0, pi]."""
    diff = (a - b) % (2 * math.pi)
    if diff > math.pi:
        diff = 2 * math.pi - diff
    return diff
