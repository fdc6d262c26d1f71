"""Directional input -> player velocity."""

import math
from enum import Enum
from typing import Iterable, Tuple


class Direction(str, Enum):
    """Direction codes the input layer may report as held."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


def velocity_from_directions(pressed: Iterable[Direction], speed: float) -> Tuple[float, float]:
    """Convert held directions to a velocity.

    Opposite directions cancel. Diagonals are normalised so the speed
    along a diagonal equals the axis speed.

    Args:
        pressed: Currently held directions
        speed: Axis speed in pixels/second

    Returns:
        (vx, vy) in screen coordinates (positive y = down)
    """
    held = set(pressed)
    dx = (Direction.RIGHT in held) - (Direction.LEFT in held)
    dy = (Direction.DOWN in held) - (Direction.UP in held)
    if dx == 0 and dy == 0:
        return 0.0, 0.0
    scale = speed / math.hypot(dx, dy)
    return dx * scale, dy * scale
