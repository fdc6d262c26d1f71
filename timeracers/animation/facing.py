"""Facing selection from a velocity vector."""

import math
from enum import Enum
from typing import Optional

from timeracers.config import FACING_THRESHOLD


class Facing(str, Enum):
    """Walking directions that have their own animation."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


def select_facing(
    vx: float,
    vy: float,
    current: Optional[Facing],
    vertical_bias: float = 1.0,
    threshold: float = FACING_THRESHOLD,
) -> Optional[Facing]:
    """Pick the facing for a velocity using a dominance test.

    Speeds below the threshold keep the current facing so that velocity
    jitter around zero does not flicker the animation. Above it, vertical
    wins only when |vy| exceeds |vx| * vertical_bias; a bias above 1.0
    keeps near-diagonal movement on the horizontal animation.

    Args:
        vx: Horizontal velocity (positive = right)
        vy: Vertical velocity (positive = down, screen coordinates)
        current: Facing to keep when no decision can be made
        vertical_bias: Dominance factor for the vertical axis (>= 1.0)
        threshold: Minimum speed (vector magnitude) for a change

    Returns:
        New facing, or current if the velocity is too small to decide
    """
    if math.hypot(vx, vy) < threshold:
        return current

    if abs(vy) > abs(vx) * vertical_bias:
        return Facing.UP if vy < 0 else Facing.DOWN
    return Facing.LEFT if vx < 0 else Facing.RIGHT
