"""Movement integration and arena bounds for entities.

Convention: screen coordinates. x' = x + vx * dt and y' = y + vy * dt,
so a negative vy moves up the screen. Velocities are pixels/second and dt
is seconds, which keeps movement independent of the tick rate.
"""

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from timeracers.config import BASE_FRAME_TIME_MS
from timeracers.errors import ConfigurationError

if TYPE_CHECKING:
    from timeracers.entities.entity import Entity


@dataclass(frozen=True)
class Arena:
    """Rectangular play area anchored at (0, 0)."""
    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"Arena dimensions must be positive, got {self.width}x{self.height}")

    def max_x(self, sprite_width: float) -> float:
        """Largest x that keeps a sprite fully inside (0 if it cannot fit)."""
        return max(0.0, self.width - sprite_width)

    def max_y(self, sprite_height: float) -> float:
        """Largest y that keeps a sprite fully inside (0 if it cannot fit)."""
        return max(0.0, self.height - sprite_height)

    def contains(self, entity: 'Entity') -> bool:
        return (0 <= entity.x <= self.max_x(entity.width) and
                0 <= entity.y <= self.max_y(entity.height))


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds."""
    return lo if value < lo else hi if value > hi else value


def integrate(entity: 'Entity', dt: float, arena: Arena) -> Tuple[bool, bool]:
    """Advance an entity's position by its velocity and keep it in bounds.

    Players are clamped. Enemies are clamped and bounce: the velocity
    component on each axis that left the arena is turned back inward.
    Axes are handled independently, so a corner hit bounces both.

    Args:
        entity: Entity to move
        dt: Delta time in seconds
        arena: Play area

    Returns:
        (bounced_x, bounced_y) - which axes hit a wall
    """
    new_x = entity.x + entity.vx * dt
    new_y = entity.y + entity.vy * dt
    max_x = arena.max_x(entity.width)
    max_y = arena.max_y(entity.height)

    hit_x = new_x < 0 or new_x > max_x
    hit_y = new_y < 0 or new_y > max_y

    if entity.is_enemy:
        if new_x < 0:
            entity.vx = abs(entity.vx)
        elif new_x > max_x:
            entity.vx = -abs(entity.vx)
        if new_y < 0:
            entity.vy = abs(entity.vy)
        elif new_y > max_y:
            entity.vy = -abs(entity.vy)

    entity.set_position(clamp(new_x, 0.0, max_x), clamp(new_y, 0.0, max_y))
    return hit_x, hit_y


def clamp_to_arena(entity: 'Entity', arena: Arena) -> None:
    """Pull an entity back inside after its sprite size changed."""
    entity.set_position(
        clamp(entity.x, 0.0, arena.max_x(entity.width)),
        clamp(entity.y, 0.0, arena.max_y(entity.height)),
    )


def random_direction(rng: random.Random, speed: float) -> Tuple[float, float]:
    """Pick one of the eight compass directions, scaled by speed.

    Never returns (0, 0): the stationary draw is rejected and re-rolled.
    """
    directions = (-1, 0, 1)
    while True:
        dx = rng.choice(directions)
        dy = rng.choice(directions)
        if dx != 0 or dy != 0:
            return dx * speed, dy * speed


def maybe_change_direction(entity: 'Entity', rng: random.Random, dt: float) -> bool:
    """Randomly re-roll an enemy's direction.

    The archetype's chance is defined per 60 Hz reference frame and is
    scaled to dt so the rate does not depend on the tick rate.

    Returns:
        True if a new direction was assigned
    """
    chance_per_frame = entity.spec.direction_change_chance
    if chance_per_frame <= 0 or dt <= 0:
        return False
    frames = dt * 1000.0 / BASE_FRAME_TIME_MS
    chance = 1.0 - (1.0 - chance_per_frame) ** frames
    if rng.random() < chance:
        entity.set_velocity(*random_direction(rng, entity.spec.speed))
        return True
    return False
