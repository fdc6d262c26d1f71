"""Movement integration and collision handling."""

from timeracers.physics.movement import (
    Arena,
    clamp,
    clamp_to_arena,
    integrate,
    maybe_change_direction,
    random_direction,
)
from timeracers.physics.collision import CollisionArbiter, CollisionReport, check_overlap

__all__ = [
    'Arena',
    'clamp',
    'clamp_to_arena',
    'integrate',
    'maybe_change_direction',
    'random_direction',
    'CollisionArbiter',
    'CollisionReport',
    'check_overlap',
]
