"""Animation state machine: velocity and input -> animation key."""

from typing import TYPE_CHECKING

from timeracers.animation.facing import select_facing
from timeracers.config import FACING_THRESHOLD

if TYPE_CHECKING:
    from timeracers.entities.entity import Entity


class AnimationStateMachine:
    """Chooses each entity's animation key and advances its playback.

    Rules:
    - A player with no held direction shows its idle animation.
    - Otherwise the facing comes from select_facing() with the
      archetype's vertical bias; below the threshold the facing is kept.
    - Switching to a different key restarts playback; re-selecting the
      current key is a no-op and does not touch the frame timer.
    """

    def __init__(self, threshold: float = FACING_THRESHOLD):
        self.threshold = threshold

    def select_key(self, entity: 'Entity') -> str:
        """Compute the key the entity should show, updating its facing."""
        spec = entity.spec
        if entity.is_player and spec.idle_animation and not entity.held_directions:
            return spec.idle_animation

        entity.facing = select_facing(
            entity.vx,
            entity.vy,
            entity.facing,
            vertical_bias=spec.vertical_bias,
            threshold=self.threshold,
        )
        return spec.walk_animation(entity.facing)

    def update(self, entity: 'Entity', elapsed_ms: float) -> bool:
        """Apply the transition rule then advance playback.

        Returns:
            True if the sprite dimensions changed (hitbox must be re-clamped)
        """
        before = (entity.width, entity.height)
        entity.set_animation(self.select_key(entity))
        if entity.animation.advance(elapsed_ms):
            entity.refresh_hitbox()
        return (entity.width, entity.height) != before
