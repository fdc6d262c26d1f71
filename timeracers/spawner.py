"""
Time Racers - Enemy spawner with cooldown arbitration.

Decides when an enemy may appear and where. The spawner never holds the
live enemies: callers pass the current count in, and a successful spawn
hands the new Entity back for the session to keep.
"""
import math
import random
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from timeracers import config
from timeracers.entities import (
    ENEMY_ARCHETYPES,
    Archetype,
    Entity,
    EntityFactory,
    EntityKind,
    get_spec,
)
from timeracers.errors import ConfigurationError
from timeracers.logging import get_logger
from timeracers.physics import Arena, clamp_to_arena, random_direction

log = get_logger('spawner')


@dataclass
class SpawnCooldown:
    """Refractory period after each spawn.

    Attributes:
        duration_ms: Cooldown length
        is_on_cooldown: True while spawning is blocked
        elapsed_ms: Time accumulated since the cooldown started
        last_update_ms: Simulation time of the last advance
    """
    duration_ms: float
    is_on_cooldown: bool = False
    elapsed_ms: float = 0.0
    last_update_ms: float = 0.0

    def start(self, now_ms: float = 0.0) -> None:
        self.is_on_cooldown = True
        self.elapsed_ms = 0.0
        self.last_update_ms = now_ms

    def advance(self, elapsed_ms: float, now_ms: Optional[float] = None) -> bool:
        """Accumulate time and release the cooldown when it has run out.

        Returns:
            True if this call ended the cooldown
        """
        self.last_update_ms = now_ms if now_ms is not None else self.last_update_ms + elapsed_ms
        if not self.is_on_cooldown:
            return False
        self.elapsed_ms += elapsed_ms
        if self.elapsed_ms >= self.duration_ms:
            self.is_on_cooldown = False
            self.elapsed_ms = 0.0
            return True
        return False

    def reset(self) -> None:
        self.is_on_cooldown = False
        self.elapsed_ms = 0.0
        self.last_update_ms = 0.0


class EnemyManager:
    """Spawns enemies under a live-count cap and a cooldown."""

    def __init__(
        self,
        factory: EntityFactory,
        arena: Arena,
        max_enemy_count: int = config.MAX_ENEMY_COUNT,
        cooldown_ms: float = config.ENEMY_SPAWN_COOLDOWN_MS,
        band_inset: float = config.SPAWN_BAND_INSET,
        safe_radius: float = config.SPAWN_SAFE_RADIUS,
        max_attempts: int = config.SPAWN_MAX_ATTEMPTS,
        archetypes: Sequence[Archetype] = ENEMY_ARCHETYPES,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the spawner.

        Args:
            factory: Builds the enemies
            arena: Play area for spawn placement
            max_enemy_count: Cap on live enemies
            cooldown_ms: Refractory period after each spawn
            band_inset: Fraction of arena height kept clear at top and bottom
            safe_radius: Minimum centre distance from the player
            max_attempts: Random draws before giving up for this tick
            archetypes: Variants chosen from, uniformly
            rng: Random source (a fresh one if None)
        """
        if max_enemy_count < 0:
            raise ConfigurationError(f"max_enemy_count must be >= 0, got {max_enemy_count}")
        if not archetypes:
            raise ConfigurationError("EnemyManager needs at least one archetype")
        for archetype in archetypes:
            if get_spec(archetype).kind != EntityKind.ENEMY:
                raise ConfigurationError(f"{archetype.value} is not an enemy archetype")

        self.factory = factory
        self.arena = arena
        self.max_enemy_count = max_enemy_count
        self.band_inset = band_inset
        self.safe_radius = safe_radius
        self.max_attempts = max_attempts
        self.archetypes = tuple(archetypes)
        self.rng = rng or random.Random()
        self.cooldown = SpawnCooldown(duration_ms=cooldown_ms)

    @property
    def is_on_cooldown(self) -> bool:
        return self.cooldown.is_on_cooldown

    def can_spawn(self, live_count: int) -> bool:
        """True iff below the cap and not cooling down."""
        return live_count < self.max_enemy_count and not self.cooldown.is_on_cooldown

    def update(self, elapsed_ms: float, now_ms: Optional[float] = None) -> None:
        """Advance the cooldown timer."""
        if self.cooldown.advance(elapsed_ms, now_ms):
            log.trace("Spawn cooldown elapsed")

    def reset(self) -> None:
        """Clear the cooldown for a new session."""
        self.cooldown.reset()

    def spawn(
        self,
        live_count: int,
        player: Optional[Entity] = None,
        archetype: Optional[Archetype] = None,
        position: Optional[Tuple[float, float]] = None,
        velocity: Optional[Tuple[float, float]] = None,
        now_ms: float = 0.0,
    ) -> Optional[Entity]:
        """Create an enemy if allowed.

        Args:
            live_count: Enemies currently alive
            player: Player to keep clear of (ignored when position is given)
            archetype: Forced variant, random if None
            position: Forced top-left corner, random in the band if None
            velocity: Forced velocity, a random non-zero direction if None
            now_ms: Simulation time, recorded on the cooldown

        Returns:
            The new enemy, or None if spawning is refused this tick
        """
        if not self.can_spawn(live_count):
            return None

        archetype = archetype or self.rng.choice(self.archetypes)
        spec = get_spec(archetype)

        if position is None:
            frame = self.factory.animations.get(spec.default_animation).frames[0]
            position = self._find_spawn_point(frame.width, frame.height, player)
            if position is None:
                log.debug("No free spawn point for %s after %d attempts",
                          archetype.value, self.max_attempts)
                return None

        if velocity is None:
            velocity = random_direction(self.rng, spec.speed)

        enemy = self.factory.build(
            archetype=archetype,
            x=position[0],
            y=position[1],
            vx=velocity[0],
            vy=velocity[1],
        )
        clamp_to_arena(enemy, self.arena)
        self.cooldown.start(now_ms)
        log.debug("Spawned %s (%d/%d live)", enemy, live_count + 1, self.max_enemy_count)
        return enemy

    def _spawn_band(self, sprite_height: float) -> Tuple[float, float]:
        """Vertical range for the top edge of a new enemy."""
        top = self.arena.height * self.band_inset
        bottom = self.arena.height * (1.0 - self.band_inset) - sprite_height
        if bottom < top:
            return 0.0, self.arena.max_y(sprite_height)
        return top, bottom

    def _find_spawn_point(
        self,
        sprite_width: float,
        sprite_height: float,
        player: Optional[Entity],
    ) -> Optional[Tuple[float, float]]:
        """Draw random points in the band until one clears the player."""
        top, bottom = self._spawn_band(sprite_height)
        max_x = self.arena.max_x(sprite_width)
        for _ in range(self.max_attempts):
            x = self.rng.uniform(0.0, max_x)
            y = self.rng.uniform(top, bottom)
            if player is None:
                return x, y
            cx = x + sprite_width / 2
            cy = y + sprite_height / 2
            player_center = player.center
            if math.hypot(cx - player_center.x, cy - player_center.y) >= self.safe_radius:
                return x, y
        return None
