"""Per-archetype constants.

Players and enemies share one Entity type; everything that differs
between them is looked up here by archetype tag.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from timeracers.animation.facing import Facing
from timeracers.config import PLAYER_SPEED


class EntityKind(str, Enum):
    """Capability tag: who can be penalised and who penalises."""
    PLAYER = "player"
    ENEMY = "enemy"


class Archetype(str, Enum):
    """Named entity variants."""
    PLAYER = "player"
    STUDENT = "student"
    LECTURER = "lecturer"
    YAPPER = "yapper"


@dataclass(frozen=True)
class ArchetypeSpec:
    """Constants shared by every entity of one archetype.

    Attributes:
        archetype: Tag this spec belongs to
        kind: PLAYER or ENEMY
        speed: Axis speed in pixels/second
        time_penalty: Seconds deducted on contact with the player (enemies only)
        animation_prefix: Prefix of the "<prefix>_walk_<facing>" keys
        vertical_bias: Dominance factor for choosing vertical animations
        idle_animation: Key shown when the player holds no direction
        direction_change_chance: Chance per 60 Hz reference frame of
            re-rolling a random direction
    """
    archetype: Archetype
    kind: EntityKind
    speed: float
    time_penalty: int
    animation_prefix: str
    vertical_bias: float = 1.0
    idle_animation: Optional[str] = None
    direction_change_chance: float = 0.0

    def walk_animation(self, facing: Optional[Facing]) -> str:
        """Animation key for walking in a direction (down if undecided)."""
        return f"{self.animation_prefix}_walk_{(facing or Facing.DOWN).value}"

    @property
    def default_animation(self) -> str:
        return self.walk_animation(Facing.DOWN)

    @property
    def animation_keys(self) -> Tuple[str, ...]:
        """Every key an entity of this archetype may show."""
        keys = tuple(self.walk_animation(f) for f in Facing)
        if self.idle_animation:
            keys += (self.idle_animation,)
        return keys


ARCHETYPES: Dict[Archetype, ArchetypeSpec] = {
    Archetype.PLAYER: ArchetypeSpec(
        archetype=Archetype.PLAYER,
        kind=EntityKind.PLAYER,
        speed=PLAYER_SPEED,
        time_penalty=0,
        animation_prefix='ali',
        idle_animation='ali_idle',
    ),
    Archetype.STUDENT: ArchetypeSpec(
        archetype=Archetype.STUDENT,
        kind=EntityKind.ENEMY,
        speed=45.0,
        time_penalty=3,
        animation_prefix='female_student',
        direction_change_chance=0.02,
    ),
    Archetype.LECTURER: ArchetypeSpec(
        archetype=Archetype.LECTURER,
        kind=EntityKind.ENEMY,
        speed=60.0,
        time_penalty=5,
        animation_prefix='female_lecturer',
        vertical_bias=1.5,       # Lecturers drift diagonally; favour side views
        direction_change_chance=0.02,
    ),
    Archetype.YAPPER: ArchetypeSpec(
        archetype=Archetype.YAPPER,
        kind=EntityKind.ENEMY,
        speed=75.0,              # Fast, but slower than the player
        time_penalty=10,
        animation_prefix='yapper',
        direction_change_chance=0.02,
    ),
}

ENEMY_ARCHETYPES: Tuple[Archetype, ...] = tuple(
    a for a, spec in ARCHETYPES.items() if spec.kind == EntityKind.ENEMY
)


def get_spec(archetype: Archetype) -> ArchetypeSpec:
    return ARCHETYPES[archetype]
