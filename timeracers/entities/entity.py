"""
Entity model and factory.

Every live object in the arena is an Entity: a flat record tagged with
its archetype. Behavioural differences come from the ArchetypeSpec table,
not from subclasses.

Invariant: ``hitbox`` always reflects the latest position and the current
animation frame's size. Every position change goes through set_position().
"""

import itertools
import math
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from models import Point2D, Rectangle
from timeracers.animation.facing import Facing
from timeracers.animation.frames import AnimationTemplate
from timeracers.animation.library import AnimationLibrary
from timeracers.animation.playback import AnimationPlayer
from timeracers.entities.archetypes import Archetype, ArchetypeSpec, EntityKind, get_spec
from timeracers.entities.input import Direction
from timeracers.errors import ConfigurationError


@dataclass(eq=False)
class Entity:
    """Mutable state of one player or enemy.

    Entities compare and hash by identity so they can live in sets.

    Attributes:
        entity_id: Unique id within a session
        spec: Archetype constants
        templates: Every animation this entity may show, resolved at construction
        x, y: Top-left corner in arena pixels
        vx, vy: Velocity in pixels/second (screen coordinates)
        facing: Last decided walking direction
        has_collided: Set while in continuous contact with the player
        held_directions: Directions the input layer reports (player only)
        hit_flash_ms: Remaining player hit-flash time
    """
    entity_id: int
    spec: ArchetypeSpec
    templates: Dict[str, AnimationTemplate] = field(repr=False)
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    facing: Optional[Facing] = Facing.DOWN
    has_collided: bool = False
    held_directions: FrozenSet[Direction] = frozenset()
    hit_flash_ms: float = 0.0
    animation_key: str = field(init=False, default='')
    animation: AnimationPlayer = field(init=False)
    hitbox: Rectangle = field(init=False)

    def __post_init__(self):
        self.set_animation(self.spec.default_animation)

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    @property
    def archetype(self) -> Archetype:
        return self.spec.archetype

    @property
    def kind(self) -> EntityKind:
        return self.spec.kind

    @property
    def is_player(self) -> bool:
        return self.spec.kind == EntityKind.PLAYER

    @property
    def is_enemy(self) -> bool:
        return self.spec.kind == EntityKind.ENEMY

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    @property
    def width(self) -> int:
        """Current sprite width."""
        return self.animation.current_frame.width

    @property
    def height(self) -> int:
        """Current sprite height."""
        return self.animation.current_frame.height

    @property
    def position(self) -> Point2D:
        return Point2D(x=self.x, y=self.y)

    @property
    def center(self) -> Point2D:
        return Point2D(x=self.x + self.width / 2, y=self.y + self.height / 2)

    def set_position(self, x: float, y: float) -> None:
        """Move the entity and recompute its hitbox."""
        self.x = x
        self.y = y
        self.refresh_hitbox()

    def refresh_hitbox(self) -> None:
        self.hitbox = Rectangle(x=self.x, y=self.y, width=self.width, height=self.height)

    # -------------------------------------------------------------------------
    # Velocity
    # -------------------------------------------------------------------------

    def set_velocity(self, vx: float, vy: float) -> None:
        self.vx = vx
        self.vy = vy

    def reverse_velocity(self) -> None:
        """Bounce straight back along the current heading."""
        self.vx = -self.vx
        self.vy = -self.vy

    # -------------------------------------------------------------------------
    # Animation
    # -------------------------------------------------------------------------

    @property
    def current_image(self) -> str:
        return self.animation.current_frame.image

    def set_animation(self, key: str) -> bool:
        """Switch to another animation.

        Re-selecting the current key is a no-op and keeps the frame timer.

        Returns:
            True if the animation changed

        Raises:
            ConfigurationError: If key is not one of this entity's animations
        """
        if key == self.animation_key:
            return False
        template = self.templates.get(key)
        if template is None:
            raise ConfigurationError(
                f"Animation key '{key}' is not available to {self.archetype.value}")
        self.animation = AnimationPlayer(template)
        self.animation_key = key
        self.refresh_hitbox()
        return True

    def __str__(self) -> str:
        return (f"Entity({self.entity_id}, {self.archetype.value}, "
                f"pos=({self.x:.1f}, {self.y:.1f}), vel=({self.vx:.1f}, {self.vy:.1f}))")


class EntityConfig(BaseModel):
    """Validated construction arguments for one entity."""
    archetype: Archetype
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0

    model_config = ConfigDict(frozen=True)

    @field_validator('x', 'y', 'vx', 'vy')
    @classmethod
    def validate_finite(cls, v: float) -> float:
        """Reject NaN and infinities."""
        if not math.isfinite(v):
            raise ValueError(f'Coordinates must be finite, got {v}')
        return v


class EntityFactory:
    """Builds entities against one AnimationLibrary.

    All validation happens here, once; a returned Entity is always fully
    usable.
    """

    def __init__(self, animations: AnimationLibrary):
        self._animations = animations
        self._ids = itertools.count(1)

    @property
    def animations(self) -> AnimationLibrary:
        return self._animations

    def validate_archetypes(self, archetypes: Iterable[Archetype]) -> None:
        """Check every archetype's animations exist.

        Raises:
            ConfigurationError: On the first archetype with missing keys
        """
        for archetype in archetypes:
            self._animations.require(get_spec(archetype).animation_keys)

    def create(self, config: EntityConfig) -> Entity:
        """Instantiate an entity from a validated config.

        Raises:
            ConfigurationError: If an animation key for the archetype is unknown
        """
        spec = get_spec(config.archetype)
        templates = self._animations.require(spec.animation_keys)
        return Entity(
            entity_id=next(self._ids),
            spec=spec,
            templates=templates,
            x=config.x,
            y=config.y,
            vx=config.vx,
            vy=config.vy,
        )

    def build(self, **values) -> Entity:
        """Validate keyword arguments into an EntityConfig and create.

        Raises:
            ConfigurationError: If the arguments fail validation
        """
        try:
            config = EntityConfig(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid entity configuration: {e}") from e
        return self.create(config)
