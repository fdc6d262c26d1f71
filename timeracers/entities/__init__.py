"""Entities, archetype constants and directional input."""

from timeracers.entities.archetypes import (
    ARCHETYPES,
    ENEMY_ARCHETYPES,
    Archetype,
    ArchetypeSpec,
    EntityKind,
    get_spec,
)
from timeracers.entities.entity import Entity, EntityConfig, EntityFactory
from timeracers.entities.input import Direction, velocity_from_directions

__all__ = [
    'ARCHETYPES',
    'ENEMY_ARCHETYPES',
    'Archetype',
    'ArchetypeSpec',
    'EntityKind',
    'get_spec',
    'Entity',
    'EntityConfig',
    'EntityFactory',
    'Direction',
    'velocity_from_directions',
]
