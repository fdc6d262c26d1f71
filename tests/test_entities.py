"""Tests for entities, the factory and directional input."""

import math

import pytest

from timeracers.animation import AnimationLibrary
from timeracers.entities import (
    ARCHETYPES,
    ENEMY_ARCHETYPES,
    Archetype,
    Direction,
    EntityFactory,
    EntityKind,
    get_spec,
    velocity_from_directions,
)
from timeracers.errors import ConfigurationError


class TestArchetypes:
    """Test the archetype constant table."""

    def test_enemy_archetypes(self):
        assert set(ENEMY_ARCHETYPES) == {Archetype.STUDENT, Archetype.LECTURER, Archetype.YAPPER}

    def test_penalties_rank_by_variant(self):
        """Student < Lecturer < Yapper."""
        assert get_spec(Archetype.STUDENT).time_penalty == 3
        assert get_spec(Archetype.LECTURER).time_penalty == 5
        assert get_spec(Archetype.YAPPER).time_penalty == 10

    def test_enemies_slower_than_player(self):
        player_speed = get_spec(Archetype.PLAYER).speed
        for archetype in ENEMY_ARCHETYPES:
            assert get_spec(archetype).speed < player_speed

    def test_animation_keys(self):
        keys = ARCHETYPES[Archetype.PLAYER].animation_keys
        assert 'ali_walk_up' in keys
        assert 'ali_idle' in keys
        assert len(ARCHETYPES[Archetype.YAPPER].animation_keys) == 4


class TestEntityFactory:
    """Test validated construction."""

    def test_build_sets_state(self, factory):
        enemy = factory.build(archetype=Archetype.YAPPER, x=350.0, y=550.0, vx=75.0)
        assert enemy.kind == EntityKind.ENEMY
        assert enemy.is_enemy and not enemy.is_player
        assert (enemy.x, enemy.y, enemy.vx, enemy.vy) == (350.0, 550.0, 75.0, 0.0)
        assert enemy.animation_key == 'yapper_walk_down'
        assert not enemy.has_collided

    def test_ids_are_unique(self, factory):
        a = factory.build(archetype=Archetype.STUDENT, x=0.0, y=0.0)
        b = factory.build(archetype=Archetype.STUDENT, x=0.0, y=0.0)
        assert a.entity_id != b.entity_id

    def test_hitbox_matches_frame(self, factory):
        player = factory.build(archetype=Archetype.PLAYER, x=350.0, y=550.0)
        assert player.hitbox.x == 350.0
        assert player.hitbox.y == 550.0
        assert (player.hitbox.width, player.hitbox.height) == (32, 46)

    def test_missing_animation_fails_at_construction(self):
        """An unknown animation key is a construction-time error."""
        factory = EntityFactory(AnimationLibrary({}))
        with pytest.raises(ConfigurationError, match="yapper_walk_down"):
            factory.build(archetype=Archetype.YAPPER, x=0.0, y=0.0)

    def test_validate_archetypes(self):
        factory = EntityFactory(AnimationLibrary({}))
        with pytest.raises(ConfigurationError):
            factory.validate_archetypes([Archetype.PLAYER])

    @pytest.mark.parametrize('values', [
        {'archetype': 'dragon', 'x': 0.0, 'y': 0.0},
        {'archetype': Archetype.STUDENT, 'x': math.nan, 'y': 0.0},
        {'archetype': Archetype.STUDENT, 'x': 0.0, 'y': 0.0, 'vx': math.inf},
        {'archetype': Archetype.STUDENT, 'x': 0.0},
    ])
    def test_invalid_arguments(self, factory, values):
        with pytest.raises(ConfigurationError, match="Invalid entity configuration"):
            factory.build(**values)


class TestEntity:
    """Test Entity state changes."""

    def test_set_position_refreshes_hitbox(self, make_entity):
        enemy = make_entity()
        enemy.set_position(200.0, 300.0)
        assert (enemy.hitbox.x, enemy.hitbox.y) == (200.0, 300.0)

    def test_reverse_velocity(self, make_entity):
        enemy = make_entity(vx=45.0, vy=-45.0)
        enemy.reverse_velocity()
        assert (enemy.vx, enemy.vy) == (-45.0, 45.0)

    def test_set_same_animation_is_noop(self, make_entity):
        enemy = make_entity()
        animation = enemy.animation
        assert not enemy.set_animation(enemy.animation_key)
        assert enemy.animation is animation

    def test_set_unknown_animation(self, make_entity):
        enemy = make_entity()
        with pytest.raises(ConfigurationError):
            enemy.set_animation('ali_walk_down')

    def test_entities_hash_by_identity(self, make_entity):
        a = make_entity()
        b = make_entity()
        assert len({a, b, a}) == 2


class TestDirectionalInput:
    """Test velocity_from_directions."""

    def test_no_input(self):
        assert velocity_from_directions([], 240.0) == (0.0, 0.0)

    def test_single_axis(self):
        assert velocity_from_directions([Direction.UP], 240.0) == (0.0, -240.0)
        assert velocity_from_directions([Direction.RIGHT], 240.0) == (240.0, 0.0)

    def test_opposites_cancel(self):
        assert velocity_from_directions([Direction.LEFT, Direction.RIGHT], 240.0) == (0.0, 0.0)

    def test_diagonal_normalised(self):
        """Diagonal speed equals axis speed."""
        vx, vy = velocity_from_directions([Direction.DOWN, Direction.LEFT], 240.0)
        assert vx < 0 < vy
        assert math.hypot(vx, vy) == pytest.approx(240.0)
