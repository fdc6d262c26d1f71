"""Tests for facing selection and the animation state machine."""

import pytest

from timeracers.animation import (
    AnimationFrame,
    AnimationLibrary,
    AnimationStateMachine,
    AnimationTemplate,
    Facing,
    select_facing,
)
from timeracers.entities import Archetype, Direction, EntityFactory


class TestSelectFacing:
    """Test the dominance rule."""

    @pytest.mark.parametrize('vx,vy,expected', [
        (100.0, 0.0, Facing.RIGHT),
        (-100.0, 0.0, Facing.LEFT),
        (0.0, 100.0, Facing.DOWN),     # screen coordinates: +y is down
        (0.0, -100.0, Facing.UP),
        (50.0, 60.0, Facing.DOWN),
        (60.0, 60.0, Facing.RIGHT),    # tie goes horizontal
    ])
    def test_dominant_axis(self, vx, vy, expected):
        assert select_facing(vx, vy, Facing.DOWN) == expected

    def test_below_threshold_keeps_current(self):
        """Tiny velocities keep the previous facing."""
        assert select_facing(0.01, 0.01, Facing.RIGHT) == Facing.RIGHT
        assert select_facing(0.0, 0.0, Facing.UP) == Facing.UP

    def test_vertical_bias_favours_horizontal(self):
        """With bias 1.5, |vy| must beat 1.5 * |vx| to go vertical."""
        assert select_facing(50.0, 60.0, Facing.DOWN, vertical_bias=1.5) == Facing.RIGHT
        assert select_facing(50.0, 80.0, Facing.DOWN, vertical_bias=1.5) == Facing.DOWN

    def test_diagonal_above_threshold_changes_facing(self):
        """Both axes under the threshold, but |v| = 7.07 clears it."""
        assert select_facing(5.0, 5.0, Facing.UP, threshold=6.0) == Facing.RIGHT
        assert select_facing(4.0, 5.0, Facing.UP, threshold=6.0) == Facing.DOWN

    def test_magnitude_just_below_threshold_keeps_current(self):
        assert select_facing(4.0, 4.0, Facing.LEFT, threshold=6.0) == Facing.LEFT

    def test_small_horizontal_loses_bias_test(self):
        """Vertical fails the bias test, so the small horizontal axis decides."""
        assert select_facing(4.0, 5.0, Facing.LEFT, vertical_bias=1.5, threshold=4.5) == Facing.RIGHT


class TestAnimationStateMachine:
    """Test key selection and transitions."""

    def test_walking_right_then_tiny_velocity_stays_right(self, make_entity):
        """Velocity below the threshold does not flicker the animation."""
        machine = AnimationStateMachine()
        player = make_entity(Archetype.PLAYER, vx=240.0)
        player.held_directions = frozenset({Direction.RIGHT})
        machine.update(player, 16.0)
        assert player.animation_key == 'ali_walk_right'

        player.set_velocity(0.01, 0.01)
        machine.update(player, 16.0)
        assert player.animation_key == 'ali_walk_right'

    def test_player_idle_without_input(self, make_entity):
        machine = AnimationStateMachine()
        player = make_entity(Archetype.PLAYER)
        machine.update(player, 16.0)
        assert player.animation_key == 'ali_idle'

    def test_enemy_never_idles(self, make_entity):
        machine = AnimationStateMachine()
        enemy = make_entity(Archetype.STUDENT, vx=-45.0)
        machine.update(enemy, 16.0)
        assert enemy.animation_key == 'female_student_walk_left'

    def test_same_key_keeps_frame_timer(self, make_entity):
        """Re-selecting the current key does not restart playback."""
        machine = AnimationStateMachine()
        enemy = make_entity(Archetype.YAPPER, vy=75.0)
        machine.update(enemy, 10.0)
        assert enemy.animation_key == 'yapper_walk_down'
        animation = enemy.animation
        machine.update(enemy, 10.0)
        assert enemy.animation is animation
        assert animation.elapsed_ms == pytest.approx(20.0)

    def test_new_key_restarts_playback(self, make_entity):
        machine = AnimationStateMachine()
        enemy = make_entity(Archetype.YAPPER, vy=75.0)
        machine.update(enemy, 110.0)
        assert enemy.animation.current_index == 1
        enemy.set_velocity(-75.0, 0.0)
        machine.update(enemy, 1.0)
        assert enemy.animation_key == 'yapper_walk_left'
        assert enemy.animation.current_index == 0

    def test_lecturer_uses_vertical_bias(self, make_entity):
        machine = AnimationStateMachine()
        lecturer = make_entity(Archetype.LECTURER, vx=60.0, vy=70.0)
        student = make_entity(Archetype.STUDENT, vx=60.0, vy=70.0)
        machine.update(lecturer, 1.0)
        machine.update(student, 1.0)
        assert lecturer.animation_key == 'female_lecturer_walk_right'
        assert student.animation_key == 'female_student_walk_down'

    def test_reports_size_change(self):
        """update() returns True when the new frame has other dimensions."""
        def template(w, h):
            return AnimationTemplate(frames=(
                AnimationFrame(image="x#0", width=w, height=h, duration_ms=100),))

        keys = {f"female_student_walk_{f.value}": template(32, 46) for f in Facing}
        keys['female_student_walk_left'] = template(40, 40)
        enemy = EntityFactory(AnimationLibrary(keys)).build(
            archetype=Archetype.STUDENT, x=0.0, y=0.0, vx=-45.0)

        assert AnimationStateMachine().update(enemy, 1.0)
        assert (enemy.hitbox.width, enemy.hitbox.height) == (40, 40)
