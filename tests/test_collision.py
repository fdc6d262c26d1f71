"""
Collision Tests

Player x Enemy penalties (at most once per continuous contact) and
Enemy x Enemy deflection.
"""

from timeracers.countdown import Countdown
from timeracers.entities import Archetype
from timeracers.physics import CollisionArbiter, check_overlap


class TestCheckOverlap:
    """Test hitbox overlap between entities."""

    def test_overlapping(self, make_entity):
        assert check_overlap(make_entity(x=100.0, y=100.0), make_entity(x=120.0, y=130.0))

    def test_touching_is_not_overlap(self, make_entity):
        assert not check_overlap(make_entity(x=100.0, y=100.0), make_entity(x=132.0, y=100.0))


class TestPlayerEnemy:
    """Test the penalty policy."""

    def test_penalty_applied_once_while_overlapping(self, make_entity, countdown):
        """N ticks of continuous overlap cost the penalty once."""
        arbiter = CollisionArbiter()
        player = make_entity(Archetype.PLAYER, x=350.0, y=550.0)
        yapper = make_entity(Archetype.YAPPER, x=350.0, y=550.0)

        first = arbiter.resolve(player, [yapper], countdown)
        assert first.penalized == [yapper]
        assert first.penalty_seconds == 10
        for _ in range(30):
            report = arbiter.resolve(player, [yapper], countdown)
            assert report.penalized == []
            assert report.player_contacts == [yapper]

        assert countdown.remaining_seconds == 50
        assert yapper.has_collided

    def test_rearm_on_separation(self, make_entity, countdown):
        """Overlap, separate, overlap again: two penalties."""
        arbiter = CollisionArbiter()
        player = make_entity(Archetype.PLAYER, x=350.0, y=550.0)
        student = make_entity(Archetype.STUDENT, x=360.0, y=560.0)

        arbiter.resolve(player, [student], countdown)
        student.set_position(600.0, 100.0)
        arbiter.resolve(player, [student], countdown)
        assert not student.has_collided

        student.set_position(360.0, 560.0)
        arbiter.resolve(player, [student], countdown)
        assert countdown.remaining_seconds == 60 - 2 * 3

    def test_enemy_reversed_on_every_contact_tick(self, make_entity, countdown):
        arbiter = CollisionArbiter()
        player = make_entity(Archetype.PLAYER, x=350.0, y=550.0)
        lecturer = make_entity(Archetype.LECTURER, x=340.0, y=540.0, vx=60.0, vy=60.0)

        arbiter.resolve(player, [lecturer], countdown)
        assert (lecturer.vx, lecturer.vy) == (-60.0, -60.0)
        arbiter.resolve(player, [lecturer], countdown)
        assert (lecturer.vx, lecturer.vy) == (60.0, 60.0)

    def test_player_velocity_untouched(self, make_entity, countdown):
        arbiter = CollisionArbiter()
        player = make_entity(Archetype.PLAYER, x=350.0, y=550.0, vx=240.0)
        arbiter.resolve(player, [make_entity(x=350.0, y=550.0)], countdown)
        assert player.vx == 240.0

    def test_no_penalty_after_game_over(self, make_entity):
        countdown = Countdown(5)
        arbiter = CollisionArbiter()
        player = make_entity(Archetype.PLAYER, x=350.0, y=550.0)
        a = make_entity(Archetype.YAPPER, x=350.0, y=550.0)
        b = make_entity(Archetype.STUDENT, x=355.0, y=555.0)

        report = arbiter.resolve(player, [a, b], countdown)
        assert report.penalized == [a]
        assert countdown.is_game_over
        assert b.has_collided

    def test_no_player(self, make_entity, countdown):
        arbiter = CollisionArbiter()
        report = arbiter.resolve(None, [make_entity()], countdown)
        assert report.penalized == []
        assert countdown.remaining_seconds == 60


class TestEnemyEnemy:
    """Test enemy deflection."""

    def test_both_reverse(self, make_entity, countdown):
        arbiter = CollisionArbiter()
        a = make_entity(x=100.0, y=100.0, vx=45.0)
        b = make_entity(x=110.0, y=100.0, vx=-45.0)
        report = arbiter.resolve(None, [a, b], countdown)
        assert report.enemy_pairs == [(a, b)]
        assert (a.vx, b.vx) == (-45.0, 45.0)

    def test_reverses_every_tick_without_penalty(self, make_entity, countdown):
        arbiter = CollisionArbiter()
        a = make_entity(x=100.0, y=100.0, vx=45.0)
        b = make_entity(x=110.0, y=100.0, vx=-45.0)
        arbiter.resolve(None, [a, b], countdown)
        arbiter.resolve(None, [a, b], countdown)
        assert (a.vx, b.vx) == (45.0, -45.0)
        assert countdown.remaining_seconds == 60
        assert not a.has_collided

    def test_order_independent(self, make_entity, countdown):
        """Three mutually overlapping enemies end the same in any order."""
        def run(order):
            enemies = [make_entity(x=100.0 + i, y=100.0, vx=10.0 * (i + 1)) for i in range(3)]
            ordered = [enemies[i] for i in order]
            CollisionArbiter().resolve(None, ordered, countdown)
            return [e.vx for e in enemies]

        assert run([0, 1, 2]) == run([2, 0, 1])
