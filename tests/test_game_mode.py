"""Tests for the pygame front end (headless)."""

import pygame
import pytest

from timeracers.entities import Direction
from timeracers.errors import ConfigurationError
from timeracers.game_mode import TimeRacersMode, directions_from_keys
from timeracers.game_state import GameState
from timeracers.main import build_parser


@pytest.fixture
def game(animations):
    pygame.init()
    mode = TimeRacersMode(level='campus', seed=3, animations=animations)
    yield mode
    mode.close()
    pygame.quit()


def key_event(event_type, key):
    return pygame.event.Event(event_type, key=key)


class TestKeyMapping:
    """Test key code -> direction mapping."""

    def test_arrows_and_wasd(self):
        assert directions_from_keys([pygame.K_LEFT, pygame.K_w]) == {Direction.LEFT, Direction.UP}
        assert directions_from_keys([pygame.K_d, pygame.K_DOWN]) == {Direction.RIGHT, Direction.DOWN}

    def test_unmapped_keys_ignored(self):
        assert directions_from_keys([pygame.K_SPACE, pygame.K_q]) == set()


class TestTimeRacersMode:
    """Test the game mode wiring."""

    def test_level_preset_applied(self, game):
        assert game.level_name == 'campus'
        assert game.session.config.max_enemy_count == 5
        assert game.state == GameState.RUNNING

    def test_held_keys_drive_player(self, game):
        game.handle_event(key_event(pygame.KEYDOWN, pygame.K_LEFT))
        assert game.session.player.held_directions == frozenset({Direction.LEFT})
        game.handle_event(key_event(pygame.KEYUP, pygame.K_LEFT))
        assert game.session.player.held_directions == frozenset()

    def test_pause_toggle(self, game):
        game.handle_event(key_event(pygame.KEYDOWN, pygame.K_p))
        assert game.state == GameState.PAUSED
        assert game.update(100.0) == 0
        game.handle_event(key_event(pygame.KEYDOWN, pygame.K_p))
        assert game.state == GameState.RUNNING

    def test_restart_only_after_game_over(self, game):
        game.update(100.0)
        game.handle_event(key_event(pygame.KEYDOWN, pygame.K_r))
        assert game.session.sim_time_ms > 0

        game.session.elapse_seconds(60)
        assert game.state == GameState.GAME_OVER
        game.handle_event(key_event(pygame.KEYDOWN, pygame.K_r))
        assert game.state == GameState.RUNNING
        assert game.session.remaining_seconds() == 60

    def test_render_headless(self, game):
        screen = pygame.Surface((800, 650))
        game.update(500.0)
        game.render(screen)
        game.session.pause()
        game.render(screen)

    def test_bad_animation_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            TimeRacersMode(animations=tmp_path / "missing.yaml")


class TestCli:
    """Test argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.width == 800
        assert args.height == 650
        assert args.seed is None

    def test_options(self):
        args = build_parser().parse_args(['--level', 'hallway', '--seed', '42', '--log-level', 'DEBUG'])
        assert args.level == 'hallway'
        assert args.seed == 42
        assert args.log_level == 'DEBUG'
