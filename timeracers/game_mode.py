"""Time Racers - pygame front end.

Features:
- Arrow keys or WASD to move, P to pause, R to restart
- Fixed-timestep simulation through FrameDriver
- Level presets (campus, hallway, lecture_hall)
- Skins render from session snapshots and play sounds from event hooks
"""

import random
from pathlib import Path
from typing import Dict, Iterable, Optional, Set, Union

import pygame

from timeracers.animation import AnimationLibrary, default_animation_library, load_animation_library
from timeracers.config import (
    BACKGROUND_COLOR,
    DEFAULT_LEVEL,
    LEVEL_PRESETS,
    MAX_CATCHUP_STEPS,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TARGET_FPS,
    SessionConfig,
    get_level_preset,
)
from timeracers.driver import FrameDriver
from timeracers.entities import Direction
from timeracers.events import EventHooks
from timeracers.game_state import GameState
from timeracers.logging import get_logger
from timeracers.session import GameSession
from timeracers.skins import GeometricSkin, TimeRacersSkin

log = get_logger('game_mode')


KEY_DIRECTIONS: Dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_s: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d: Direction.RIGHT,
}


def directions_from_keys(held_keys: Iterable[int]) -> Set[Direction]:
    """Map held pygame key codes to directions (unmapped keys are ignored)."""
    return {KEY_DIRECTIONS[k] for k in held_keys if k in KEY_DIRECTIONS}


class TimeRacersMode:
    """Time Racers game mode.

    Owns one GameSession and the FrameDriver that ticks it. Input arrives
    as pygame events, time as wall-clock milliseconds from update().
    """

    # Game metadata
    NAME = "Time Racers"
    DESCRIPTION = "Cross the campus before the clock runs out. Every chat costs time."
    VERSION = "1.0.0"

    # CLI arguments
    ARGUMENTS = [
        {
            'name': '--level',
            'type': str,
            'default': DEFAULT_LEVEL,
            'choices': sorted(LEVEL_PRESETS),
            'help': 'Level preset'
        },
        {
            'name': '--fps',
            'type': int,
            'default': TARGET_FPS,
            'help': 'Simulation ticks per second'
        },
        {
            'name': '--seed',
            'type': int,
            'default': None,
            'help': 'Random seed for spawns and wandering'
        },
        {
            'name': '--animations',
            'type': str,
            'default': None,
            'help': 'Animation config file (YAML or JSON)'
        },
    ]

    # Skin registry
    SKINS: Dict[str, type] = {
        'geometric': GeometricSkin,
    }

    def __init__(
        self,
        level: str = DEFAULT_LEVEL,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
        fps: int = TARGET_FPS,
        seed: Optional[int] = None,
        animations: Optional[Union[str, Path, AnimationLibrary]] = None,
        skin: str = 'geometric',
        sound_dir: Optional[Union[str, Path]] = None,
        **kwargs,
    ):
        """Initialize the game.

        Args:
            level: Level preset name (unknown names fall back to campus)
            width: Arena width
            height: Arena height
            fps: Simulation ticks per second
            seed: Random seed, None for a random run
            animations: Library, or path to an animation config file
            skin: Visual skin to use
            sound_dir: Folder of <sound_key>.wav files, None for silence
            **kwargs: SessionConfig overrides

        Raises:
            ConfigurationError: If the animation config or overrides are invalid
        """
        self._preset = get_level_preset(level)
        self._width = width
        self._height = height

        if isinstance(animations, AnimationLibrary):
            library = animations
        elif animations is not None:
            library = load_animation_library(animations)
        else:
            library = default_animation_library()

        self.hooks = EventHooks()
        self.session = GameSession(
            config=SessionConfig.from_level(self._preset, **kwargs),
            animations=library,
            hooks=self.hooks,
            rng=random.Random(seed),
        )
        self.session.init(width, height)
        self.driver = FrameDriver(self.session, target_fps=fps, max_catchup_steps=MAX_CATCHUP_STEPS)
        self.driver.start()

        skin_class = self.SKINS.get(skin, GeometricSkin)
        self._skin: TimeRacersSkin = skin_class(sound_dir=sound_dir)
        self._skin.attach(self.hooks)

        self._held_keys: Set[int] = set()
        log.info("Level '%s' started (%dx%d @ %d fps, seed=%s)",
                 self._preset.name, width, height, fps, seed)

    @property
    def level_name(self) -> str:
        return self._preset.name

    @property
    def state(self) -> GameState:
        return self.session.state

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def handle_event(self, event: pygame.event.Event) -> None:
        """Route one pygame event."""
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_p:
                self.toggle_pause()
            elif event.key == pygame.K_r and self.session.is_game_over():
                self.reset()
            else:
                self._held_keys.add(event.key)
        elif event.type == pygame.KEYUP:
            self._held_keys.discard(event.key)
        elif event.type == pygame.WINDOWFOCUSLOST:
            self._held_keys.clear()
        else:
            return
        self.session.set_directional_input(directions_from_keys(self._held_keys))

    def toggle_pause(self) -> None:
        if self.session.state == GameState.PAUSED:
            self.session.resume()
        else:
            self.session.pause()

    # -------------------------------------------------------------------------
    # Update / render
    # -------------------------------------------------------------------------

    def update(self, elapsed_ms: float) -> int:
        """Feed wall-clock time to the driver. Returns ticks run."""
        return self.driver.advance(elapsed_ms)

    def render(self, screen: pygame.Surface) -> None:
        """Render the game.

        Args:
            screen: Pygame surface to draw on
        """
        screen.fill(BACKGROUND_COLOR)
        snapshot = self.session.snapshot()
        self._skin.render(screen, snapshot, self._preset.name)

        if snapshot.state == GameState.GAME_OVER:
            self._render_overlay(screen, "TIME'S UP", "Press R to restart", (200, 40, 40))
        elif snapshot.state == GameState.PAUSED:
            self._render_overlay(screen, "PAUSED", "Press P to resume", (40, 40, 40))

    def _render_overlay(self, screen: pygame.Surface, title: str, hint: str, color) -> None:
        font = pygame.font.Font(None, 72)
        text = font.render(title, True, color)
        rect = text.get_rect(center=(self._width // 2, self._height // 2))
        screen.blit(text, rect)

        font_small = pygame.font.Font(None, 36)
        hint_text = font_small.render(hint, True, (30, 30, 30))
        hint_rect = hint_text.get_rect(center=(self._width // 2, self._height // 2 + 50))
        screen.blit(hint_text, hint_rect)

    def reset(self) -> None:
        """Reset game to initial state."""
        self.session.reset()
        self.session.set_directional_input(directions_from_keys(self._held_keys))
        self.driver.start()

    def close(self) -> None:
        """Stop the driver (and session) and release the skin's hooks."""
        self.driver.stop()
        self._skin.detach()
