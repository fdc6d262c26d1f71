"""Base class for Time Racers skins.

Skins handle ALL rendering and audio - the session only manages state.
A skin reads SessionSnapshot objects and listens to the event hooks; it
never mutates the session.
"""

from abc import ABC, abstractmethod
from typing import Optional

import pygame

from timeracers.events import EventHooks, GameEvent, GameEventType
from timeracers.session import EntitySnapshot, PopupSnapshot, SessionSnapshot


class TimeRacersSkin(ABC):
    """Base class for game skins (visuals + audio)."""

    NAME: str = "base"
    DESCRIPTION: str = "Base skin"

    def __init__(self):
        self._hooks: Optional[EventHooks] = None

    # -------------------------------------------------------------------------
    # Event hooks
    # -------------------------------------------------------------------------

    def attach(self, hooks: EventHooks) -> None:
        """Subscribe the skin's sound handlers to a session's hooks."""
        self.detach()
        hooks.subscribe(GameEventType.PENALTY_APPLIED, self._on_penalty)
        hooks.subscribe(GameEventType.GAME_OVER, self._on_game_over)
        self._hooks = hooks

    def detach(self) -> None:
        if self._hooks is None:
            return
        self._hooks.unsubscribe(GameEventType.PENALTY_APPLIED, self._on_penalty)
        self._hooks.unsubscribe(GameEventType.GAME_OVER, self._on_game_over)
        self._hooks = None

    def _on_penalty(self, event: GameEvent) -> None:
        self.play_penalty_sound(event.payload.get('sound_key', ''))

    def _on_game_over(self, event: GameEvent) -> None:
        self.play_game_over_sound()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    @abstractmethod
    def render_entity(self, entity: EntitySnapshot, screen: pygame.Surface) -> None:
        """Render one player or enemy.

        Args:
            entity: Entity to render
            screen: Pygame surface to draw on
        """
        pass

    def render_popup(self, popup: PopupSnapshot, screen: pygame.Surface) -> None:
        """Render a "-Ns" penalty popup."""
        pass

    def render_hud(self, screen: pygame.Surface, snapshot: SessionSnapshot, level_name: str = "") -> None:
        """Render the heads-up display (countdown, enemy count)."""
        pass

    def render(self, screen: pygame.Surface, snapshot: SessionSnapshot, level_name: str = "") -> None:
        """Render a whole frame from a snapshot."""
        for enemy in snapshot.enemies:
            self.render_entity(enemy, screen)
        if snapshot.player is not None:
            self.render_entity(snapshot.player, screen)
        for popup in snapshot.popups:
            self.render_popup(popup, screen)
        self.render_hud(screen, snapshot, level_name)

    # -------------------------------------------------------------------------
    # Audio
    # -------------------------------------------------------------------------

    def play_penalty_sound(self, sound_key: str) -> None:
        """Play the voice line picked for a penalty."""
        pass

    def play_game_over_sound(self) -> None:
        """Play sound when the countdown runs out."""
        pass
