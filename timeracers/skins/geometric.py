"""Geometric skin - coloured boxes in place of sprite sheets."""

from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import pygame

from timeracers.config import POPUP_DURATION_MS
from timeracers.entities import Archetype
from timeracers.logging import get_logger
from timeracers.session import EntitySnapshot, PopupSnapshot, SessionSnapshot

from .base import TimeRacersSkin

log = get_logger('skin')


class GeometricSkin(TimeRacersSkin):
    """Renders the game using simple shapes.

    - Player: blue box, flashing red after a penalty
    - Enemies: one colour per archetype, outlined while in contact
    - Popups: red "-Ns" text fading as it rises
    - Sounds: optional, loaded from ``<sound_dir>/<key>.wav``
    """

    NAME = "geometric"
    DESCRIPTION = "Simple shapes, no sprite sheets required"

    ENTITY_COLORS: Dict[Archetype, Tuple[int, int, int]] = {
        Archetype.PLAYER: (60, 110, 220),
        Archetype.STUDENT: (90, 180, 90),
        Archetype.LECTURER: (200, 150, 40),
        Archetype.YAPPER: (170, 60, 170),
    }
    FLASH_COLOR = (255, 60, 60)
    OUTLINE_COLOR = (255, 255, 255)
    CONTACT_OUTLINE_COLOR = (255, 60, 60)
    HUD_COLOR = (30, 30, 30)
    LOW_TIME_COLOR = (200, 30, 30)
    POPUP_COLOR = (220, 30, 30)
    LOW_TIME_SECONDS = 10
    POPUP_RISE_PX = 30

    def __init__(self, sound_dir: Optional[Union[str, Path]] = None):
        super().__init__()
        self._font: Optional[pygame.font.Font] = None
        self._small_font: Optional[pygame.font.Font] = None
        self._sound_dir = Path(sound_dir) if sound_dir else None
        self._sounds: Dict[str, Optional[pygame.mixer.Sound]] = {}

    def _ensure_font(self) -> None:
        """Ensure fonts are initialized."""
        if self._font is None:
            pygame.font.init()
            self._font = pygame.font.Font(None, 36)
            self._small_font = pygame.font.Font(None, 24)

    def render_entity(self, entity: EntitySnapshot, screen: pygame.Surface) -> None:
        """Render an entity as a filled box with a facing notch."""
        color = self.ENTITY_COLORS.get(entity.archetype, (128, 128, 128))
        if entity.hit_flash:
            color = self.FLASH_COLOR
        rect = pygame.Rect(int(entity.x), int(entity.y), entity.width, entity.height)
        pygame.draw.rect(screen, color, rect)

        outline = self.CONTACT_OUTLINE_COLOR if entity.has_collided else self.OUTLINE_COLOR
        pygame.draw.rect(screen, outline, rect, 2)

        # Facing notch: the animation key ends in the direction
        notch = {
            'up': (rect.centerx, rect.top + 4),
            'down': (rect.centerx, rect.bottom - 4),
            'left': (rect.left + 4, rect.centery),
            'right': (rect.right - 4, rect.centery),
        }.get(entity.animation_key.rsplit('_', 1)[-1])
        if notch is not None:
            pygame.draw.circle(screen, self.OUTLINE_COLOR, notch, 3)

    def render_popup(self, popup: PopupSnapshot, screen: pygame.Surface) -> None:
        self._ensure_font()
        rise = self.POPUP_RISE_PX * (1.0 - min(1.0, popup.remaining_ms / POPUP_DURATION_MS))
        text = self._small_font.render(popup.text, True, self.POPUP_COLOR)
        rect = text.get_rect(center=(int(popup.x), int(popup.y - rise)))
        screen.blit(text, rect)

    def render_hud(self, screen: pygame.Surface, snapshot: SessionSnapshot, level_name: str = "") -> None:
        """Countdown top-left, level and enemy count top-right."""
        self._ensure_font()
        seconds = snapshot.remaining_seconds
        color = self.LOW_TIME_COLOR if seconds <= self.LOW_TIME_SECONDS else self.HUD_COLOR
        minutes, secs = divmod(seconds, 60)
        screen.blit(self._font.render(f"Time: {minutes}:{secs:02d}", True, color), (10, 10))

        info = f"Enemies: {len(snapshot.enemies)}"
        if level_name:
            info = f"{level_name}  {info}"
        text = self._small_font.render(info, True, self.HUD_COLOR)
        screen.blit(text, (screen.get_width() - text.get_width() - 10, 14))

    # -------------------------------------------------------------------------
    # Audio
    # -------------------------------------------------------------------------

    def _load_sound(self, key: str) -> Optional[pygame.mixer.Sound]:
        if key in self._sounds:
            return self._sounds[key]
        sound = None
        path = self._sound_dir / f"{key}.wav"
        if path.exists():
            try:
                if not pygame.mixer.get_init():
                    pygame.mixer.init()
                sound = pygame.mixer.Sound(str(path))
            except pygame.error as e:
                log.warning("Could not load sound %s: %s", path, e)
        self._sounds[key] = sound
        return sound

    def play_penalty_sound(self, sound_key: str) -> None:
        if self._sound_dir is None or not sound_key:
            return
        sound = self._load_sound(sound_key)
        if sound is not None:
            sound.play()

    def play_game_over_sound(self) -> None:
        if self._sound_dir is None:
            return
        sound = self._load_sound('game_over')
        if sound is not None:
            sound.play()
