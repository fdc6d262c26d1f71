"""
Time Racers - Configuration loader with level presets.

Values come from environment variables, optionally seeded from a .env
file beside this package. Speeds are pixels/second, durations are
milliseconds unless the name says otherwise.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from timeracers.errors import ConfigurationError

# Load .env from package directory
_env_path = Path(__file__).parent / '.env'
load_dotenv(_env_path)


def _get_bool(key: str, default: bool) -> bool:
    """Get boolean from environment."""
    val = os.getenv(key, str(default)).lower()
    return val in ('true', '1', 'yes')


def _get_int(key: str, default: int) -> int:
    """Get integer from environment."""
    return int(os.getenv(key, str(default)))


def _get_float(key: str, default: float) -> float:
    """Get float from environment."""
    return float(os.getenv(key, str(default)))


# Display / arena
SCREEN_WIDTH = _get_int('SCREEN_WIDTH', 800)
SCREEN_HEIGHT = _get_int('SCREEN_HEIGHT', 650)
FULLSCREEN = _get_bool('FULLSCREEN', False)

# Simulation cadence
TARGET_FPS = _get_int('TARGET_FPS', 60)
BASE_FRAME_TIME_MS = 1000.0 / 60.0   # Reference frame for per-frame constants
MAX_CATCHUP_STEPS = _get_int('MAX_CATCHUP_STEPS', 5)

# Countdown
START_SECONDS = _get_int('START_SECONDS', 60)

# Player
PLAYER_SPEED = _get_float('PLAYER_SPEED', 240.0)

# Enemies
MAX_ENEMY_COUNT = _get_int('MAX_ENEMY_COUNT', 10)
ENEMY_SPAWN_COOLDOWN_MS = _get_int('ENEMY_SPAWN_COOLDOWN_MS', 5000)
SPAWN_BAND_INSET = _get_float('SPAWN_BAND_INSET', 0.15)     # Fraction of arena height
SPAWN_SAFE_RADIUS = _get_float('SPAWN_SAFE_RADIUS', 120.0)  # Keep-out radius around player
SPAWN_MAX_ATTEMPTS = _get_int('SPAWN_MAX_ATTEMPTS', 20)

# Animation: below this speed on both axes the facing is kept (0.1 px per 60 Hz frame)
FACING_THRESHOLD = _get_float('FACING_THRESHOLD', 6.0)

# Effects
HIT_FLASH_MS = _get_int('HIT_FLASH_MS', 500)
POPUP_DURATION_MS = _get_int('POPUP_DURATION_MS', 2000)

# Voice lines played on a penalty, one picked at random
COLLISION_SOUND_KEYS: Tuple[str, ...] = (
    "aight_later",
    "ey_ey_ey",
    "i_hadda_go",
    "i_hafta_go",
    "no_later_boi",
    "sorry_i_cah_stay",
)

# Visual
BACKGROUND_COLOR = (200, 170, 170)


@dataclass
class LevelPreset:
    """Tuning for one level of the campus run."""
    name: str
    time_limit_seconds: int    # Starting countdown
    max_enemies: int           # Maximum simultaneous enemies
    player_speed: float        # Player speed in pixels/second


LEVEL_PRESETS: Dict[str, LevelPreset] = {
    'campus': LevelPreset(
        name='campus',
        time_limit_seconds=60,
        max_enemies=5,
        player_speed=240.0,
    ),
    'hallway': LevelPreset(
        name='hallway',
        time_limit_seconds=75,
        max_enemies=8,
        player_speed=300.0,
    ),
    'lecture_hall': LevelPreset(
        name='lecture_hall',
        time_limit_seconds=60,
        max_enemies=5,
        player_speed=240.0,
    ),
}

DEFAULT_LEVEL = os.getenv('DEFAULT_LEVEL', 'campus')


def get_level_preset(name: str) -> LevelPreset:
    """Get level preset by name, with fallback to campus."""
    return LEVEL_PRESETS.get(name, LEVEL_PRESETS['campus'])


class SessionConfig(BaseModel):
    """Validated settings for one game session.

    Build with ``SessionConfig.create(...)`` or ``from_level(...)`` to get
    ConfigurationError instead of a raw pydantic ValidationError.

    Attributes:
        start_seconds: Countdown at the start of a session
        max_enemy_count: Cap on live enemies
        spawn_cooldown_ms: Refractory period after each spawn
        player_speed: Player axis speed in pixels/second
        player_spawn: Fixed player spawn point, None for the default
            (horizontally centred, two sprite heights above the bottom)
        spawn_band_inset: Fraction of arena height kept free at the top
            and bottom when spawning enemies
        spawn_safe_radius: Minimum distance between a new enemy and the player
        spawn_max_attempts: Random spawn point draws before giving up for the tick
        facing_threshold: Speed below which the facing is kept
        hit_flash_ms: Player flash duration after a penalty
        popup_duration_ms: Lifetime of "-Ns" penalty popups
        clock_from_ticks: Drain the countdown from tick time; False when an
            external one-second timer calls elapse_seconds() instead
    """
    start_seconds: int = Field(default=START_SECONDS, gt=0)
    max_enemy_count: int = Field(default=MAX_ENEMY_COUNT, ge=0)
    spawn_cooldown_ms: int = Field(default=ENEMY_SPAWN_COOLDOWN_MS, ge=0)
    player_speed: float = Field(default=PLAYER_SPEED, gt=0)
    player_spawn: Optional[Tuple[float, float]] = None
    spawn_band_inset: float = Field(default=SPAWN_BAND_INSET, ge=0, lt=0.5)
    spawn_safe_radius: float = Field(default=SPAWN_SAFE_RADIUS, ge=0)
    spawn_max_attempts: int = Field(default=SPAWN_MAX_ATTEMPTS, gt=0)
    facing_threshold: float = Field(default=FACING_THRESHOLD, ge=0)
    hit_flash_ms: int = Field(default=HIT_FLASH_MS, ge=0)
    popup_duration_ms: int = Field(default=POPUP_DURATION_MS, ge=0)
    clock_from_ticks: bool = True

    model_config = ConfigDict(frozen=True)

    @classmethod
    def create(cls, **values) -> 'SessionConfig':
        """Validate values into a SessionConfig.

        Raises:
            ConfigurationError: If any value is out of range
        """
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid session configuration: {e}") from e

    @classmethod
    def from_level(cls, preset: LevelPreset, **overrides) -> 'SessionConfig':
        """Build a session config from a level preset plus overrides."""
        values = {
            'start_seconds': preset.time_limit_seconds,
            'max_enemy_count': preset.max_enemies,
            'player_speed': preset.player_speed,
        }
        values.update(overrides)
        return cls.create(**values)
