"""
Animation lookup service and sprite-sheet configuration loader.

The library maps string keys to immutable templates. Entities resolve
every key they may use when they are constructed, so an unknown key is a
configuration error raised before gameplay, never a runtime condition.

Animation config format (YAML or JSON):

    frame_width: 32          # defaults for every sheet
    frame_height: 46
    animations:
      - sheet: ali_walk_down.png
        rows: 1
        columns: 4
        frame_time_multiplier: 8   # x BASE_FRAME_TIME_MS per frame
        looping: true

Each sheet cell (row-major) becomes one frame whose image reference is
"<sheet>#<index>". The animation key is the sheet's file stem.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from timeracers.animation.frames import AnimationFrame, AnimationTemplate
from timeracers.config import BASE_FRAME_TIME_MS
from timeracers.errors import ConfigurationError
from timeracers.logging import get_logger

log = get_logger('animation')

DEFAULT_ANIMATIONS_PATH = Path(__file__).parent / 'animations.yaml'


class AnimationLibrary:
    """Immutable key -> AnimationTemplate lookup."""

    def __init__(self, templates: Mapping[str, AnimationTemplate]):
        for key in templates:
            if not key or not key.strip():
                raise ConfigurationError("Animation keys cannot be blank")
        self._templates: Dict[str, AnimationTemplate] = dict(templates)

    def __contains__(self, key: object) -> bool:
        return key in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._templates))

    def get(self, key: str) -> AnimationTemplate:
        """Look up a template.

        Raises:
            ConfigurationError: If no template is registered under key
        """
        template = self._templates.get(key)
        if template is None:
            raise ConfigurationError(f"Unknown animation key '{key}'")
        return template

    def require(self, keys: Iterable[str]) -> Dict[str, AnimationTemplate]:
        """Resolve a set of keys at once.

        Raises:
            ConfigurationError: Listing every missing key
        """
        keys = list(keys)
        missing = sorted(k for k in keys if k not in self._templates)
        if missing:
            raise ConfigurationError(f"Unknown animation keys: {', '.join(missing)}")
        return {k: self._templates[k] for k in keys}


class SheetConfig(BaseModel):
    """One sprite-sheet entry of the animation config."""
    sheet: str = Field(..., min_length=1)
    rows: int = Field(default=1, ge=1)
    columns: int = Field(default=1, ge=1)
    frame_width: Optional[int] = Field(default=None, gt=0)
    frame_height: Optional[int] = Field(default=None, gt=0)
    frame_time_multiplier: float = Field(default=1.0, gt=0)
    looping: bool = True

    @property
    def key(self) -> str:
        return Path(self.sheet).stem


def _load_data_file(path: Path) -> Dict[str, Any]:
    """Load data from a YAML or JSON file."""
    if not path.exists():
        raise ConfigurationError(f"Animation config not found: {path}")
    try:
        with open(path, 'r') as f:
            if path.suffix == '.json':
                return json.load(f) or {}
            return yaml.safe_load(f) or {}
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Malformed animation config: {e}", source=str(path)) from e


def build_templates(data: Dict[str, Any], source: Optional[str] = None) -> Dict[str, AnimationTemplate]:
    """Turn parsed config data into templates keyed by sheet stem."""
    if not isinstance(data, dict):
        raise ConfigurationError("Animation config must be a mapping", source=source)
    default_width = data.get('frame_width')
    default_height = data.get('frame_height')
    entries: List[Any] = data.get('animations') or []
    if not entries:
        raise ConfigurationError("Animation config defines no animations", source=source)

    templates: Dict[str, AnimationTemplate] = {}
    for raw in entries:
        try:
            entry = SheetConfig(**raw)
            width = entry.frame_width or default_width
            height = entry.frame_height or default_height
            if not width or not height:
                raise ConfigurationError(
                    f"Sheet '{entry.sheet}' has no frame size", source=source)
            duration = entry.frame_time_multiplier * BASE_FRAME_TIME_MS
            frames = tuple(
                AnimationFrame(image=f"{entry.sheet}#{i}", width=width,
                               height=height, duration_ms=duration)
                for i in range(entry.rows * entry.columns)
            )
            template = AnimationTemplate(frames=frames, looping=entry.looping)
        except (ValidationError, TypeError) as e:
            raise ConfigurationError(f"Invalid animation entry {raw!r}: {e}", source=source) from e

        if entry.key in templates:
            raise ConfigurationError(f"Duplicate animation key '{entry.key}'", source=source)
        templates[entry.key] = template
        log.debug("Loaded animation <%s> with <%d> frames", entry.key, len(frames))

    return templates


def load_animation_library(path: Union[str, Path]) -> AnimationLibrary:
    """Load an AnimationLibrary from a YAML or JSON config file.

    Raises:
        ConfigurationError: If the file is missing, malformed or invalid
    """
    path = Path(path)
    templates = build_templates(_load_data_file(path), source=str(path))
    log.info("Loaded %d animations from %s", len(templates), path.name)
    return AnimationLibrary(templates)


def default_animation_library() -> AnimationLibrary:
    """Load the animations packaged with the game."""
    return load_animation_library(DEFAULT_ANIMATIONS_PATH)
