"""Immutable animation templates.

A template is an ordered, finite, restartable sequence of frames. The
image reference is an opaque string the renderer resolves; the core only
uses the frame dimensions (for hitboxes) and durations (for playback).
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnimationFrame(BaseModel):
    """One frame of an animation.

    Attributes:
        image: Image reference resolved by the renderer (e.g. "ali_walk_down.png#2")
        width: Sprite width in pixels
        height: Sprite height in pixels
        duration_ms: How long the frame is displayed
    """
    image: str = Field(..., min_length=1)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    duration_ms: float = Field(..., gt=0)

    model_config = ConfigDict(frozen=True)


class AnimationTemplate(BaseModel):
    """Ordered frames plus loop flag.

    Attributes:
        frames: At least one frame
        looping: Wrap to frame 0 after the last frame, else hold the last frame
    """
    frames: Tuple[AnimationFrame, ...]
    looping: bool = True

    model_config = ConfigDict(frozen=True)

    @field_validator('frames')
    @classmethod
    def validate_frames(cls, v: Tuple[AnimationFrame, ...]) -> Tuple[AnimationFrame, ...]:
        """Templates without frames cannot be played."""
        if not v:
            raise ValueError('Cannot create a template without any frames')
        return v

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def total_duration_ms(self) -> float:
        return sum(frame.duration_ms for frame in self.frames)
