"""Per-entity animation playback."""

from timeracers.animation.frames import AnimationFrame, AnimationTemplate


class AnimationPlayer:
    """Plays one AnimationTemplate by accumulating elapsed time.

    Playback is driven by simulation time passed to advance(), never by
    reading the wall clock, so it is independent of movement and of the
    frame rate.
    """

    def __init__(self, template: AnimationTemplate, autostart: bool = True):
        self._template = template
        self._index = 0
        self._elapsed_ms = 0.0
        self._playing = autostart

    @property
    def template(self) -> AnimationTemplate:
        return self._template

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_frame(self) -> AnimationFrame:
        return self._template.frames[self._index]

    @property
    def elapsed_ms(self) -> float:
        """Time accumulated within the current frame."""
        return self._elapsed_ms

    @property
    def is_playing(self) -> bool:
        return self._playing

    def start(self) -> None:
        self._playing = True

    def stop(self) -> None:
        self._playing = False

    def restart(self) -> None:
        """Rewind to frame 0 and play."""
        self._index = 0
        self._elapsed_ms = 0.0
        self._playing = True

    def advance(self, elapsed_ms: float) -> bool:
        """Advance playback.

        Leftover time carries into the next frame, so a long tick can step
        several frames. One-shot templates stop on their last frame.

        Args:
            elapsed_ms: Simulation time since the previous call

        Returns:
            True if the displayed frame changed
        """
        if not self._playing or elapsed_ms <= 0:
            return False

        start_index = self._index
        frames = self._template.frames
        self._elapsed_ms += elapsed_ms

        while self._playing and self._elapsed_ms >= frames[self._index].duration_ms:
            self._elapsed_ms -= frames[self._index].duration_ms
            if self._index < len(frames) - 1:
                self._index += 1
            elif self._template.looping:
                self._index = 0
            else:
                self._elapsed_ms = 0.0
                self._playing = False

        return self._index != start_index
