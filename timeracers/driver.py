"""
Time Racers - Frame Driver

Fixed-timestep scheduler. The front end feeds it wall-clock milliseconds
(e.g. the value pygame's Clock.tick() returns); the driver banks them
and runs the session in whole steps of 1000 / target_fps ms, so
simulation results do not depend on the render frame rate.

A slow frame is caught up with at most max_catchup_steps ticks; any
backlog beyond that is dropped rather than replayed.
"""

from timeracers.config import MAX_CATCHUP_STEPS, TARGET_FPS
from timeracers.errors import ConfigurationError
from timeracers.logging import get_logger
from timeracers.session import GameSession

log = get_logger('driver')


class FrameDriver:
    """Runs GameSession.tick() at a fixed cadence on the caller's thread."""

    def __init__(
        self,
        session: GameSession,
        target_fps: int = TARGET_FPS,
        max_catchup_steps: int = MAX_CATCHUP_STEPS,
    ):
        if target_fps <= 0:
            raise ConfigurationError(f"target_fps must be positive, got {target_fps}")
        if max_catchup_steps < 1:
            raise ConfigurationError(f"max_catchup_steps must be >= 1, got {max_catchup_steps}")
        self.session = session
        self.target_fps = target_fps
        self.max_catchup_steps = max_catchup_steps
        self._step_ms = 1000.0 / target_fps
        self._accumulator_ms = 0.0
        self._running = False
        self._ticks = 0

    @property
    def step_ms(self) -> float:
        return self._step_ms

    @property
    def running(self) -> bool:
        return self._running

    @property
    def accumulator_ms(self) -> float:
        return self._accumulator_ms

    @property
    def total_ticks(self) -> int:
        return self._ticks

    def start(self) -> None:
        self._running = True
        self._accumulator_ms = 0.0

    def stop(self) -> None:
        """Stop scheduling, then stop the session.

        The guard is cleared first so no further tick reaches a session
        that is tearing down.
        """
        self._running = False
        self._accumulator_ms = 0.0
        self.session.stop()

    def advance(self, elapsed_ms: float) -> int:
        """Bank elapsed wall-clock time and run the ticks it pays for.

        Args:
            elapsed_ms: Wall-clock time since the previous call

        Returns:
            Number of ticks run
        """
        if not self._running:
            return 0
        self._accumulator_ms += max(0.0, elapsed_ms)

        ticks = 0
        while self._accumulator_ms >= self._step_ms:
            # Guard checked per tick: game over or stop() can land mid-batch
            if not self._running or not self.session.is_running:
                self._accumulator_ms = 0.0
                break
            if ticks >= self.max_catchup_steps:
                dropped = self._accumulator_ms
                self._accumulator_ms %= self._step_ms
                log.debug("Dropped %.1f ms of backlog after %d catch-up ticks",
                          dropped - self._accumulator_ms, ticks)
                break
            self.session.tick(self._step_ms)
            self._accumulator_ms -= self._step_ms
            ticks += 1

        self._ticks += ticks
        return ticks
