"""
Time Racers - Countdown

The remaining time. Two sources drain it: whole seconds of
simulation time and collision penalties. Both go through the same
deduction path, so game over is decided in one place.
"""

from typing import Callable, Optional

from timeracers.errors import ConfigurationError
from timeracers.logging import get_logger

log = get_logger('countdown')

MS_PER_SECOND = 1000.0


class Countdown:
    """Decrementing seconds counter with a one-shot game-over latch.

    The logical value may dip below zero when a penalty exceeds what is
    left; it is pinned to zero as game over latches, so the public
    ``remaining_seconds`` never reads negative and never climbs back
    without reset().
    """

    def __init__(
        self,
        start_seconds: int,
        on_game_over: Optional[Callable[[], None]] = None,
    ):
        """Initialize the countdown.

        Args:
            start_seconds: Budget at the start (and after reset)
            on_game_over: Called once when time runs out

        Raises:
            ConfigurationError: If start_seconds is not positive
        """
        if start_seconds <= 0:
            raise ConfigurationError(f"start_seconds must be positive, got {start_seconds}")
        self._start_seconds = start_seconds
        self._remaining = start_seconds
        self._accumulated_ms = 0.0
        self._game_over = False
        self._on_game_over = on_game_over

    @property
    def start_seconds(self) -> int:
        return self._start_seconds

    @property
    def remaining_seconds(self) -> int:
        """Seconds left, clamped to zero."""
        return max(0, self._remaining)

    @property
    def is_game_over(self) -> bool:
        return self._game_over

    @property
    def accumulated_ms(self) -> float:
        """Simulation time banked towards the next whole second."""
        return self._accumulated_ms

    def _deduct(self, seconds: int, reason: str) -> bool:
        if self._game_over:
            log.trace("Ignoring %s of %ds after game over", reason, seconds)
            return False
        self._remaining -= seconds
        if self._remaining <= 0:
            self._remaining = 0
            self._game_over = True
            log.info("Countdown reached zero (%s)", reason)
            if self._on_game_over is not None:
                self._on_game_over()
        return True

    def apply_penalty(self, seconds: int) -> bool:
        """Deduct a collision penalty.

        Returns:
            True if deducted, False if the game was already over
        """
        if seconds < 0:
            raise ValueError(f"Penalty must be non-negative, got {seconds}")
        return self._deduct(seconds, 'penalty')

    def tick_second(self) -> bool:
        """Deduct one real-time second."""
        return self._deduct(1, 'second')

    def advance(self, elapsed_ms: float) -> int:
        """Bank simulation time and deduct every whole second it completes.

        Args:
            elapsed_ms: Simulation time since the last call

        Returns:
            Number of seconds deducted
        """
        if self._game_over:
            return 0
        self._accumulated_ms += elapsed_ms
        deducted = 0
        while self._accumulated_ms >= MS_PER_SECOND and not self._game_over:
            self._accumulated_ms -= MS_PER_SECOND
            if self.tick_second():
                deducted += 1
        return deducted

    def reset(self, start_seconds: Optional[int] = None) -> None:
        """Restore the starting time and clear game over."""
        if start_seconds is not None:
            if start_seconds <= 0:
                raise ConfigurationError(f"start_seconds must be positive, got {start_seconds}")
            self._start_seconds = start_seconds
        self._remaining = self._start_seconds
        self._accumulated_ms = 0.0
        self._game_over = False
