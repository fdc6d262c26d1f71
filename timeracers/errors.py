"""Exception types raised by the simulation core.

Steady-state refusals (spawn cooldown active, enemy cap reached, no
overlap found) are ordinary return values and never raise.
"""

from typing import Optional


class TimeRacersError(Exception):
    """Base class for all Time Racers errors."""
    pass


class ConfigurationError(TimeRacersError):
    """Raised when configuration is invalid or references unknown data.

    Examples: an unknown animation key, a malformed animation file, or a
    configuration struct that fails validation.
    """

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{message} (in {source})"
        super().__init__(message)


class SessionStateError(TimeRacersError):
    """Raised when a session operation is called in the wrong state."""
    pass
