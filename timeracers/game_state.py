"""Lifecycle states of a game session.

The session moves NOT_INITIALIZED -> RUNNING on init(), may toggle between
RUNNING and PAUSED, and enters GAME_OVER once the countdown reaches zero.
STOPPED is terminal until the next init(); reset() returns to RUNNING.
"""
from enum import Enum


class GameState(Enum):
    """Standard session states.

    States:
        NOT_INITIALIZED: Created but init() has not been called
        RUNNING: Ticks advance the simulation
        PAUSED: Ticks are ignored until resume()
        GAME_OVER: Countdown reached zero; only reset() leaves this state
        STOPPED: Session torn down; ticks are ignored
    """
    NOT_INITIALIZED = "not_initialized"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"
    STOPPED = "stopped"
