"""
Time Racers Event Hooks

Fire-and-forget notifications from the simulation core to collaborators
that must not influence it (sound, HUD flashes, analytics).

Events are emitted synchronously at the end of the phase that produced
them. The core never waits on a subscriber and a failing subscriber does
not interrupt the tick.
"""

from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from timeracers.logging import get_logger

log = get_logger('events')


class GameEventType(str, Enum):
    """Kinds of events the session publishes."""
    ENEMY_SPAWNED = "enemy_spawned"
    PENALTY_APPLIED = "penalty_applied"
    GAME_OVER = "game_over"
    SESSION_RESET = "session_reset"
    SECOND_ELAPSED = "second_elapsed"


class GameEvent(BaseModel):
    """
    Immutable notification published by the session.

    Payload keys by type:
        ENEMY_SPAWNED: entity_id, archetype, x, y
        PENALTY_APPLIED: entity_id, archetype, seconds, remaining, sound_key
        GAME_OVER: remaining
        SESSION_RESET: remaining
        SECOND_ELAPSED: remaining
    """
    type: GameEventType
    sim_time_ms: float = Field(default=0.0, ge=0, description="Session time when emitted")
    payload: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


EventCallback = Callable[[GameEvent], None]


class EventHooks:
    """Subscriber registry keyed by event type."""

    def __init__(self):
        self._subscribers: Dict[GameEventType, List[EventCallback]] = defaultdict(list)

    def subscribe(self, event_type: GameEventType, callback: EventCallback) -> None:
        """Register callback for an event type (duplicates are ignored)."""
        if callback not in self._subscribers[event_type]:
            self._subscribers[event_type].append(callback)

    def unsubscribe(self, event_type: GameEventType, callback: EventCallback) -> None:
        """Remove a previously registered callback, if present."""
        if callback in self._subscribers[event_type]:
            self._subscribers[event_type].remove(callback)

    def subscriber_count(self, event_type: GameEventType) -> int:
        return len(self._subscribers[event_type])

    def emit(self, event: GameEvent) -> None:
        """Deliver event to every subscriber of its type."""
        for callback in list(self._subscribers[event.type]):
            try:
                callback(event)
            except Exception:
                log.exception("Subscriber %r failed on %s", callback, event.type.value)
