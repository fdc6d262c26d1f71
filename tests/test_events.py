"""Tests for the fire-and-forget event hooks."""

import pytest
from pydantic import ValidationError

from timeracers.events import EventHooks, GameEvent, GameEventType


class TestEventHooks:
    """Test subscription and delivery."""

    def test_delivers_to_subscribers_of_type(self, recorder):
        hooks = EventHooks()
        hooks.subscribe(GameEventType.PENALTY_APPLIED, recorder)
        hooks.emit(GameEvent(type=GameEventType.PENALTY_APPLIED, payload={'seconds': 10}))
        hooks.emit(GameEvent(type=GameEventType.GAME_OVER))
        assert len(recorder.events) == 1
        assert recorder.events[0].payload['seconds'] == 10

    def test_duplicate_subscription_ignored(self, recorder):
        hooks = EventHooks()
        hooks.subscribe(GameEventType.GAME_OVER, recorder)
        hooks.subscribe(GameEventType.GAME_OVER, recorder)
        assert hooks.subscriber_count(GameEventType.GAME_OVER) == 1

    def test_unsubscribe(self, recorder):
        hooks = EventHooks()
        hooks.subscribe(GameEventType.GAME_OVER, recorder)
        hooks.unsubscribe(GameEventType.GAME_OVER, recorder)
        hooks.unsubscribe(GameEventType.GAME_OVER, recorder)  # absent: no error
        hooks.emit(GameEvent(type=GameEventType.GAME_OVER))
        assert recorder.events == []

    def test_failing_subscriber_does_not_stop_others(self, recorder):
        """A subscriber exception is logged and delivery continues."""
        def broken(event):
            raise RuntimeError("speaker unplugged")

        hooks = EventHooks()
        hooks.subscribe(GameEventType.GAME_OVER, broken)
        hooks.subscribe(GameEventType.GAME_OVER, recorder)
        hooks.emit(GameEvent(type=GameEventType.GAME_OVER))
        assert len(recorder.events) == 1


class TestGameEvent:
    """Test GameEvent validation."""

    def test_negative_time_rejected(self):
        with pytest.raises(ValidationError):
            GameEvent(type=GameEventType.GAME_OVER, sim_time_ms=-1)

    def test_frozen(self):
        event = GameEvent(type=GameEventType.GAME_OVER)
        with pytest.raises(ValidationError):
            event.sim_time_ms = 5.0
