"""Shared fixtures for the Time Racers test suite."""

import os
import random

import pytest

# Headless pygame for the front-end tests
os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

from timeracers import logging as tr_logging
from timeracers.animation import default_animation_library
from timeracers.config import SessionConfig
from timeracers.countdown import Countdown
from timeracers.entities import Archetype, EntityFactory
from timeracers.events import EventHooks
from timeracers.physics import Arena
from timeracers.session import GameSession


class StillRandom(random.Random):
    """Random source whose probability rolls never fire.

    random() always returns just under 1, so enemies never re-roll their
    direction. choice() keeps drawing from the seeded bit stream.
    """

    getrandbits = random.Random.getrandbits

    def random(self):
        return 0.999999


class EventRecorder:
    """Collects events delivered through EventHooks."""

    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    def of_type(self, event_type):
        return [e for e in self.events if e.type == event_type]


@pytest.fixture(autouse=True)
def restore_logging_config():
    """Keep logging configuration changes local to each test."""
    saved = {
        'default_level': tr_logging._config['default_level'],
        'module_levels': dict(tr_logging._config['module_levels']),
        'log_dir': tr_logging._config['log_dir'],
        'modules': {k: dict(v) for k, v in tr_logging._config['modules'].items()},
    }
    yield
    tr_logging._config.update(saved)
    tr_logging.close_all_sinks()


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def still_rng():
    """Random source that never re-rolls enemy directions."""
    return StillRandom(1234)


@pytest.fixture(scope='session')
def animations():
    """The packaged animation library."""
    return default_animation_library()


@pytest.fixture
def factory(animations):
    return EntityFactory(animations)


@pytest.fixture
def arena():
    return Arena(800, 650)


@pytest.fixture
def countdown():
    return Countdown(60)


@pytest.fixture
def make_entity(factory):
    """Build an entity: make_entity(Archetype.YAPPER, x, y, vx, vy)."""
    def _make(archetype=Archetype.STUDENT, x=100.0, y=100.0, vx=0.0, vy=0.0):
        return factory.build(archetype=archetype, x=x, y=y, vx=vx, vy=vy)
    return _make


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def make_session(animations, still_rng):
    """Build an initialised 800x650 session: make_session(**config_overrides)."""
    def _make(rng=None, hooks=None, width=800, height=650, **overrides):
        session = GameSession(
            config=SessionConfig.create(**overrides),
            animations=animations,
            hooks=hooks or EventHooks(),
            rng=rng or still_rng,
        )
        session.init(width, height)
        return session
    return _make


@pytest.fixture
def session(make_session):
    """Initialised session without automatic spawns."""
    return make_session(start_seconds=60, max_enemy_count=0)
