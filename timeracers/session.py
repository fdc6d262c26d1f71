"""
Time Racers - Game Session

The top-level controller of one run. It owns the live entity collection,
the countdown and the spawner, and drives one tick as a sequence of
whole-collection phases:

    input -> movement (all) -> animation (all) -> collision
          -> effect timers -> spawn -> countdown

Every phase finishes for every entity before the next phase starts, so
collision always sees post-movement positions regardless of iteration
order. All public operations take the session lock, which serialises
the frame cadence against any external one-second timer.

Usage:
    session = GameSession(SessionConfig.from_level(get_level_preset('campus')))
    session.init(800, 650)
    session.set_directional_input({Direction.LEFT})
    session.tick(16.7)
    snap = session.snapshot()
"""

import random
import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from timeracers.animation import AnimationLibrary, AnimationStateMachine, default_animation_library
from timeracers.config import COLLISION_SOUND_KEYS, SessionConfig
from timeracers.countdown import Countdown
from timeracers.entities import (
    ARCHETYPES,
    Archetype,
    Direction,
    Entity,
    EntityFactory,
    get_spec,
    velocity_from_directions,
)
from timeracers.errors import SessionStateError
from timeracers.events import EventHooks, GameEvent, GameEventType
from timeracers.game_state import GameState
from timeracers.logging import emit_record, get_logger
from timeracers.physics import (
    Arena,
    CollisionArbiter,
    clamp_to_arena,
    integrate,
    maybe_change_direction,
)
from timeracers.spawner import EnemyManager

log = get_logger('session')


# =============================================================================
# Snapshots (read-only view for renderers)
# =============================================================================

class EntitySnapshot(BaseModel):
    """What a renderer needs to draw one entity."""
    entity_id: int
    archetype: Archetype
    x: float
    y: float
    width: int
    height: int
    vx: float
    vy: float
    animation_key: str
    frame_index: int
    image: str
    has_collided: bool = False
    hit_flash: bool = False

    model_config = ConfigDict(frozen=True)


class PopupSnapshot(BaseModel):
    """A floating "-Ns" penalty label."""
    text: str
    x: float
    y: float
    remaining_ms: float

    model_config = ConfigDict(frozen=True)


class SessionSnapshot(BaseModel):
    """Immutable copy of the session state at one instant."""
    state: GameState
    remaining_seconds: int
    is_game_over: bool
    sim_time_ms: float
    arena_width: int
    arena_height: int
    player: Optional[EntitySnapshot] = None
    enemies: Tuple[EntitySnapshot, ...] = ()
    popups: Tuple[PopupSnapshot, ...] = ()

    model_config = ConfigDict(frozen=True)


@dataclass
class PenaltyPopup:
    """Live penalty label; counts down and is dropped at zero."""
    text: str
    x: float
    y: float
    remaining_ms: float


def _snapshot_entity(entity: Entity) -> EntitySnapshot:
    return EntitySnapshot(
        entity_id=entity.entity_id,
        archetype=entity.archetype,
        x=entity.x,
        y=entity.y,
        width=entity.width,
        height=entity.height,
        vx=entity.vx,
        vy=entity.vy,
        animation_key=entity.animation_key,
        frame_index=entity.animation.current_index,
        image=entity.current_image,
        has_collided=entity.has_collided,
        hit_flash=entity.hit_flash_ms > 0,
    )


# =============================================================================
# Session
# =============================================================================

class GameSession:
    """One run of the game: player, enemies, countdown and their rules."""

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        animations: Optional[AnimationLibrary] = None,
        hooks: Optional[EventHooks] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the session.

        Nothing is created until init(); the collaborators are only stored.

        Args:
            config: Session settings (defaults from the environment)
            animations: Animation lookup (the packaged library if None)
            hooks: Event hooks for sound and other listeners
            rng: Random source for spawning, wandering and sound picks
        """
        self.config = config or SessionConfig()
        self.animations = animations if animations is not None else default_animation_library()
        self.hooks = hooks or EventHooks()
        self.rng = rng or random.Random()

        self._lock = threading.RLock()
        self._state = GameState.NOT_INITIALIZED
        self._factory = EntityFactory(self.animations)
        self._arbiter = CollisionArbiter()
        self._animator = AnimationStateMachine(self.config.facing_threshold)
        self._countdown = Countdown(self.config.start_seconds, on_game_over=self._on_countdown_expired)
        self._arena: Optional[Arena] = None
        self._spawner: Optional[EnemyManager] = None

        self._player: Optional[Entity] = None
        self._enemies: List[Entity] = []
        self._popups: List[PenaltyPopup] = []
        self._held: frozenset = frozenset()
        self._sim_time_ms = 0.0
        self._game_over_announced = False

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == GameState.RUNNING

    @property
    def arena(self) -> Optional[Arena]:
        return self._arena

    @property
    def player(self) -> Optional[Entity]:
        return self._player

    @property
    def enemies(self) -> Tuple[Entity, ...]:
        """Live enemies (a copy; the session owns the collection)."""
        with self._lock:
            return tuple(self._enemies)

    @property
    def spawner(self) -> Optional[EnemyManager]:
        return self._spawner

    @property
    def sim_time_ms(self) -> float:
        return self._sim_time_ms

    def is_game_over(self) -> bool:
        with self._lock:
            return self._countdown.is_game_over

    def remaining_seconds(self) -> int:
        with self._lock:
            return self._countdown.remaining_seconds

    def snapshot(self) -> SessionSnapshot:
        """Copy everything a renderer needs."""
        with self._lock:
            return SessionSnapshot(
                state=self._state,
                remaining_seconds=self._countdown.remaining_seconds,
                is_game_over=self._countdown.is_game_over,
                sim_time_ms=self._sim_time_ms,
                arena_width=self._arena.width if self._arena else 0,
                arena_height=self._arena.height if self._arena else 0,
                player=_snapshot_entity(self._player) if self._player else None,
                enemies=tuple(_snapshot_entity(e) for e in self._enemies),
                popups=tuple(
                    PopupSnapshot(text=p.text, x=p.x, y=p.y, remaining_ms=p.remaining_ms)
                    for p in self._popups
                ),
            )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def init(self, arena_width: int, arena_height: int) -> None:
        """Create the arena and the player and start running.

        Every archetype's animations are resolved here, so a broken
        animation config fails before the first tick.

        Raises:
            ConfigurationError: Bad arena size or missing animation keys
        """
        with self._lock:
            self._factory.validate_archetypes(ARCHETYPES)
            self._arena = Arena(arena_width, arena_height)
            self._spawner = EnemyManager(
                self._factory,
                self._arena,
                max_enemy_count=self.config.max_enemy_count,
                cooldown_ms=self.config.spawn_cooldown_ms,
                band_inset=self.config.spawn_band_inset,
                safe_radius=self.config.spawn_safe_radius,
                max_attempts=self.config.spawn_max_attempts,
                rng=self.rng,
            )
            self._start_run()
            log.info("Session initialized: arena %dx%d, %ds on the clock, up to %d enemies",
                     arena_width, arena_height, self.config.start_seconds,
                     self.config.max_enemy_count)

    def reset(self) -> None:
        """Start a fresh run in the same arena.

        Raises:
            SessionStateError: Before init() or after stop()
        """
        with self._lock:
            self._require_initialized('reset')
            if self._state == GameState.STOPPED:
                raise SessionStateError("reset() after stop(); call init() again")
            self._start_run()
            log.info("Session reset")
            self._emit(GameEventType.SESSION_RESET, remaining=self._countdown.remaining_seconds)

    def pause(self) -> bool:
        """Suspend ticking. Returns True if the session was running."""
        with self._lock:
            if self._state != GameState.RUNNING:
                return False
            self._state = GameState.PAUSED
            log.debug("Paused at %.0f ms", self._sim_time_ms)
            return True

    def resume(self) -> bool:
        """Resume after pause(). Returns True if the session was paused."""
        with self._lock:
            if self._state != GameState.PAUSED:
                return False
            self._state = GameState.RUNNING
            log.debug("Resumed at %.0f ms", self._sim_time_ms)
            return True

    def stop(self) -> None:
        """Halt the session, then tear down its entities.

        Ticks arriving afterwards hit the running guard and are ignored.
        """
        with self._lock:
            if self._state == GameState.STOPPED:
                return
            self._state = GameState.STOPPED
            self._enemies.clear()
            self._popups.clear()
            self._player = None
            self._held = frozenset()
            log.info("Session stopped")

    def _start_run(self) -> None:
        self._enemies.clear()
        self._popups.clear()
        self._sim_time_ms = 0.0
        self._game_over_announced = False
        self._countdown.reset(self.config.start_seconds)
        self._spawner.reset()
        self._player = self._create_player()
        self._state = GameState.RUNNING

    def _create_player(self) -> Entity:
        spec = get_spec(Archetype.PLAYER)
        if self.config.player_spawn is not None:
            x, y = self.config.player_spawn
        else:
            frame = self.animations.get(spec.default_animation).frames[0]
            x = self._arena.width / 2 - frame.width / 2
            y = self._arena.height - 2 * frame.height
        player = self._factory.build(archetype=Archetype.PLAYER, x=x, y=y)
        player.held_directions = self._held
        clamp_to_arena(player, self._arena)
        return player

    def _require_initialized(self, operation: str) -> None:
        if self._state == GameState.NOT_INITIALIZED:
            raise SessionStateError(f"{operation}() called before init()")

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def set_directional_input(self, pressed: Iterable[Direction]) -> None:
        """Record the held directions; the player's velocity follows next tick."""
        with self._lock:
            self._held = frozenset(pressed)
            if self._player is not None:
                self._player.held_directions = self._held

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def tick(self, elapsed_ms: float) -> bool:
        """Advance the simulation by elapsed_ms.

        Returns:
            True if a tick ran, False if paused or stopped

        Raises:
            SessionStateError: Before init() or after game over
            ValueError: If elapsed_ms is negative
        """
        with self._lock:
            self._require_initialized('tick')
            if self._state == GameState.GAME_OVER:
                raise SessionStateError("tick() after game over; call reset()")
            if self._state != GameState.RUNNING:
                return False
            if elapsed_ms < 0:
                raise ValueError(f"elapsed_ms must be non-negative, got {elapsed_ms}")

            dt = elapsed_ms / 1000.0
            self._sim_time_ms += elapsed_ms
            entities = [self._player] + self._enemies

            # Input
            self._player.set_velocity(
                *velocity_from_directions(self._held, self.config.player_speed))

            # Movement
            for enemy in self._enemies:
                maybe_change_direction(enemy, self.rng, dt)
            for entity in entities:
                integrate(entity, dt, self._arena)

            # Animation
            for entity in entities:
                if self._animator.update(entity, elapsed_ms):
                    clamp_to_arena(entity, self._arena)

            # Collision
            report = self._arbiter.resolve(self._player, self._enemies, self._countdown)
            for enemy in report.penalized:
                self._on_penalty(enemy)
            self._announce_game_over()

            # Effects
            self._update_effects(elapsed_ms)

            # Spawn
            if not self._countdown.is_game_over:
                self._spawner.update(elapsed_ms, self._sim_time_ms)
                self._try_spawn()

            # Countdown
            if self.config.clock_from_ticks:
                self._deduct_seconds(self._countdown.advance(elapsed_ms))
            return True

    def _update_effects(self, elapsed_ms: float) -> None:
        if self._player.hit_flash_ms > 0:
            self._player.hit_flash_ms = max(0.0, self._player.hit_flash_ms - elapsed_ms)
        for popup in self._popups:
            popup.remaining_ms -= elapsed_ms
        self._popups = [p for p in self._popups if p.remaining_ms > 0]

    # -------------------------------------------------------------------------
    # Spawning
    # -------------------------------------------------------------------------

    def spawn_enemy(
        self,
        archetype: Optional[Archetype] = None,
        position: Optional[Tuple[float, float]] = None,
        velocity: Optional[Tuple[float, float]] = None,
    ) -> Optional[Entity]:
        """Ask the spawner for an enemy now.

        The cap and the cooldown still apply; a refusal returns None.

        Raises:
            SessionStateError: Before init(), after stop() or after game over
        """
        with self._lock:
            self._require_initialized('spawn_enemy')
            if self._state in (GameState.STOPPED, GameState.GAME_OVER):
                raise SessionStateError(f"spawn_enemy() while {self._state.value}")
            return self._try_spawn(archetype, position, velocity)

    def _try_spawn(
        self,
        archetype: Optional[Archetype] = None,
        position: Optional[Tuple[float, float]] = None,
        velocity: Optional[Tuple[float, float]] = None,
    ) -> Optional[Entity]:
        enemy = self._spawner.spawn(
            len(self._enemies),
            player=self._player,
            archetype=archetype,
            position=position,
            velocity=velocity,
            now_ms=self._sim_time_ms,
        )
        if enemy is None:
            return None
        self._enemies.append(enemy)
        self._emit(
            GameEventType.ENEMY_SPAWNED,
            entity_id=enemy.entity_id,
            archetype=enemy.archetype.value,
            x=enemy.x,
            y=enemy.y,
        )
        emit_record('session', {
            'event': 'spawn',
            'sim_time_ms': self._sim_time_ms,
            'entity_id': enemy.entity_id,
            'archetype': enemy.archetype.value,
            'live': len(self._enemies),
        })
        return enemy

    # -------------------------------------------------------------------------
    # Countdown
    # -------------------------------------------------------------------------

    def elapse_seconds(self, seconds: int = 1) -> int:
        """Drain whole seconds from an external one-second timer.

        Ignored while paused or stopped, and after game over.

        Returns:
            Seconds actually deducted
        """
        with self._lock:
            self._require_initialized('elapse_seconds')
            if self._state != GameState.RUNNING:
                return 0
            deducted = 0
            for _ in range(seconds):
                if not self._countdown.tick_second():
                    break
                deducted += 1
            self._deduct_seconds(deducted)
            return deducted

    def _deduct_seconds(self, count: int) -> None:
        for _ in range(count):
            self._emit(GameEventType.SECOND_ELAPSED, remaining=self._countdown.remaining_seconds)
        self._announce_game_over()

    def _on_penalty(self, enemy: Entity) -> None:
        penalty = enemy.spec.time_penalty
        remaining = self._countdown.remaining_seconds
        sound_key = self.rng.choice(COLLISION_SOUND_KEYS)

        self._player.hit_flash_ms = self.config.hit_flash_ms
        if self.config.popup_duration_ms > 0:
            self._popups.append(PenaltyPopup(
                text=f"-{penalty}s",
                x=self._player.center.x,
                y=self._player.y,
                remaining_ms=self.config.popup_duration_ms,
            ))

        log.info("%s hit the player: -%ds (%ds left)", enemy.archetype.value, penalty, remaining)
        self._emit(
            GameEventType.PENALTY_APPLIED,
            entity_id=enemy.entity_id,
            archetype=enemy.archetype.value,
            seconds=penalty,
            remaining=remaining,
            sound_key=sound_key,
        )
        emit_record('session', {
            'event': 'penalty',
            'sim_time_ms': self._sim_time_ms,
            'entity_id': enemy.entity_id,
            'archetype': enemy.archetype.value,
            'seconds': penalty,
            'remaining': remaining,
        })

    def _on_countdown_expired(self) -> None:
        # Called from inside Countdown; the event goes out at the end of the phase
        self._state = GameState.GAME_OVER

    def _announce_game_over(self) -> None:
        if not self._countdown.is_game_over or self._game_over_announced:
            return
        self._game_over_announced = True
        log.info("Game over at %.0f ms with %d enemies on the field",
                 self._sim_time_ms, len(self._enemies))
        self._emit(GameEventType.GAME_OVER, remaining=self._countdown.remaining_seconds)
        emit_record('session', {
            'event': 'game_over',
            'sim_time_ms': self._sim_time_ms,
            'enemies': len(self._enemies),
        })

    def _emit(self, event_type: GameEventType, **payload) -> None:
        self.hooks.emit(GameEvent(type=event_type, sim_time_ms=self._sim_time_ms, payload=payload))
