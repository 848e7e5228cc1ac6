"""
ChallengeSession - one attempt at a daily dogfight
--------------------------------------------------
- Roster is generated from the day's seed at construction
- `step(delta, now, controls)` advances one frame: player, missiles, enemies,
  collisions, escapes, then win / timeout detection
- The first terminal condition resolves the persisted record exactly once

Nothing here touches wall-clock time, input devices or drawing; those are
supplied by a `Clock`, an `InputState` snapshot and a `FrameSnapshot` reader.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .challenge import generate_roster
from .entities import Enemy, Missile, Player
from .errors import DogfightError, OutcomeAlreadyResolved
from .records import ChallengeResult, KeyValueStore, PlayerRecord, resolve_timeout, resolve_win
from .rng import MASK32, Mulberry32, day_key as format_day_key, derive_seed, seed_from_key
from .utils import circle_collide, clamp

logger = logging.getLogger(__name__)

MAX_FRAME_DT = 0.05  # s; bounds integration error after a stall

PLAYER_SPEED = 200.0  # px/s lateral
PLAYER_EDGE_OFFSET = 10.0  # added to the radius for the side clamp
PLAYER_FLOOR_OFFSET = 120.0

MISSILE_SPEED = -380.0  # px/s, upward
MISSILE_NOSE_OFFSET = 20.0
FIRE_COOLDOWN = 0.5  # s
MISSILE_MARGIN = 20.0

ENEMY_EDGE_MARGIN = 20.0
ESCAPE_MARGIN = 40.0
HIT_SLOP = 2.0

DEFAULT_WIDTH = 480
DEFAULT_HEIGHT = 864
DEFAULT_TIME_LIMIT = 20.0


class SessionStatus(str, Enum):
    RUNNING = "running"
    WON = "won"
    TIMED_OUT = "timed_out"


@dataclass
class InputState:
    """Control flags written by the input side, read once per step"""
    steer_left: bool = False
    steer_right: bool = False
    firing: bool = False


@dataclass(frozen=True)
class FrameSnapshot:
    """Read-only view handed to the renderer each frame"""
    player: Tuple[float, float, float]
    missiles: Tuple[Tuple[float, float, float], ...]
    enemies: Tuple[Tuple[str, float, float, float], ...]
    time_left: float
    enemy_count: int
    status: SessionStatus
    record: PlayerRecord
    result: Optional[ChallengeResult]


class ChallengeSession:
    """State and rules for a single attempt"""

    def __init__(
        self,
        day: Union[str, date],
        started_at: float = 0.0,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        time_limit: float = DEFAULT_TIME_LIMIT,
        store: Optional[KeyValueStore] = None,
        seed: Optional[int] = None,
    ):
        if width <= 4 * ENEMY_EDGE_MARGIN or height <= 0:
            raise ValueError(f"playfield too small: {width}x{height}")
        if time_limit <= 0:
            raise ValueError(f"time_limit must be positive, got {time_limit}")

        self.day_key = day if isinstance(day, str) else format_day_key(day)
        self.width = width
        self.height = height
        self.time_limit = float(time_limit)
        self.started_at = float(started_at)

        self.seed = seed_from_key(self.day_key) if seed is None else int(seed) & MASK32
        self.rng = Mulberry32(self.seed)
        drift = Mulberry32(derive_seed(self.seed, "drift"))
        self.enemies: List[Enemy] = generate_roster(self.rng, width, drift)
        self.roster_size = len(self.enemies)

        self.player = Player(x=width / 2, y=height - PLAYER_FLOOR_OFFSET)
        self.missiles: List[Missile] = []

        self.elapsed = 0.0
        self.running = True
        self.solved = False
        self.status = SessionStatus.RUNNING

        # Running totals + per-step events (for HUD / reward shaping)
        self.kills = 0
        self.escaped = 0
        self.shots = 0
        self.events: Dict[str, int] = {"kill": 0, "escape": 0, "shot": 0}

        self.store = store
        self.record = PlayerRecord.load(store) if store is not None else PlayerRecord()
        self.result: Optional[ChallengeResult] = None

        logger.debug("session %s seed=%d enemies=%d", self.day_key, self.seed, self.roster_size)

    @property
    def time_left(self) -> float:
        return max(0.0, self.time_limit - self.elapsed)

    # ----------------------------
    # Frame update
    # ----------------------------

    def step(self, delta: float, now: float, controls: Optional[InputState] = None) -> SessionStatus:
        """Advance one frame.

        Args:
            delta: seconds since the previous frame (clamped to [0, MAX_FRAME_DT])
            now: clock reading; elapsed time is measured from `started_at`
            controls: input flags for this frame
        """
        if not self.running:
            return self.status

        dt = clamp(delta, 0.0, MAX_FRAME_DT)
        self.elapsed = max(0.0, now - self.started_at)
        self.events = {"kill": 0, "escape": 0, "shot": 0}

        self._update_player(dt, controls or InputState())
        self._update_missiles(dt)
        self._update_enemies(dt)
        self._handle_collisions()
        self._remove_escaped()
        self._check_terminal()
        return self.status

    def _update_player(self, dt: float, controls: InputState):
        p = self.player
        if controls.steer_left:
            p.x -= PLAYER_SPEED * dt
        if controls.steer_right:
            p.x += PLAYER_SPEED * dt
        edge = p.radius + PLAYER_EDGE_OFFSET
        p.x = clamp(p.x, edge, self.width - edge)

        p.cooldown = max(0.0, p.cooldown - dt)
        if controls.firing and p.cooldown <= 0.0:
            self._fire()

    def _fire(self):
        p = self.player
        p.cooldown = FIRE_COOLDOWN
        self.missiles.append(Missile(x=p.x, y=p.y - MISSILE_NOSE_OFFSET, vy=MISSILE_SPEED))
        self.shots += 1
        self.events["shot"] += 1

    def _update_missiles(self, dt: float):
        top = -MISSILE_MARGIN
        bottom = self.height + MISSILE_MARGIN
        for m in self.missiles:
            m.y += m.vy * dt
            if m.y < top or m.y > bottom:
                m.alive = False
        self.missiles = [m for m in self.missiles if m.alive]

    def _update_enemies(self, dt: float):
        for e in self.enemies:
            e.advance(dt, self.missiles)
            e.x = clamp(e.x, ENEMY_EDGE_MARGIN, self.width - ENEMY_EDGE_MARGIN)

    def _handle_collisions(self):
        # Enemies and missiles are scanned oldest first: an enemy takes the
        # oldest live missile in range, and a missile shared by two enemies
        # kills the older one. Both are gone after a hit.
        for e in self.enemies:
            for m in self.missiles:
                if not m.alive:
                    continue
                if circle_collide(m.x, m.y, m.radius, e.x, e.y, e.radius, HIT_SLOP):
                    e.hp -= 1
                    e.alive = False
                    m.alive = False
                    self.kills += 1
                    self.events["kill"] += 1
                    break

        self.enemies = [e for e in self.enemies if e.alive]
        self.missiles = [m for m in self.missiles if m.alive]

    def _remove_escaped(self):
        floor = self.height + ESCAPE_MARGIN
        remaining = []
        for e in self.enemies:
            if e.y > floor:
                self.escaped += 1
                self.events["escape"] += 1
            else:
                remaining.append(e)
        self.enemies = remaining

    def _check_terminal(self):
        if not self.enemies and not self.solved:
            self.solved = True
            self._finish(SessionStatus.WON)
        elif self.elapsed >= self.time_limit and not self.solved:
            self._finish(SessionStatus.TIMED_OUT)

    def _finish(self, status: SessionStatus):
        self.running = False
        self.status = status
        self.resolve()

    # ----------------------------
    # Outcome
    # ----------------------------

    def resolve(self) -> ChallengeResult:
        """Apply this session's outcome to the record (once) and persist it."""
        if self.result is not None:
            raise OutcomeAlreadyResolved(f"session {self.day_key} already resolved")
        if self.status is SessionStatus.RUNNING:
            raise DogfightError(f"session {self.day_key} is still running")

        if self.status is SessionStatus.WON:
            result = resolve_win(self.record, self.elapsed, self.time_limit, self.day_key)
        else:
            result = resolve_timeout(self.record, self.time_limit, self.day_key)

        if self.store is not None:
            result.persist(self.store)
        self.record = result.record
        self.result = result
        return result

    def snapshot(self) -> FrameSnapshot:
        p = self.player
        return FrameSnapshot(
            player=(p.x, p.y, p.radius),
            missiles=tuple((m.x, m.y, m.radius) for m in self.missiles),
            enemies=tuple((e.kind.value, e.x, e.y, e.radius) for e in self.enemies),
            time_left=self.time_left,
            enemy_count=len(self.enemies),
            status=self.status,
            record=self.record,
            result=self.result,
        )
