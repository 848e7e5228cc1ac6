"""
Daily roster generation.

The order and number of draws below fixes how the stream is consumed, so
changing it changes every day's challenge for every player.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional

from .entities import (
    AcceleratorEnemy,
    Enemy,
    EnemyKind,
    EvasiveEnemy,
    StraightEnemy,
    SwoopEnemy,
    ZigzagEnemy,
)

logger = logging.getLogger(__name__)

Draw = Callable[[], float]

MAX_ENEMIES = 7
SPAWN_MARGIN = 40
ROW_SPACING = 80

# Upper bounds of the cumulative kind table for a single uniform draw
KIND_TABLE = (
    (0.28, EnemyKind.STRAIGHT),
    (0.52, EnemyKind.ZIGZAG),
    (0.72, EnemyKind.EVASIVE),
    (0.88, EnemyKind.ACCELERATOR),
    (1.0, EnemyKind.SWOOP),
)

# (low, span) for each tuned parameter: value = low + u * span
DRIFT_RANGE = (30.0, 30.0)
ZIGZAG_AMPLITUDE = (30.0, 40.0)
ZIGZAG_FREQUENCY = (1.0, 1.5)
EVADE_SPEED = (80.0, 100.0)
ACCELERATION = (20.0, 40.0)
ACCELERATOR_SPEED = (20.0, 30.0)
SWOOP_FREQUENCY = (1.0, 2.0)
SWOOP_SPEED = (40.0, 30.0)


def _scaled(u: float, bounds) -> float:
    low, span = bounds
    return low + u * span


def pick_enemy_kind(u: float) -> EnemyKind:
    for upper, kind in KIND_TABLE:
        if u < upper:
            return kind
    return EnemyKind.SWOOP


def generate_roster(rng: Draw, width: float, drift_rng: Optional[Draw] = None) -> List[Enemy]:
    """Build the day's enemies from a seeded stream.

    Args:
        rng: zero-argument callable returning floats in [0, 1)
        width: playfield width in px
        drift_rng: separate stream for the base drift of straight, zigzag and
            evasive enemies; when None they all drift at the midpoint speed

    Returns:
        Enemies in creation order, staggered upward above the top edge.
    """
    count = math.floor(1 + rng() * MAX_ENEMIES)
    roster: List[Enemy] = []

    for i in range(count):
        x = float(SPAWN_MARGIN + math.floor(rng() * (width - 2 * SPAWN_MARGIN)))
        y = float(-SPAWN_MARGIN - i * ROW_SPACING)
        kind = pick_enemy_kind(rng())

        if kind in (EnemyKind.STRAIGHT, EnemyKind.ZIGZAG, EnemyKind.EVASIVE):
            drift = _scaled(drift_rng() if drift_rng is not None else 0.5, DRIFT_RANGE)

        if kind is EnemyKind.STRAIGHT:
            enemy: Enemy = StraightEnemy(x=x, y=y, vy=drift, ident=i)
        elif kind is EnemyKind.ZIGZAG:
            amplitude = _scaled(rng(), ZIGZAG_AMPLITUDE)
            frequency = _scaled(rng(), ZIGZAG_FREQUENCY)
            enemy = ZigzagEnemy(x=x, y=y, vy=drift, ident=i, amplitude=amplitude, frequency=frequency)
        elif kind is EnemyKind.EVASIVE:
            enemy = EvasiveEnemy(x=x, y=y, vy=drift, ident=i, evade_speed=_scaled(rng(), EVADE_SPEED))
        elif kind is EnemyKind.ACCELERATOR:
            acceleration = _scaled(rng(), ACCELERATION)
            vy = _scaled(rng(), ACCELERATOR_SPEED)
            enemy = AcceleratorEnemy(x=x, y=y, vy=vy, ident=i, acceleration=acceleration)
        else:
            swoop = _scaled(rng(), SWOOP_FREQUENCY)
            vy = _scaled(rng(), SWOOP_SPEED)
            enemy = SwoopEnemy(x=x, y=y, vy=vy, ident=i, swoop_frequency=swoop)

        roster.append(enemy)

    logger.debug("generated roster: %s", ", ".join(e.kind.value for e in roster))
    return roster
