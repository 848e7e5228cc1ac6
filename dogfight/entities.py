"""
Game entity dataclasses

Enemies are one dataclass per motion model; each carries its own tuning
parameters and moves itself with `advance`.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Sequence

PLAYER_RADIUS = 14.0
MISSILE_RADIUS = 4.0
ENEMY_RADIUS = 12.0

# Evasive enemies react to missiles inside this window (relative to the enemy)
EVADE_HALF_WIDTH = 60.0
EVADE_BELOW = 80.0
EVADE_AHEAD = 200.0

SWOOP_AMPLITUDE = 20.0
SWOOP_LURCH = 10.0


class EnemyKind(str, Enum):
    STRAIGHT = "straight"
    ZIGZAG = "zigzag"
    EVASIVE = "evasive"
    ACCELERATOR = "accelerator"
    SWOOP = "swoop"


@dataclass
class Player:
    """Player ship; only moves sideways"""
    x: float
    y: float
    radius: float = PLAYER_RADIUS
    cooldown: float = 0.0  # seconds until next shot


@dataclass
class Missile:
    """Missile projectile entity"""
    x: float
    y: float
    vy: float
    radius: float = MISSILE_RADIUS
    owner: str = "player"
    alive: bool = True


@dataclass
class Enemy:
    """Base enemy; subclasses implement `advance`"""
    x: float
    y: float
    vy: float
    radius: float = ENEMY_RADIUS
    hp: int = 1
    phase: float = 0.0
    ident: int = 0
    alive: bool = True

    kind: ClassVar[EnemyKind]

    def advance(self, dt: float, missiles: Sequence[Missile]) -> None:
        raise NotImplementedError


@dataclass
class StraightEnemy(Enemy):
    kind: ClassVar[EnemyKind] = EnemyKind.STRAIGHT

    def advance(self, dt: float, missiles: Sequence[Missile]) -> None:
        self.y += self.vy * dt


@dataclass
class ZigzagEnemy(Enemy):
    amplitude: float = 50.0
    frequency: float = 1.75

    kind: ClassVar[EnemyKind] = EnemyKind.ZIGZAG

    def advance(self, dt: float, missiles: Sequence[Missile]) -> None:
        self.phase += dt * self.frequency
        self.x += math.sin(self.phase) * self.amplitude * dt
        self.y += self.vy * dt


@dataclass
class EvasiveEnemy(Enemy):
    evade_speed: float = 130.0

    kind: ClassVar[EnemyKind] = EnemyKind.EVASIVE

    def dodge_direction(self, missiles: Sequence[Missile]) -> int:
        """Sum of +1 (missile to the left) / -1 (to the right) over threats."""
        dodge = 0
        for m in missiles:
            if not m.alive or m.owner != "player":
                continue
            if abs(m.x - self.x) < EVADE_HALF_WIDTH and self.y - EVADE_AHEAD < m.y < self.y + EVADE_BELOW:
                dodge += 1 if m.x < self.x else -1
        return dodge

    def advance(self, dt: float, missiles: Sequence[Missile]) -> None:
        self.x += self.dodge_direction(missiles) * self.evade_speed * dt
        self.y += self.vy * dt


@dataclass
class AcceleratorEnemy(Enemy):
    acceleration: float = 40.0

    kind: ClassVar[EnemyKind] = EnemyKind.ACCELERATOR

    def advance(self, dt: float, missiles: Sequence[Missile]) -> None:
        # No terminal velocity
        self.vy += self.acceleration * dt
        self.y += self.vy * dt


@dataclass
class SwoopEnemy(Enemy):
    swoop_frequency: float = 2.0

    kind: ClassVar[EnemyKind] = EnemyKind.SWOOP

    def advance(self, dt: float, missiles: Sequence[Missile]) -> None:
        self.phase += dt * self.swoop_frequency
        s = math.sin(self.phase)
        self.x += s * SWOOP_AMPLITUDE * dt * 60
        # lurch is per frame, not scaled by dt
        self.y += self.vy * dt + abs(s) * SWOOP_LURCH
