"""
Utility functions for game mechanics
"""

from __future__ import annotations
import math


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def circle_collide(x1, y1, r1, x2, y2, r2, slop: float = 0.0) -> bool:
    """Check if two circles overlap (strictly closer than r1 + r2 + slop)"""
    return math.hypot(x1 - x2, y1 - y2) < r1 + r2 + slop
