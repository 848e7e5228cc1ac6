"""
Seeded randomness and day keys for the daily challenge.

Everyone playing on the same UTC day must face the same roster, so the
generator here is Mulberry32 (bit-exact with the browser version of the
game) rather than Python's Mersenne Twister.
"""

from __future__ import annotations

import zlib
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Union

MASK32 = 0xFFFFFFFF

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply (low half of the product)."""
    return (a * b) & MASK32


class Mulberry32:
    """Mulberry32 stream of floats in [0, 1).

    Callable and iterable; every draw advances the 32-bit state.
    """

    def __init__(self, seed: int):
        self.seed = int(seed) & MASK32
        self._state = self.seed

    def next(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & MASK32
        a = self._state
        t = _imul(a ^ (a >> 15), 1 | a)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & MASK32) ^ t
        return ((t ^ (t >> 14)) & MASK32) / 4294967296.0

    __call__ = next

    def __iter__(self) -> Iterator[float]:
        return self

    def __next__(self) -> float:
        return self.next()


def day_key(when: Union[date, datetime, None] = None) -> str:
    """Format a calendar day as YYYY-MM-DD (UTC for aware datetimes)."""
    if when is None:
        when = datetime.now(timezone.utc)
    if isinstance(when, datetime):
        if when.tzinfo is not None:
            when = when.astimezone(timezone.utc)
        when = when.date()
    return when.isoformat()


def day_before(key: str) -> str:
    return (date.fromisoformat(key) - timedelta(days=1)).isoformat()


def seed_from_key(key: str) -> int:
    """FNV-1a over the key's code points, wrapped to 32 bits."""
    h = FNV_OFFSET_BASIS
    for ch in key:
        h ^= ord(ch)
        h = _imul(h, FNV_PRIME)
    return h & MASK32


def derive_seed(seed: int, tag: str) -> int:
    """Stable sub-stream seed for a named purpose.

    Never use the built-in hash() here, it is randomized per process.
    """
    crc = zlib.crc32(tag.encode("utf-8")) & MASK32
    return (int(seed) ^ crc) & MASK32
