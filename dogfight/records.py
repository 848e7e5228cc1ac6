"""
Persisted best time / streak record and the win/timeout resolver.

The record lives in a string key-value store (three keys). `PlayerRecord`
is the only place that parses or formats those strings.
"""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, replace
from datetime import date
from typing import Dict, Optional, Protocol

from .rng import day_before

logger = logging.getLogger(__name__)

KEY_BEST = "dogfight_bestTime"
KEY_STREAK = "dogfight_streak"
KEY_LAST_DONE = "dogfight_lastDone"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store, mostly for tests and training envs"""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = str(value)


class JsonFileStore:
    """Key-value store backed by a small JSON object on disk"""

    def __init__(self, path: str):
        self.path = path
        self.data: Dict[str, str] = {}
        if os.path.exists(path):
            try:
                with open(path, "r") as f:
                    loaded = json.load(f)
            except (OSError, ValueError) as exc:
                logger.warning("ignoring unreadable record file %s: %s", path, exc)
                loaded = {}
            if isinstance(loaded, dict):
                self.data = {str(k): str(v) for k, v in loaded.items() if v is not None}
            else:
                logger.warning("ignoring record file %s: not a JSON object", path)

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = str(value)
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(self.data, f, indent=2)


def _parse_best(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning("malformed best time %r, treating as absent", raw)
        return None
    if not math.isfinite(value):
        logger.warning("non-finite best time %r, treating as absent", raw)
        return None
    return value


def _parse_streak(raw: Optional[str]) -> int:
    if raw is None or raw == "":
        return 0
    try:
        value = int(raw)
    except ValueError:
        logger.warning("malformed streak %r, treating as 0", raw)
        return 0
    return max(0, value)


def _parse_day(raw: Optional[str]) -> Optional[str]:
    if not raw:
        return None
    try:
        return date.fromisoformat(raw).isoformat()
    except ValueError:
        logger.warning("malformed last-done day %r, treating as absent", raw)
        return None


def format_best(seconds: float) -> str:
    return f"{seconds:.3f}"


@dataclass(frozen=True)
class PlayerRecord:
    """Best time (s), day streak and the last day a challenge was won."""
    best_time: Optional[float] = None
    streak: int = 0
    last_done: Optional[str] = None

    @classmethod
    def load(cls, store: KeyValueStore) -> "PlayerRecord":
        """Read the record; missing or malformed values fall back to defaults."""
        return cls(
            best_time=_parse_best(store.get(KEY_BEST)),
            streak=_parse_streak(store.get(KEY_STREAK)),
            last_done=_parse_day(store.get(KEY_LAST_DONE)),
        )

    def to_strings(self) -> Dict[str, str]:
        out = {KEY_STREAK: str(self.streak)}
        if self.best_time is not None:
            out[KEY_BEST] = format_best(self.best_time)
        if self.last_done is not None:
            out[KEY_LAST_DONE] = self.last_done
        return out

    def save(self, store: KeyValueStore) -> None:
        for key, value in self.to_strings().items():
            store.set(key, value)

    @property
    def has_valid_best(self) -> bool:
        return self.best_time is not None and self.best_time > 0


@dataclass(frozen=True)
class ChallengeResult:
    """What one finished session did to the record."""
    won: bool
    elapsed: float
    day_key: str
    record: PlayerRecord
    new_best: bool = False

    @property
    def message(self) -> str:
        if self.won:
            return f"Success! Time: {self.elapsed:.2f}s • Streak: {self.record.streak}"
        return "Time up. Try again tomorrow."

    def persist(self, store: KeyValueStore) -> None:
        """Write the result; a timeout only touches the streak."""
        if self.won:
            self.record.save(store)
        else:
            store.set(KEY_STREAK, str(self.record.streak))


def next_streak(prev_streak: int, last_done: Optional[str], today: str) -> int:
    if last_done == day_before(today):
        return prev_streak + 1
    if last_done == today:
        # second win on the same day: neither extends nor breaks the streak
        return prev_streak
    return 1


def resolve_win(record: PlayerRecord, elapsed: float, time_limit: float, today: str) -> ChallengeResult:
    elapsed = min(elapsed, time_limit)
    new_best = not record.has_valid_best or elapsed < record.best_time
    updated = PlayerRecord(
        best_time=elapsed if new_best else record.best_time,
        streak=next_streak(record.streak, record.last_done, today),
        last_done=today,
    )
    logger.info("challenge %s won in %.3fs (streak %d%s)",
                today, elapsed, updated.streak, ", new best" if new_best else "")
    return ChallengeResult(won=True, elapsed=elapsed, day_key=today, record=updated, new_best=new_best)


def resolve_timeout(record: PlayerRecord, time_limit: float, today: str) -> ChallengeResult:
    logger.info("challenge %s timed out, streak reset", today)
    return ChallengeResult(
        won=False,
        elapsed=time_limit,
        day_key=today,
        record=replace(record, streak=0),
    )
