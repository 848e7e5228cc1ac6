"""
Clock and frame scheduling.

The session never reads wall-clock time itself. A `Clock` supplies seconds and
the UTC calendar day; `FrameLoop` turns successive clock readings into frame
deltas and drives `ChallengeSession.step`.
"""

from __future__ import annotations

import time
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Callable, Optional, Protocol

if TYPE_CHECKING:
    from .session import ChallengeSession, InputState, SessionStatus


class Clock(Protocol):
    def now(self) -> float: ...

    def today(self) -> date: ...


class SystemClock:
    """Monotonic seconds + the current UTC date"""

    def now(self) -> float:
        return time.monotonic()

    def today(self) -> date:
        return datetime.now(timezone.utc).date()


class ManualClock:
    """Clock advanced by hand (fixed-step envs, tests)"""

    def __init__(self, start: float = 0.0, day: Optional[date] = None):
        self._now = float(start)
        self._day = day or datetime.now(timezone.utc).date()

    def now(self) -> float:
        return self._now

    def today(self) -> date:
        return self._day

    def advance(self, seconds: float) -> float:
        self._now += seconds
        return self._now


class FrameLoop:
    """Single-threaded tick loop around one session.

    `tick` runs one frame. `run` keeps ticking while the session is running
    and the caller's `keep_going` agrees; stopping is simply not ticking again.
    """

    def __init__(self, session: "ChallengeSession", clock: Clock):
        self.session = session
        self.clock = clock
        self._last = session.started_at
        self.frames = 0

    def tick(self, controls: "InputState") -> "SessionStatus":
        now = self.clock.now()
        delta = now - self._last
        self._last = now
        self.frames += 1
        return self.session.step(delta, now, controls)

    def run(
        self,
        controls: Callable[["ChallengeSession"], "InputState"],
        on_frame: Optional[Callable[["ChallengeSession"], None]] = None,
        keep_going: Optional[Callable[["ChallengeSession"], bool]] = None,
        wait: Optional[Callable[[], None]] = None,
    ) -> "SessionStatus":
        """Tick until the session ends.

        Args:
            controls: returns the input snapshot for the next frame
            on_frame: called after every frame (rendering)
            keep_going: caller's veto; returning False stops the loop early
            wait: called between frames (sleep, or advance a manual clock)
        """
        status = self.session.status
        while self.session.running:
            if keep_going is not None and not keep_going(self.session):
                break
            if wait is not None:
                wait()
            status = self.tick(controls(self.session))
            if on_frame is not None:
                on_frame(self.session)
        return status
