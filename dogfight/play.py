"""
Play the daily challenge.

    python -m dogfight.play                       # today's wave in a window
    python -m dogfight.play --headless --autopilot --day 2025-10-02
"""

import argparse
import logging
import os
from datetime import date

from .clock import FrameLoop, ManualClock, SystemClock
from .records import JsonFileStore, PlayerRecord
from .session import DEFAULT_HEIGHT, DEFAULT_TIME_LIMIT, DEFAULT_WIDTH, ChallengeSession, InputState

DEFAULT_RECORD = os.path.join(os.path.expanduser("~"), ".dogfight_record.json")

AIM_TOLERANCE = 8.0
FIRE_TOLERANCE = 14.0


def autopilot(session: ChallengeSession) -> InputState:
    """Chase the lowest enemy on screen and fire when lined up"""
    visible = [e for e in session.enemies if e.y > 0] or session.enemies
    if not visible:
        return InputState()
    target = max(visible, key=lambda e: e.y)
    dx = target.x - session.player.x
    return InputState(
        steer_left=dx < -AIM_TOLERANCE,
        steer_right=dx > AIM_TOLERANCE,
        firing=abs(dx) < FIRE_TOLERANCE and target.y > -40,
    )


def play_headless(day: date, store, fps: int = 60, use_autopilot: bool = True, **session_kwargs):
    """Run one session on a manual clock at a fixed frame rate"""
    clock = ManualClock(day=day)
    session = ChallengeSession(day, started_at=clock.now(), store=store, **session_kwargs)
    loop = FrameLoop(session, clock)
    controls = autopilot if use_autopilot else (lambda s: InputState())
    loop.run(controls, wait=lambda: clock.advance(1.0 / fps))
    return session


def play_window(day: date, store, **session_kwargs):
    """Open an arcade window and play with the keyboard (arrows/A/D + space)"""
    import arcade
    from .window import DogfightWindow

    clock = SystemClock()
    session = ChallengeSession(day, started_at=clock.now(), store=store, **session_kwargs)
    window = DogfightWindow(session.width, session.height, loop=FrameLoop(session, clock))
    window.snapshot = session.snapshot()
    arcade.run()
    return session


def main():
    parser = argparse.ArgumentParser(description="Play the daily dogfight challenge")
    parser.add_argument("--day", type=str, default=None,
                        help="Challenge day YYYY-MM-DD (default: today, UTC)")
    parser.add_argument("--record", type=str, default=DEFAULT_RECORD,
                        help=f"JSON file holding best time and streak (default: {DEFAULT_RECORD})")
    parser.add_argument("--headless", action="store_true", help="No window; fixed-step simulation")
    parser.add_argument("--autopilot", action="store_true", help="Let the scripted pilot fly (headless)")
    parser.add_argument("--fps", type=int, default=60, help="Headless frame rate (default: 60)")
    parser.add_argument("--time-limit", type=float, default=DEFAULT_TIME_LIMIT)
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH)
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT)
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    day = date.fromisoformat(args.day) if args.day else SystemClock().today()
    store = JsonFileStore(args.record)
    before = PlayerRecord.load(store)
    session_kwargs = dict(width=args.width, height=args.height, time_limit=args.time_limit)

    print(f"Daily challenge {day.isoformat()} | best: "
          f"{before.best_time if before.best_time is not None else '-'} | streak: {before.streak}")

    if args.headless:
        session = play_headless(day, store, fps=args.fps, use_autopilot=args.autopilot, **session_kwargs)
    else:
        session = play_window(day, store, **session_kwargs)

    if session.result is None:
        print("Challenge abandoned.")
        return
    print(session.result.message)
    print(f"Kills: {session.kills}/{session.roster_size}  Escaped: {session.escaped}  Shots: {session.shots}")


if __name__ == "__main__":
    main()
