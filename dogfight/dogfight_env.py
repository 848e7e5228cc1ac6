"""
DogfightEnv - the daily challenge as a Gymnasium environment
------------------------------------------------------------
- One ChallengeSession per episode, stepped at a fixed dt on a manual clock
- Discrete MultiDiscrete action space: [steer(3), fire(2)]
- Vector observation: player state + time left + up to 7 enemies
- Episode ends on win (all enemies shot or escaped) or timeout

With `daily=True` every reset replays the day's roster (what a human plays);
with `daily=False` the roster seed comes from the env's np_random so training
sees a different wave each episode.

Install:
    pip install gymnasium arcade numpy
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .challenge import MAX_ENEMIES
from .clock import ManualClock
from .entities import EnemyKind
from .records import KeyValueStore, MemoryStore
from .session import (
    DEFAULT_HEIGHT,
    DEFAULT_TIME_LIMIT,
    DEFAULT_WIDTH,
    FIRE_COOLDOWN,
    ChallengeSession,
    InputState,
    SessionStatus,
)
from .utils import clamp

STEER_NONE, STEER_LEFT, STEER_RIGHT = 0, 1, 2

KIND_CODES = {kind: i for i, kind in enumerate(EnemyKind)}

DEFAULT_REWARDS = {
    "R_KILL": 1.0,
    "R_WIN": 5.0,
    "R_TIMEOUT": 5.0,
    "R_ESCAPE": 1.0,
    "R_SHOT": 0.02,
    "R_TIME": 0.001,
}


class DogfightEnv(gym.Env):
    """Daily dogfight environment"""

    metadata = {"render_modes": ["human"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        time_limit: float = DEFAULT_TIME_LIMIT,
        dt: float = 1 / 60,
        day: Optional[date] = None,
        daily: bool = True,
        store: Optional[KeyValueStore] = None,
        reward_config: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        self.render_mode = render_mode
        self.width = width
        self.height = height
        self.time_limit = time_limit
        self.dt = dt
        self.daily = daily
        self.store = store if store is not None else MemoryStore()
        self.rewards = dict(DEFAULT_REWARDS)
        if reward_config:
            self.rewards.update({k: v for k, v in reward_config.items() if k.startswith("R_")})

        self.clock = ManualClock(day=day) if day is not None else ManualClock()

        self.action_space = spaces.MultiDiscrete([3, 2])

        # Player: x(1) cooldown(1) time_left(1) enemies_left(1)
        # Each enemy: rel pos(2) vy(1) kind(1) present(1)
        obs_dim = 4 + MAX_ENEMIES * 5
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self.session: ChallengeSession = None  # type: ignore
        self._window = None

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        options = options or {}

        day = options.get("day") or self.clock.today()
        roster_seed = options.get("roster_seed")
        if roster_seed is None and not self.daily:
            roster_seed = int(self.np_random.integers(0, 2**32))

        self.session = ChallengeSession(
            day,
            started_at=self.clock.now(),
            width=self.width,
            height=self.height,
            time_limit=self.time_limit,
            store=self.store,
            seed=roster_seed,
        )
        return self._get_obs(), self._get_info()

    def step(self, action):
        steer, fire = int(action[0]), int(action[1])
        controls = InputState(
            steer_left=steer == STEER_LEFT,
            steer_right=steer == STEER_RIGHT,
            firing=fire == 1,
        )

        now = self.clock.advance(self.dt)
        status = self.session.step(self.dt, now, controls)

        reward = self._compute_reward(status)
        terminated = status is not SessionStatus.RUNNING
        truncated = False

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), reward, terminated, truncated, self._get_info()

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        s = self.session
        p = s.player

        obs_parts = [
            (p.x / self.width) * 2 - 1,
            clamp(p.cooldown / FIRE_COOLDOWN, 0, 1) * 2 - 1,
            (s.time_left / s.time_limit) * 2 - 1,
            (len(s.enemies) / MAX_ENEMIES) * 2 - 1,
        ]

        # Lowest enemies first (closest to escaping)
        enemies_sorted = sorted(s.enemies, key=lambda e: -e.y)
        n_kinds = max(1, len(KIND_CODES) - 1)
        for i in range(MAX_ENEMIES):
            if i < len(enemies_sorted):
                e = enemies_sorted[i]
                obs_parts += [
                    clamp((e.x - p.x) / self.width, -1, 1),
                    clamp((e.y - p.y) / self.height, -1, 1),
                    clamp(e.vy / 200.0, -1, 1),
                    KIND_CODES[e.kind] / n_kinds * 2 - 1,
                    1.0,
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0, -1.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self, status: SessionStatus) -> float:
        ev = self.session.events
        r = self.rewards

        reward = 0.0
        reward += r["R_KILL"] * ev.get("kill", 0)
        reward -= r["R_ESCAPE"] * ev.get("escape", 0)
        reward -= r["R_SHOT"] * ev.get("shot", 0)
        reward -= r["R_TIME"]

        if status is SessionStatus.WON:
            # escapes also empty the roster; only reward a clean sweep
            if self.session.kills == self.session.roster_size:
                reward += r["R_WIN"]
        elif status is SessionStatus.TIMED_OUT:
            reward -= r["R_TIMEOUT"]

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        s = self.session
        return {
            "day": s.day_key,
            "status": s.status.value,
            "num_enemies": len(s.enemies),
            "roster_size": s.roster_size,
            "kills": s.kills,
            "escaped": s.escaped,
            "shots": s.shots,
            "elapsed": s.elapsed,
            "time_left": s.time_left,
            "best_time": s.record.best_time,
            "streak": s.record.streak,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            from .window import DogfightWindow

            self._window = DogfightWindow(self.width, self.height)

        self._window.show(self.session.snapshot())
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None
