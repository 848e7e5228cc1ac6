from datetime import date

import numpy as np
import pytest

from dogfight.dogfight_env import STEER_NONE, STEER_RIGHT, DogfightEnv
from dogfight.entities import Missile, StraightEnemy
from dogfight.records import KEY_STREAK, MemoryStore

DAY = date(2025, 10, 2)


def make_env(**kwargs):
    kwargs.setdefault("day", DAY)
    kwargs.setdefault("dt", 0.05)
    return DogfightEnv(**kwargs)


def test_reset_observation():
    env = make_env()
    obs, info = env.reset(seed=0)
    assert obs.shape == env.observation_space.shape == (39,)
    assert obs.dtype == np.float32
    assert env.observation_space.contains(obs)
    assert info["day"] == "2025-10-02"
    assert info["roster_size"] == 5
    assert info["status"] == "running"


def test_daily_env_replays_the_day():
    a, b = make_env(), make_env()
    a.reset(seed=1)
    b.reset(seed=2)
    assert a.session.enemies == b.session.enemies


def test_training_env_varies_roster_with_seed():
    env = make_env(daily=False)
    env.reset(seed=3)
    first = env.session.seed
    env.reset(seed=3)
    assert env.session.seed == first
    env.reset(seed=4)
    assert env.session.seed != first


def test_options_override_day_and_seed():
    env = make_env()
    env.reset(options={"day": "2025-10-05", "roster_seed": 99})
    assert env.session.day_key == "2025-10-05"
    assert env.session.seed == 99


def test_step_moves_and_fires():
    env = make_env()
    env.reset()
    obs, reward, terminated, truncated, info = env.step(np.array([STEER_RIGHT, 1]))
    assert env.session.player.x == pytest.approx(250)
    assert info["shots"] == 1
    assert not terminated and not truncated
    assert reward == pytest.approx(-0.021)
    assert env.observation_space.contains(obs)


def test_kill_and_clean_sweep_rewards():
    env = make_env()
    env.reset()
    env.session.enemies = [StraightEnemy(x=240, y=700, vy=0)]
    env.session.roster_size = 1
    env.session.missiles = [Missile(x=240, y=705, vy=0)]

    _, reward, terminated, _, info = env.step([STEER_NONE, 0])
    assert terminated
    assert info["status"] == "won"
    assert reward == pytest.approx(5.999)


def test_episode_terminates_by_time_limit():
    store = MemoryStore()
    env = make_env(store=store, time_limit=2.0)
    env.reset()
    env.session.enemies = [StraightEnemy(x=100, y=-500, vy=0)]

    steps = 0
    terminated = False
    while not terminated:
        _, reward, terminated, _, info = env.step([STEER_NONE, 0])
        steps += 1
        assert steps <= 41

    assert info["status"] == "timed_out"
    assert reward < -4.0
    assert store.get(KEY_STREAK) == "0"


def test_random_policy_runs_to_completion():
    env = make_env(daily=False)
    env.reset(seed=7)
    env.action_space.seed(7)
    terminated = False
    steps = 0
    while not terminated:
        obs, _, terminated, _, _ = env.step(env.action_space.sample())
        assert env.observation_space.contains(obs)
        steps += 1
    assert steps <= 401
    env.close()
