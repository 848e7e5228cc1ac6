"""
Training script for the daily dogfight environment using Stable-Baselines3
Supports PPO and DQN with challenge metrics tracking.
"""

import os
import argparse
from typing import Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from stable_baselines3 import PPO, DQN
from stable_baselines3.common.vec_env import DummyVecEnv, VecNormalize
from stable_baselines3.common.callbacks import CheckpointCallback, EvalCallback
from stable_baselines3.common.monitor import Monitor

from dogfight import DogfightEnv
from rl.configs.dogfight_config import ENV_CONFIG, REWARD_CONFIG, PPO_CONFIG, DQN_CONFIG, TRAINING_CONFIG
from rl.metrics_callback import MetricsCallback


class MultiDiscreteToDiscreteWrapper(gym.ActionWrapper):
    """
    Wrapper to convert MultiDiscrete action space to Discrete for DQN.
    Flattens MultiDiscrete([3, 2]) to Discrete(6).
    """

    def __init__(self, env):
        super().__init__(env)
        self.orig_action_space = env.action_space
        self._nvec = env.action_space.nvec
        self.n_total = int(np.prod(self._nvec))
        self.action_space = spaces.Discrete(self.n_total)

    def action(self, action):
        """Convert flat discrete action to MultiDiscrete."""
        indices = []
        remaining = int(action)
        for n in reversed(self._nvec):
            indices.append(remaining % n)
            remaining //= n
        return np.array(list(reversed(indices)), dtype=np.int64)


ALGORITHMS = {
    "ppo": (PPO, PPO_CONFIG),
    "dqn": (DQN, DQN_CONFIG),
}


def make_env(render_mode: Optional[str] = None, seed: Optional[int] = None, wrap_for_dqn: bool = False):
    """Factory function to create the environment"""
    def _init():
        env = DogfightEnv(render_mode=render_mode, reward_config=REWARD_CONFIG, **ENV_CONFIG)
        if wrap_for_dqn:
            env = MultiDiscreteToDiscreteWrapper(env)
        env = Monitor(env)
        if seed is not None:
            env.reset(seed=seed)
        return env
    return _init


def train_agent(
    algo: str = "ppo",
    total_timesteps: int = None,
    save_dir: Optional[str] = None,
    log_dir: Optional[str] = None,
    tensorboard_log: Optional[str] = None,
    n_envs: int = 4,
):
    """Train a PPO or DQN agent on the dogfight environment"""
    if algo not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm: {algo}")
    model_cls, model_config = ALGORITHMS[algo]
    is_dqn = algo == "dqn"
    if is_dqn:
        n_envs = 1

    if total_timesteps is None:
        total_timesteps = TRAINING_CONFIG["total_timesteps"]
    save_dir = save_dir or os.path.join(TRAINING_CONFIG["model_dir"], algo)
    log_dir = log_dir or os.path.join(TRAINING_CONFIG["log_dir"], algo)
    tensorboard_log = tensorboard_log or os.path.join(TRAINING_CONFIG["tensorboard_log"], algo)

    os.makedirs(save_dir, exist_ok=True)
    os.makedirs(log_dir, exist_ok=True)

    print(f"\n{'='*60}")
    print(f"Training {algo.upper()} for {total_timesteps:,} timesteps...")
    print(f"Using {n_envs} parallel environment(s)")
    print(f"{'='*60}\n")

    env = DummyVecEnv([make_env(seed=i, wrap_for_dqn=is_dqn) for i in range(n_envs)])
    eval_env = DummyVecEnv([make_env(seed=100, wrap_for_dqn=is_dqn)])
    if not is_dqn:
        env = VecNormalize(env, norm_obs=True, norm_reward=True)
        eval_env = VecNormalize(eval_env, norm_obs=True, norm_reward=False, training=False)

    checkpoint_callback = CheckpointCallback(
        save_freq=max(1, TRAINING_CONFIG["save_freq"] // n_envs),
        save_path=save_dir,
        name_prefix=f"{algo}_dogfight",
    )

    eval_callback = EvalCallback(
        eval_env,
        best_model_save_path=save_dir,
        log_path=log_dir,
        eval_freq=max(1, TRAINING_CONFIG.get("eval_freq", 5000) // n_envs),
        deterministic=True,
        render=False,
    )

    metrics_callback = MetricsCallback(log_dir=log_dir, algo_name=algo, verbose=1)

    model = model_cls(env=env, tensorboard_log=tensorboard_log, **model_config)
    model.learn(
        total_timesteps=total_timesteps,
        callback=[checkpoint_callback, eval_callback, metrics_callback],
    )

    final_path = os.path.join(save_dir, f"{algo}_dogfight_final")
    model.save(final_path)
    if isinstance(env, VecNormalize):
        env.save(os.path.join(save_dir, "vec_normalize.pkl"))

    print(f"\n{'='*60}")
    print(f"{algo.upper()} Training complete! Model saved to {final_path}")
    summary = metrics_callback.get_summary()
    if summary:
        print(f"Mean Reward: {summary['mean_reward']:.2f} ± {summary['std_reward']:.2f}")
        print(f"Win rate: {summary['win_rate']:.1%}  Mean kills: {summary['mean_kills']:.2f}")
        print(f"Total Episodes: {summary['total_episodes']}")
    print(f"{'='*60}\n")

    return model, metrics_callback


def main():
    parser = argparse.ArgumentParser(description="Train RL agent on the daily dogfight")
    parser.add_argument(
        "--algo",
        type=str,
        default="ppo",
        choices=["ppo", "dqn", "all"],
        help="RL algorithm to use (default: ppo)",
    )
    parser.add_argument(
        "--timesteps",
        type=int,
        default=None,
        help=f"Total timesteps to train (default: {TRAINING_CONFIG['total_timesteps']})",
    )
    parser.add_argument(
        "--n-envs",
        type=int,
        default=4,
        help="Number of parallel environments for PPO (default: 4)",
    )

    args = parser.parse_args()

    if args.algo == "all":
        print("Training all algorithms sequentially...")
        for algo in ALGORITHMS:
            train_agent(algo, total_timesteps=args.timesteps, n_envs=args.n_envs)
    else:
        train_agent(args.algo, total_timesteps=args.timesteps, n_envs=args.n_envs)


if __name__ == "__main__":
    main()
