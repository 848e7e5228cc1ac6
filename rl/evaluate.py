"""
Evaluation script for trained agents on a day's challenge
"""

import argparse
from datetime import date
from typing import Optional

import numpy as np

from stable_baselines3 import PPO, DQN
from stable_baselines3.common.vec_env import DummyVecEnv, VecNormalize

from dogfight import DogfightEnv
from dogfight.dogfight_env import STEER_LEFT, STEER_NONE, STEER_RIGHT
from dogfight.play import autopilot
from rl.configs.dogfight_config import ENV_CONFIG, REWARD_CONFIG
from rl.train import MultiDiscreteToDiscreteWrapper


def _daily_env_config(day: Optional[date]):
    config = dict(ENV_CONFIG)
    config["daily"] = True
    config["day"] = day
    return config


def _summarize(label: str, rewards, wins, kills):
    print(f"\n{label} ({len(rewards)} episodes):")
    print(f"Mean Reward: {np.mean(rewards):.2f} ± {np.std(rewards):.2f}")
    print(f"Win rate: {np.mean(wins):.1%}  Mean kills: {np.mean(kills):.2f}")
    return {
        "mean_reward": float(np.mean(rewards)),
        "std_reward": float(np.std(rewards)),
        "win_rate": float(np.mean(wins)),
        "mean_kills": float(np.mean(kills)),
        "episode_rewards": list(rewards),
    }


def evaluate_model(
    model_path: str,
    algo: str = "ppo",
    n_episodes: int = 5,
    render: bool = True,
    day: Optional[date] = None,
    vec_normalize_path: Optional[str] = None,
):
    """
    Evaluate a trained model on one day's roster

    Args:
        model_path: Path to the saved model
        algo: Algorithm used ('ppo' or 'dqn')
        n_episodes: Number of attempts
        render: Whether to render the environment
        day: Challenge day (default: today, UTC)
        vec_normalize_path: Path to VecNormalize stats (for PPO)
    """
    if algo == "ppo":
        model = PPO.load(model_path)
    elif algo == "dqn":
        model = DQN.load(model_path)
    else:
        raise ValueError(f"Unknown algorithm: {algo}")

    render_mode = "human" if render else None
    base_env = DogfightEnv(render_mode=render_mode, reward_config=REWARD_CONFIG, **_daily_env_config(day))
    env = MultiDiscreteToDiscreteWrapper(base_env) if algo == "dqn" else base_env
    env = DummyVecEnv([lambda: env])

    if vec_normalize_path:
        env = VecNormalize.load(vec_normalize_path, env)
        env.training = False
        env.norm_reward = False

    rewards, wins, kills = [], [], []
    for episode in range(n_episodes):
        obs = env.reset()
        done = False
        total_reward = 0.0
        info = {}

        while not done:
            action, _ = model.predict(obs, deterministic=True)
            obs, reward, dones, infos = env.step(action)
            total_reward += float(reward[0])
            done = bool(dones[0])
            info = infos[0]

        rewards.append(total_reward)
        wins.append(1.0 if info.get("status") == "won" else 0.0)
        kills.append(info.get("kills", 0))
        print(f"Episode {episode + 1}/{n_episodes}: Reward = {total_reward:.2f}, "
              f"Status = {info.get('status')}, Kills = {info.get('kills')}/{info.get('roster_size')}")

    env.close()
    return _summarize("Evaluation Results", rewards, wins, kills)


def compare_with_autopilot(n_episodes: int = 5, day: Optional[date] = None):
    """
    Evaluate the scripted autopilot as a baseline
    """
    print("Evaluating autopilot baseline...")

    env = DogfightEnv(render_mode=None, reward_config=REWARD_CONFIG, **_daily_env_config(day))
    rewards, wins, kills = [], [], []

    for episode in range(n_episodes):
        obs, info = env.reset()
        terminated = truncated = False
        total_reward = 0.0

        while not (terminated or truncated):
            controls = autopilot(env.session)
            steer = STEER_LEFT if controls.steer_left else STEER_RIGHT if controls.steer_right else STEER_NONE
            obs, reward, terminated, truncated, info = env.step([steer, int(controls.firing)])
            total_reward += reward

        rewards.append(total_reward)
        wins.append(1.0 if info["status"] == "won" else 0.0)
        kills.append(info["kills"])

    env.close()
    return _summarize("Autopilot Results", rewards, wins, kills)


def main():
    parser = argparse.ArgumentParser(description="Evaluate trained RL agent on a daily challenge")
    parser.add_argument("model_path", type=str, help="Path to the trained model")
    parser.add_argument("--algo", type=str, default="ppo", choices=["ppo", "dqn"],
                        help="Algorithm used to train the model (default: ppo)")
    parser.add_argument("--n-episodes", type=int, default=5, help="Number of attempts (default: 5)")
    parser.add_argument("--no-render", action="store_true", help="Disable rendering")
    parser.add_argument("--day", type=str, default=None, help="Challenge day YYYY-MM-DD (default: today)")
    parser.add_argument("--vec-normalize", type=str, default=None,
                        help="Path to VecNormalize stats file (for PPO)")
    parser.add_argument("--compare-autopilot", action="store_true",
                        help="Also evaluate the scripted autopilot for comparison")

    args = parser.parse_args()
    day = date.fromisoformat(args.day) if args.day else None

    results = evaluate_model(
        model_path=args.model_path,
        algo=args.algo,
        n_episodes=args.n_episodes,
        render=not args.no_render,
        day=day,
        vec_normalize_path=args.vec_normalize,
    )

    if args.compare_autopilot:
        print("\n")
        baseline = compare_with_autopilot(n_episodes=args.n_episodes, day=day)
        print(f"\nImprovement over autopilot: {results['mean_reward'] - baseline['mean_reward']:.2f}")


if __name__ == "__main__":
    main()
