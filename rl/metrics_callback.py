"""
Custom callback for tracking challenge metrics during training.
Records: wins, kills, escapes, clear time.
"""

import os
import csv
from typing import Dict, List, Any, Optional
from stable_baselines3.common.callbacks import BaseCallback


def episode_row(info: Dict[str, Any]) -> Dict[str, Any]:
    """Pull the per-episode challenge metrics out of a terminal info dict."""
    won = info.get("status") == "won"
    return {
        "won": 1.0 if won else 0.0,
        "kills": info.get("kills", 0),
        "escaped": info.get("escaped", 0),
        "roster": info.get("roster_size", 0),
        "clear_time": info.get("elapsed", 0.0) if won else None,
    }


class MetricsCallback(BaseCallback):
    """
    Callback to track and log challenge metrics per episode.
    Saves to CSV for easy plotting.
    """

    def __init__(
        self,
        log_dir: str,
        algo_name: str,
        verbose: int = 1,
    ):
        super().__init__(verbose)
        self.log_dir = log_dir
        self.algo_name = algo_name

        # Episode tracking
        self.episode_rewards: List[float] = []
        self.episode_lengths: List[int] = []
        self.episode_wins: List[float] = []
        self.episode_kills: List[float] = []
        self.episode_escapes: List[float] = []
        self.clear_times: List[float] = []

        # CSV file
        self.csv_path: Optional[str] = None
        self.csv_file = None
        self.csv_writer = None

    def _on_training_start(self) -> None:
        """Initialize CSV file for logging."""
        os.makedirs(self.log_dir, exist_ok=True)
        self.csv_path = os.path.join(self.log_dir, f"{self.algo_name}_metrics.csv")

        self.csv_file = open(self.csv_path, "w", newline="")
        self.csv_writer = csv.writer(self.csv_file)
        self.csv_writer.writerow([
            "timestep", "episode", "reward", "length",
            "won", "kills", "escaped", "roster", "clear_time"
        ])
        self.csv_file.flush()

        if self.verbose > 0:
            print(f"[MetricsCallback] Logging to {self.csv_path}")

    def _on_step(self) -> bool:
        """Called after each step."""
        infos = self.locals.get("infos", [])
        dones = self.locals.get("dones", [])

        for info, done in zip(infos, dones):
            # Monitor wrapper adds episode info on the terminal step
            if done and "episode" in info:
                ep_info = info["episode"]
                row = episode_row(info)

                self.episode_rewards.append(ep_info["r"])
                self.episode_lengths.append(ep_info["l"])
                self.episode_wins.append(row["won"])
                self.episode_kills.append(row["kills"])
                self.episode_escapes.append(row["escaped"])
                if row["clear_time"] is not None:
                    self.clear_times.append(row["clear_time"])

                if self.csv_writer:
                    self.csv_writer.writerow([
                        self.num_timesteps,
                        len(self.episode_rewards),
                        ep_info["r"],
                        ep_info["l"],
                        row["won"],
                        row["kills"],
                        row["escaped"],
                        row["roster"],
                        "" if row["clear_time"] is None else f"{row['clear_time']:.3f}",
                    ])
                    self.csv_file.flush()

                if self.logger:
                    self.logger.record("custom/win", row["won"])
                    self.logger.record("custom/kills", row["kills"])
                    self.logger.record("custom/escaped", row["escaped"])

                if self.verbose > 0 and len(self.episode_rewards) % 10 == 0:
                    avg_reward = sum(self.episode_rewards[-10:]) / 10
                    win_rate = sum(self.episode_wins[-10:]) / 10
                    print(f"[{self.algo_name}] Episode {len(self.episode_rewards)}, "
                          f"Timestep {self.num_timesteps}, "
                          f"Avg Reward (10 ep): {avg_reward:.2f}, "
                          f"Win rate: {win_rate:.0%}")

        return True

    def _on_training_end(self) -> None:
        """Cleanup CSV file."""
        if self.csv_file:
            self.csv_file.close()
            if self.verbose > 0:
                print(f"[MetricsCallback] Saved {len(self.episode_rewards)} episodes to {self.csv_path}")

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics."""
        if not self.episode_rewards:
            return {}

        import numpy as np
        return {
            "mean_reward": np.mean(self.episode_rewards),
            "std_reward": np.std(self.episode_rewards),
            "mean_length": np.mean(self.episode_lengths),
            "total_episodes": len(self.episode_rewards),
            "win_rate": np.mean(self.episode_wins),
            "mean_kills": np.mean(self.episode_kills),
            "best_clear_time": min(self.clear_times) if self.clear_times else None,
        }
