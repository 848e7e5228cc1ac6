"""
Configuration for the daily dogfight challenge and its RL environment
"""

# Challenge parameters (ChallengeSession kwargs)
CHALLENGE_CONFIG = {
    "width": 480,
    "height": 864,
    "time_limit": 20.0,  # seconds
}

# Environment parameters (DogfightEnv kwargs)
ENV_CONFIG = {
    # "render_mode": None,  # Don't render during training
    **CHALLENGE_CONFIG,
    "dt": 1/60,
    "daily": False,  # new roster every episode while training
}

# ==============================================================================
# REWARD SHAPING
# ==============================================================================

REWARD_CONFIG = {
    "name": "baseline",
    "description": "Shoot everything, don't let anything through",
    "R_KILL": 1.0,       # Reward per enemy shot down
    "R_WIN": 5.0,        # Bonus for clearing the wave with no escapes
    "R_TIMEOUT": 5.0,    # Penalty when the clock runs out
    "R_ESCAPE": 1.0,     # Penalty per enemy passing the bottom edge
    "R_SHOT": 0.02,      # Penalty per missile (encourage aiming)
    "R_TIME": 0.001,     # Small per-step time penalty
}

# ==============================================================================
# ALGORITHM HYPERPARAMETERS
# ==============================================================================

# PPO hyperparameters
PPO_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 3e-4,
    "n_steps": 1024,
    "batch_size": 256,
    "n_epochs": 10,
    "gamma": 0.99,
    "gae_lambda": 0.95,
    "clip_range": 0.2,
    "ent_coef": 0.01,
    "vf_coef": 0.5,
    "max_grad_norm": 0.5,
    "verbose": 1,
}

# DQN hyperparameters
DQN_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 1e-4,
    "buffer_size": 100_000,
    "learning_starts": 1000,
    "batch_size": 128,
    "tau": 1.0,
    "gamma": 0.99,
    "train_freq": 4,
    "gradient_steps": 1,
    "target_update_interval": 1000,
    "exploration_fraction": 0.1,
    "exploration_initial_eps": 1.0,
    "exploration_final_eps": 0.05,
    "verbose": 1,
}

# ==============================================================================
# TRAINING SETTINGS
# ==============================================================================

TRAINING_CONFIG = {
    "total_timesteps": 500_000,
    "save_freq": 10_000,
    "eval_freq": 5_000,
    "log_dir": "./logs",
    "model_dir": "./models",
    "tensorboard_log": "./tensorboard_logs",
}
