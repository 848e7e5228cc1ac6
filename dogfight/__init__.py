"""Daily dogfight - deterministic daily shooter challenge"""

from .rng import Mulberry32, day_key, day_before, seed_from_key
from .challenge import generate_roster
from .records import PlayerRecord, MemoryStore, JsonFileStore
from .session import ChallengeSession, InputState, SessionStatus
from .clock import FrameLoop, ManualClock, SystemClock
from .dogfight_env import DogfightEnv

__all__ = [
    'Mulberry32', 'day_key', 'day_before', 'seed_from_key',
    'generate_roster',
    'PlayerRecord', 'MemoryStore', 'JsonFileStore',
    'ChallengeSession', 'InputState', 'SessionStatus',
    'FrameLoop', 'ManualClock', 'SystemClock',
    'DogfightEnv',
]
