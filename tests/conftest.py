import pytest

from dogfight.records import MemoryStore


class SequenceRNG:
    """Replays a fixed list of draws; fails loudly if the generator wants more."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def __call__(self):
        if self.calls >= len(self.values):
            raise AssertionError(f"generator drew more than {len(self.values)} values")
        value = self.values[self.calls]
        self.calls += 1
        return value


@pytest.fixture
def sequence_rng():
    return SequenceRNG


@pytest.fixture
def store():
    return MemoryStore()
