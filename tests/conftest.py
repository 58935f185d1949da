"""
Shared fixtures: small deterministic constraints providers.
"""

import random
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from keydungeon.constraints.base import DungeonConstraints
from keydungeon.generation.config import GeneratorConfig
from keydungeon.generation.context import GenerationContext


class CompleteConstraints(DungeonConstraints):
    """Every slot is adjacent to every other slot. Slot i sits at (i, 0)."""

    def __init__(self, slots=10, max_keys=2, max_switches=0, max_rooms=None,
                 entrances=(0,), acceptable=True):
        self.slots = slots
        self._max_rooms = max_rooms if max_rooms is not None else slots
        self._max_keys = max_keys
        self._max_switches = max_switches
        self.entrances = list(entrances)
        self.acceptable = acceptable
        self.acceptable_calls = 0

    @property
    def max_rooms(self):
        return self._max_rooms

    @property
    def max_keys(self):
        return self._max_keys

    @property
    def max_switches(self):
        return self._max_switches

    def initial_rooms(self):
        return self.entrances

    def get_coords(self, room_id):
        return (room_id, 0)

    def get_adjacent_rooms(self, room_id, key_level):
        return [(1.0, other) for other in range(self.slots) if other != room_id]

    def is_acceptable(self, dungeon):
        self.acceptable_calls += 1
        return self.acceptable


class DeadEndConstraints(CompleteConstraints):
    """Only the entrance has a neighbour; growth stalls after two rooms."""

    def __init__(self, max_rooms=5, max_keys=1):
        super().__init__(slots=max_rooms, max_keys=max_keys)

    def get_adjacent_rooms(self, room_id, key_level):
        if room_id == 0:
            return [(1.0, 1)]
        return []


@pytest.fixture
def complete_constraints():
    return CompleteConstraints()


@pytest.fixture
def make_context():
    """Build a GenerationContext with a seeded rng."""
    def _make(constraints, seed=0, **config_kwargs):
        return GenerationContext(
            constraints,
            random.Random(seed),
            GeneratorConfig(seed=seed, **config_kwargs),
        )
    return _make
