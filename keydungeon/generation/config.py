"""
Generator Configuration
=======================

GeneratorConfig gathers the knobs of one DungeonGenerator. It is built once
and never mutated afterwards.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional

# ============================================================================
# TUNING CONSTANTS
# ============================================================================

# Tree growth: a 1-in-N draw skips the same-level parent search and
# forces a lock-crossing edge from anywhere in the dungeon
SAME_LEVEL_PARENT_ODDS = 10

# Switch placement
SWITCH_PLACEMENT_ATTEMPTS = 10
SWITCH_LOCK_ODDS = 4            # 1-in-N child edges are left unlocked

# Intensity curve
INTENSITY_GROWTH_JITTER = 0.1   # Each room scales its base by [1-j/2, 1+j/2)
INTENSITY_EASE_OFF = 0.2        # Fraction of a tier's peak dropped at the next tier
INTENSITY_SCALE = 0.99          # Normalised maximum (boss alone sits at 1.0)

# Key-level ceiling meaning "any tier" when asking for adjacent slots
ANY_KEY_LEVEL = sys.maxsize

DEFAULT_MAX_RETRIES = 20


class KeyPlacement(Enum):
    """Ordering used to pick the room that receives a level's key."""
    INTENSITY = "intensity"   # Highest intensity first
    DEAD_END = "dead_end"     # Fewest links first


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Configuration for DungeonGenerator.

    Attributes:
        seed: Random seed; None draws a fresh one (logged, and recorded on
            the generator for reproduction)
        boss_room_locked: Reserve the final key for the boss room's door
        generate_goal: Place a distinct goal room behind the boss
        max_retries: Full restarts allowed before generation fails
        key_placement: Room ordering used by key placement
    """
    seed: Optional[int] = None
    boss_room_locked: bool = True
    generate_goal: bool = True
    max_retries: int = DEFAULT_MAX_RETRIES
    key_placement: KeyPlacement = KeyPlacement.INTENSITY

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if not isinstance(self.key_placement, KeyPlacement):
            raise ValueError(f"Unknown key placement: {self.key_placement!r}")
