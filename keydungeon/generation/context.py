"""
Generation Context
==================

Explicit handle on the state one generation attempt works with. Every
phase receives it as an argument instead of reading generator fields, so a
phase can be exercised on its own with a fixed seed.
"""

import random
from dataclasses import dataclass, field

from keydungeon.constraints.base import DungeonConstraints
from keydungeon.core.dungeon import Dungeon
from keydungeon.generation.config import GeneratorConfig
from keydungeon.generation.key_levels import KeyLevelRoomMapping


@dataclass
class GenerationContext:
    """
    Attributes:
        constraints: Layout provider
        rng: The single sequential random source of the run
        config: Generator configuration
        dungeon: Graph store of the current attempt
        levels: Key-level index of the current attempt
    """
    constraints: DungeonConstraints
    rng: random.Random
    config: GeneratorConfig = field(default_factory=GeneratorConfig)
    dungeon: Dungeon = field(default_factory=Dungeon)
    levels: KeyLevelRoomMapping = field(default_factory=KeyLevelRoomMapping)

    def reset(self) -> None:
        """Discard the attempt: fresh dungeon and key-level index."""
        self.dungeon = Dungeon()
        self.levels = KeyLevelRoomMapping()
