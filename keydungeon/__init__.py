"""
KeyDungeon - Lock-and-Key Puzzle Dungeon Generator
==================================================

Procedural generation of puzzle dungeons whose rooms are gated by keys,
switch states and a boss door, grown as a spanning tree over the room
slots offered by a pluggable constraints provider.

Submodules:
- core: Symbols, conditions, rooms and the dungeon graph store
- constraints: Layout/budget providers (abstract interface + grid)
- generation: Generation phases and the retry orchestrator
- simulation: Player-state solver for generated dungeons
- utils: networkx export, solution paths and invariant validation
- visualization: ASCII preview

Usage:
    from keydungeon import DungeonGenerator, GeneratorConfig, GridConstraints

    constraints = GridConstraints.rectangle(6, 6, max_rooms=20, max_keys=3)
    dungeon = DungeonGenerator(constraints, GeneratorConfig(seed=42)).generate()
"""

__version__ = "1.0.0"

from keydungeon.core import Condition, Dungeon, Edge, Room, SwitchState, Symbol, SymbolKind
from keydungeon.constraints import DungeonConstraints, GridConstraints
from keydungeon.generation import (
    DungeonGenerator,
    GenerationFailureError,
    GenerationReport,
    GeneratorConfig,
    InternalGenerationError,
    KeyPlacement,
)
from keydungeon.simulation import DungeonSolver, SolveResult

__all__ = [
    'Condition', 'Dungeon', 'Edge', 'Room', 'SwitchState', 'Symbol', 'SymbolKind',
    'DungeonConstraints', 'GridConstraints',
    'DungeonGenerator', 'GenerationFailureError', 'GenerationReport',
    'GeneratorConfig', 'InternalGenerationError', 'KeyPlacement',
    'DungeonSolver', 'SolveResult',
]
