"""
Generation Module
=================

Lock-and-key dungeon generation phases and the retry orchestrator.

Usage:
    from keydungeon.generation import DungeonGenerator, GeneratorConfig

    generator = DungeonGenerator(constraints, GeneratorConfig(seed=7))
    dungeon = generator.generate()
"""

from keydungeon.generation.config import GeneratorConfig, KeyPlacement
from keydungeon.generation.context import GenerationContext
from keydungeon.generation.key_levels import KeyLevelRoomMapping
from keydungeon.generation.outcomes import (
    PhaseStatus,
    PhaseOutcome,
    GenerationReport,
    GenerationFailureError,
    InternalGenerationError,
)
from keydungeon.generation.generator import DungeonGenerator, GenerationPhase

__all__ = [
    'GeneratorConfig',
    'KeyPlacement',
    'GenerationContext',
    'KeyLevelRoomMapping',
    'PhaseStatus',
    'PhaseOutcome',
    'GenerationReport',
    'GenerationFailureError',
    'InternalGenerationError',
    'DungeonGenerator',
    'GenerationPhase',
]
