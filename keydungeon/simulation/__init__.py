"""
Simulation Module
=================

Player-state search used to check generated dungeons can be completed.
"""

from keydungeon.simulation.solver import DungeonSolver, SolveResult

__all__ = [
    'DungeonSolver',
    'SolveResult',
]
