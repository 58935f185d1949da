"""
Utility Module
==============

Graph export, solution paths and dungeon invariant validation.
"""

from keydungeon.utils.graph_utils import (
    to_networkx,
    get_solution_path,
    validate_dungeon,
)

__all__ = [
    'to_networkx',
    'get_solution_path',
    'validate_dungeon',
]
