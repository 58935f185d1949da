"""
Layout Constraints
==================

The provider interface consumed by the generator and a grid implementation.
"""

from keydungeon.constraints.base import DungeonConstraints
from keydungeon.constraints.grid import GridConstraints

__all__ = ['DungeonConstraints', 'GridConstraints']
