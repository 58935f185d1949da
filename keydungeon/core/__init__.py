"""
Core Data Model
===============

Symbol/Condition algebra and the id-indexed dungeon graph store.
"""

from keydungeon.core.symbols import Symbol, SymbolKind, SwitchState, Condition
from keydungeon.core.dungeon import Room, Edge, Dungeon

__all__ = [
    'Symbol',
    'SymbolKind',
    'SwitchState',
    'Condition',
    'Room',
    'Edge',
    'Dungeon',
]
