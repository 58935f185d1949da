"""
Layout / Constraints Provider Interface
=======================================

The generator never decides which room slots exist or which are adjacent.
It asks a DungeonConstraints implementation, which owns the spatial layout.

Room slots are identified by integer ids; coordinates are opaque to the
generator and copied onto rooms verbatim.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Collection, List, Tuple

from keydungeon.core.symbols import Symbol

if TYPE_CHECKING:
    from keydungeon.core.dungeon import Dungeon


class DungeonConstraints(ABC):
    """
    Spatial layout and budget provider consumed by DungeonGenerator.

    Implementations must be deterministic for a given construction if the
    generator's same-seed reproducibility is to hold.
    """

    @property
    @abstractmethod
    def max_rooms(self) -> int:
        """Target number of rooms."""

    @property
    @abstractmethod
    def max_keys(self) -> int:
        """Number of keys (and key levels) to generate."""

    @property
    @abstractmethod
    def max_switches(self) -> int:
        """Switches to place; 0 disables switch locks."""

    @abstractmethod
    def initial_rooms(self) -> Collection[int]:
        """Non-empty collection of ids eligible as the entrance."""

    @abstractmethod
    def get_coords(self, room_id: int) -> Any:
        """Coordinate(s) of a room slot."""

    @abstractmethod
    def get_adjacent_rooms(self, room_id: int, key_level: int) -> List[Tuple[float, int]]:
        """
        Neighbouring slots reachable at or below `key_level`.

        Returns:
            Ordered list of (weight, neighbour id) pairs. The weight is
            advisory.
        """

    def room_can_fit_item(self, room_id: int, item: Symbol) -> bool:
        """Whether `item` may be placed in the room."""
        return True

    def edge_graphify_probability(self, id1: int, id2: int) -> float:
        """Probability in [0, 1] of adding a densification edge."""
        return 0.2

    def is_acceptable(self, dungeon: 'Dungeon') -> bool:
        """Final global validity check over a finished dungeon."""
        return True
