"""
Grid Constraints
================

Concrete DungeonConstraints over a rectangular grid of room slots.

- Usable slots come from a 2-D boolean numpy mask (rows x cols).
- Slots are 4-connected (networkx grid graph restricted to usable cells).
- An optional key-level map marks cells that can only be entered once the
  player holds a minimum number of keys. A "river" of level-1 cells across
  the map forces the generator to spend a key before crossing it.

Room id = row * cols + col, coordinates are (col, row) tuples.

Usage:
    constraints = GridConstraints.rectangle(6, 6, max_rooms=20, max_keys=3)

    river = np.zeros((8, 8), dtype=int)
    river[4, :] = 1
    constraints = GridConstraints(
        np.ones((8, 8), dtype=bool), max_rooms=30, max_keys=3,
        key_level_map=river,
    )
"""

import logging
from typing import Collection, Dict, List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

from keydungeon.constraints.base import DungeonConstraints

logger = logging.getLogger(__name__)

DEFAULT_GRAPHIFY_PROBABILITY = 0.2


class GridConstraints(DungeonConstraints):
    """
    Count-based constraints on a grid of 4-connected room slots.

    Args:
        mask: Boolean array (rows, cols); True marks a usable slot
        max_rooms: Target room count (clamped to the number of usable slots)
        max_keys: Number of keys
        max_switches: Number of switches (0 disables switch locks)
        entrances: Explicit entrance ids; defaults to the usable slots of
            the bottom-most row that has any
        key_level_map: Optional int array (rows, cols) of minimum key levels
        graphify_probability: Probability returned for every candidate
            densification edge
    """

    def __init__(
        self,
        mask,
        max_rooms: int,
        max_keys: int,
        max_switches: int = 0,
        entrances: Optional[Sequence[int]] = None,
        key_level_map=None,
        graphify_probability: float = DEFAULT_GRAPHIFY_PROBABILITY,
    ):
        mask = np.asarray(mask, dtype=bool)
        if mask.ndim != 2:
            raise ValueError(f"mask must be 2-D, got shape {mask.shape}")
        if max_rooms < 1 or max_keys < 0 or max_switches < 0:
            raise ValueError(
                f"Invalid budgets: rooms={max_rooms}, keys={max_keys}, switches={max_switches}"
            )
        if not 0.0 <= graphify_probability <= 1.0:
            raise ValueError(f"graphify_probability must be in [0, 1], got {graphify_probability}")

        self.mask = mask
        self.rows, self.cols = mask.shape

        if key_level_map is None:
            self.key_level_map = np.zeros(mask.shape, dtype=int)
        else:
            self.key_level_map = np.asarray(key_level_map, dtype=int)
            if self.key_level_map.shape != mask.shape:
                raise ValueError(
                    f"key_level_map shape {self.key_level_map.shape} != mask shape {mask.shape}"
                )

        self.graph = nx.grid_2d_graph(self.rows, self.cols)
        self.graph.remove_nodes_from(
            [(r, c) for r, c in list(self.graph.nodes) if not mask[r, c]]
        )

        self._adjacency: Dict[int, List[int]] = {
            self.id_for(c, r): sorted(self.id_for(nc, nr) for nr, nc in self.graph[(r, c)])
            for r, c in sorted(self.graph.nodes)
        }

        usable = len(self._adjacency)
        if usable == 0:
            raise ValueError("mask has no usable cells")
        self._max_rooms = min(max_rooms, usable)
        self._max_keys = max_keys
        self._max_switches = max_switches
        self.graphify_probability = graphify_probability

        if entrances is None:
            self._entrances = self._default_entrances()
        else:
            self._entrances = list(entrances)
            for room_id in self._entrances:
                if room_id not in self._adjacency:
                    raise ValueError(f"Entrance {room_id} is not a usable cell")

        logger.debug(
            f"GridConstraints {self.cols}x{self.rows}: {usable} usable cells, "
            f"max_rooms={self._max_rooms}, max_keys={max_keys}, max_switches={max_switches}"
        )

    @classmethod
    def rectangle(
        cls,
        width: int,
        height: int,
        max_rooms: int,
        max_keys: int,
        max_switches: int = 0,
        **kwargs,
    ) -> 'GridConstraints':
        """Grid where every one of the width x height cells is usable."""
        return cls(
            np.ones((height, width), dtype=bool),
            max_rooms=max_rooms,
            max_keys=max_keys,
            max_switches=max_switches,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Id <-> coordinate mapping
    # ------------------------------------------------------------------

    def id_for(self, col: int, row: int) -> int:
        return row * self.cols + col

    def cell_of(self, room_id: int) -> Tuple[int, int]:
        """(row, col) of a room id."""
        if room_id not in self._adjacency:
            raise ValueError(f"Room id {room_id} is not a usable cell")
        return divmod(room_id, self.cols)

    # ------------------------------------------------------------------
    # DungeonConstraints
    # ------------------------------------------------------------------

    @property
    def max_rooms(self) -> int:
        return self._max_rooms

    @property
    def max_keys(self) -> int:
        return self._max_keys

    @property
    def max_switches(self) -> int:
        return self._max_switches

    def initial_rooms(self) -> Collection[int]:
        return list(self._entrances)

    def get_coords(self, room_id: int) -> Tuple[int, int]:
        row, col = self.cell_of(room_id)
        return (col, row)

    def get_adjacent_rooms(self, room_id: int, key_level: int) -> List[Tuple[float, int]]:
        self.cell_of(room_id)
        result = []
        for neighbour in self._adjacency[room_id]:
            row, col = divmod(neighbour, self.cols)
            if self.key_level_map[row, col] <= key_level:
                result.append((1.0, neighbour))
        return result

    def edge_graphify_probability(self, id1: int, id2: int) -> float:
        return self.graphify_probability

    def _default_entrances(self) -> List[int]:
        usable_rows = np.flatnonzero(self.mask.any(axis=1))
        bottom = int(usable_rows[-1])
        return [self.id_for(int(col), bottom) for col in np.flatnonzero(self.mask[bottom])]
