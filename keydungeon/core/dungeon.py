"""
Dungeon Graph Store
===================

Id-indexed arena of rooms plus the lock-annotated edges between them.

Rooms refer to each other only by id: the parent/child spanning tree used
during construction and the edge targets are all room ids, never direct
object references.

Mutations (adding a room, adding an edge) take the dungeon's re-entrant
lock, so an external reader (e.g. a live preview thread) holding
`dungeon.lock` always observes fully-formed rooms and edges.

Usage:
    dungeon = Dungeon()
    entrance = Room(0, (0, 0), item=Symbol.start())
    dungeon.add(entrance)
    dungeon.attach_child(0, Room(1, (1, 0)), Symbol.key(0))

    assert dungeon.get(1).parent_id == 0
    assert dungeon.get(0).get_edge(1).symbol == Symbol.key(0)
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from keydungeon.core.symbols import Condition, Symbol

logger = logging.getLogger(__name__)


# ============================================================================
# EDGES AND ROOMS
# ============================================================================

@dataclass(frozen=True)
class Edge:
    """Connection from `source` to `target`, optionally locked by `symbol`."""
    source: int
    target: int
    symbol: Optional[Symbol] = None

    @property
    def is_locked(self) -> bool:
        return self.symbol is not None


@dataclass
class Room:
    """
    A room slot used by the dungeon.

    Attributes:
        id: Layout id of the slot
        coords: Opaque coordinate(s) from the layout provider
        parent_id: Spanning-tree parent (None for the entrance)
        item: Placed item symbol (key, switch, start, boss or goal)
        precond: Symbols required to enter
        intensity: Difficulty score; [0, 1) after intensity computation,
            boss = 1.0, goal = 0.0
        children: Spanning-tree children, in creation order
        edges: Neighbour id -> outgoing edge
    """
    id: int
    coords: Any
    parent_id: Optional[int] = None
    item: Optional[Symbol] = None
    precond: Condition = field(default_factory=Condition)
    intensity: float = 0.0
    children: List[int] = field(default_factory=list)
    edges: Dict[int, Edge] = field(default_factory=dict)

    def is_start(self) -> bool:
        return self.item is not None and self.item.is_start

    def is_goal(self) -> bool:
        return self.item is not None and self.item.is_goal

    def is_boss(self) -> bool:
        return self.item is not None and self.item.is_boss

    def is_switch(self) -> bool:
        return self.item is not None and self.item.is_switch

    def get_edge(self, target_id: int) -> Optional[Edge]:
        return self.edges.get(target_id)

    def link_count(self) -> int:
        return len(self.edges)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'coords': _jsonable(self.coords),
            'parent': self.parent_id,
            'children': list(self.children),
            'item': str(self.item) if self.item is not None else None,
            'precond': [str(sym) for sym in self.precond],
            'intensity': self.intensity,
            'edges': [
                {
                    'target': edge.target,
                    'symbol': str(edge.symbol) if edge.symbol is not None else None,
                }
                for edge in self.edges.values()
            ],
        }


def _jsonable(coords: Any) -> Any:
    if isinstance(coords, (list, tuple)):
        return [_jsonable(c) for c in coords]
    if hasattr(coords, 'item'):
        # numpy scalar
        return coords.item()
    return coords


# ============================================================================
# DUNGEON
# ============================================================================

class Dungeon:
    """
    Mutable store of rooms and edges for one generation attempt.

    Rooms are inserted once per id and mutated in place afterwards; they are
    never removed.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self._rooms: Dict[int, Room] = {}

    # ------------------------------------------------------------------
    # Rooms
    # ------------------------------------------------------------------

    def add(self, room: Room) -> Room:
        """Insert a room. Inserting an id twice is a contract violation."""
        with self.lock:
            if room.id in self._rooms:
                raise ValueError(f"Room {room.id} already exists in the dungeon")
            self._rooms[room.id] = room
        return room

    def get(self, room_id: int) -> Optional[Room]:
        return self._rooms.get(room_id)

    def __getitem__(self, room_id: int) -> Room:
        return self._rooms[room_id]

    def __contains__(self, room_id: int) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def room_count(self) -> int:
        return len(self._rooms)

    def rooms(self) -> List[Room]:
        """Snapshot of all rooms in insertion order."""
        with self.lock:
            return list(self._rooms.values())

    def room_ids(self) -> List[int]:
        with self.lock:
            return list(self._rooms)

    def attach_child(
        self,
        parent_id: int,
        room: Room,
        symbol: Optional[Symbol] = None,
    ) -> Room:
        """
        Atomically insert `room` as a spanning-tree child of `parent_id` and
        link the two rooms, locked by `symbol` when given.
        """
        with self.lock:
            parent = self._require(parent_id)
            self.add(room)
            room.parent_id = parent_id
            parent.children.append(room.id)
            self.link(parent_id, room.id, symbol)
        return room

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def link(self, a_id: int, b_id: int, symbol: Optional[Symbol] = None) -> None:
        """Create (or replace) edges in both directions between two rooms."""
        with self.lock:
            a = self._require(a_id)
            b = self._require(b_id)
            a.edges[b_id] = Edge(a_id, b_id, symbol)
            b.edges[a_id] = Edge(b_id, a_id, symbol)

    def link_one_way(self, a_id: int, b_id: int, symbol: Optional[Symbol] = None) -> None:
        """Create (or replace) the edge from `a_id` to `b_id` only."""
        with self.lock:
            a = self._require(a_id)
            self._require(b_id)
            a.edges[b_id] = Edge(a_id, b_id, symbol)

    def edges(self) -> List[Edge]:
        with self.lock:
            return [edge for room in self._rooms.values() for edge in room.edges.values()]

    def edge_count(self) -> int:
        """Number of connected room pairs (a two-way link counts once)."""
        with self.lock:
            pairs = {
                frozenset((edge.source, edge.target))
                for room in self._rooms.values()
                for edge in room.edges.values()
            }
        return len(pairs)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_start(self) -> Optional[Room]:
        return self._find_item(Room.is_start)

    def find_boss(self) -> Optional[Room]:
        return self._find_item(Room.is_boss)

    def find_goal(self) -> Optional[Room]:
        return self._find_item(Room.is_goal)

    def find_switch(self) -> Optional[Room]:
        return self._find_item(Room.is_switch)

    def iter_subtree(self, room_id: int) -> Iterator[Room]:
        """Pre-order walk of the spanning subtree rooted at `room_id`."""
        stack = [room_id]
        while stack:
            room = self._rooms[stack.pop()]
            yield room
            stack.extend(reversed(room.children))

    def to_dict(self) -> Dict[str, Any]:
        with self.lock:
            start = self.find_start()
            boss = self.find_boss()
            goal = self.find_goal()
            return {
                'rooms': [room.to_dict() for room in self._rooms.values()],
                'start': start.id if start is not None else None,
                'boss': boss.id if boss is not None else None,
                'goal': goal.id if goal is not None else None,
            }

    def _find_item(self, predicate) -> Optional[Room]:
        with self.lock:
            for room in self._rooms.values():
                if predicate(room):
                    return room
        return None

    def _require(self, room_id: int) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            raise ValueError(f"Room {room_id} is not in the dungeon")
        return room

    def __repr__(self) -> str:
        return f"Dungeon(rooms={len(self._rooms)}, edges={self.edge_count()})"
