"""
Dungeon Graph Utilities
=======================

Helpers over a finished (or in-progress) Dungeon:
- networkx export for analysis and consumers that work on graphs
- solution path along the spanning tree
- invariant validation of generated dungeons

Usage:
    import networkx as nx
    from keydungeon.utils.graph_utils import to_networkx, validate_dungeon

    G = to_networkx(dungeon)
    print(nx.shortest_path(G, dungeon.find_start().id, dungeon.find_boss().id))

    is_valid, errors = validate_dungeon(dungeon, max_keys=3, generate_goal=True)
    if not is_valid:
        print(f"Validation failed: {errors}")
"""

import logging
from typing import List, Optional, Tuple

import networkx as nx

from keydungeon.core.dungeon import Dungeon
from keydungeon.core.symbols import Symbol, SwitchState

logger = logging.getLogger(__name__)


# ==========================================
# EXPORT
# ==========================================

def to_networkx(dungeon: Dungeon) -> nx.DiGraph:
    """
    Convert a dungeon to a directed networkx graph.

    Node attributes: coords, item, precond, key_level, switch_state
    ("on", "off" or "either"), intensity, parent.
    Edge attributes: symbol (string or None), locked.
    Two-way links become a pair of opposite edges.
    """
    G = nx.DiGraph()
    with dungeon.lock:
        for room in dungeon.rooms():
            G.add_node(
                room.id,
                coords=room.coords,
                item=str(room.item) if room.item is not None else None,
                precond=str(room.precond),
                key_level=room.precond.key_level,
                switch_state=room.precond.switch_state.value,
                intensity=room.intensity,
                parent=room.parent_id,
            )
        for edge in dungeon.edges():
            G.add_edge(
                edge.source,
                edge.target,
                symbol=str(edge.symbol) if edge.symbol is not None else None,
                locked=edge.is_locked,
            )
    return G


# ==========================================
# PATHS
# ==========================================

def get_solution_path(dungeon: Dungeon) -> List[int]:
    """
    Room ids from the goal (or the boss, when there is no goal) back to the
    entrance along parent links. Empty when neither exists.
    """
    room = dungeon.find_goal() or dungeon.find_boss()
    solution = []
    while room is not None:
        solution.append(room.id)
        room = dungeon.get(room.parent_id) if room.parent_id is not None else None
    return solution


# ==========================================
# VALIDATION
# ==========================================

def validate_dungeon(
    dungeon: Dungeon,
    max_keys: Optional[int] = None,
    generate_goal: Optional[bool] = None,
) -> Tuple[bool, List[str]]:
    """
    Check the structural invariants of a generated dungeon.

    Checks:
    1. Exactly one START; at most one BOSS and one GOAL
    2. Preconditions are monotonic along the spanning tree (a child's
       precondition implies its parent's) and parents are linked to children;
       a room behind a switch lock requires that switch state
    3. Boss intensity 1.0, goal intensity 0.0, every other room in [0, 1)
    4. With max_keys: exactly one room holds each key 0..max_keys-1
    5. With generate_goal: a goal exists iff goal generation was enabled
    6. The room graph is connected

    Returns:
        (is_valid, errors)
    """
    errors: List[str] = []
    rooms = dungeon.rooms()

    starts = [room.id for room in rooms if room.is_start()]
    bosses = [room.id for room in rooms if room.is_boss()]
    goals = [room.id for room in rooms if room.is_goal()]

    if len(starts) != 1:
        errors.append(f"Expected exactly one start room, found {starts}")
    if len(bosses) > 1:
        errors.append(f"Multiple boss rooms: {bosses}")
    if len(goals) > 1:
        errors.append(f"Multiple goal rooms: {goals}")
    if generate_goal is not None:
        if not bosses:
            errors.append("No boss room")
        if generate_goal and not goals:
            errors.append("Goal generation enabled but no goal room")
        if not generate_goal and goals:
            errors.append(f"Goal generation disabled but found goal rooms {goals}")

    for room in rooms:
        if room.parent_id is None:
            continue
        parent = dungeon.get(room.parent_id)
        if parent is None:
            errors.append(f"Room {room.id} has missing parent {room.parent_id}")
            continue
        if not room.precond.implies(parent.precond):
            errors.append(
                f"Room {room.id} precondition {room.precond} does not imply "
                f"parent {parent.id} precondition {parent.precond}"
            )
        if room.id not in parent.children:
            errors.append(f"Room {room.id} missing from children of {parent.id}")
        edge = parent.get_edge(room.id)
        if edge is None:
            errors.append(f"No edge from parent {parent.id} to child {room.id}")
        elif edge.symbol is not None and edge.symbol.is_switch_state:
            state = room.precond.switch_state
            if state is SwitchState.EITHER or state.to_symbol() != edge.symbol:
                errors.append(
                    f"Room {room.id} is behind a {edge.symbol} lock but requires "
                    f"switch state {state.value}"
                )

    for room in rooms:
        if room.is_boss():
            if room.intensity != 1.0:
                errors.append(f"Boss room {room.id} intensity {room.intensity} != 1.0")
        elif room.is_goal():
            if room.intensity != 0.0:
                errors.append(f"Goal room {room.id} intensity {room.intensity} != 0.0")
        elif not 0.0 <= room.intensity < 1.0:
            errors.append(f"Room {room.id} intensity {room.intensity} outside [0, 1)")

    if max_keys is not None:
        for level in range(max_keys):
            holders = [room.id for room in rooms if room.item == Symbol.key(level)]
            if len(holders) != 1:
                errors.append(f"Key {level} held by {holders}, expected exactly one room")
        extra = [
            room.id for room in rooms
            if room.item is not None and room.item.is_key and room.item.value >= max_keys
        ]
        if extra:
            errors.append(f"Rooms {extra} hold keys beyond the key budget")

    for edge in dungeon.edges():
        if edge.target not in dungeon:
            errors.append(f"Edge {edge.source}->{edge.target} points to a missing room")

    if rooms and not errors:
        G = to_networkx(dungeon)
        if not nx.is_weakly_connected(G):
            errors.append("Dungeon graph is not connected")

    if errors:
        logger.debug(f"Dungeon validation failed: {errors}")
    return len(errors) == 0, errors
