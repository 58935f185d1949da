"""
Graphify: Densification
=======================

Randomly links adjacent rooms to make the dungeon less of a tree without
trivialising the puzzle:

- Same tier (preconditions imply each other): unlocked edge, with the
  provider's graphify probability.
- Tiers differing by exactly one symbol: edge locked by that symbol;
  always added for switch states, otherwise with the graphify probability.
- Anything else is left unlinked. Boss and goal rooms are never touched.
"""

import logging

from keydungeon.generation.config import ANY_KEY_LEVEL
from keydungeon.generation.context import GenerationContext

logger = logging.getLogger(__name__)


def graphify(ctx: GenerationContext) -> int:
    """
    Add shortcut/cycle edges between adjacent rooms.

    Returns:
        Number of edges added
    """
    dungeon = ctx.dungeon
    constraints = ctx.constraints
    rng = ctx.rng
    added = 0

    for room in dungeon.rooms():
        if room.is_goal() or room.is_boss():
            continue

        # Any key level: the precondition checks below keep links safe
        for _, next_id in constraints.get_adjacent_rooms(room.id, ANY_KEY_LEVEL):
            if room.get_edge(next_id) is not None:
                continue

            next_room = dungeon.get(next_id)
            if next_room is None or next_room.is_goal() or next_room.is_boss():
                continue

            forward_implies = room.precond.implies(next_room.precond)
            backward_implies = next_room.precond.implies(room.precond)
            if forward_implies and backward_implies:
                if rng.random() >= constraints.edge_graphify_probability(room.id, next_id):
                    continue
                dungeon.link(room.id, next_id)
            else:
                difference = room.precond.single_symbol_difference(next_room.precond)
                if difference is None or (
                        not difference.is_switch_state and
                        rng.random() >= constraints.edge_graphify_probability(room.id, next_id)):
                    continue
                dungeon.link(room.id, next_id, difference)
            added += 1

    logger.debug(f"Graphify added {added} edges")
    return added
