"""
Key Placement
=============

For every key level but the last, place the key for the next level in one of
the level's rooms. Rooms are shuffled first and then stably sorted, so ties
in the sort order stay random.
"""

import logging

from keydungeon.core.symbols import Symbol
from keydungeon.generation.config import KeyPlacement
from keydungeon.generation.context import GenerationContext
from keydungeon.generation.outcomes import PhaseOutcome

logger = logging.getLogger(__name__)


def place_keys(ctx: GenerationContext) -> PhaseOutcome:
    """
    Place keys so that the dungeon stays solvable.

    Returns:
        OK, or RETRY when some level has no room the key fits in
    """
    dungeon = ctx.dungeon
    levels = ctx.levels

    for key in range(levels.key_count() - 1):
        rooms = levels.get_rooms(key)

        ctx.rng.shuffle(rooms)
        # list.sort is stable (also with reverse=True), so the shuffle above
        # still decides between equal rooms
        if ctx.config.key_placement is KeyPlacement.DEAD_END:
            rooms.sort(key=lambda room_id: dungeon[room_id].link_count())
        else:
            rooms.sort(key=lambda room_id: dungeon[room_id].intensity, reverse=True)

        key_sym = Symbol.key(key)
        for room_id in rooms:
            room = dungeon[room_id]
            if room.item is None and ctx.constraints.room_can_fit_item(room_id, key_sym):
                room.item = key_sym
                logger.debug(f"{key_sym} placed in room {room_id}")
                break
        else:
            return PhaseOutcome.retry(f"No room at key level {key} can hold {key_sym}")

    return PhaseOutcome.ok()
