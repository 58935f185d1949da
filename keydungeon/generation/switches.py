"""
Switch-Lock Placement
=====================

Places a single switch item and gates part of the dungeon behind switch
states:

1. Pick a branching room on the solution path (base room) so the player
   must deal with a switch-lock to finish the dungeon.
2. Place the switch in a room outside the base room's subtree that is
   reachable whenever the base room is.
3. Walk the base room's children: each unlocked child edge becomes
   switch-locked with probability 3/4 (its subtree inherits the switch
   state precondition); otherwise look for gating opportunities deeper.

Sibling edges alternate between On and Off, starting from a random state.
"""

import logging
from typing import List

from keydungeon.core.dungeon import Room
from keydungeon.core.symbols import Condition, Symbol, SwitchState
from keydungeon.generation.config import SWITCH_LOCK_ODDS, SWITCH_PLACEMENT_ATTEMPTS
from keydungeon.generation.context import GenerationContext
from keydungeon.generation.outcomes import PhaseOutcome
from keydungeon.utils.graph_utils import get_solution_path

logger = logging.getLogger(__name__)


def remove_descendants_from_list(ctx: GenerationContext, room_ids: List[int], room_id: int) -> None:
    """Remove `room_id` and all of its spanning-tree descendants from `room_ids`."""
    subtree = {room.id for room in ctx.dungeon.iter_subtree(room_id)}
    room_ids[:] = [rid for rid in room_ids if rid not in subtree]


def add_precond(ctx: GenerationContext, room_id: int, cond: Condition) -> None:
    """Conjoin `cond` onto the precondition of a room and all its descendants."""
    for room in ctx.dungeon.iter_subtree(room_id):
        room.precond = room.precond.and_(cond)


def switch_lock_child_rooms(ctx: GenerationContext, room: Room, given_state: SwitchState) -> bool:
    """
    Randomly lock descendant rooms of `room` behind switch states.

    Args:
        ctx: Attempt state
        room: Room whose child edges may be locked
        given_state: State to require; EITHER picks a random starting state
            and alternates it between siblings

    Returns:
        True if at least one lock was added
    """
    any_locks = False
    if given_state is not SwitchState.EITHER:
        state = given_state
    else:
        state = SwitchState.ON if ctx.rng.randrange(2) == 0 else SwitchState.OFF

    for neighbour_id in list(room.edges):
        if neighbour_id not in room.children:
            continue
        next_room = ctx.dungeon[neighbour_id]
        if room.edges[neighbour_id].symbol is None and ctx.rng.randrange(SWITCH_LOCK_ODDS) != 0:
            ctx.dungeon.link(room.id, next_room.id, state.to_symbol())
            add_precond(ctx, next_room.id, Condition(state.to_symbol()))
            any_locks = True
        else:
            any_locks |= switch_lock_child_rooms(ctx, next_room, state)

        if given_state is SwitchState.EITHER:
            state = state.invert()

    return any_locks


def place_switches(ctx: GenerationContext) -> PhaseOutcome:
    """
    Place the switch and the switch-locks that require it. A no-op when the
    constraints allow no switches.

    Returns:
        OK, or RETRY when no base room exists or every attempt failed
    """
    if ctx.constraints.max_switches <= 0:
        return PhaseOutcome.ok()

    dungeon = ctx.dungeon
    solution = [dungeon[room_id] for room_id in get_solution_path(dungeon)]
    switch_sym = Symbol.switch()

    for attempt in range(SWITCH_PLACEMENT_ATTEMPTS):
        room_ids = dungeon.room_ids()
        ctx.rng.shuffle(room_ids)
        ctx.rng.shuffle(solution)

        base_room = None
        for room in solution:
            if len(room.children) > 1 and room.parent_id is not None:
                base_room = room
                break
        if base_room is None:
            return PhaseOutcome.retry("No branching room on the solution path")
        base_room_cond = base_room.precond

        remove_descendants_from_list(ctx, room_ids, base_room.id)

        switch_room = None
        for room_id in room_ids:
            room = dungeon[room_id]
            if room.item is None and base_room_cond.implies(room.precond) and \
                    ctx.constraints.room_can_fit_item(room.id, switch_sym):
                switch_room = room
                break
        if switch_room is None:
            logger.debug(f"Switch attempt {attempt + 1}: no room can hold the switch")
            continue

        if switch_lock_child_rooms(ctx, base_room, SwitchState.EITHER):
            switch_room.item = switch_sym
            logger.debug(
                f"Switch placed in room {switch_room.id}, locks below room {base_room.id}"
            )
            return PhaseOutcome.ok()

    return PhaseOutcome.retry(f"No switch-lock placed after {SWITCH_PLACEMENT_ATTEMPTS} attempts")
