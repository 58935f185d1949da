"""
Room Placement Phases
=====================

1. Entrance seeding: one room at a random initial slot, holding START.
2. Tree growth: rooms are added one at a time as children of existing rooms
   until the dungeon reaches its target size. A new key level opens once
   the current level holds enough rooms; the edge that first crosses into
   a level is locked by that level's key.
3. Boss/goal placement: a leaf (and its parent, when a distinct goal is
   generated) becomes the boss/goal pair and is promoted to the final key
   level.

Solvability invariant:
    Every room's precondition is the running precondition at the time it was
    created. Preconditions only grow, so a child's precondition always
    implies its parent's: the spanning tree is monotonic in key level.
"""

import logging
from typing import Callable, Iterable, Optional

from keydungeon.core.dungeon import Room
from keydungeon.core.symbols import Condition, Symbol
from keydungeon.generation.config import SAME_LEVEL_PARENT_ODDS
from keydungeon.generation.context import GenerationContext
from keydungeon.generation.outcomes import InternalGenerationError, PhaseOutcome

logger = logging.getLogger(__name__)

LockPolicy = Callable[[int, int, int], bool]


# ============================================================================
# ENTRANCE
# ============================================================================

def init_entrance_room(ctx: GenerationContext) -> Room:
    """Create the entrance at a random initial slot and register it at level 0."""
    possible_entries = list(ctx.constraints.initial_rooms())
    if not possible_entries:
        raise InternalGenerationError("Constraints provided no initial rooms")

    room_id = possible_entries[ctx.rng.randrange(len(possible_entries))]
    entrance = Room(
        room_id,
        ctx.constraints.get_coords(room_id),
        item=Symbol.start(),
        precond=Condition(),
    )
    ctx.dungeon.add(entrance)
    ctx.levels.add_room(0, room_id)
    logger.debug(f"Entrance placed at room {room_id}")
    return entrance


# ============================================================================
# TREE GROWTH
# ============================================================================

def should_add_new_lock(
    key_level: int,
    num_rooms: int,
    target_rooms_per_lock: int,
    max_keys: int,
    boss_room_locked: bool,
) -> bool:
    """
    Decide whether to open a new key level.

    Args:
        key_level: Number of distinct locks placed so far
        num_rooms: Rooms already placed at the current key level
        target_rooms_per_lock: Target rooms per key level
        max_keys: Key budget
        boss_room_locked: When True the final key is reserved for the boss
    """
    usable_keys = max_keys - 1 if boss_room_locked else max_keys
    return num_rooms >= target_rooms_per_lock and key_level < usable_keys


def choose_room_with_free_edge(
    ctx: GenerationContext,
    room_ids: Iterable[int],
    key_level: int,
) -> Optional[Room]:
    """
    Randomly choose a room among `room_ids` that has at least one adjacent
    empty slot.

    Returns:
        The chosen room, or None when no room has a free neighbour
    """
    candidates = list(room_ids)
    ctx.rng.shuffle(candidates)
    for room_id in candidates:
        for _, next_id in ctx.constraints.get_adjacent_rooms(room_id, key_level):
            if next_id not in ctx.dungeon:
                return ctx.dungeon[room_id]
    return None


def choose_free_edge(ctx: GenerationContext, room: Room, key_level: int) -> int:
    """Uniformly choose one empty slot adjacent to `room`."""
    free = [
        next_id
        for _, next_id in ctx.constraints.get_adjacent_rooms(room.id, key_level)
        if next_id not in ctx.dungeon
    ]
    if not free:
        raise InternalGenerationError(f"Room {room.id} doesn't have a free edge")
    return ctx.rng.choice(free)


def place_rooms(
    ctx: GenerationContext,
    rooms_per_lock: int,
    lock_policy: Optional[LockPolicy] = None,
) -> PhaseOutcome:
    """
    Fill the dungeon with rooms and doors (some locked). Keys are not placed
    here.

    Args:
        ctx: Attempt state; must already contain the entrance
        rooms_per_lock: Target number of rooms per key level
        lock_policy: (key_level, num_rooms, rooms_per_lock) -> open a level?
            Defaults to should_add_new_lock with the context's budgets.

    Returns:
        OK, or OUT_OF_SPACE when no room has a free adjacent slot
    """
    if lock_policy is None:
        def lock_policy(key_level, num_rooms, target):
            return should_add_new_lock(
                key_level, num_rooms, target,
                ctx.constraints.max_keys, ctx.config.boss_room_locked,
            )

    dungeon = ctx.dungeon
    levels = ctx.levels

    # key_level: keys needed to reach the next room
    key_level = 0
    latest_key: Optional[Symbol] = None
    # keys a player must hold to reach the next room
    cond = Condition()

    while dungeon.room_count() < ctx.constraints.max_rooms:
        do_lock = False

        if lock_policy(key_level, len(levels.get_rooms(key_level)), rooms_per_lock):
            latest_key = Symbol.key(key_level)
            key_level += 1
            cond = cond.and_(latest_key)
            do_lock = True
            logger.debug(f"Opened key level {key_level} with {latest_key}")

        parent = None
        if not do_lock and ctx.rng.randrange(SAME_LEVEL_PARENT_ODDS) > 0:
            parent = choose_room_with_free_edge(ctx, levels.get_rooms(key_level), key_level)
        if parent is None:
            parent = choose_room_with_free_edge(ctx, dungeon.room_ids(), key_level)
            do_lock = True

        if parent is None:
            return PhaseOutcome.out_of_space(
                f"No free slots after {dungeon.room_count()} rooms "
                f"(rooms_per_lock={rooms_per_lock})"
            )

        next_id = choose_free_edge(ctx, parent, key_level)
        room = Room(next_id, ctx.constraints.get_coords(next_id), precond=cond)
        dungeon.attach_child(parent.id, room, latest_key if do_lock else None)
        levels.add_room(key_level, next_id)

    return PhaseOutcome.ok()


# ============================================================================
# BOSS AND GOAL
# ============================================================================

def place_boss_goal_rooms(ctx: GenerationContext) -> PhaseOutcome:
    """
    Place the BOSS (and GOAL) in existing leaf rooms and move them into the
    final key level.

    Returns:
        OK, or RETRY when no leaf is eligible
    """
    dungeon = ctx.dungeon
    levels = ctx.levels
    constraints = ctx.constraints
    generate_goal = ctx.config.generate_goal

    goal_sym = Symbol.goal()
    boss_sym = Symbol.boss()

    possible_goal_rooms = []
    for room in dungeon.rooms():
        if room.children or room.item is not None:
            continue
        if room.parent_id is None:
            continue
        parent = dungeon[room.parent_id]
        if generate_goal:
            if parent.item is not None:
                continue
            if len(parent.children) != 1 or not parent.precond.implies(room.precond):
                continue
            if not constraints.room_can_fit_item(room.id, goal_sym) or \
                    not constraints.room_can_fit_item(parent.id, boss_sym):
                continue
        elif not constraints.room_can_fit_item(room.id, boss_sym):
            continue
        possible_goal_rooms.append(room)

    if not possible_goal_rooms:
        return PhaseOutcome.retry("No room can hold the boss/goal")

    goal_room = possible_goal_rooms[ctx.rng.randrange(len(possible_goal_rooms))]
    boss_room = dungeon[goal_room.parent_id]
    if not generate_goal:
        boss_room = goal_room
        goal_room = None

    if goal_room is not None:
        goal_room.item = goal_sym
    boss_room.item = boss_sym

    old_key_level = boss_room.precond.key_level
    new_key_level = min(levels.key_count(), constraints.max_keys)

    if old_key_level != new_key_level:
        if goal_room is not None:
            levels.remove_room(old_key_level, goal_room.id)
        levels.remove_room(old_key_level, boss_room.id)

        if goal_room is not None:
            levels.add_room(new_key_level, goal_room.id)
        levels.add_room(new_key_level, boss_room.id)

        boss_key = Symbol.key(new_key_level - 1) if new_key_level > 0 else None
        precond = boss_room.precond.and_(boss_key) if boss_key is not None else boss_room.precond
        boss_room.precond = precond
        if goal_room is not None:
            goal_room.precond = precond

        dungeon.link(boss_room.parent_id, boss_room.id, boss_key)
        if goal_room is not None:
            dungeon.link(boss_room.id, goal_room.id)

    logger.debug(
        f"Boss at room {boss_room.id}"
        + (f", goal at room {goal_room.id}" if goal_room is not None else "")
        + f" (key level {new_key_level})"
    )
    return PhaseOutcome.ok()
