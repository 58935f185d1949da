"""
Intensity Curve
===============

Intensity models narrative tension. Within a key level it rises with depth;
at the next key level it restarts from an eased-off fraction of the
previous level's peak, giving a sawtooth that never fully resets.

    intensity(room)  = base * U[1 - j/2, 1 + j/2)          (j = 0.1)
    base(child)      = intensity(parent) + 1.0             (same tier only)
    base(tier root)  = peak(previous tiers) * (1 - 0.2)

Afterwards all intensities are rescaled so the maximum is 0.99; the boss is
then forced to 1.0 and the goal to 0.0.
"""

import logging

from keydungeon.core.dungeon import Room
from keydungeon.generation.config import (
    INTENSITY_EASE_OFF,
    INTENSITY_GROWTH_JITTER,
    INTENSITY_SCALE,
)
from keydungeon.generation.context import GenerationContext
from keydungeon.generation.outcomes import InternalGenerationError

logger = logging.getLogger(__name__)


def apply_intensity(ctx: GenerationContext, room: Room, intensity: float) -> float:
    """
    Set `intensity` (with jitter) on `room` and higher intensities on each of
    its descendants within the same key level.

    Values set here are not normalised; see normalize_intensity.

    Returns:
        The maximum intensity assigned in the walk
    """
    dungeon = ctx.dungeon
    max_intensity = 0.0
    stack = [(room, intensity)]
    while stack:
        current, base = stack.pop()
        value = base * (1.0 - INTENSITY_GROWTH_JITTER / 2.0 +
                        INTENSITY_GROWTH_JITTER * ctx.rng.random())
        current.intensity = value
        max_intensity = max(max_intensity, value)

        same_tier = [
            dungeon[child_id] for child_id in current.children
            if current.precond.implies(dungeon[child_id].precond)
        ]
        for child in reversed(same_tier):
            stack.append((child, value + 1.0))

    return max_intensity


def normalize_intensity(ctx: GenerationContext) -> None:
    """Scale intensities down so that 0 <= intensity < 1.0."""
    rooms = ctx.dungeon.rooms()
    max_intensity = max((room.intensity for room in rooms), default=0.0)
    if max_intensity <= 0.0:
        return
    for room in rooms:
        room.intensity = room.intensity * INTENSITY_SCALE / max_intensity


def compute_intensity(ctx: GenerationContext) -> None:
    """Compute the intensity of every room. Boss and goal must be placed."""
    dungeon = ctx.dungeon
    levels = ctx.levels

    next_level_base_intensity = 0.0
    for level in range(levels.key_count()):
        intensity = next_level_base_intensity * (1.0 - INTENSITY_EASE_OFF)

        for room_id in levels.get_rooms(level):
            room = dungeon[room_id]
            if room.parent_id is None or \
                    not dungeon[room.parent_id].precond.implies(room.precond):
                next_level_base_intensity = max(
                    next_level_base_intensity,
                    apply_intensity(ctx, room, intensity),
                )

    normalize_intensity(ctx)

    boss = dungeon.find_boss()
    if boss is None:
        raise InternalGenerationError("Intensity computed before the boss was placed")
    boss.intensity = 1.0
    goal = dungeon.find_goal()
    if goal is not None:
        goal.intensity = 0.0
