"""
Tests for the intensity curve.
"""

import pytest

from keydungeon.core.dungeon import Room
from keydungeon.core.symbols import Condition, Symbol
from keydungeon.generation.intensity import apply_intensity, compute_intensity, normalize_intensity
from keydungeon.generation.outcomes import InternalGenerationError

from conftest import CompleteConstraints


def _tiered(ctx):
    """0(start) -> 1 -> 2 at level 0, then 3 (boss, K0) -> 4 (goal, K0)."""
    key0 = Condition(Symbol.key(0))
    ctx.dungeon.add(Room(0, (0, 0), item=Symbol.start()))
    ctx.dungeon.attach_child(0, Room(1, (1, 0)))
    ctx.dungeon.attach_child(1, Room(2, (2, 0)))
    ctx.dungeon.attach_child(0, Room(3, (3, 0), item=Symbol.boss(), precond=key0), Symbol.key(0))
    ctx.dungeon.attach_child(3, Room(4, (4, 0), item=Symbol.goal(), precond=key0))
    for room_id in (0, 1, 2):
        ctx.levels.add_room(0, room_id)
    for room_id in (3, 4):
        ctx.levels.add_room(1, room_id)


class TestIntensity:

    def test_apply_intensity_rises_with_depth(self, make_context):
        ctx = make_context(CompleteConstraints(slots=5, max_keys=1))
        _tiered(ctx)

        peak = apply_intensity(ctx, ctx.dungeon[0], 0.0)

        rooms = ctx.dungeon
        assert rooms[0].intensity == 0.0
        assert rooms[0].intensity < rooms[1].intensity < rooms[2].intensity
        assert peak == pytest.approx(rooms[2].intensity)
        # Different tier: untouched
        assert rooms[3].intensity == 0.0

    def test_compute_intensity_ranges(self, make_context):
        ctx = make_context(CompleteConstraints(slots=5, max_keys=1), seed=3)
        _tiered(ctx)

        compute_intensity(ctx)

        assert ctx.dungeon[3].intensity == 1.0
        assert ctx.dungeon[4].intensity == 0.0
        for room_id in (0, 1, 2):
            assert 0.0 <= ctx.dungeon[room_id].intensity < 1.0
        assert ctx.dungeon[1].intensity < ctx.dungeon[2].intensity

    def test_normalize_skips_all_zero(self, make_context):
        ctx = make_context(CompleteConstraints(slots=1))
        ctx.dungeon.add(Room(0, (0, 0), item=Symbol.start()))
        normalize_intensity(ctx)
        assert ctx.dungeon[0].intensity == 0.0

    def test_requires_boss(self, make_context):
        ctx = make_context(CompleteConstraints(slots=1))
        ctx.dungeon.add(Room(0, (0, 0), item=Symbol.start()))
        ctx.levels.add_room(0, 0)
        with pytest.raises(InternalGenerationError):
            compute_intensity(ctx)
