"""
Tests for graphify (densification edges).
"""

from keydungeon.core.dungeon import Room
from keydungeon.core.symbols import Condition, Symbol
from keydungeon.generation.graphify import graphify

from conftest import CompleteConstraints


class FixedProbabilityConstraints(CompleteConstraints):

    def __init__(self, probability, **kwargs):
        super().__init__(**kwargs)
        self.probability = probability

    def edge_graphify_probability(self, id1, id2):
        return self.probability


def _keyed(ctx):
    """0(start) -> 1 -K0-> 2 {K0} -K1-> 3 (boss, {K0, K1})."""
    k0 = Condition(Symbol.key(0))
    ctx.dungeon.add(Room(0, (0, 0), item=Symbol.start()))
    ctx.dungeon.attach_child(0, Room(1, (1, 0)))
    ctx.dungeon.attach_child(1, Room(2, (2, 0), precond=k0), Symbol.key(0))
    ctx.dungeon.attach_child(
        2, Room(3, (3, 0), item=Symbol.boss(), precond=k0.and_(Symbol.key(1))), Symbol.key(1),
    )


class TestGraphify:

    def test_single_key_difference_is_locked(self, make_context):
        ctx = make_context(FixedProbabilityConstraints(1.0, slots=4))
        _keyed(ctx)

        added = graphify(ctx)

        assert added == 1
        assert ctx.dungeon[0].get_edge(2).symbol == Symbol.key(0)
        assert ctx.dungeon[2].get_edge(0).symbol == Symbol.key(0)

    def test_boss_is_never_touched(self, make_context):
        ctx = make_context(FixedProbabilityConstraints(1.0, slots=4))
        _keyed(ctx)

        graphify(ctx)

        assert set(ctx.dungeon[3].edges) == {2}
        assert ctx.dungeon[0].get_edge(3) is None
        assert ctx.dungeon[1].get_edge(3) is None

    def test_zero_probability_adds_no_key_edges(self, make_context):
        ctx = make_context(FixedProbabilityConstraints(0.0, slots=4))
        _keyed(ctx)

        assert graphify(ctx) == 0
        assert ctx.dungeon.edge_count() == 3

    def test_switch_state_difference_always_linked(self, make_context):
        ctx = make_context(FixedProbabilityConstraints(0.0, slots=3))
        on = Condition(Symbol.switch_on())
        ctx.dungeon.add(Room(0, (0, 0), item=Symbol.start()))
        ctx.dungeon.attach_child(0, Room(1, (1, 0)))
        ctx.dungeon.attach_child(1, Room(2, (2, 0), precond=on), Symbol.switch_on())

        assert graphify(ctx) == 1
        assert ctx.dungeon[0].get_edge(2).symbol == Symbol.switch_on()

    def test_same_tier_rooms_linked_open(self, make_context):
        ctx = make_context(FixedProbabilityConstraints(1.0, slots=3))
        ctx.dungeon.add(Room(0, (0, 0), item=Symbol.start()))
        ctx.dungeon.attach_child(0, Room(1, (1, 0)))
        ctx.dungeon.attach_child(1, Room(2, (2, 0)))

        assert graphify(ctx) == 1
        assert ctx.dungeon[0].get_edge(2).symbol is None

    def test_unrelated_tiers_left_apart(self, make_context):
        ctx = make_context(FixedProbabilityConstraints(1.0, slots=3))
        ctx.dungeon.add(Room(0, (0, 0), item=Symbol.start()))
        ctx.dungeon.attach_child(
            0, Room(1, (1, 0), precond=Condition(Symbol.switch_on())), Symbol.switch_on(),
        )
        ctx.dungeon.attach_child(
            0, Room(2, (2, 0), precond=Condition(Symbol.switch_off())), Symbol.switch_off(),
        )

        assert graphify(ctx) == 0
        assert ctx.dungeon[1].get_edge(2) is None
