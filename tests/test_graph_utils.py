"""
Tests for graph export, solution paths and dungeon validation.
"""

import networkx as nx

from keydungeon.constraints import GridConstraints
from keydungeon.core.dungeon import Dungeon, Room
from keydungeon.core.symbols import Condition, Symbol
from keydungeon.generation import DungeonGenerator, GeneratorConfig
from keydungeon.utils.graph_utils import get_solution_path, to_networkx, validate_dungeon


def _finished():
    """Hand-built dungeon satisfying every invariant (one key)."""
    k0 = Condition(Symbol.key(0))
    dungeon = Dungeon()
    dungeon.add(Room(0, (0, 0), item=Symbol.start(), intensity=0.0))
    dungeon.attach_child(0, Room(1, (1, 0), item=Symbol.key(0), intensity=0.99))
    dungeon.attach_child(0, Room(2, (0, 1), item=Symbol.boss(), precond=k0, intensity=1.0), Symbol.key(0))
    dungeon.attach_child(2, Room(3, (0, 2), item=Symbol.goal(), precond=k0, intensity=0.0))
    return dungeon


class TestExport:

    def test_to_networkx(self):
        G = to_networkx(_finished())

        assert isinstance(G, nx.DiGraph)
        assert G.number_of_nodes() == 4
        assert G.number_of_edges() == 6
        assert G.nodes[2]['item'] == 'Boss'
        assert G.nodes[2]['key_level'] == 1
        assert G.nodes[3]['parent'] == 2
        assert G.edges[0, 2]['symbol'] == 'K0'
        assert G.edges[0, 2]['locked']
        assert not G.edges[2, 3]['locked']
        assert nx.shortest_path(G, 0, 3) == [0, 2, 3]

    def test_switch_state_attribute(self):
        dungeon = _finished()
        dungeon.attach_child(
            1, Room(4, (2, 0), precond=Condition(Symbol.switch_on())), Symbol.switch_on(),
        )

        G = to_networkx(dungeon)

        assert G.nodes[4]['switch_state'] == 'on'
        assert G.nodes[1]['switch_state'] == 'either'

    def test_solution_path(self):
        assert get_solution_path(_finished()) == [3, 2, 0]

    def test_solution_path_falls_back_to_boss(self):
        dungeon = Dungeon()
        dungeon.add(Room(0, (0, 0), item=Symbol.start()))
        dungeon.attach_child(0, Room(1, (1, 0), item=Symbol.boss()))
        assert get_solution_path(dungeon) == [1, 0]

    def test_solution_path_empty(self):
        dungeon = Dungeon()
        dungeon.add(Room(0, (0, 0), item=Symbol.start()))
        assert get_solution_path(dungeon) == []


class TestValidateDungeon:

    def test_valid_dungeon(self):
        valid, errors = validate_dungeon(_finished(), max_keys=1, generate_goal=True)
        assert valid
        assert errors == []

    def test_missing_key_detected(self):
        dungeon = _finished()
        dungeon[1].item = None
        valid, errors = validate_dungeon(dungeon, max_keys=1)
        assert not valid
        assert any("Key 0" in error for error in errors)

    def test_non_monotonic_precondition_detected(self):
        dungeon = _finished()
        dungeon[3].precond = Condition()
        valid, errors = validate_dungeon(dungeon)
        assert not valid
        assert any("does not imply" in error for error in errors)

    def test_intensity_range_detected(self):
        dungeon = _finished()
        dungeon[1].intensity = 1.5
        dungeon[2].intensity = 0.5
        valid, errors = validate_dungeon(dungeon)
        assert not valid
        assert len(errors) == 2

    def test_switch_lock_requires_matching_state(self):
        dungeon = _finished()
        dungeon.attach_child(
            1, Room(4, (2, 0), precond=Condition(Symbol.switch_on())), Symbol.switch_off(),
        )
        dungeon.attach_child(1, Room(5, (1, 1)), Symbol.switch_on())

        valid, errors = validate_dungeon(dungeon)

        assert not valid
        assert len(errors) == 2
        assert all("switch state" in error for error in errors)

    def test_matching_switch_lock_is_valid(self):
        dungeon = _finished()
        dungeon.attach_child(
            1, Room(4, (2, 0), precond=Condition(Symbol.switch_off())), Symbol.switch_off(),
        )
        valid, errors = validate_dungeon(dungeon)
        assert valid, errors

    def test_goal_expectation(self):
        valid, errors = validate_dungeon(_finished(), generate_goal=False)
        assert not valid

    def test_disconnected_detected(self):
        dungeon = _finished()
        dungeon.add(Room(9, (5, 5)))
        valid, errors = validate_dungeon(dungeon)
        assert not valid
        assert errors == ["Dungeon graph is not connected"]

    def test_generated_dungeon_is_valid(self):
        constraints = GridConstraints.rectangle(5, 5, max_rooms=15, max_keys=2)
        dungeon = DungeonGenerator(constraints, GeneratorConfig(seed=21, max_retries=200)).generate()

        valid, errors = validate_dungeon(dungeon, max_keys=2, generate_goal=True)
        assert valid, errors
