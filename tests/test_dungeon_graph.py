"""
Tests for the dungeon graph store.
"""

import threading

import pytest

from keydungeon.core.dungeon import Dungeon, Room
from keydungeon.core.symbols import Condition, Symbol


def _small_dungeon():
    dungeon = Dungeon()
    dungeon.add(Room(0, (0, 0), item=Symbol.start()))
    dungeon.attach_child(0, Room(1, (1, 0)))
    dungeon.attach_child(0, Room(2, (0, 1), precond=Condition(Symbol.key(0))), Symbol.key(0))
    dungeon.attach_child(2, Room(3, (0, 2), item=Symbol.boss()))
    return dungeon


class TestDungeon:

    def test_attach_child_links_both_ways(self):
        dungeon = _small_dungeon()
        assert dungeon[2].parent_id == 0
        assert dungeon[0].children == [1, 2]
        assert dungeon[0].get_edge(2).symbol == Symbol.key(0)
        assert dungeon[2].get_edge(0).symbol == Symbol.key(0)
        assert dungeon[0].get_edge(1).symbol is None

    def test_duplicate_room_rejected(self):
        dungeon = _small_dungeon()
        with pytest.raises(ValueError):
            dungeon.add(Room(1, (5, 5)))

    def test_failed_attach_leaves_room_untouched(self):
        dungeon = _small_dungeon()
        duplicate = Room(3, (4, 4))

        with pytest.raises(ValueError):
            dungeon.attach_child(1, duplicate)

        assert duplicate.parent_id is None
        assert dungeon[1].children == []
        assert dungeon[3].parent_id == 2

    def test_link_unknown_room_rejected(self):
        dungeon = _small_dungeon()
        with pytest.raises(ValueError):
            dungeon.link(0, 99)

    def test_link_one_way(self):
        dungeon = _small_dungeon()
        dungeon.link_one_way(1, 3, Symbol.switch_on())
        assert dungeon[1].get_edge(3).symbol == Symbol.switch_on()
        assert dungeon[3].get_edge(1) is None

    def test_edge_count_counts_pairs(self):
        dungeon = _small_dungeon()
        assert dungeon.edge_count() == 3
        assert len(dungeon.edges()) == 6
        dungeon.link(1, 3)
        assert dungeon.edge_count() == 4

    def test_find_items(self):
        dungeon = _small_dungeon()
        assert dungeon.find_start().id == 0
        assert dungeon.find_boss().id == 3
        assert dungeon.find_goal() is None
        assert dungeon.find_switch() is None

    def test_iter_subtree_is_preorder(self):
        dungeon = _small_dungeon()
        assert [room.id for room in dungeon.iter_subtree(0)] == [0, 1, 2, 3]
        assert [room.id for room in dungeon.iter_subtree(2)] == [2, 3]

    def test_to_dict(self):
        data = _small_dungeon().to_dict()
        assert data['start'] == 0
        assert data['boss'] == 3
        assert data['goal'] is None
        room2 = next(room for room in data['rooms'] if room['id'] == 2)
        assert room2['precond'] == ['K0']
        assert room2['coords'] == [0, 1]
        assert {'target': 0, 'symbol': 'K0'} in room2['edges']

    def test_concurrent_reader_sees_complete_rooms(self):
        dungeon = Dungeon()
        dungeon.add(Room(0, (0, 0), item=Symbol.start()))
        errors = []

        def reader():
            for _ in range(200):
                with dungeon.lock:
                    for room in dungeon.rooms():
                        for edge in room.edges.values():
                            if edge.target not in dungeon:
                                errors.append(edge)

        thread = threading.Thread(target=reader)
        thread.start()
        for i in range(1, 200):
            dungeon.attach_child(i - 1, Room(i, (i, 0)))
        thread.join()

        assert errors == []
        assert dungeon.room_count() == 200
