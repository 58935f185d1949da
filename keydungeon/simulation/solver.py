"""
Dungeon Solver - Lock/Key/Switch State-Space Search
===================================================

Breadth-first search over player states to confirm that a generated dungeon
can be completed from its entrance.

State:
    (room, keys held, switch state)

Moves:
    - Walk along an edge whose lock is satisfied:
        * unlocked edges always
        * KEY(n) edges when key n is held (keys are not consumed)
        * SWITCH_ON / SWITCH_OFF edges when the switch is in that state
    - Toggle the switch while standing in the switch room

Keys are picked up on entering the room that holds them. The switch starts
Off. The target is the goal room, or the boss room when the dungeon has no
goal.

Usage:
    solver = DungeonSolver(dungeon)
    result = solver.solve()
    if result.solvable:
        print(f"Path: {result.path}, keys: {result.keys_collected}")
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

from keydungeon.core.dungeon import Dungeon, Edge
from keydungeon.core.symbols import SwitchState

logger = logging.getLogger(__name__)

# (room id, keys held, switch is on)
SolverState = Tuple[int, FrozenSet[int], bool]


@dataclass
class SolveResult:
    """Result of a solvability search."""
    solvable: bool
    path: List[int] = field(default_factory=list)
    keys_collected: List[int] = field(default_factory=list)
    switch_toggles: int = 0
    states_explored: int = 0


class DungeonSolver:
    """
    Exhaustive BFS solver for lock-and-key dungeons.

    The state space is bounded by rooms x 2^keys x 2, which is small for the
    key budgets the generator works with.
    """

    def __init__(self, dungeon: Dungeon, initial_switch: SwitchState = SwitchState.OFF):
        if initial_switch is SwitchState.EITHER:
            raise ValueError("initial switch state must be ON or OFF")
        self.dungeon = dungeon
        self.initial_switch_on = initial_switch is SwitchState.ON

    def solve(self) -> SolveResult:
        start = self.dungeon.find_start()
        target = self.dungeon.find_goal() or self.dungeon.find_boss()
        if start is None or target is None:
            logger.warning("Dungeon has no start or no goal/boss room; nothing to solve")
            return SolveResult(solvable=False)

        initial: SolverState = (start.id, self._pickup(start.id, frozenset()), self.initial_switch_on)
        parents: Dict[SolverState, Optional[SolverState]] = {initial: None}
        queue = deque([initial])

        while queue:
            state = queue.popleft()
            room_id, keys, switch_on = state

            if room_id == target.id:
                result = self._build_result(state, parents)
                logger.debug(
                    f"Solved in {len(result.path)} moves, "
                    f"{result.switch_toggles} toggles, {len(parents)} states"
                )
                return result

            room = self.dungeon[room_id]
            successors = []
            if room.is_switch():
                successors.append((room_id, keys, not switch_on))
            for edge in room.edges.values():
                if self._can_pass(edge, keys, switch_on):
                    successors.append((edge.target, self._pickup(edge.target, keys), switch_on))

            for nxt in successors:
                if nxt not in parents:
                    parents[nxt] = state
                    queue.append(nxt)

        logger.debug(f"Dungeon unsolvable after exploring {len(parents)} states")
        return SolveResult(solvable=False, states_explored=len(parents))

    def _pickup(self, room_id: int, keys: FrozenSet[int]) -> FrozenSet[int]:
        item = self.dungeon[room_id].item
        if item is not None and item.is_key:
            return keys | {item.value}
        return keys

    @staticmethod
    def _can_pass(edge: Edge, keys: FrozenSet[int], switch_on: bool) -> bool:
        symbol = edge.symbol
        if symbol is None:
            return True
        if symbol.is_key:
            return symbol.value in keys
        if symbol.is_switch_state:
            return (symbol == SwitchState.ON.to_symbol()) == switch_on
        return False

    @staticmethod
    def _build_result(
        final: SolverState,
        parents: Dict[SolverState, Optional[SolverState]],
    ) -> SolveResult:
        chain = []
        state: Optional[SolverState] = final
        while state is not None:
            chain.append(state)
            state = parents[state]
        chain.reverse()

        path = [chain[0][0]]
        keys_collected = sorted(chain[0][1])
        toggles = 0
        for prev, cur in zip(chain, chain[1:]):
            if cur[0] == prev[0]:
                toggles += 1
                continue
            path.append(cur[0])
            keys_collected.extend(sorted(cur[1] - prev[1]))

        return SolveResult(
            solvable=True,
            path=path,
            keys_collected=keys_collected,
            switch_toggles=toggles,
            states_explored=len(parents),
        )
