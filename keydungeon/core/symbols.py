"""
Symbols and Conditions: The Lock/Key Vocabulary
================================================

Immutable values describing what a room holds and what a player must hold to
enter it.

Symbols:
    - KEY(n):      Key for level n (n >= 0)
    - SWITCH_ON:   Switch must be in the On state
    - SWITCH_OFF:  Switch must be in the Off state
    - SWITCH:      The switch item itself
    - START:       Entrance marker
    - GOAL:        Goal marker (reward room behind the boss)
    - BOSS:        Boss marker

Conditions:
    A Condition is a conjunction (set) of symbols. The empty condition is
    always satisfied.

    A.implies(B)  <=>  every symbol of B is in A
                  (A is at least as restrictive as B)

Usage:
    cond = Condition().and_(Symbol.key(0)).and_(Symbol.key(1))
    assert cond.key_level == 2
    assert cond.implies(Condition(Symbol.key(0)))
    assert cond.single_symbol_difference(Condition(Symbol.key(0))) == Symbol.key(1)
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Union


# ============================================================================
# SYMBOLS
# ============================================================================

class SymbolKind(Enum):
    """Tag of a Symbol."""
    KEY = "key"
    SWITCH_ON = "switch_on"
    SWITCH_OFF = "switch_off"
    SWITCH = "switch"
    START = "start"
    GOAL = "goal"
    BOSS = "boss"


@dataclass(frozen=True)
class Symbol:
    """
    A tagged, immutable value. Only KEY symbols carry a value (the key level).

    Compared and hashed by (kind, value).
    """
    kind: SymbolKind
    value: Optional[int] = None

    def __post_init__(self):
        if self.kind is SymbolKind.KEY:
            if self.value is None or self.value < 0:
                raise ValueError(f"Key symbols need a non-negative level, got {self.value!r}")
        elif self.value is not None:
            raise ValueError(f"{self.kind.value} symbols carry no value")

    @classmethod
    def key(cls, level: int) -> 'Symbol':
        return cls(SymbolKind.KEY, level)

    @classmethod
    def start(cls) -> 'Symbol':
        return cls(SymbolKind.START)

    @classmethod
    def goal(cls) -> 'Symbol':
        return cls(SymbolKind.GOAL)

    @classmethod
    def boss(cls) -> 'Symbol':
        return cls(SymbolKind.BOSS)

    @classmethod
    def switch(cls) -> 'Symbol':
        return cls(SymbolKind.SWITCH)

    @classmethod
    def switch_on(cls) -> 'Symbol':
        return cls(SymbolKind.SWITCH_ON)

    @classmethod
    def switch_off(cls) -> 'Symbol':
        return cls(SymbolKind.SWITCH_OFF)

    @property
    def is_key(self) -> bool:
        return self.kind is SymbolKind.KEY

    @property
    def is_switch_state(self) -> bool:
        return self.kind in (SymbolKind.SWITCH_ON, SymbolKind.SWITCH_OFF)

    @property
    def is_switch(self) -> bool:
        return self.kind is SymbolKind.SWITCH

    @property
    def is_start(self) -> bool:
        return self.kind is SymbolKind.START

    @property
    def is_goal(self) -> bool:
        return self.kind is SymbolKind.GOAL

    @property
    def is_boss(self) -> bool:
        return self.kind is SymbolKind.BOSS

    def __str__(self) -> str:
        if self.is_key:
            return f"K{self.value}"
        return _SYMBOL_NAMES[self.kind]


_SYMBOL_NAMES = {
    SymbolKind.SWITCH_ON: "ON",
    SymbolKind.SWITCH_OFF: "OFF",
    SymbolKind.SWITCH: "Switch",
    SymbolKind.START: "Start",
    SymbolKind.GOAL: "Goal",
    SymbolKind.BOSS: "Boss",
}


class SwitchState(Enum):
    """
    State a switch-lock requires.

    EITHER is a wildcard used while deciding which state to require; it is
    never stored in a Condition or on an Edge.
    """
    ON = "on"
    OFF = "off"
    EITHER = "either"

    def invert(self) -> 'SwitchState':
        if self is SwitchState.ON:
            return SwitchState.OFF
        if self is SwitchState.OFF:
            return SwitchState.ON
        return SwitchState.EITHER

    def to_symbol(self) -> Symbol:
        if self is SwitchState.ON:
            return Symbol.switch_on()
        if self is SwitchState.OFF:
            return Symbol.switch_off()
        raise ValueError("SwitchState.EITHER has no symbol")


# ============================================================================
# CONDITIONS
# ============================================================================

class Condition:
    """
    Immutable conjunction of symbols required to enter a room.

    Args:
        symbols: A single Symbol, or any iterable of Symbols
    """

    __slots__ = ('_symbols',)

    def __init__(self, symbols: Union[Symbol, Iterable[Symbol], None] = None):
        if symbols is None:
            frozen = frozenset()
        elif isinstance(symbols, Symbol):
            frozen = frozenset((symbols,))
        else:
            frozen = frozenset(symbols)
        _check_symbols(frozen)
        object.__setattr__(self, '_symbols', frozen)

    def __setattr__(self, name, value):
        raise AttributeError("Condition is immutable")

    @property
    def symbols(self) -> FrozenSet[Symbol]:
        return self._symbols

    @property
    def key_level(self) -> int:
        """Number of distinct keys required."""
        return sum(1 for sym in self._symbols if sym.is_key)

    @property
    def switch_state(self) -> SwitchState:
        """Required switch state, EITHER when no switch state is required."""
        for sym in self._symbols:
            if sym.kind is SymbolKind.SWITCH_ON:
                return SwitchState.ON
            if sym.kind is SymbolKind.SWITCH_OFF:
                return SwitchState.OFF
        return SwitchState.EITHER

    def and_(self, other: Union[Symbol, 'Condition']) -> 'Condition':
        """Conjunction of this condition with a symbol or another condition."""
        if isinstance(other, Condition):
            return Condition(self._symbols | other._symbols)
        return Condition(self._symbols | {other})

    def implies(self, other: Union[Symbol, 'Condition']) -> bool:
        """True iff holding this condition guarantees `other` holds."""
        if isinstance(other, Condition):
            return other._symbols <= self._symbols
        return other in self._symbols

    def single_symbol_difference(self, other: 'Condition') -> Optional[Symbol]:
        """
        The symbol present in exactly one of the two conditions, when the
        symmetric difference has exactly one element; otherwise None.
        """
        difference = self._symbols ^ other._symbols
        if len(difference) != 1:
            return None
        return next(iter(difference))

    def __contains__(self, symbol: Symbol) -> bool:
        return symbol in self._symbols

    def __iter__(self):
        return iter(sorted(self._symbols, key=_symbol_sort_key))

    def __len__(self) -> int:
        return len(self._symbols)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Condition):
            return NotImplemented
        return self._symbols == other._symbols

    def __hash__(self) -> int:
        return hash(self._symbols)

    def __str__(self) -> str:
        if not self._symbols:
            return "{}"
        return "{" + ", ".join(str(sym) for sym in self) + "}"

    def __repr__(self) -> str:
        return f"Condition({str(self)})"


def _check_symbols(symbols: FrozenSet[Symbol]) -> None:
    if Symbol.switch_on() in symbols and Symbol.switch_off() in symbols:
        raise ValueError("A condition cannot require the switch both On and Off")
    for sym in symbols:
        if not (sym.is_key or sym.is_switch_state):
            raise ValueError(f"{sym} cannot appear in a condition")


def _symbol_sort_key(sym: Symbol):
    return (sym.kind.value, sym.value if sym.value is not None else -1)
