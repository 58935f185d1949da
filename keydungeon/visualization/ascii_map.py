"""
ASCII Dungeon Preview
=====================

Text rendering of dungeons laid out on a grid (room coords are (x, y)
integer pairs, as produced by GridConstraints).

Each room occupies canvas cell (2*y, 2*x); the cell between two
grid-adjacent rooms shows their link.

Room glyphs:
    S  start        B  boss        G  goal
    T  switch       0-9  key (level mod 10)
    .  empty room

Link glyphs:
    - |   open link (horizontal / vertical)
    0-9   locked by that key (level mod 10)
    +     requires switch On
    ~     requires switch Off

Example (3 rooms, boss behind key 0):

    S-.0B
"""

import logging
from typing import Optional

import numpy as np

from keydungeon.core.dungeon import Dungeon, Room
from keydungeon.core.symbols import Symbol

logger = logging.getLogger(__name__)

EMPTY = ' '


def _room_glyph(room: Room) -> str:
    item = room.item
    if item is None:
        return '.'
    if item.is_start:
        return 'S'
    if item.is_boss:
        return 'B'
    if item.is_goal:
        return 'G'
    if item.is_switch:
        return 'T'
    if item.is_key:
        return str(item.value % 10)
    return '?'


def _link_glyph(symbol: Optional[Symbol], horizontal: bool) -> str:
    if symbol is None:
        return '-' if horizontal else '|'
    if symbol.is_key:
        return str(symbol.value % 10)
    if symbol == Symbol.switch_on():
        return '+'
    if symbol == Symbol.switch_off():
        return '~'
    return '?'


def render_ascii(dungeon: Dungeon) -> str:
    """
    Render a grid dungeon as text.

    Raises:
        ValueError: if a room's coords are not an (x, y) integer pair
    """
    rooms = dungeon.rooms()
    if not rooms:
        return ''

    positions = {}
    for room in rooms:
        coords = room.coords
        if not isinstance(coords, (tuple, list)) or len(coords) != 2:
            raise ValueError(f"Room {room.id} coords {coords!r} are not an (x, y) pair")
        positions[room.id] = (int(coords[0]), int(coords[1]))

    xs = [x for x, _ in positions.values()]
    ys = [y for _, y in positions.values()]
    min_x, min_y = min(xs), min(ys)
    width = 2 * (max(xs) - min_x) + 1
    height = 2 * (max(ys) - min_y) + 1

    canvas = np.full((height, width), EMPTY, dtype='<U1')

    for room in rooms:
        x, y = positions[room.id]
        canvas[2 * (y - min_y), 2 * (x - min_x)] = _room_glyph(room)

    for room in rooms:
        x, y = positions[room.id]
        for edge in room.edges.values():
            if edge.target not in positions:
                continue
            tx, ty = positions[edge.target]
            if abs(tx - x) + abs(ty - y) != 1:
                # Not grid-adjacent; nothing sensible to draw
                continue
            row = (y - min_y) + (ty - min_y)
            col = (x - min_x) + (tx - min_x)
            # A locked direction wins over an open one
            if canvas[row, col] == EMPTY or edge.is_locked:
                canvas[row, col] = _link_glyph(edge.symbol, horizontal=(ty == y))

    lines = [''.join(line).rstrip() for line in canvas]
    logger.debug(f"Rendered {len(rooms)} rooms on a {height}x{width} canvas")
    return '\n'.join(lines)
