"""
Key-Level Index
===============

Maps a key level (the number of distinct keys needed so far) to the ids of
the rooms created at that level. Rebuilt for every generation attempt.

Level 0 always contains the entrance; levels are dense from 0 upward.
"""

from typing import Dict, List


class KeyLevelRoomMapping:
    """keyLevel -> ordered list of room ids."""

    def __init__(self):
        self._levels: List[List[int]] = []

    def get_rooms(self, key_level: int) -> List[int]:
        """Room ids at `key_level`. Requesting a level creates it (and any below)."""
        if key_level < 0:
            raise ValueError(f"key_level must be >= 0, got {key_level}")
        while key_level >= len(self._levels):
            self._levels.append([])
        return self._levels[key_level]

    def add_room(self, key_level: int, room_id: int) -> None:
        self.get_rooms(key_level).append(room_id)

    def remove_room(self, key_level: int, room_id: int) -> None:
        self.get_rooms(key_level).remove(room_id)

    def key_count(self) -> int:
        """Number of levels."""
        return len(self._levels)

    def as_dict(self) -> Dict[int, List[int]]:
        return {level: list(rooms) for level, rooms in enumerate(self._levels)}

    def __repr__(self) -> str:
        sizes = [len(rooms) for rooms in self._levels]
        return f"KeyLevelRoomMapping(levels={sizes})"
