import random
from typing import List, NamedTuple, Optional

from .errors import BoardFullError, InvalidSlotError


class Tile(NamedTuple):
    pair_id: int
    role: str


class SlotBoard:
    """Fixed set of display positions, each empty or holding one tile."""

    def __init__(self, capacity: int = 16, rng: Optional[random.Random] = None) -> None:
        if capacity <= 0:
            raise ValueError('capacity must be positive')
        self._rng = rng or random.Random()
        self._slots: List[Optional[Tile]] = [None] * capacity

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def empty_slots(self) -> List[int]:
        return [i for i, tile in enumerate(self._slots) if tile is None]

    def occupied_count(self) -> int:
        return sum(1 for tile in self._slots if tile is not None)

    def tile_at(self, slot: int) -> Optional[Tile]:
        self._check_range(slot)
        return self._slots[slot]

    def place(self, slot: int, tile: Tile) -> int:
        self._check_range(slot)
        if self._slots[slot] is not None:
            raise InvalidSlotError(f"slot {slot} already holds {self._slots[slot]}")
        self._slots[slot] = tile
        return slot

    def place_random(self, tile: Tile) -> int:
        empty = self.empty_slots()
        if not empty:
            raise BoardFullError(f"no empty slot for {tile}")
        return self.place(self._rng.choice(empty), tile)

    def release(self, slot: int) -> None:
        self._check_range(slot)
        if self._slots[slot] is None:
            raise InvalidSlotError(f"slot {slot} is already empty")
        self._slots[slot] = None

    def clear(self) -> None:
        self._slots = [None] * len(self._slots)

    def _check_range(self, slot: int) -> None:
        if not 0 <= slot < len(self._slots):
            raise InvalidSlotError(f"slot {slot} is outside the board")
