import random
from typing import Dict, List, Optional

from .board import SlotBoard, Tile
from .errors import BoardFullError
from .problems import ANSWER, CALC, Pair, ProblemGenerator


class PairSession:
    """Owns the pairs on the board and the slots their tiles occupy."""

    def __init__(self, board: SlotBoard, generator: ProblemGenerator,
                 rng: Optional[random.Random] = None) -> None:
        self.board = board
        self.generator = generator
        self._rng = rng or random.Random()
        self._pairs: Dict[int, Pair] = {}

    @property
    def pairs(self) -> List[Pair]:
        return list(self._pairs.values())

    def __len__(self) -> int:
        return len(self._pairs)

    def initialize(self, count: int) -> List[Pair]:
        """Reset and lay out ``count`` fresh pairs.

        All tiles are shuffled together before being laid into the empty
        slots, so a pair's two tiles land in unrelated positions.
        """
        if 2 * count > self.board.capacity:
            raise BoardFullError(f"{count} pairs need {2 * count} slots, board has {self.board.capacity}")
        self.board.clear()
        self._pairs = {}
        batch = self.generator.generate_distinct_batch(count)
        tiles = [Tile(p.id, role) for p in batch for role in (CALC, ANSWER)]
        self._rng.shuffle(tiles)
        by_id = {p.id: p for p in batch}
        for slot, tile in zip(self.board.empty_slots(), tiles):
            self.board.place(slot, tile)
            pair = by_id[tile.pair_id]
            if tile.role == CALC:
                pair.calc_slot = slot
            else:
                pair.answer_slot = slot
        for pair in batch:
            self._pairs[pair.id] = pair
        return batch

    def add_pair(self, pair: Pair) -> Pair:
        pair.calc_slot = self.board.place_random(Tile(pair.id, CALC))
        pair.answer_slot = self.board.place_random(Tile(pair.id, ANSWER))
        self._pairs[pair.id] = pair
        return pair

    def remove_pair(self, pair_id: int) -> Optional[Pair]:
        # Absent ids are tolerated: a late replacement may fire twice.
        pair = self._pairs.pop(pair_id, None)
        if pair is None:
            return None
        for slot in (pair.calc_slot, pair.answer_slot):
            if slot is not None:
                self.board.release(slot)
        pair.calc_slot = None
        pair.answer_slot = None
        return pair

    def find_active(self, pair_id: int) -> Optional[Pair]:
        return self._pairs.get(pair_id)

    def snapshot(self) -> List[dict]:
        return [p.to_dict() for p in self._pairs.values()]
