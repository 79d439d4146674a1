import itertools
import random
from dataclasses import dataclass
from typing import List, Optional, Set

ACTIVE = 'active'
MATCHED = 'matched'

CALC = 'calc'
ANSWER = 'answer'
ROLES = (CALC, ANSWER)

MAX_OPERAND = 50
MAX_DIVISOR = 49
MAX_DISTINCT_ATTEMPTS = 20


@dataclass(frozen=True)
class Problem:
    label: str
    answer: int


@dataclass
class Pair:
    id: int
    label: str
    answer: int
    status: str = ACTIVE
    calc_slot: Optional[int] = None
    answer_slot: Optional[int] = None

    def text_for(self, role: str) -> str:
        return self.label if role == CALC else str(self.answer)

    def slot_for(self, role: str) -> Optional[int]:
        return self.calc_slot if role == CALC else self.answer_slot

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'label': self.label,
            'answer': self.answer,
            'status': self.status,
            'calc_slot': self.calc_slot,
            'answer_slot': self.answer_slot,
        }


class ProblemGenerator:
    """Produces multiplication/division problems and wraps them into pairs.

    Pair ids come from a counter owned by the generator, so they keep
    increasing for as long as the generator lives.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self._ids = itertools.count()

    def generate_problem(self) -> Problem:
        if self._rng.random() < 0.5:
            a = self._rng.randint(1, MAX_OPERAND)
            b = self._rng.randint(1, MAX_OPERAND)
            return Problem(label=f"{a} × {b}", answer=a * b)
        b = self._rng.randint(1, MAX_DIVISOR)
        answer = self._rng.randint(1, MAX_OPERAND)
        return Problem(label=f"{b * answer} ÷ {b}", answer=answer)

    def generate_distinct_batch(self, count: int) -> List[Pair]:
        """Generate ``count`` pairs, avoiding repeated answers where possible.

        Each slot retries up to MAX_DISTINCT_ATTEMPTS times; after that the
        duplicate answer is accepted.
        """
        pairs: List[Pair] = []
        used_answers: Set[int] = set()
        for _ in range(count):
            attempts = 0
            while True:
                problem = self.generate_problem()
                attempts += 1
                if problem.answer not in used_answers or attempts >= MAX_DISTINCT_ATTEMPTS:
                    break
            used_answers.add(problem.answer)
            pairs.append(Pair(id=next(self._ids), label=problem.label, answer=problem.answer))
        return pairs
