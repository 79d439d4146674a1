from dataclasses import dataclass

from .rules import Rules

POINTS_PER_MATCH = 2


@dataclass
class ScoreState:
    score: int = 0
    last_bonus_at: int = 0

    @property
    def match_count(self) -> int:
        return self.score // POINTS_PER_MATCH

    def reset(self) -> None:
        self.score = 0
        self.last_bonus_at = 0


@dataclass(frozen=True)
class MatchScore:
    score: int
    bonus_seconds: int
    won: bool


def score_match(state: ScoreState, rules: Rules) -> MatchScore:
    """Apply one successful match to ``state``.

    +2 per match. A bonus is granted each time the completed-match count
    crosses a new multiple of ``rules.bonus_every``; since the count moves
    by one per match, at most one bonus is granted per call.
    """
    state.score += POINTS_PER_MATCH
    bonus = 0
    threshold = state.match_count // rules.bonus_every
    if threshold > state.last_bonus_at:
        state.last_bonus_at = threshold
        bonus = rules.bonus_seconds
    return MatchScore(score=state.score, bonus_seconds=bonus, won=state.score >= rules.total_to_win)
