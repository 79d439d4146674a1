"""Events a GameSession emits for the presentation layer.

Every event has a ``name`` (the Socket.IO event name) and a ``payload()``
that is safe to serialise as JSON.
"""

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict

WON = 'won'
LOST = 'lost'


@dataclass(frozen=True)
class Event:
    name: ClassVar[str] = 'event'

    def payload(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GameStarted(Event):
    name: ClassVar[str] = 'game_started'
    tiles_on_board: int
    time_left: int


@dataclass(frozen=True)
class TileSelected(Event):
    name: ClassVar[str] = 'tile_selected'
    pair_id: int
    role: str
    label: str
    message: str


@dataclass(frozen=True)
class SelectionCleared(Event):
    name: ClassVar[str] = 'selection_cleared'


@dataclass(frozen=True)
class MatchSucceeded(Event):
    name: ClassVar[str] = 'match_succeeded'
    pair_id: int


@dataclass(frozen=True)
class MatchFailed(Event):
    name: ClassVar[str] = 'match_failed'
    pair_id1: int
    pair_id2: int
    message: str


@dataclass(frozen=True)
class WrongCleared(Event):
    name: ClassVar[str] = 'wrong_cleared'
    pair_id1: int
    pair_id2: int


@dataclass(frozen=True)
class PairAdded(Event):
    name: ClassVar[str] = 'pair_added'
    pair: Dict[str, Any]
    calc_slot: int
    answer_slot: int


@dataclass(frozen=True)
class PairRemoved(Event):
    name: ClassVar[str] = 'pair_removed'
    pair_id: int


@dataclass(frozen=True)
class ScoreChanged(Event):
    name: ClassVar[str] = 'score_changed'
    score: int


@dataclass(frozen=True)
class BonusGranted(Event):
    name: ClassVar[str] = 'bonus_granted'
    seconds: int
    time_left: int
    text: str


@dataclass(frozen=True)
class BonusExpired(Event):
    name: ClassVar[str] = 'bonus_expired'


@dataclass(frozen=True)
class TimerTick(Event):
    name: ClassVar[str] = 'timer_tick'
    time_left: int
    urgency: str
    progress: float


@dataclass(frozen=True)
class GameEnded(Event):
    name: ClassVar[str] = 'game_ended'
    result: str
    final_score: int
