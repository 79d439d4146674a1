import logging
import random
import threading
from typing import Callable, Optional

from . import events
from .board import SlotBoard
from .matching import (
    CLEARED, MATCHED, MISMATCHED, SELECTED, SWAPPED, WRONG_MESSAGE,
    MatchEngine, SelectedTile, selection_prompt,
)
from .pairs import PairSession
from .problems import ACTIVE, ROLES, Pair, ProblemGenerator
from .problems import MATCHED as PAIR_MATCHED
from .rules import Rules
from .scheduler import ManualScheduler, Scheduler
from .scoring import ScoreState, score_match
from .timer import CountdownTimer

logger = logging.getLogger(__name__)

NOT_STARTED = 'not_started'
RUNNING = 'running'
WON = events.WON
LOST = events.LOST

Listener = Callable[[events.Event], None]


class GameSession:
    """One play-through: board, selection, score and countdown.

    The session is driven by two stimuli, ``select_tile`` calls and timer
    ticks, and reports everything that happens through ``listener``.
    ``start`` may be called again at any time and fully resets the session.
    Delayed work (pair replacement, clearing the mismatch marker, bonus popup
    expiry) is scheduled with the current ``generation`` and ignored once a
    restart has moved the generation on.
    """

    def __init__(self, rules: Optional[Rules] = None, scheduler: Optional[Scheduler] = None,
                 listener: Optional[Listener] = None, rng: Optional[random.Random] = None,
                 code: Optional[str] = None) -> None:
        self.code = code
        self.rules = rules or Rules()
        self.scheduler = scheduler or ManualScheduler()
        self.listener = listener
        self._rng = rng or random.Random()
        self.generator = ProblemGenerator(self._rng)
        self.pairs = PairSession(SlotBoard(self.rules.board_capacity, self._rng), self.generator, self._rng)
        self.engine = MatchEngine()
        self.scores = ScoreState()
        self._lock = threading.RLock()
        self.timer = CountdownTimer(
            self.scheduler,
            initial_time=self.rules.initial_time,
            interval=self.rules.tick_interval_sec,
            on_tick=self._on_tick,
            lock=self._lock,
        )
        self.state = NOT_STARTED
        self.generation = 0

    @property
    def running(self) -> bool:
        return self.state == RUNNING

    @property
    def score(self) -> int:
        return self.scores.score

    @property
    def time_left(self) -> int:
        return self.timer.time_left

    @property
    def board(self) -> SlotBoard:
        return self.pairs.board

    # ---- commands ----

    def start(self) -> None:
        with self._lock:
            self.timer.stop()
            self.generation += 1
            self.scores.reset()
            self.engine.reset()
            batch = self.pairs.initialize(self.rules.tiles_on_board)
            self.state = RUNNING
            self.timer.start()
            logger.info(f"[game-start] game={self.code} generation={self.generation} pairs={len(batch)}")

            self._emit(events.GameStarted(tiles_on_board=self.rules.tiles_on_board, time_left=self.time_left))
            for pair in batch:
                self._emit_pair_added(pair)
            self._emit(events.ScoreChanged(score=self.score))
            self._emit_tick()

    def select_tile(self, pair_id: int, role: str) -> Optional[str]:
        """Handle a click on one tile; returns the outcome, or None if ignored."""
        if role not in ROLES:
            raise ValueError(f"unknown tile role: {role!r}")
        with self._lock:
            if not self.running:
                return None
            pair = self.pairs.find_active(pair_id)
            if pair is None or pair.status != ACTIVE:
                return None

            resolution = self.engine.select(SelectedTile(pair.id, role, pair.slot_for(role)))
            outcome = resolution.outcome
            if outcome in (SELECTED, SWAPPED):
                self._emit_selected(pair, role)
            elif outcome == CLEARED:
                self._emit(events.SelectionCleared())
            elif outcome == MISMATCHED:
                self._mismatch(resolution.previous.pair_id, pair.id)
            elif outcome == MATCHED:
                self._match(pair)
            return outcome

    def close(self) -> None:
        """Stop the clock and orphan any pending callbacks."""
        with self._lock:
            self.timer.stop()
            self.generation += 1
            logger.info(f"[game-close] game={self.code} state={self.state} score={self.score}")

    # ---- transitions ----

    def _match(self, pair: Pair) -> None:
        pair.status = PAIR_MATCHED
        self._emit(events.MatchSucceeded(pair_id=pair.id))

        result = score_match(self.scores, self.rules)
        self._emit(events.ScoreChanged(score=result.score))
        logger.debug(f"[match] game={self.code} pair={pair.id} score={result.score}")

        if result.bonus_seconds:
            time_left = self.timer.add(result.bonus_seconds)
            self._emit(events.BonusGranted(
                seconds=result.bonus_seconds,
                time_left=time_left,
                text=f"+{result.bonus_seconds}s ⏱️",
            ))
            self._later(self.rules.bonus_popup_ms, self._expire_bonus)

        self._later(self.rules.match_remove_delay_ms, self._replace_pair, pair.id)

        if result.won:
            self._finish(WON)

    def _mismatch(self, first_id: int, second_id: int) -> None:
        self._emit(events.MatchFailed(pair_id1=first_id, pair_id2=second_id, message=WRONG_MESSAGE))
        self._later(self.rules.wrong_clear_delay_ms, self._clear_wrong, first_id, second_id)

    def _finish(self, result: str) -> None:
        if not self.running:
            return
        self.state = result
        self.timer.stop()
        if not self.engine.idle:
            self.engine.reset()
            self._emit(events.SelectionCleared())
        logger.info(f"[game-end] game={self.code} result={result} score={self.score} time_left={self.time_left}")
        self._emit(events.GameEnded(result=result, final_score=self.score))

    def _on_tick(self, time_left: int) -> None:
        with self._lock:
            if not self.running:
                return
            self._emit_tick()
            if time_left <= 0:
                self._finish(LOST)

    # ---- delayed callbacks ----

    def _later(self, delay_ms: int, callback: Callable, *args) -> None:
        self.scheduler.call_later(delay_ms / 1000.0, self._guarded, self.generation, callback, *args)

    def _guarded(self, generation: int, callback: Callable, *args) -> None:
        with self._lock:
            if generation != self.generation:
                logger.debug(f"[task-skip] game={self.code} task={callback.__name__} stale generation={generation}")
                return
            callback(*args)

    def _replace_pair(self, pair_id: int) -> None:
        if self.pairs.remove_pair(pair_id) is None:
            return
        self._emit(events.PairRemoved(pair_id=pair_id))
        if not self.running:
            return
        new_pair = self.generator.generate_distinct_batch(1)[0]
        self.pairs.add_pair(new_pair)
        self._emit_pair_added(new_pair)

    def _clear_wrong(self, first_id: int, second_id: int) -> None:
        self._emit(events.WrongCleared(pair_id1=first_id, pair_id2=second_id))

    def _expire_bonus(self) -> None:
        self._emit(events.BonusExpired())

    # ---- emission ----

    def _emit(self, event: events.Event) -> None:
        if self.listener is not None:
            self.listener(event)

    def _emit_selected(self, pair: Pair, role: str) -> None:
        text = pair.text_for(role)
        self._emit(events.TileSelected(pair_id=pair.id, role=role, label=text,
                                       message=selection_prompt(role, text)))

    def _emit_pair_added(self, pair: Pair) -> None:
        self._emit(events.PairAdded(pair=pair.to_dict(), calc_slot=pair.calc_slot,
                                    answer_slot=pair.answer_slot))

    def _emit_tick(self) -> None:
        self._emit(events.TimerTick(time_left=self.time_left, urgency=self.timer.urgency,
                                    progress=self.timer.progress))

    def snapshot(self) -> dict:
        with self._lock:
            selected = self.engine.selected
            slots = []
            for slot in range(self.board.capacity):
                tile = self.board.tile_at(slot)
                slots.append(None if tile is None else {'pair_id': tile.pair_id, 'role': tile.role})
            return {
                'game_code': self.code,
                'status': self.state,
                'running': self.running,
                'score': self.score,
                'time_left': self.time_left,
                'urgency': self.timer.urgency,
                'progress': self.timer.progress,
                'last_bonus_at': self.scores.last_bonus_at,
                'selected': None if selected is None else {'pair_id': selected.pair_id, 'role': selected.role},
                'pairs': self.pairs.snapshot(),
                'slots': slots,
                'rules': self.rules.to_dict(),
            }
