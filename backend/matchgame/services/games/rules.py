from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class Rules:
    """Fixed constants of one game: board size, win target, bonus and timing."""

    tiles_on_board: int = 8
    total_to_win: int = 120
    bonus_every: int = 5
    bonus_seconds: int = 20
    initial_time: int = 60
    tick_interval_sec: float = 1.0
    match_remove_delay_ms: int = 600
    wrong_clear_delay_ms: int = 700
    bonus_popup_ms: int = 1500

    @property
    def board_capacity(self) -> int:
        return 2 * self.tiles_on_board

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> 'Rules':
        """Build rules from a Flask config mapping, falling back to defaults."""
        defaults = cls()
        return cls(
            tiles_on_board=int(cfg.get('TILES_ON_BOARD', defaults.tiles_on_board)),
            total_to_win=int(cfg.get('TOTAL_TO_WIN', defaults.total_to_win)),
            bonus_every=int(cfg.get('BONUS_EVERY', defaults.bonus_every)),
            bonus_seconds=int(cfg.get('BONUS_SECONDS', defaults.bonus_seconds)),
            initial_time=int(cfg.get('INITIAL_TIME', defaults.initial_time)),
            tick_interval_sec=float(cfg.get('TICK_INTERVAL_SEC', defaults.tick_interval_sec)),
            match_remove_delay_ms=int(cfg.get('MATCH_REMOVE_DELAY_MS', defaults.match_remove_delay_ms)),
            wrong_clear_delay_ms=int(cfg.get('WRONG_CLEAR_DELAY_MS', defaults.wrong_clear_delay_ms)),
            bonus_popup_ms=int(cfg.get('BONUS_POPUP_MS', defaults.bonus_popup_ms)),
        )

    def to_dict(self) -> dict:
        return {
            'tiles_on_board': self.tiles_on_board,
            'total_to_win': self.total_to_win,
            'bonus_every': self.bonus_every,
            'bonus_seconds': self.bonus_seconds,
            'initial_time': self.initial_time,
            'durations': {
                'match_remove_ms': self.match_remove_delay_ms,
                'wrong_clear_ms': self.wrong_clear_delay_ms,
                'bonus_popup_ms': self.bonus_popup_ms,
            },
        }
