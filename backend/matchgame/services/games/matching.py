from dataclasses import dataclass
from typing import Optional

from .problems import CALC

SELECTED = 'selected'
CLEARED = 'cleared'
MATCHED = 'matched'
MISMATCHED = 'mismatched'
SWAPPED = 'swapped'

WRONG_MESSAGE = '❌ Errado! Tente de novo.'


def selection_prompt(role: str, text: str) -> str:
    if role == CALC:
        return f'"{text}" selecionado — agora clique na resposta!'
    return f'"{text}" selecionado — agora clique na conta!'


@dataclass(frozen=True)
class SelectedTile:
    pair_id: int
    role: str
    slot: Optional[int] = None


@dataclass(frozen=True)
class Resolution:
    outcome: str
    tile: SelectedTile
    previous: Optional[SelectedTile] = None


class MatchEngine:
    """Two-state selection machine: Idle, or OneSelected(tile).

    ``select`` resolves a click against the current selection and returns a
    Resolution; callers decide what the outcome means for score and board.
    Whether a click is allowed at all (session running, pair still active)
    is checked by the caller before ``select`` is reached.
    """

    def __init__(self) -> None:
        self.selected: Optional[SelectedTile] = None

    @property
    def idle(self) -> bool:
        return self.selected is None

    def reset(self) -> None:
        self.selected = None

    def select(self, tile: SelectedTile) -> Resolution:
        prev = self.selected
        if prev is None:
            self.selected = tile
            return Resolution(SELECTED, tile)

        if prev == tile:
            self.selected = None
            return Resolution(CLEARED, tile, prev)

        if prev.pair_id == tile.pair_id and prev.role != tile.role:
            self.selected = None
            return Resolution(MATCHED, tile, prev)

        if prev.pair_id != tile.pair_id:
            self.selected = None
            return Resolution(MISMATCHED, tile, prev)

        # Same pair and role, but a different tile: move the selection.
        self.selected = tile
        return Resolution(SWAPPED, tile, prev)
