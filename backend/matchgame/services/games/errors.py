class GameError(Exception):
    """Base class for engine invariant violations."""


class BoardFullError(GameError):
    """Raised when a tile is placed on a board with no empty slot."""


class InvalidSlotError(GameError):
    """Raised when a slot is released twice, or placed into while occupied."""
