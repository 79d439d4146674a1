"""Game domain services: problems, board, matching, scoring and timers.

This package contains the match-session engine. It knows nothing about
HTTP or Socket.IO; the transport layer drives a ``GameSession`` and relays
the events it emits to the page.
"""

from .errors import BoardFullError, GameError, InvalidSlotError
from .rules import Rules
from .session import GameSession

__all__ = ['BoardFullError', 'GameError', 'GameSession', 'InvalidSlotError', 'Rules']
