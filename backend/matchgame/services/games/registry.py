"""In-memory registry of live sessions, one per page, keyed by game code."""

import random
import string
import threading
from typing import Dict, Optional

from matchgame import socketio
from .events import Event
from .rules import Rules
from .scheduler import ManualScheduler, Scheduler, SocketIOScheduler
from .session import GameSession

_sessions: Dict[str, GameSession] = {}
_registry_lock = threading.Lock()


def generate_game_code(length=4):
    """Generate a unique, short game code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in _sessions:
            return code


def room_for(game_code: str) -> str:
    return f"game:{game_code}"


def broadcast_to_room(game_code: str):
    """Listener that relays session events to the page's Socket.IO room."""
    room = room_for(game_code)

    def _emit(event: Event) -> None:
        socketio.emit(event.name, event.payload(), to=room, namespace='/ws')

    return _emit


def _build_scheduler(app) -> Scheduler:
    if app.config.get('SCHEDULER') == 'manual':
        return ManualScheduler()
    return SocketIOScheduler(socketio)


def _build_rng(app) -> random.Random:
    seed = app.config.get('RANDOM_SEED')
    return random.Random(int(seed)) if seed is not None else random.Random()


def create_session(app) -> GameSession:
    with _registry_lock:
        code = generate_game_code()
        session = GameSession(
            rules=Rules.from_config(app.config),
            scheduler=_build_scheduler(app),
            listener=broadcast_to_room(code),
            rng=_build_rng(app),
            code=code,
        )
        _sessions[code] = session
    app.logger.info(f"[session-create] game={code} scheduler={type(session.scheduler).__name__}")
    return session


def get_session(game_code: Optional[str]) -> Optional[GameSession]:
    if not game_code:
        return None
    return _sessions.get(game_code.upper())


def drop_session(game_code: str) -> bool:
    with _registry_lock:
        session = _sessions.pop(game_code.upper(), None)
    if session is None:
        return False
    session.close()
    return True


def session_count() -> int:
    return len(_sessions)


def clear_sessions() -> None:
    with _registry_lock:
        sessions = list(_sessions.values())
        _sessions.clear()
    for session in sessions:
        session.close()
