from flask_socketio import join_room, leave_room, emit
from matchgame import socketio
from flask import current_app, request
from matchgame.api.games import parse_selection
from matchgame.services.games.registry import drop_session, get_session, room_for
from typing import Dict, Any
import time


def handle_connect(auth=None):
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(reason=None):
    # When the page that owns a session goes away and no other owner
    # socket remains, close the session for that game code
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx:
        return
    game_code = ctx.get('game_code')
    if ctx.get('is_session_owner') and game_code:
        _owner_count[game_code] = max(0, _owner_count.get(game_code, 0) - 1)
        # In tests, end immediately for determinism; in prod, allow grace period
        if current_app.config.get('TESTING'):
            if _owner_count.get(game_code, 0) == 0:
                _end_session(game_code)
            return
        _schedule_end_if_no_owner(game_code, float(current_app.config.get('OWNER_GRACE_SEC', 2.0)))


def handle_join_game(data):
    game_code = (data or {}).get('game_code')
    is_session_owner = bool((data or {}).get('is_session_owner'))
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    game_code = game_code.upper()
    session = get_session(game_code)
    if not session:
        emit('error', {'message': 'Game not found'})
        return
    room = room_for(game_code)
    join_room(room)
    _sid_to_ctx[_get_sid()] = {'game_code': game_code, 'is_session_owner': is_session_owner}
    if is_session_owner:
        _owner_count[game_code] = _owner_count.get(game_code, 0) + 1
        _cancel_scheduled_end(game_code)
    emit('joined', {'room': room, 'state': session.snapshot()})


def handle_leave_game(data):
    game_code = (data or {}).get('game_code')
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    game_code = game_code.upper()
    room = room_for(game_code)
    leave_room(room)
    emit('left', {'room': room})
    # Explicit quit by the owner closes the session immediately
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx.get('is_session_owner') and ctx.get('game_code') == game_code:
        _sid_to_ctx.pop(_get_sid(), None)
        _end_session(game_code)


def handle_start_game(data):
    session = get_session((data or {}).get('game_code'))
    if not session:
        emit('error', {'message': 'Game not found'})
        return
    session.start()


def handle_select_tile(data):
    session = get_session((data or {}).get('game_code'))
    if not session:
        emit('error', {'message': 'Game not found'})
        return
    pair_id, role, error = parse_selection(data)
    if error:
        emit('error', {'message': error})
        return
    outcome = session.select_tile(pair_id, role)
    emit('select_ack', {'pair_id': pair_id, 'role': role, 'outcome': outcome})


def handle_ping(data):
    emit('pong', data or {})

# ---- Session owner lifecycle helpers ----

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_owner_count: Dict[str, int] = {}
_end_deadline: Dict[str, float] = {}

def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore

def _end_session(game_code: str) -> None:
    """Close the session: notify clients and drop it from the registry."""
    # Use socketio.emit since this may be called from a background task
    socketio.emit('session_ended', {'game_code': game_code}, to=room_for(game_code), namespace='/ws')
    try:
        drop_session(game_code)
    finally:
        _owner_count.pop(game_code, None)
        _end_deadline.pop(game_code, None)

def _schedule_end_if_no_owner(game_code: str, delay_sec: float = 2.0) -> None:
    if _owner_count.get(game_code, 0) > 0:
        return
    _end_deadline[game_code] = time.time() + delay_sec

    def _runner(code: str, deadline: float):
        sleep_for = max(0.0, deadline - time.time())
        if sleep_for:
            socketio.sleep(sleep_for)
        if _owner_count.get(code, 0) == 0 and _end_deadline.get(code) == deadline:
            _end_session(code)

    socketio.start_background_task(_runner, game_code, _end_deadline[game_code])

def _cancel_scheduled_end(game_code: str) -> None:
    _end_deadline.pop(game_code, None)


def reset_socket_state() -> None:
    _sid_to_ctx.clear()
    _owner_count.clear()
    _end_deadline.clear()


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = [
        ('connect', handle_connect),
        ('disconnect', handle_disconnect),
        ('join_game', handle_join_game),
        ('leave_game', handle_leave_game),
        ('start_game', handle_start_game),
        ('select_tile', handle_select_tile),
        ('ping', handle_ping),
    ]
    for name, handler in handlers:
        socketio.on_event(name, handler, namespace='/ws')

    if testing:
        # Test-only mirror on default namespace
        for name, handler in handlers:
            socketio.on_event(name, handler, namespace='/')
