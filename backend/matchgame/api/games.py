from flask import Blueprint, jsonify, request, current_app
from matchgame.services.games.problems import ROLES
from matchgame.services.games.registry import create_session, drop_session, get_session
from matchgame.services.games.scheduler import ManualScheduler


games = Blueprint('games', __name__)


def _not_found():
    return jsonify({'error': 'Game not found'}), 404


def parse_selection(data):
    """Return (pair_id, role, error) from a select payload."""
    pair_id = (data or {}).get('pair_id')
    role = (data or {}).get('role')
    if pair_id is None or role is None:
        return None, None, 'pair_id and role are required'
    if isinstance(pair_id, bool):
        return None, None, 'pair_id must be an integer'
    try:
        pair_id = int(pair_id)
    except (TypeError, ValueError):
        return None, None, 'pair_id must be an integer'
    if role not in ROLES:
        return None, None, f"role must be one of {', '.join(ROLES)}"
    return pair_id, role, None


@games.route('/create', methods=['POST'])
def create_game():
    data = request.get_json(silent=True) or {}
    session = create_session(current_app._get_current_object())
    if data.get('start'):
        session.start()
    return jsonify({
        'message': 'New game created!',
        'game_code': session.code,
    }), 201


@games.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    session = get_session(game_code)
    if not session:
        return _not_found()
    return jsonify(session.snapshot())


@games.route('/<string:game_code>/start', methods=['POST'])
def start_game(game_code):
    session = get_session(game_code)
    if not session:
        return _not_found()
    # Restart is always allowed, including mid-game
    session.start()
    current_app.logger.info(f"[start] game={session.code} generation={session.generation}")
    return jsonify(session.snapshot())


@games.route('/<string:game_code>/select', methods=['POST'])
def select_tile(game_code):
    session = get_session(game_code)
    if not session:
        return _not_found()
    pair_id, role, error = parse_selection(request.get_json(silent=True))
    if error:
        return jsonify({'error': error}), 400
    outcome = session.select_tile(pair_id, role)
    payload = session.snapshot()
    payload['outcome'] = outcome
    return jsonify(payload)


@games.route('/<string:game_code>/advance', methods=['POST'])
def advance_clock(game_code):
    """Move a manually scheduled session's clock forward (tests and demos)."""
    session = get_session(game_code)
    if not session:
        return _not_found()
    if not isinstance(session.scheduler, ManualScheduler):
        return jsonify({'error': 'This game runs on the real clock'}), 400
    data = request.get_json(silent=True) or {}
    try:
        seconds = float(data.get('seconds', 1))
    except (TypeError, ValueError):
        return jsonify({'error': 'seconds must be a number'}), 400
    if seconds < 0:
        return jsonify({'error': 'seconds must be non-negative'}), 400
    fired = session.scheduler.advance(seconds)
    payload = session.snapshot()
    payload['fired'] = fired
    return jsonify(payload)


@games.route('/<string:game_code>', methods=['DELETE'])
def close_game(game_code):
    if not drop_session(game_code):
        return _not_found()
    return jsonify({'message': 'Game closed'})
