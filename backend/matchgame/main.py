from flask import Blueprint, jsonify

from matchgame.services.games.registry import session_count

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Math Match game server!'})

@main.route('/health')
def health():
    return jsonify({'ok': True, 'sessions': session_count()})
