import os
import random
import sys
import pytest

# Ensure the backend root (containing the `matchgame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from matchgame import create_app, socketio
from matchgame.services.games.registry import clear_sessions
from matchgame.services.games.rules import Rules
from matchgame.services.games.scheduler import ManualScheduler
from matchgame.services.games.session import GameSession


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SCHEDULER = 'manual'
    RANDOM_SEED = 1234
    CORS_ORIGINS = ['http://localhost:5173']


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
    from matchgame.socketio_events import reset_socket_state
    clear_sessions()
    reset_socket_state()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def received():
    """Events emitted by the ``session`` fixture, in order."""
    return []


@pytest.fixture()
def session(received):
    return GameSession(
        rules=Rules(),
        scheduler=ManualScheduler(),
        listener=received.append,
        rng=random.Random(7),
        code='TEST',
    )
