import os
import random
import sys
import pytest

# Ensure the backend root (containing the `showgame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from showgame import create_app, socketio
from showgame.registry import RoomRegistry
from showgame.room import Room


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['*']
    SOCKETIO_NAMESPACE = '/'
    SHUFFLE_SEED = 7
    LOG_LEVEL = 'DEBUG'
    HOST = '127.0.0.1'
    PORT = 3001


@pytest.fixture()
def registry():
    return RoomRegistry(rng=random.Random(7))


@pytest.fixture()
def flask_app(registry):
    application = create_app(TestConfig, registry=registry)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    """Open Socket.IO test clients on demand; all are closed afterwards."""
    opened = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        test_client.get_received()  # flush
        opened.append(test_client)
        return test_client

    yield _connect
    for test_client in opened:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def room():
    return Room('R1', rng=random.Random(1))


@pytest.fixture()
def full_room(room):
    for player_id in ('a', 'b', 'c', 'd'):
        assert room.add_player(player_id, f"sid-{player_id}")
    return room
