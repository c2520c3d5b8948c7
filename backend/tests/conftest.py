import os
import sys
import pytest

# Ensure the backend root (containing the `dungeon_game` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from dungeon_game import create_app, db, socketio
from dungeon_game.services.game_loop import GameServer
from dungeon_game.services.session import GenerationConfig

from helpers import (
    CORRIDOR_EAST,
    CORRIDOR_WEST,
    FakeClock,
    MemoryStore,
    RecordingBroadcaster,
    StaticMazeGenerator,
)


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_TABLES = True
    # Matches the hand-built corridor layouts
    DUNGEON_WIDTH = 7
    DUNGEON_HEIGHT = 3
    DUNGEON_ROOM_COUNT = 2
    DUNGEON_AVG_ROOM_SIZE = 1
    SOCKETIO_NAMESPACE = '/'
    CORS_ORIGINS = ['*']
    LOG_LEVEL = 'DEBUG'


CORRIDOR_CONFIG = GenerationConfig(width=7, height=3, room_count=2, avg_room_size=1)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig, maze_generator=StaticMazeGenerator(CORRIDOR_EAST, CORRIDOR_WEST))
    with application.app_context():
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


@pytest.fixture()
def make_sio_client(flask_app):
    clients = []

    def _make():
        c = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(c)
        return c

    yield _make
    for c in clients:
        if c.is_connected():
            c.disconnect()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def game_server(broadcaster, store, clock):
    server = GameServer(
        StaticMazeGenerator(CORRIDOR_EAST, CORRIDOR_WEST),
        CORRIDOR_CONFIG,
        store,
        broadcaster,
        clock=clock,
    )
    server.start()
    broadcaster.clear()
    return server
