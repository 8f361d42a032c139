import os
import sys
import pytest

# Ensure the backend root (containing the `minesweeper` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from minesweeper import create_app, get_game, socketio
from minesweeper.models import Board

TWO_BY_TWO = [
    [0, 0],
    [1, 1],
]

class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    MINESWEEPER_HOST = '127.0.0.1'
    MINESWEEPER_PORT = 0
    MINESWEEPER_DEBUG = False
    MINESWEEPER_WEB_PORT = 0
    BOARD_SIZE = 2
    BOARD_FILE = None
    LOG_LEVEL = 'DEBUG'


class DebugConfig(TestConfig):
    MINESWEEPER_DEBUG = True


@pytest.fixture()
def two_by_two():
    return Board(TWO_BY_TWO)


@pytest.fixture()
def flask_app(two_by_two):
    application = create_app(TestConfig, board=two_by_two)
    with application.app_context():
        yield application


@pytest.fixture()
def debug_app():
    application = create_app(DebugConfig, board=Board(TWO_BY_TWO))
    with application.app_context():
        yield application


@pytest.fixture()
def game(flask_app):
    return get_game(flask_app)


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
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')
