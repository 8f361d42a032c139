from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

from minesweeper.models import Board
from minesweeper.players import PlayerCounter

allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


class GameState:
    """The shared board and player counter one application serves."""

    def __init__(self, board, players, debug=False):
        self.board = board
        self.players = players
        self.debug = debug


def build_board(config) -> Board:
    if config.get('BOARD_FILE'):
        return Board.from_file(config['BOARD_FILE'])
    return Board.random(int(config.get('BOARD_SIZE', 10)))


def get_game(flask_app) -> GameState:
    return flask_app.extensions['minesweeper']


def create_app(config_class=Config, board=None, players=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    if board is None:
        board = build_board(flask_app.config)
    flask_app.extensions['minesweeper'] = GameState(
        board,
        players if players is not None else PlayerCounter(),
        debug=bool(flask_app.config.get('MINESWEEPER_DEBUG', False)),
    )

    from minesweeper.main import main
    flask_app.register_blueprint(main, url_prefix='/api')

    from minesweeper.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    return flask_app
