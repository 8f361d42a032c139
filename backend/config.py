import os


def _env_bool(name, default='false'):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # TCP line protocol
    MINESWEEPER_HOST = os.environ.get('MINESWEEPER_HOST', '0.0.0.0')
    MINESWEEPER_PORT = int(os.environ.get('MINESWEEPER_PORT', '4444'))
    # Keep clients connected after a BOOM
    MINESWEEPER_DEBUG = _env_bool('MINESWEEPER_DEBUG')
    # Optional Socket.IO/HTTP surface. 0 disables.
    MINESWEEPER_WEB_PORT = int(os.environ.get('MINESWEEPER_WEB_PORT', '0'))
    # Board source: BOARD_FILE wins over BOARD_SIZE when set
    BOARD_SIZE = int(os.environ.get('BOARD_SIZE', '10'))
    BOARD_FILE = os.environ.get('BOARD_FILE') or None
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
