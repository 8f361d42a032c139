"""Text command protocol shared by the TCP server and the /ws namespace.

Commands arrive one per line; the two integers of dig/flag/deflag are
``X Y`` in screen order (column, then row), so they are swapped before the
board is addressed as ``(row, column)``. Lines that don't match the grammar
exactly produce no reply.
"""

import re
from typing import NamedTuple, Optional

from minesweeper.models import Board, Outcome

BOOM_MSG = 'BOOM!'
HELP_MSG = 'The following commands are available : look, dig, flag, deflag, help, bye'

COMMAND_RE = re.compile(r'(look)|(dig \d+ \d+)|(flag \d+ \d+)|(deflag \d+ \d+)|(help)|(bye)', re.ASCII)

BOARD = 'board'
BOOM = 'boom'
HELP = 'help'
BYE = 'bye'


class Reply(NamedTuple):
    kind: str
    text: str = ''


def welcome_message(players: int) -> str:
    return (
        f'Welcome to Minesweeper. "{players}" people are playing including you. '
        "Type 'help' for help."
    )


def _coordinate(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        # Too many digits to convert; no board is that large, so it is out of bounds.
        return -1


def handle_request(board: Board, line: str) -> Optional[Reply]:
    """Run one command line against the board and return the reply, or None to ignore it."""
    line = line.rstrip('\r\n')
    if not COMMAND_RE.fullmatch(line):
        return None

    parts = line.split(' ')
    command = parts[0]
    if command == 'bye':
        return Reply(BYE)
    if command == 'help':
        return Reply(HELP, HELP_MSG)
    if command == 'look':
        return Reply(BOARD, board.render())

    col, row = _coordinate(parts[1]), _coordinate(parts[2])
    # Render inside the same lock hold so the reply reflects this command.
    with board.locked():
        if command == 'dig':
            if board.dig(row, col) is Outcome.EXPLODED:
                return Reply(BOOM, BOOM_MSG)
        elif command == 'flag':
            board.flag(row, col)
        else:
            board.deflag(row, col)
        return Reply(BOARD, board.render())
