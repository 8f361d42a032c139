import threading

import click

from config import Config
from minesweeper import create_app, get_game, socketio
from minesweeper.loader import BoardFileError
from minesweeper.models import Board
from minesweeper.server import MinesweeperServer


def _start_web(app, host, port):
    thread = threading.Thread(
        target=socketio.run,
        args=(app,),
        kwargs={'host': host, 'port': port, 'use_reloader': False, 'allow_unsafe_werkzeug': True},
        name='web',
        daemon=True,
    )
    thread.start()
    return thread


@click.command('minesweeper-server')
@click.argument('debug', required=False, type=click.Choice(['true', 'false']))
@click.option('-s', '--size', type=click.IntRange(min=1), help='Start with a random SIZE x SIZE board.')
@click.option('-f', '--file', 'board_file', type=click.Path(exists=True, dir_okay=False),
              help='Start with the board stored in FILE.')
@click.option('--port', type=int, default=Config.MINESWEEPER_PORT, show_default=True,
              help='TCP port for the line protocol.')
@click.option('--web-port', type=int, default=Config.MINESWEEPER_WEB_PORT, show_default=True,
              help='Also serve the HTTP/Socket.IO surface on this port (0 disables).')
def main(debug, size, board_file, port, web_port):
    """Run a multiplayer Minesweeper server.

    DEBUG is 'true' or 'false'; in debug mode clients stay connected after a
    BOOM. When omitted, MINESWEEPER_DEBUG decides. Without -s or -f a random
    board of the configured size (10 by default) is used.
    """
    if size is not None and board_file is not None:
        raise click.UsageError("-s and -f may not be given together")

    board_file = board_file or (Config.BOARD_FILE if size is None else None)
    try:
        board = Board.from_file(board_file) if board_file else Board.random(size or Config.BOARD_SIZE)
    except BoardFileError as exc:
        raise click.BadParameter(str(exc), param_hint="'-f' / '--file'")

    app = create_app(board=board)
    game = get_game(app)
    if debug is not None:
        game.debug = debug == 'true'

    server = MinesweeperServer(
        board,
        game.players,
        port=port,
        debug=game.debug,
        host=app.config['MINESWEEPER_HOST'],
        logger=app.logger,
    )
    try:
        server.bind()
        if web_port:
            _start_web(app, app.config['MINESWEEPER_HOST'], web_port)
            app.logger.info(f"[web] port={web_port}")
        server.serve_forever()
    except OSError as exc:
        app.logger.error(f"[listen-error] port={port} error={exc!r}")
        raise SystemExit(1)
    except KeyboardInterrupt:
        server.shutdown()


if __name__ == '__main__':
    main()
