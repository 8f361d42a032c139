import logging
import socket
import threading
from typing import Optional

from minesweeper.models import Board
from minesweeper.players import PlayerCounter
from minesweeper.protocol import BOOM, BYE, handle_request, welcome_message


class MinesweeperServer:
    """Line-oriented TCP server: one thread per client over a shared Board.

    The board is thread safe on its own; the player counter has its own lock.
    An error on one client connection closes that connection only, while an
    error on the listening socket propagates out of ``serve_forever``.
    """

    def __init__(
        self,
        board: Board,
        players: Optional[PlayerCounter] = None,
        port: int = 4444,
        debug: bool = False,
        host: str = '0.0.0.0',
        logger: Optional[logging.Logger] = None,
    ):
        self.board = board
        self.players = players if players is not None else PlayerCounter()
        self.host = host
        self.port = port
        self.debug = debug
        self.logger = logger or logging.getLogger(__name__)
        self._listener: Optional[socket.socket] = None
        self._closing = threading.Event()

    def bind(self) -> None:
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            listener.bind((self.host, self.port))
            listener.listen()
        except OSError:
            listener.close()
            raise
        self._listener = listener
        # Port 0 asks the OS for a free port; report the real one.
        self.port = listener.getsockname()[1]
        self.logger.info(f"[listen] host={self.host} port={self.port} debug={self.debug} size={self.board.size}")

    def serve_forever(self) -> None:
        """Accept clients until ``shutdown`` is called. Never returns otherwise."""
        if self._listener is None:
            self.bind()
        while True:
            try:
                conn, addr = self._listener.accept()
            except OSError:
                if self._closing.is_set():
                    return
                raise
            self.players.increment()
            thread = threading.Thread(
                target=self._run_client, args=(conn, addr), name=f"client-{addr[0]}:{addr[1]}", daemon=True
            )
            thread.start()

    def shutdown(self) -> None:
        self._closing.set()
        if self._listener is not None:
            try:
                self._listener.shutdown(socket.SHUT_RDWR)
            except OSError:
                # Not connected on some platforms; close() still wakes accept().
                pass
            self._listener.close()

    def _run_client(self, conn: socket.socket, addr) -> None:
        self.logger.info(f"[connect] client={addr[0]}:{addr[1]} players={self.players.count}")
        try:
            self.handle_connection(conn)
        except Exception as exc:
            self.logger.warning(f"[client-error] client={addr[0]}:{addr[1]} error={exc!r}")
        finally:
            remaining = self.players.decrement()
            conn.close()
            self.logger.info(f"[disconnect] client={addr[0]}:{addr[1]} players={remaining}")

    def handle_connection(self, conn: socket.socket) -> None:
        """Serve one client until it disconnects, says bye, or (outside debug mode) digs a bomb."""
        with conn.makefile('r', encoding='utf-8', errors='replace', newline='\n') as rfile, \
                conn.makefile('w', encoding='utf-8', newline='') as wfile:
            self._send(wfile, welcome_message(self.players.count))
            for line in rfile:
                reply = handle_request(self.board, line)
                if reply is None:
                    continue
                if reply.kind == BYE:
                    break
                self.logger.debug(f"[command] {line.strip()!r} -> {reply.kind}")
                self._send(wfile, reply.text)
                if reply.kind == BOOM:
                    self.logger.info(f"[boom] debug={self.debug}")
                    if not self.debug:
                        break

    @staticmethod
    def _send(wfile, text: str) -> None:
        wfile.write(text + '\r\n')
        wfile.flush()
