from flask import current_app, request
from flask_socketio import disconnect, emit
from typing import Set

from minesweeper import get_game, socketio
from minesweeper.protocol import BOARD, BOOM, BYE, HELP, handle_request, welcome_message

# sids currently counted as players; guards against double decrements
_counted_sids: Set[str] = set()


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    game = get_game(current_app)
    sid = _get_sid()
    if sid not in _counted_sids:
        _counted_sids.add(sid)
        game.players.increment()
    current_app.logger.info(f"[ws-connect] sid={sid} players={game.players.count}")
    emit('welcome', {'message': welcome_message(game.players.count)})


def handle_disconnect(*args):
    game = get_game(current_app)
    sid = _get_sid()
    if sid in _counted_sids:
        _counted_sids.discard(sid)
        game.players.decrement()
    current_app.logger.info(f"[ws-disconnect] sid={sid} players={game.players.count}")


def handle_command(data):
    """Run one text command; replies mirror the TCP protocol."""
    line = data.get('line') if isinstance(data, dict) else data
    if not isinstance(line, str):
        emit('error', {'message': 'line is required'})
        return
    game = get_game(current_app)
    reply = handle_request(game.board, line)
    if reply is None:
        return
    if reply.kind == BYE:
        disconnect()
        return
    if reply.kind == BOARD:
        emit('board', {'board': reply.text})
    elif reply.kind == HELP:
        emit('help', {'message': reply.text})
    elif reply.kind == BOOM:
        current_app.logger.info(f"[boom] sid={_get_sid()} debug={game.debug}")
        emit('boom', {'message': reply.text})
        if not game.debug:
            disconnect()


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register the Socket.IO event handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('command', handle_command, namespace=namespace)
