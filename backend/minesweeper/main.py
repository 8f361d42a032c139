from flask import Blueprint, current_app, jsonify

from minesweeper import get_game

main = Blueprint('main', __name__)


@main.route('/board')
def get_board():
    """Current board as seen by players, plus the connected player count."""
    game = get_game(current_app)
    payload = game.board.to_dict()
    payload['players'] = game.players.count
    return jsonify(payload)


@main.route('/players')
def get_players():
    return jsonify({'players': get_game(current_app).players.count})
