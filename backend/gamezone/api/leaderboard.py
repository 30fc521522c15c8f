from flask import Blueprint, jsonify, request

from gamezone.errors import ValidationError
from gamezone.services.games.leaderboard import GAME_TYPES, rank

leaderboard = Blueprint('leaderboard', __name__)


def parse_game_type(value) -> str:
    """Normalize a leaderboard filter: a catalog game type or ``"all"``."""
    game_type = value or 'all'
    if game_type != 'all' and game_type not in GAME_TYPES:
        raise ValidationError('Unknown game type')
    return game_type


@leaderboard.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    game_type = parse_game_type(request.args.get('gameType'))
    return jsonify(rank(game_type))
