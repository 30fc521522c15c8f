"""Score ledger: append-only storage of game results.

Scores are never updated in place. "Best" and "latest" views are derived
from the rows by the ranking code.
"""

import logging
from typing import List, Optional

from gamezone import db
from gamezone.models import Game, Score, User

logger = logging.getLogger(__name__)

GAME_NAMES = {
    'guessing': 'Guessing Game',
    'spinwheel': 'Spin Wheel',
    'redlight': 'Red Light, Green Light',
    'typeracer': 'Type Racer',
    'cse17': 'CSE-17 Bread Game',
}
UNKNOWN_GAME_NAME = 'Unknown Game'

# Game types where a smaller value ranks higher
LOWER_IS_BETTER = frozenset({'guessing', 'redlight'})


def game_name(game_type: str) -> str:
    return GAME_NAMES.get(game_type, UNKNOWN_GAME_NAME)


def lower_is_better(game_type: str) -> bool:
    return game_type in LOWER_IS_BETTER


def _number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_score(game_type: str, value: float) -> str:
    """Render a raw score for display. Presentation only, never parsed back."""
    if game_type == 'guessing':
        return f"{_number(value)} attempts"
    if game_type == 'redlight':
        return f"{value:.1f}s"
    if game_type == 'typeracer':
        return f"{_number(value)} WPM"
    return f"{_number(value)} pts"


def get_or_create_game(game_type: str) -> Game:
    game = Game.query.filter_by(type=game_type).first()
    if game:
        return game
    name = game_name(game_type)
    if name == UNKNOWN_GAME_NAME:
        logger.error(f"[catalog] unrecognized game type {game_type!r}")
    game = Game(type=game_type, name=name)
    db.session.add(game)
    db.session.flush()
    logger.info(f"[catalog] created game type={game_type} name={name}")
    return game


def record_score(user: User, game_type: str, value: float, accuracy: Optional[float] = None) -> Score:
    game = get_or_create_game(game_type)
    score = Score(user_id=user.id, game_id=game.id, value=float(value), accuracy=accuracy)
    db.session.add(score)
    db.session.commit()
    logger.info(f"[score] user={user.id} game={game_type} value={value}")
    return score


def scores_for_user(user: User, game_type: str) -> List[Score]:
    return (
        Score.query.join(Game)
        .filter(Score.user_id == user.id, Game.type == game_type)
        .order_by(Score.id)
        .all()
    )


def all_scores(game_type: str = 'all') -> list:
    """Every score joined with its player and game, in insertion order."""
    query = (
        db.session.query(Score, User, Game)
        .join(User, Score.user_id == User.id)
        .join(Game, Score.game_id == Game.id)
    )
    if game_type != 'all':
        query = query.filter(Game.type == game_type)
    return query.order_by(Score.id).all()


def increment_games_played(user: User) -> None:
    user.games_played = (user.games_played or 0) + 1
    db.session.add(user)
    db.session.commit()
