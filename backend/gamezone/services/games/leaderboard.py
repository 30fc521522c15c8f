"""Leaderboard ranking.

Entries are derived on every call and never stored. Comparison uses the raw
score values; formatting is applied for display only.
"""

import math
from functools import cmp_to_key
from typing import List

from gamezone import db
from gamezone.models import Game, Score, User
from . import ledger

GAME_TYPES = tuple(ledger.GAME_NAMES)

TYPING_PLACEHOLDERS = (
    {'rank': 1, 'player': 'SpeedTyper', 'wpm': 124, 'accuracy': 98},
    {'rank': 2, 'player': 'TypeMaster', 'wpm': 116, 'accuracy': 96},
    {'rank': 3, 'player': 'KeyboardNinja', 'wpm': 105, 'accuracy': 94},
)

OBSTACLE_PLACEHOLDERS = (
    {'player': 'FastBread', 'score': 1250},
    {'player': 'BreadMaster', 'score': 980},
    {'player': 'CarefulLoaf', 'score': 825},
)


def _compare_rows(a, b) -> int:
    # Direction comes from the left-hand row's own game type, so the mixed
    # "all" view is not a single global ascending/descending order.
    a_value, b_value = a[0], b[0]
    if ledger.lower_is_better(a[1]['gameType']):
        diff = a_value - b_value
    else:
        diff = b_value - a_value
    return (diff > 0) - (diff < 0)


def rank(game_type: str = 'all') -> List[dict]:
    rows = []
    for score, user, game in ledger.all_scores(game_type):
        rows.append((score.value, {
            'rank': 0,
            'player': user.username,
            'game': game.name,
            'gameType': game.type,
            'score': ledger.format_score(game.type, score.value),
            'date': score.created_at.date().isoformat(),
        }))

    rows.sort(key=cmp_to_key(_compare_rows))

    entries = []
    for position, (_, entry) in enumerate(rows, start=1):
        entry['rank'] = position
        entries.append(entry)
    return entries


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _best_per_user(game_type: str):
    """Return (user, best score row) pairs, best value first."""
    best = {}
    users = {}
    for score, user, _ in ledger.all_scores(game_type):
        current = best.get(user.id)
        if current is None or score.value > current.value:
            best[user.id] = score
            users[user.id] = user
    ordered = sorted(best.items(), key=lambda item: item[1].value, reverse=True)
    return [(users[user_id], score) for user_id, score in ordered]


def typing_leaderboard() -> List[dict]:
    entries = []
    for position, (user, score) in enumerate(_best_per_user('typeracer'), start=1):
        entries.append({
            'rank': position,
            'player': user.username,
            'wpm': _round_half_up(score.value),
            'accuracy': _round_half_up(score.accuracy) if score.accuracy is not None else None,
        })
    if not entries:
        return [dict(entry) for entry in TYPING_PLACEHOLDERS]
    return entries


def obstacle_leaderboard(top_n: int = 5) -> List[dict]:
    entries = [
        {'player': user.username, 'score': score.value}
        for user, score in _best_per_user('cse17')
    ]
    if not entries:
        entries = [dict(entry) for entry in OBSTACLE_PLACEHOLDERS]
    return entries[:top_n]


def summary() -> dict:
    """Aggregate counts for the admin dashboard."""
    total_users = User.query.count()
    total_scores = Score.query.count()
    games_played = db.session.query(db.func.coalesce(db.func.sum(User.games_played), 0)).scalar()
    per_game = (
        db.session.query(Game.name, db.func.count(Score.id))
        .join(Score, Score.game_id == Game.id)
        .group_by(Game.name)
        .order_by(db.func.count(Score.id).desc(), Game.name)
        .all()
    )
    top_game, top_count = per_game[0] if per_game else (None, 0)
    return {
        'totalUsers': total_users,
        'totalScores': total_scores,
        'gamesPlayed': int(games_played or 0),
        'topGame': top_game,
        'topGamePercentage': round(top_count / total_scores * 100) if total_scores else 0,
    }
