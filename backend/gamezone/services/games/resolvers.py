"""Per-game scoring and randomization rules.

Inputs are validated at the HTTP layer; nothing here re-checks ranges.
"""

import random
from collections import namedtuple
from typing import List, Optional, Sequence

from gamezone.models import User
from . import ledger
from .leaderboard import obstacle_leaderboard, typing_leaderboard
from .sessions import KeyedLocks

Prize = namedtuple('Prize', ['value', 'label', 'probability'])

# Order matters: the draw walks this list accumulating probability.
PRIZES = (
    Prize(100, '100 Points', 0.2),
    Prize(250, '250 Points', 0.15),
    Prize(500, '500 Points', 0.1),
    Prize(1000, '1000 Points', 0.05),
    Prize(0, 'Try Again', 0.25),
    Prize(150, '150 Points', 0.15),
    Prize(750, '750 Points', 0.05),
    Prize(300, '300 Points', 0.05),
)

WHEEL_BASE_DEGREES = 1800  # five full turns

TYPING_PROMPTS = (
    "The quick brown fox jumps over the lazy dog.",
    "Programming is the art of telling a computer what to do.",
    "Video games are an exciting form of entertainment for people of all ages.",
    "The best way to predict the future is to invent it.",
    "You miss 100% of the shots you don't take.",
)

OBSTACLE_SIZE = 30

# Held across the personal-best check and the write for one user
submission_lock = KeyedLocks()


def draw_prize(fraction: float, prizes: Sequence[Prize] = PRIZES) -> Prize:
    """Cumulative-distribution lookup of ``fraction`` in [0, 1).

    Falls back to the last prize if rounding leaves the draw unmatched.
    """
    cumulative = 0.0
    for prize in prizes:
        cumulative += prize.probability
        if fraction <= cumulative:
            return prize
    return prizes[-1]


def wheel_degrees(prize: Prize, rng: random.Random, prizes: Sequence[Prize] = PRIZES) -> float:
    per_prize = 360 / len(prizes)
    return WHEEL_BASE_DEGREES + per_prize * prizes.index(prize) + rng.random() * (per_prize * 0.8)


def spin_wheel(user: User, rng: Optional[random.Random] = None) -> dict:
    rng = rng or random
    prize = draw_prize(rng.random())
    degrees = wheel_degrees(prize, rng)
    if prize.value > 0:
        ledger.record_score(user, 'spinwheel', prize.value)
    ledger.increment_games_played(user)
    return {
        'prize': prize.label,
        'value': prize.value,
        'degrees': degrees,
    }


def is_new_personal_best(user: User, game_type: str, value: float) -> bool:
    """True when ``value`` beats every earlier score of ``user`` for a higher-is-better game."""
    previous = [s.value for s in ledger.scores_for_user(user, game_type)]
    return not previous or value > max(previous)


# ---- Guessing ----

def guessing_stats(user: User) -> dict:
    scores = ledger.scores_for_user(user, 'guessing')
    played = len(scores)
    win_rate = round(played / (played + 2) * 100) if played else 0
    best = min((s.value for s in scores), default=0)
    return {
        'gamesPlayed': played,
        'winRate': win_rate,
        'bestScore': int(best) if float(best).is_integer() else best,
    }


# ---- Red light, green light ----

def submit_redlight(user: User, seconds: float) -> dict:
    ledger.record_score(user, 'redlight', seconds)
    return {'success': True, 'stats': redlight_stats(user)}


def redlight_stats(user: User) -> dict:
    scores = ledger.scores_for_user(user, 'redlight')
    attempts = len(scores)
    best = min((s.value for s in scores), default=0.0)
    success_rate = round(attempts / (attempts + 5) * 100) if attempts else 0
    return {
        'attempts': attempts,
        'bestTime': f"{best:.1f}",
        'successRate': success_rate,
    }


# ---- Type racer ----

def pick_prompt(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(TYPING_PROMPTS)


def submit_typeracer(user: User, wpm: float, accuracy: float) -> dict:
    with submission_lock(user.id):
        high_score = is_new_personal_best(user, 'typeracer', wpm)
        ledger.record_score(user, 'typeracer', wpm, accuracy=accuracy)
    return {
        'success': True,
        'isHighScore': high_score,
        'leaderboard': typing_leaderboard(),
    }


# ---- Bread (obstacle) game ----

def generate_obstacles(count: int = 5, rng: Optional[random.Random] = None) -> List[dict]:
    rng = rng or random
    return [
        {
            'id': i,
            'x': 100 + rng.random() * 400,
            'y': rng.random() * 300,
            'width': OBSTACLE_SIZE,
            'height': OBSTACLE_SIZE,
        }
        for i in range(count)
    ]


def submit_bread(user: User, score: float, top_n: int = 5) -> dict:
    with submission_lock(user.id):
        high_score = is_new_personal_best(user, 'cse17', score)
        ledger.record_score(user, 'cse17', score)
    stats = bread_stats(user, top_n=top_n)
    return {
        'success': True,
        'score': score,
        'isHighScore': high_score,
        'highScore': stats['highScore'],
        'highScores': stats['highScores'],
    }


def bread_stats(user: User, top_n: int = 5) -> dict:
    scores = ledger.scores_for_user(user, 'cse17')
    played = len(scores)
    total = sum(s.value for s in scores)
    return {
        'gamesPlayed': played,
        'highScore': max((s.value for s in scores), default=0),
        'averageScore': round(total / played) if played else 0,
        'highScores': obstacle_leaderboard(top_n),
    }
