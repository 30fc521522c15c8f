"""In-memory session state for the guessing game.

Sessions live only in process memory and are lost on restart. Each user has
at most one session; starting a new game replaces the old one. Mutations for
a given user run under that user's lock so interleaved requests cannot lose
an attempt.
"""

import random
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from gamezone.errors import DuplicateGuess, GameAlreadyOver, NoActiveGame

IN_PROGRESS = 'in_progress'
WON = 'won'
LOST = 'lost'


@dataclass
class GuessingSession:
    target_number: int
    max_attempts: int = 10
    attempts: int = 0
    previous_guesses: List[int] = field(default_factory=list)
    state: str = IN_PROGRESS

    @property
    def game_over(self) -> bool:
        return self.state in (WON, LOST)

    @property
    def attempts_left(self) -> int:
        return self.max_attempts - self.attempts


@dataclass
class GuessOutcome:
    message: str
    is_correct: bool
    attempts_left: int
    previous_guesses: List[int]
    correct_number: Optional[int] = None
    # Attempt count to record as a score, set only on a win
    score: Optional[int] = None

    def to_dict(self):
        payload = {
            'message': self.message,
            'isCorrect': self.is_correct,
            'attemptsLeft': self.attempts_left,
            'previousGuesses': list(self.previous_guesses),
        }
        if self.correct_number is not None:
            payload['correctNumber'] = self.correct_number
        return payload


class KeyedLocks:
    """One lock per key, created on first use."""

    def __init__(self):
        self._locks: Dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def __call__(self, key: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock


class SessionStore:
    """Keyed store of guessing sessions with per-key serialization."""

    def __init__(self, low: int = 1, high: int = 100, max_attempts: int = 10,
                 rng: Optional[random.Random] = None):
        self.low = low
        self.high = high
        self.max_attempts = max_attempts
        self._rng = rng or random.Random()
        self._sessions: Dict[int, GuessingSession] = {}
        self._lock_for = KeyedLocks()

    def get(self, user_id: int) -> Optional[GuessingSession]:
        return self._sessions.get(user_id)

    def start(self, user_id: int, target_number: Optional[int] = None) -> GuessingSession:
        if target_number is None:
            target_number = self._rng.randint(self.low, self.high)
        with self._lock_for(user_id):
            session = GuessingSession(target_number=target_number, max_attempts=self.max_attempts)
            self._sessions[user_id] = session
            return session

    def guess(self, user_id: int, value: int,
              on_win: Optional[Callable[[int], None]] = None) -> GuessOutcome:
        """Apply one guess. ``on_win`` receives the attempt count while the lock is held."""
        with self._lock_for(user_id):
            session = self._sessions.get(user_id)
            if session is None:
                raise NoActiveGame()
            if session.game_over:
                raise GameAlreadyOver()
            if value in session.previous_guesses:
                raise DuplicateGuess()

            score = None
            if value == session.target_number:
                score = session.attempts + 1
                # Session is untouched if the score write fails
                if on_win is not None:
                    on_win(score)

            session.attempts += 1
            session.previous_guesses.append(value)

            if score is not None:
                message = 'correct'
                session.state = WON
            elif value < session.target_number:
                message = 'too low'
            else:
                message = 'too high'

            if session.state != WON and session.attempts_left <= 0:
                session.state = LOST

            return GuessOutcome(
                message=message,
                is_correct=session.state == WON,
                attempts_left=session.attempts_left,
                previous_guesses=list(session.previous_guesses),
                correct_number=session.target_number if session.game_over else None,
                score=score,
            )
