import logging
import threading
from typing import Callable, Optional, Set

from . import ledger
from .leaderboard import rank

logger = logging.getLogger(__name__)


class BroadcastHub:
    """Fan-out of leaderboard snapshots to every connected viewer.

    Channels are Socket.IO session ids on a single namespace. There is no
    per-channel filter: each broadcast goes to all subscribers.
    """

    def __init__(self, emit: Callable[..., None], namespace: str = '/ws',
                 ranker: Callable[[str], list] = rank):
        self._emit = emit
        self._namespace = namespace
        self._rank = ranker
        self._channels: Set[str] = set()
        self._lock = threading.Lock()

    @property
    def channels(self) -> Set[str]:
        with self._lock:
            return set(self._channels)

    def subscribe(self, channel: str) -> None:
        with self._lock:
            self._channels.add(channel)
        self.send_snapshot(channel, 'all')

    def unsubscribe(self, channel: str) -> None:
        with self._lock:
            self._channels.discard(channel)

    def send_snapshot(self, channel: str, game_type: str = 'all') -> None:
        payload = {'type': 'leaderboard', 'data': self._rank(game_type)}
        self._send(channel, payload)

    def broadcast(self, game_type: str = 'all', winner: Optional[dict] = None) -> int:
        """Push the ``game_type`` leaderboard to all channels. Returns the delivery count."""
        payload = {
            'type': 'winner' if winner else 'leaderboard',
            'data': self._rank(game_type),
        }
        if winner:
            payload['winner'] = winner
        delivered = 0
        for channel in self.channels:
            if self._send(channel, payload):
                delivered += 1
        logger.info(f"[broadcast] type={payload['type']} game={game_type} delivered={delivered}")
        return delivered

    def _send(self, channel: str, payload: dict) -> bool:
        try:
            self._emit(payload['type'], payload, to=channel, namespace=self._namespace)
            return True
        except Exception:
            logger.exception(f"[broadcast] push to {channel} failed; dropping channel")
            self.unsubscribe(channel)
            return False


def winner_announcement(user, game_type: str, score_text: str, message: str) -> dict:
    return {
        'player': user.username,
        'game': ledger.game_name(game_type),
        'gameType': game_type,
        'score': score_text,
        'message': message,
    }
