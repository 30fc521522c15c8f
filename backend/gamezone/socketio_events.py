from flask import current_app, request
from flask_socketio import emit

from gamezone import socketio
from gamezone.errors import ValidationError
from gamezone.api.leaderboard import parse_game_type
from gamezone.services.games import get_hub


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect():
    # Initial sync: every new viewer gets the "all games" board
    get_hub().subscribe(_get_sid())


def handle_disconnect(*args):
    get_hub().unsubscribe(_get_sid())


def handle_request_leaderboard(data):
    try:
        game_type = parse_game_type((data or {}).get('gameType'))
    except (ValidationError, AttributeError) as exc:
        current_app.logger.warning(f"[ws-error] sid={_get_sid()} bad leaderboard request {data!r}: {exc}")
        emit('error', {'message': 'Invalid leaderboard request'})
        return
    get_hub().send_snapshot(_get_sid(), game_type)


def handle_message(data):
    """Plain ``send()`` messages carry their kind in a ``type`` field."""
    if not isinstance(data, dict) or not isinstance(data.get('type'), str):
        current_app.logger.warning(f"[ws-error] sid={_get_sid()} malformed message {data!r}")
        emit('error', {'message': 'Malformed message'})
        return
    if data['type'] == 'requestLeaderboard':
        handle_request_leaderboard(data)
        return
    current_app.logger.info(f"[ws] sid={_get_sid()} ignoring message type={data['type']}")


def handle_ping(data):
    emit('pong', data or {})


def handle_error(exc):
    # Per-message failures are logged; the connection stays open
    current_app.logger.exception(f"[ws-error] sid={_get_sid()} handler failed: {exc}")
    emit('error', {'message': 'Internal server error'})


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers on the viewer namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('requestLeaderboard', handle_request_leaderboard, namespace=namespace)
    socketio.on_event('message', handle_message, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
    socketio.on_event('json', handle_message, namespace=namespace)
    socketio.on_error(namespace)(handle_error)
