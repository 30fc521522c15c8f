"""Error taxonomy and the JSON handlers that map it onto HTTP responses.

Game-logic errors are soft failures: they travel back as ``{"error": ...}``
with a 200 so the client can render them in place. Validation problems are
400s with a generic message, and anything unexpected becomes a 500 whose
real cause only reaches the log.
"""

from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException


class GameZoneError(Exception):
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(GameZoneError):
    status_code = 400
    message = 'Invalid request'


class NotFound(GameZoneError):
    status_code = 404
    message = 'Not found'


class GameLogicError(GameZoneError):
    status_code = 200
    message = 'Game error'


class NoActiveGame(GameLogicError):
    message = 'No active guessing game found'


class GameAlreadyOver(GameLogicError):
    message = 'Game is already over'


class DuplicateGuess(GameLogicError):
    message = 'You already tried this number'


def register_error_handlers(flask_app):
    @flask_app.errorhandler(GameLogicError)
    def handle_game_logic_error(exc):
        return jsonify({'error': exc.message}), exc.status_code

    @flask_app.errorhandler(GameZoneError)
    def handle_gamezone_error(exc):
        if exc.status_code >= 500:
            current_app.logger.error(f"[error] {exc!r}")
        return jsonify({'message': exc.message}), exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        return jsonify({'message': exc.description}), exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected(exc):
        current_app.logger.exception(f"[internal] unhandled error: {exc}")
        return jsonify({'message': 'Internal server error'}), 500
