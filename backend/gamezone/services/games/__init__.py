"""Game domain services: score ledger, sessions, resolvers, ranking, broadcast.

This package contains the game logic imported by HTTP routes and socket
handlers, keeping transport concerns separated from scoring and ranking.
"""

from flask import current_app


def get_session_store():
    return current_app.extensions['guessing_sessions']


def get_hub():
    return current_app.extensions['broadcast_hub']
