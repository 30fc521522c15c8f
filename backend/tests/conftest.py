import os
import sys
import pytest
from flask import g

# Ensure the backend root (containing the `gamezone` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from gamezone import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BCRYPT_LOG_ROUNDS = 4
    LOG_LEVEL = 'INFO'
    GUESS_MIN = 1
    GUESS_MAX = 100
    GUESS_MAX_ATTEMPTS = 10
    OBSTACLE_COUNT = 5
    OBSTACLE_TOP_N = 5
    ADMIN_USERNAME = 'admin'
    ADMIN_PASSWORD = 'admin123'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)

    # Requests reuse the fixture's long-lived app context, so drop
    # Flask-Login's per-context user cache between test-client requests.
    @application.teardown_request
    def _reset_login_cache(exc):
        g.pop('_login_user', None)

    with application.app_context():
        # Ensure models are imported so tables are created
        import gamezone.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def register(test_client, username, password='password'):
    res = test_client.post('/register', json={'username': username, 'password': password})
    assert res.status_code == 201
    return res.get_json()


@pytest.fixture()
def alice(flask_app):
    """A test client logged in as a fresh user."""
    test_client = flask_app.test_client()
    test_client.user = register(test_client, 'alice')
    return test_client


@pytest.fixture()
def bob(flask_app):
    test_client = flask_app.test_client()
    test_client.user = register(test_client, 'bob')
    return test_client


@pytest.fixture()
def sessions(flask_app):
    return flask_app.extensions['guessing_sessions']


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


def events_named(received, name):
    return [pkt['args'][0] for pkt in received if pkt['name'] == name]
