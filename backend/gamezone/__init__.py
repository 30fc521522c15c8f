import logging

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5000",
    "http://127.0.0.1:5000",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    logging.basicConfig(level=flask_app.config.get('LOG_LEVEL', 'INFO'))
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Per-process game state: guessing sessions and the viewer broadcast hub
    from gamezone.services.games.sessions import SessionStore
    from gamezone.services.games.broadcast import BroadcastHub
    flask_app.extensions['guessing_sessions'] = SessionStore(
        low=flask_app.config.get('GUESS_MIN', 1),
        high=flask_app.config.get('GUESS_MAX', 100),
        max_attempts=flask_app.config.get('GUESS_MAX_ATTEMPTS', 10),
    )
    flask_app.extensions['broadcast_hub'] = BroadcastHub(socketio.emit, namespace='/ws')

    from gamezone.errors import register_error_handlers
    register_error_handlers(flask_app)

    # Import and register blueprints here
    from gamezone.main import main
    flask_app.register_blueprint(main)

    from gamezone.api.games import games
    # Mount game routes under /api to match frontend API client
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from gamezone.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard, url_prefix='/api')

    from gamezone.api.admin import admin
    flask_app.register_blueprint(admin, url_prefix='/api/admin')

    from gamezone.socketio_events import register_socketio_handlers
    register_socketio_handlers('/ws')

    # Flask-Login user loader
    from gamezone.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'message': 'Authentication required'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from gamezone.services.games.ledger import get_or_create_game, GAME_NAMES
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            admin = User(username=flask_app.config['ADMIN_USERNAME'], role='admin')
            admin.set_password(flask_app.config['ADMIN_PASSWORD'])
            db.session.add(admin)
            for game_type in GAME_NAMES:
                get_or_create_game(game_type)

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
