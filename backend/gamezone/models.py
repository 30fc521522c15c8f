from datetime import datetime
from gamezone import db, bcrypt
from flask_login import UserMixin


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    role = db.Column(db.String(16), nullable=False, default='user')  # user, mediator, admin
    games_played = db.Column(db.Integer, nullable=False, default=0)
    photo_url = db.Column(db.String(512), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    scores = db.relationship('Score', back_populates='user', lazy='dynamic')

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == 'admin'

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'role': self.role,
            'gamesPlayed': self.games_played,
            'photoUrl': self.photo_url,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


class Game(db.Model):
    """Catalog entry for one game type. Created lazily, never modified."""
    __tablename__ = 'games'
    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(32), unique=True, nullable=False, index=True)
    name = db.Column(db.String(64), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    scores = db.relationship('Score', back_populates='game', lazy='dynamic')


class Score(db.Model):
    __tablename__ = 'scores'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    game_id = db.Column(db.Integer, db.ForeignKey('games.id'), nullable=False, index=True)
    value = db.Column(db.Float, nullable=False)
    accuracy = db.Column(db.Float, nullable=True)  # typeracer only
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    user = db.relationship('User', back_populates='scores')
    game = db.relationship('Game', back_populates='scores')
