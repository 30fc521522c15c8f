from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from gamezone import db
from gamezone.models import User

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Game Zone server!'})

@main.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password')
    if not username or not password:
        return jsonify({'message': 'Missing username or password'}), 400

    if User.query.filter(db.func.lower(User.username) == username.lower()).first():
        return jsonify({'message': 'Username already exists'}), 400

    user = User(username=username, email=data.get('email'))
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    login_user(user, remember=True)
    return jsonify(user.to_dict()), 201

@main.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    username = data.get('username') or ''
    user = User.query.filter(db.func.lower(User.username) == username.lower()).first()
    if user and user.check_password(data.get('password') or ''):
        login_user(user, remember=True)
        return jsonify(user.to_dict())
    return jsonify({'message': 'Invalid username or password'}), 401

@main.route('/check_login')
@login_required
def check_login():
    return jsonify(current_user.to_dict())

@main.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'message': 'Logged out successfully.'})
