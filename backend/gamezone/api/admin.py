from functools import wraps

from flask import Blueprint, jsonify, current_app
from flask_login import login_required, current_user

from gamezone import db
from gamezone.errors import NotFound
from gamezone.models import Score, User
from gamezone.services.games.leaderboard import summary

admin = Blueprint('admin', __name__)


def admin_required(view):
    @wraps(view)
    @login_required
    def wrapper(*args, **kwargs):
        if not current_user.is_admin:
            return jsonify({'message': 'Admin access required'}), 403
        return view(*args, **kwargs)
    return wrapper


@admin.route('/users', methods=['GET'])
@admin_required
def list_users():
    users = User.query.order_by(User.id).all()
    return jsonify([u.to_dict() for u in users])


@admin.route('/users/<int:user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    admin_id = current_user.id
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound('User not found')
    # Scores reference the user, so they go first
    Score.query.filter_by(user_id=user.id).delete()
    db.session.delete(user)
    db.session.commit()
    current_app.logger.info(f"[admin] user={admin_id} deleted user={user_id}")
    return jsonify({'message': 'User deleted successfully'})


@admin.route('/stats', methods=['GET'])
@admin_required
def stats():
    return jsonify(summary())
