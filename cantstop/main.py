from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from .models import PlayerIdentity
import uuid

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Peak Pursuit game server!'})

@main.route('/session', methods=['POST'])
def create_session():
    """
    Gives this browser a stable player id, remembered in the session cookie.
    """
    if current_user.is_authenticated:
        return jsonify(current_user.to_dict()), 200
    player = PlayerIdentity(str(uuid.uuid4()))
    login_user(player, remember=True)
    return jsonify(player.to_dict()), 201

@main.route('/session', methods=['GET'])
@login_required
def get_session():
    return jsonify(current_user.to_dict())

@main.route('/session', methods=['DELETE'])
@login_required
def end_session():
    logout_user()
    return jsonify({'message': 'Player session ended.'})
