from flask import Blueprint, jsonify, request
from skillswap import db
from skillswap.auth import current_user_id, login_required
from skillswap.profiles import ProfileService

user_bp = Blueprint('users', __name__)


@user_bp.route('/profile', methods=['GET'])
@login_required
def view_profile():
    return jsonify(ProfileService(db.session).get_profile(current_user_id(), private=True)), 200


@user_bp.route('/profile', methods=['PUT'])
@login_required
def update_profile():
    user_id = current_user_id()
    print(f"[DEBUG] Received request to update profile for user_id: {user_id}")
    profile = ProfileService(db.session).update_profile(user_id, request.get_json(silent=True))
    return jsonify({'message': 'Profile updated successfully', 'user': profile}), 200


@user_bp.route('/availability', methods=['PUT'])
@login_required
def update_availability():
    slots = ProfileService(db.session).replace_availability(current_user_id(), request.get_json(silent=True))
    return jsonify({'message': 'Availability updated successfully', 'availability': slots}), 200


# Fetch another user's public profile
@user_bp.route('/<int:user_id>', methods=['GET'])
@login_required
def view_user(user_id):
    return jsonify(ProfileService(db.session).get_profile(user_id)), 200


@user_bp.route('/<int:user_id>/availability', methods=['GET'])
@login_required
def view_availability(user_id):
    return jsonify(ProfileService(db.session).list_availability(user_id)), 200
