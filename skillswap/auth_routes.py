from flask import Blueprint, request, jsonify, current_app
from skillswap import db
from skillswap.errors import parse_payload
from skillswap.identity import IdentityService
from skillswap.schemas import ExternalLoginRequest

auth_bp = Blueprint('auth', __name__)


def identity_service():
    return IdentityService(db.session, current_app.config)


@auth_bp.route('/register', methods=['POST'])
def register():
    result = identity_service().register(request.get_json(silent=True))
    return jsonify({'message': 'User created successfully', **result}), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    result = identity_service().login(request.get_json(silent=True))
    return jsonify({'message': 'Login successful', **result}), 200


# The provider profile is trusted as sent; the provider token is not verified here
@auth_bp.route('/google', methods=['POST'])
def google_login():
    payload = parse_payload(ExternalLoginRequest, request.get_json(silent=True))
    result, created = identity_service().login_external(payload.profile.model_dump())
    if created:
        return jsonify({'message': 'User created successfully', **result}), 201
    return jsonify({'message': 'Login successful', **result}), 200
