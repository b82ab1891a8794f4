from flask import Blueprint, jsonify, request
from skillswap import db
from skillswap.auth import current_user_id, login_required
from skillswap.errors import parse_payload
from skillswap.negotiation import SwapNegotiation
from skillswap.schemas import StatusUpdate

swap_bp = Blueprint('swaps', __name__)


# swaps where i am the requester or the provider
@swap_bp.route('', methods=['GET'])
@login_required
def list_swaps():
    user_id = current_user_id()
    swaps = SwapNegotiation(db.session).list(user_id, status=request.args.get('status'))
    print(f"[DEBUG] User {user_id} has {len(swaps)} swap requests.")
    return jsonify(swaps), 200


@swap_bp.route('/<int:swap_id>', methods=['GET'])
@login_required
def view_swap(swap_id):
    return jsonify(SwapNegotiation(db.session).get(swap_id, current_user_id())), 200


@swap_bp.route('', methods=['POST'])
@login_required
def create_swap():
    swap = SwapNegotiation(db.session).create(current_user_id(), request.get_json(silent=True))
    return jsonify({'message': 'Swap request created successfully', 'swapId': swap['id'], 'swap': swap}), 201


# accept, reject, cancel or complete
@swap_bp.route('/<int:swap_id>/status', methods=['PUT'])
@login_required
def update_swap_status(swap_id):
    payload = parse_payload(StatusUpdate, request.get_json(silent=True))
    swap = SwapNegotiation(db.session).update_status(swap_id, current_user_id(), payload.status)
    return jsonify({'message': 'Swap request updated successfully', 'swap': swap}), 200


@swap_bp.route('/<int:swap_id>', methods=['DELETE'])
@login_required
def delete_swap(swap_id):
    SwapNegotiation(db.session).delete(swap_id, current_user_id())
    return jsonify({'message': 'Swap request deleted successfully'}), 200
