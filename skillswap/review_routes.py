from flask import Blueprint, jsonify, request
from skillswap import db
from skillswap.auth import current_user_id, login_required
from skillswap.reviews import ReviewLedger

review_bp = Blueprint('reviews', __name__)


# reviews a user has received
@review_bp.route('/user/<int:user_id>', methods=['GET'])
@login_required
def list_user_reviews(user_id):
    return jsonify(ReviewLedger(db.session).list_for_user(user_id)), 200


@review_bp.route('', methods=['POST'])
@login_required
def create_review():
    review = ReviewLedger(db.session).create(current_user_id(), request.get_json(silent=True))
    return jsonify({'message': 'Review created successfully', 'reviewId': review['id'], 'review': review}), 201
