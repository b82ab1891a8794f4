from sqlalchemy import text

from skillswap.errors import Conflict, Forbidden, ValidationError, parse_payload
from skillswap.negotiation import COMPLETED
from skillswap.schemas import ReviewPayload
from skillswap.store import fetch_all, fetch_one, transaction

ALREADY_REVIEWED = 'You have already reviewed this swap'


class ReviewLedger:
    """One immutable rating per participant of a completed swap."""

    def __init__(self, session):
        self.session = session

    def create(self, reviewer_id, data):
        payload = parse_payload(ReviewPayload, data)

        # Validate swap request
        swap = fetch_one(
            self.session,
            "SELECT * FROM swap_requests WHERE id = :swap_id AND status = :status",
            {'swap_id': payload.swap_request_id, 'status': COMPLETED},
        )
        if not swap:
            raise ValidationError('Swap request not found or not completed')

        participants = (swap['requester_id'], swap['provider_id'])
        if reviewer_id not in participants:
            raise Forbidden('You can only review swaps you participated in')
        if payload.reviewee_id not in participants:
            raise ValidationError('Invalid reviewee')
        if reviewer_id == payload.reviewee_id:
            raise ValidationError('You cannot review yourself')

        existing = fetch_one(
            self.session,
            "SELECT id FROM reviews WHERE swap_request_id = :swap_id AND reviewer_id = :reviewer_id",
            {'swap_id': payload.swap_request_id, 'reviewer_id': reviewer_id},
        )
        if existing:
            raise Conflict(ALREADY_REVIEWED)

        insert_query = """
        INSERT INTO reviews (swap_request_id, reviewer_id, reviewee_id, rating, feedback)
        VALUES (:swap_request_id, :reviewer_id, :reviewee_id, :rating, :feedback);
        """
        with transaction(self.session, 'Failed to create review', conflict_message=ALREADY_REVIEWED):
            result = self.session.execute(text(insert_query), {'reviewer_id': reviewer_id, **payload.model_dump()})
            review_id = result.lastrowid

        print(f"[DEBUG] User {reviewer_id} reviewed user {payload.reviewee_id} for swap {payload.swap_request_id}")
        return fetch_one(self.session, "SELECT * FROM reviews WHERE id = :review_id", {'review_id': review_id})

    def list_for_user(self, user_id):
        query = """
        SELECT r.*, u.name AS reviewer_name, u.photo AS reviewer_photo
        FROM reviews r
        JOIN users u ON r.reviewer_id = u.id
        WHERE r.reviewee_id = :user_id
        ORDER BY r.created_at DESC, r.id DESC
        """
        return fetch_all(self.session, query, {'user_id': user_id})
