from sqlalchemy import text

from skillswap.errors import NotFound, ValidationError, parse_payload
from skillswap.negotiation import COMPLETED
from skillswap.schemas import AvailabilityUpdate, ProfileUpdate
from skillswap.store import fetch_all, fetch_one, transaction

PUBLIC_COLUMNS = "u.id, u.name, u.photo, u.location, u.bio, u.created_at"
PRIVATE_COLUMNS = PUBLIC_COLUMNS + ", u.email, u.updated_at"


class ProfileService:
    """
    User profiles and weekly availability.

    ``swaps_completed`` and ``average_rating`` are computed from
    swap_requests and reviews on every read; nothing caches them.
    """

    def __init__(self, session):
        self.session = session

    def get_profile(self, user_id, private=False):
        columns = PRIVATE_COLUMNS if private else PUBLIC_COLUMNS
        query = f"""
        SELECT {columns},
               (SELECT COUNT(*) FROM swap_requests sr
                WHERE (sr.requester_id = u.id OR sr.provider_id = u.id) AND sr.status = :completed
               ) AS swaps_completed,
               (SELECT AVG(r.rating) FROM reviews r WHERE r.reviewee_id = u.id) AS average_rating
        FROM users u
        WHERE u.id = :user_id;
        """
        user = fetch_one(self.session, query, {'user_id': user_id, 'completed': COMPLETED})
        if not user:
            raise NotFound('User not found')

        user['swaps_completed'] = user['swaps_completed'] or 0
        if user['average_rating'] is not None:
            user['average_rating'] = round(float(user['average_rating']), 1)
        return user

    def update_profile(self, user_id, data):
        payload = parse_payload(ProfileUpdate, data)
        values = payload.model_dump(exclude_none=True)
        if not values:
            raise ValidationError('No valid fields to update')
        if 'photo' in values:
            values['photo'] = str(values['photo'])

        # Column names come from the schema's fields, never from the request
        assignments = [f"{key} = :{key}" for key in values]
        assignments.append("updated_at = CURRENT_TIMESTAMP")
        update_query = f"UPDATE users SET {', '.join(assignments)} WHERE id = :user_id;"

        with transaction(self.session, 'Failed to update profile'):
            self.session.execute(text(update_query), {**values, 'user_id': user_id})
        print(f"[DEBUG] Updated profile fields {sorted(values)} for user {user_id}")
        return self.get_profile(user_id, private=True)

    def list_availability(self, user_id):
        if not fetch_one(self.session, "SELECT id FROM users WHERE id = :user_id", {'user_id': user_id}):
            raise NotFound('User not found')
        query = """
        SELECT id, day_of_week, start_time, end_time
        FROM availability
        WHERE user_id = :user_id
        ORDER BY day_of_week, start_time;
        """
        return fetch_all(self.session, query, {'user_id': user_id})

    def replace_availability(self, user_id, data):
        payload = parse_payload(AvailabilityUpdate, data)

        insert_query = """
        INSERT INTO availability (user_id, day_of_week, start_time, end_time)
        VALUES (:user_id, :day_of_week, :start_time, :end_time);
        """
        with transaction(self.session, 'Failed to update availability'):
            self.session.execute(text("DELETE FROM availability WHERE user_id = :user_id"), {'user_id': user_id})
            for slot in payload.slots:
                self.session.execute(text(insert_query), {'user_id': user_id, **slot.model_dump()})

        print(f"[DEBUG] Stored {len(payload.slots)} availability slots for user {user_id}")
        return self.list_availability(user_id)
