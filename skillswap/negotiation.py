"""
Swap request negotiation.

A swap request moves through a fixed lifecycle::

    pending --provider accepts--> accepted --either participant--> completed
    pending --provider rejects--> rejected
    pending --requester cancels--> cancelled

``completed``, ``rejected`` and ``cancelled`` are terminal. Every move is
looked up in ``TRANSITIONS``, keyed by (current status, requested status,
actor role); anything not listed there is refused without touching the row.
"""

from sqlalchemy import text

from skillswap.errors import Forbidden, InvalidTransition, NotFound, ValidationError, parse_payload
from skillswap.schemas import SwapRequestPayload
from skillswap.store import fetch_all, fetch_one, transaction

PENDING = 'pending'
ACCEPTED = 'accepted'
REJECTED = 'rejected'
COMPLETED = 'completed'
CANCELLED = 'cancelled'

STATUSES = (PENDING, ACCEPTED, REJECTED, COMPLETED, CANCELLED)
TERMINAL_STATUSES = frozenset({REJECTED, COMPLETED, CANCELLED})
DELETABLE_STATUSES = frozenset({REJECTED, CANCELLED})

REQUESTER = 'requester'
PROVIDER = 'provider'

# Allowed (current, requested, role) edges; every other combination is denied.
TRANSITIONS = frozenset({
    (PENDING, ACCEPTED, PROVIDER),
    (PENDING, REJECTED, PROVIDER),
    (PENDING, CANCELLED, REQUESTER),
    (ACCEPTED, COMPLETED, REQUESTER),
    (ACCEPTED, COMPLETED, PROVIDER),
})

# Statuses a client may ask for; nothing ever moves back to pending.
REQUESTABLE_STATUSES = frozenset(target for (_, target, _) in TRANSITIONS)

FORBIDDEN_MESSAGES = {
    ACCEPTED: 'Only the provider can accept or reject requests',
    REJECTED: 'Only the provider can accept or reject requests',
    CANCELLED: 'Only the requester can cancel requests',
    COMPLETED: 'Not authorized',
}

SWAP_DETAIL_QUERY = """
SELECT sr.*,
       u1.name AS requester_name, u1.photo AS requester_photo,
       u2.name AS provider_name, u2.photo AS provider_photo,
       s1.title AS offered_skill_title, s1.category AS offered_skill_category,
       s2.title AS wanted_skill_title, s2.category AS wanted_skill_category
FROM swap_requests sr
JOIN users u1 ON sr.requester_id = u1.id
JOIN users u2 ON sr.provider_id = u2.id
JOIN skills s1 ON sr.offered_skill_id = s1.id
JOIN skills s2 ON sr.wanted_skill_id = s2.id
"""


def roles_of(swap, user_id):
    """Roles ``user_id`` holds in ``swap``; a self-swap holds both."""
    roles = set()
    if swap['requester_id'] == user_id:
        roles.add(REQUESTER)
    if swap['provider_id'] == user_id:
        roles.add(PROVIDER)
    return roles


def is_allowed(current, target, role):
    return (current, target, role) in TRANSITIONS


def is_requestable(status):
    return isinstance(status, str) and status in REQUESTABLE_STATUSES


def roles_allowed_to_request(target):
    return {role for (_, to, role) in TRANSITIONS if to == target}


def check_transition(current, target, roles):
    """
    Raise unless one of ``roles`` may move a swap from ``current`` to ``target``.

    Role entitlement is checked before state legality, so an outsider always
    sees Forbidden whatever the swap's state.
    """
    if not is_requestable(target):
        raise ValidationError('Invalid status')
    if not roles & roles_allowed_to_request(target):
        raise Forbidden(FORBIDDEN_MESSAGES[target])
    if not any(is_allowed(current, target, role) for role in roles):
        if current in TERMINAL_STATUSES:
            raise InvalidTransition(f'Swap request is already {current}')
        raise InvalidTransition(f'Cannot move a {current} swap request to {target}')


class SwapNegotiation:

    def __init__(self, session):
        self.session = session

    def create(self, requester_id, data):
        payload = parse_payload(SwapRequestPayload, data)

        # Validate that requester owns the offered skill
        offered_skill = fetch_one(
            self.session, "SELECT user_id FROM skills WHERE id = :skill_id", {'skill_id': payload.offered_skill_id}
        )
        if not offered_skill or offered_skill['user_id'] != requester_id:
            raise ValidationError('You can only offer your own skills')

        # Validate that provider owns the wanted skill
        wanted_skill = fetch_one(
            self.session, "SELECT user_id FROM skills WHERE id = :skill_id", {'skill_id': payload.wanted_skill_id}
        )
        if not wanted_skill or wanted_skill['user_id'] != payload.provider_id:
            raise ValidationError('Invalid wanted skill')

        insert_query = """
        INSERT INTO swap_requests (requester_id, provider_id, offered_skill_id, wanted_skill_id, message, status)
        VALUES (:requester_id, :provider_id, :offered_skill_id, :wanted_skill_id, :message, :status);
        """
        with transaction(self.session, 'Failed to create swap request'):
            result = self.session.execute(text(insert_query), {
                'requester_id': requester_id,
                'provider_id': payload.provider_id,
                'offered_skill_id': payload.offered_skill_id,
                'wanted_skill_id': payload.wanted_skill_id,
                'message': payload.message,
                'status': PENDING,
            })
            swap_id = result.lastrowid

        print(f"[DEBUG] User {requester_id} requested swap {swap_id} from user {payload.provider_id}")
        return self._get_row(swap_id)

    def update_status(self, swap_id, acting_user_id, new_status):
        if not is_requestable(new_status):
            raise ValidationError('Invalid status')

        swap = self._get_row(swap_id)
        if not swap:
            raise NotFound('Swap request not found')

        check_transition(swap['status'], new_status, roles_of(swap, acting_user_id))

        # The status guard keeps a concurrent change from being overwritten
        update_query = """
        UPDATE swap_requests
        SET status = :new_status, updated_at = CURRENT_TIMESTAMP
        WHERE id = :swap_id AND status = :current_status;
        """
        with transaction(self.session, 'Failed to update swap request'):
            result = self.session.execute(text(update_query), {
                'new_status': new_status,
                'swap_id': swap_id,
                'current_status': swap['status'],
            })
            if result.rowcount != 1:
                raise InvalidTransition('Swap request changed while updating, try again')

        print(f"[DEBUG] Swap {swap_id}: {swap['status']} -> {new_status} by user {acting_user_id}")
        return self._get_row(swap_id)

    def list(self, user_id, status=None):
        query = SWAP_DETAIL_QUERY + " WHERE (sr.requester_id = :user_id OR sr.provider_id = :user_id)"
        params = {'user_id': user_id}

        if status:
            if not isinstance(status, str) or status not in STATUSES:
                raise ValidationError('Invalid status')
            query += " AND sr.status = :status"
            params['status'] = status

        query += " ORDER BY sr.created_at DESC, sr.id DESC"
        return fetch_all(self.session, query, params)

    def get(self, swap_id, user_id):
        swap = fetch_one(self.session, SWAP_DETAIL_QUERY + " WHERE sr.id = :swap_id", {'swap_id': swap_id})
        if not swap:
            raise NotFound('Swap request not found')
        if not roles_of(swap, user_id):
            raise Forbidden('Not authorized to view this swap request')
        return swap

    def delete(self, swap_id, requester_id):
        swap = self._get_row(swap_id)
        if not swap:
            raise NotFound('Swap request not found')
        if swap['requester_id'] != requester_id:
            raise Forbidden('Not authorized to delete this swap request')
        if swap['status'] not in DELETABLE_STATUSES:
            raise ValidationError('Only rejected or cancelled swap requests can be deleted')

        with transaction(self.session, 'Failed to delete swap request'):
            self.session.execute(text("DELETE FROM swap_requests WHERE id = :swap_id"), {'swap_id': swap_id})
        print(f"[DEBUG] User {requester_id} deleted swap {swap_id}")

    def _get_row(self, swap_id):
        return fetch_one(self.session, "SELECT * FROM swap_requests WHERE id = :swap_id", {'swap_id': swap_id})
