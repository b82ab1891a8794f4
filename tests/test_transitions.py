import itertools

import pytest

from skillswap.errors import Forbidden, InvalidTransition, ValidationError
from skillswap.negotiation import (
    ACCEPTED,
    CANCELLED,
    COMPLETED,
    PENDING,
    PROVIDER,
    REJECTED,
    REQUESTABLE_STATUSES,
    REQUESTER,
    STATUSES,
    TERMINAL_STATUSES,
    TRANSITIONS,
    check_transition,
    roles_of,
)

ALLOWED_EDGES = [
    (PENDING, ACCEPTED, PROVIDER),
    (PENDING, REJECTED, PROVIDER),
    (PENDING, CANCELLED, REQUESTER),
    (ACCEPTED, COMPLETED, REQUESTER),
    (ACCEPTED, COMPLETED, PROVIDER),
]


def test_table_lists_exactly_the_lifecycle_edges():
    assert TRANSITIONS == frozenset(ALLOWED_EDGES)


def test_pending_is_never_requestable():
    assert PENDING not in REQUESTABLE_STATUSES
    assert REQUESTABLE_STATUSES == {ACCEPTED, REJECTED, COMPLETED, CANCELLED}


@pytest.mark.parametrize('current,target,role', ALLOWED_EDGES)
def test_allowed_edges_pass(current, target, role):
    check_transition(current, target, {role})


@pytest.mark.parametrize('target', sorted(REQUESTABLE_STATUSES))
def test_outsider_is_forbidden_whatever_the_state(target):
    for current in STATUSES:
        with pytest.raises(Forbidden):
            check_transition(current, target, set())


@pytest.mark.parametrize('target', [ACCEPTED, REJECTED])
def test_requester_cannot_answer_their_own_request(target):
    with pytest.raises(Forbidden):
        check_transition(PENDING, target, {REQUESTER})


def test_provider_cannot_cancel():
    with pytest.raises(Forbidden):
        check_transition(PENDING, CANCELLED, {PROVIDER})


@pytest.mark.parametrize('current', sorted(TERMINAL_STATUSES))
@pytest.mark.parametrize('target,role', [
    (ACCEPTED, PROVIDER),
    (REJECTED, PROVIDER),
    (CANCELLED, REQUESTER),
    (COMPLETED, REQUESTER),
    (COMPLETED, PROVIDER),
])
def test_terminal_states_have_no_way_out(current, target, role):
    with pytest.raises(InvalidTransition, match=f'already {current}'):
        check_transition(current, target, {role})


def test_pending_cannot_jump_to_completed():
    with pytest.raises(InvalidTransition):
        check_transition(PENDING, COMPLETED, {PROVIDER})


def test_accepted_cannot_be_cancelled_or_rejected():
    with pytest.raises(InvalidTransition):
        check_transition(ACCEPTED, CANCELLED, {REQUESTER})
    with pytest.raises(InvalidTransition):
        check_transition(ACCEPTED, REJECTED, {PROVIDER})


@pytest.mark.parametrize('target', [PENDING, 'archived', None, [ACCEPTED], {'status': ACCEPTED}])
def test_unknown_targets_are_invalid_input(target):
    with pytest.raises(ValidationError):
        check_transition(PENDING, target, {REQUESTER, PROVIDER})


def test_only_table_entries_are_allowed():
    role_sets = [{REQUESTER}, {PROVIDER}, {REQUESTER, PROVIDER}]
    for current, target, roles in itertools.product(STATUSES, REQUESTABLE_STATUSES, role_sets):
        expected = any((current, target, role) in TRANSITIONS for role in roles)
        try:
            check_transition(current, target, roles)
        except (Forbidden, ValidationError):
            assert not expected, (current, target, roles)
        else:
            assert expected, (current, target, roles)


def test_roles_of_self_swap_holds_both_roles():
    swap = {'requester_id': 3, 'provider_id': 3}
    assert roles_of(swap, 3) == {REQUESTER, PROVIDER}
    assert roles_of({'requester_id': 1, 'provider_id': 2}, 2) == {PROVIDER}
    assert roles_of({'requester_id': 1, 'provider_id': 2}, 9) == set()
