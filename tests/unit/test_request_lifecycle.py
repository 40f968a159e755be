"""
Tests for the service request lifecycle rules.
"""

from datetime import timedelta
from itertools import product

import pytest

from app.core.errors import InvalidTransitionError, PermissionDeniedError, ValidationError
from app.features.service_requests.domain.lifecycle import (
    ALLOWED_TRANSITIONS,
    apply_transition,
    authorize_caller,
)
from app.features.service_requests.domain.models import RequestStatus
from app.models.domain.user_domain import Caller
from tests.factories import CLIENT_ID, NOW, PROVIDER_OWNER_ID, make_request

PROVIDER = Caller(user_id=PROVIDER_OWNER_ID, role="provider")
CLIENT = Caller(user_id=CLIENT_ID)
ADMIN = Caller(user_id="admin-1", role="admin")
OUTSIDER = Caller(user_id="someone-else")


@pytest.mark.parametrize("current,target", list(product(RequestStatus, RequestStatus)))
def test_provider_transition_table(current, target):
    request = make_request(current)

    if target in ALLOWED_TRANSITIONS[current]:
        updated = apply_transition(request, target, PROVIDER, NOW)
        assert updated.status is target
        assert updated.updated_at == NOW
    else:
        with pytest.raises(InvalidTransitionError) as exc:
            apply_transition(request, target, PROVIDER, NOW)
        assert exc.value.current_status == str(current)
        assert exc.value.attempted_status == str(target)
        assert exc.value.message == f"Cannot change status from {current} to {target}"


@pytest.mark.parametrize("terminal", [RequestStatus.COMPLETED, RequestStatus.CANCELLED])
def test_terminal_states_reject_every_target(terminal):
    request = make_request(terminal)
    for target in RequestStatus:
        with pytest.raises(InvalidTransitionError):
            apply_transition(request, target, ADMIN, NOW)


def test_pending_to_accepted_stamps_accepted_at():
    updated = apply_transition(make_request(), "accepted", PROVIDER, NOW)

    assert updated.status is RequestStatus.ACCEPTED
    assert updated.accepted_at == NOW
    assert updated.completed_at is None


def test_in_progress_to_completed_stamps_completed_at():
    updated = apply_transition(
        make_request(RequestStatus.IN_PROGRESS), RequestStatus.COMPLETED, PROVIDER, NOW
    )

    assert updated.completed_at == NOW
    assert updated.is_terminal


def test_apply_transition_leaves_input_untouched():
    request = make_request()
    apply_transition(request, "accepted", PROVIDER, NOW, notes="On my way")

    assert request.status is RequestStatus.PENDING
    assert request.notes is None
    assert request.updated_at is None


def test_notes_are_recorded_when_given():
    updated = apply_transition(make_request(), "accepted", PROVIDER, NOW, notes="Tomorrow 9am")
    assert updated.notes == "Tomorrow 9am"


def test_overlong_notes_rejected():
    with pytest.raises(ValidationError):
        apply_transition(make_request(), "accepted", PROVIDER, NOW, notes="x" * 1001)


def test_outsider_rejected_before_transition_check():
    # completed -> accepted is also invalid, but authorization wins
    for status in RequestStatus:
        with pytest.raises(PermissionDeniedError):
            apply_transition(make_request(status), "accepted", OUTSIDER, NOW)


def test_client_can_cancel_own_request():
    updated = apply_transition(make_request(), "cancelled", CLIENT, NOW)
    assert updated.status is RequestStatus.CANCELLED


@pytest.mark.parametrize(
    "current,target",
    [
        (RequestStatus.PENDING, RequestStatus.ACCEPTED),
        (RequestStatus.ACCEPTED, RequestStatus.IN_PROGRESS),
        (RequestStatus.IN_PROGRESS, RequestStatus.COMPLETED),
    ],
)
def test_client_cannot_drive_work_forward(current, target):
    with pytest.raises(PermissionDeniedError):
        apply_transition(make_request(current), target, CLIENT, NOW)


def test_admin_can_move_any_request():
    updated = apply_transition(make_request(RequestStatus.ACCEPTED), "in_progress", ADMIN, NOW)
    assert updated.status is RequestStatus.IN_PROGRESS


def test_unknown_target_is_invalid_transition():
    with pytest.raises(InvalidTransitionError):
        apply_transition(make_request(), "archived", PROVIDER, NOW)


def test_authorize_caller_relations():
    request = make_request()

    assert authorize_caller(request, PROVIDER) == "provider"
    assert authorize_caller(request, ADMIN) == "admin"
    assert authorize_caller(request, CLIENT) == "client"
    with pytest.raises(PermissionDeniedError):
        authorize_caller(request, OUTSIDER)


def test_provider_who_is_also_client_acts_as_provider():
    request = make_request(user_id=PROVIDER_OWNER_ID, created_at=NOW - timedelta(hours=2))
    updated = apply_transition(request, "accepted", PROVIDER, NOW)
    assert updated.status is RequestStatus.ACCEPTED
