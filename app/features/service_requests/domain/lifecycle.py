"""
Service request lifecycle rules.

Pure functions: they take an already-loaded ServiceRequest and return a new
one, never touching the store. The router/service layer fetches, calls
apply_transition, then persists the result.

    pending      -> accepted | cancelled
    accepted     -> in_progress | cancelled
    in_progress  -> completed | cancelled
    completed    -> (terminal)
    cancelled    -> (terminal)
"""

from dataclasses import replace
from datetime import datetime
from typing import Literal

from app.core.errors import InvalidTransitionError, PermissionDeniedError, ValidationError
from app.models.domain.user_domain import Caller

from .models import RequestStatus, ServiceRequest

CallerRelation = Literal["client", "provider", "admin"]

ALLOWED_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.ACCEPTED, RequestStatus.CANCELLED}),
    RequestStatus.ACCEPTED: frozenset({RequestStatus.IN_PROGRESS, RequestStatus.CANCELLED}),
    RequestStatus.IN_PROGRESS: frozenset({RequestStatus.COMPLETED, RequestStatus.CANCELLED}),
    RequestStatus.COMPLETED: frozenset(),
    RequestStatus.CANCELLED: frozenset(),
}


def allowed_targets(status: RequestStatus) -> frozenset[RequestStatus]:
    return ALLOWED_TRANSITIONS[RequestStatus(status)]


def authorize_caller(request: ServiceRequest, caller: Caller) -> CallerRelation:
    """
    Return how the caller relates to the request.

    Raises:
        PermissionDeniedError: caller is neither the client, the provider's
            owner, nor an admin.
    """
    if request.provider_user_id is not None and caller.user_id == request.provider_user_id:
        return "provider"
    if caller.is_admin:
        return "admin"
    if caller.user_id == request.user_id:
        return "client"

    raise PermissionDeniedError(
        "You do not have permission to update this request",
        operation="authorize",
        details={"request_id": request.id},
    )


def _parse_status(value: str | RequestStatus, current: RequestStatus) -> RequestStatus:
    try:
        return RequestStatus(value)
    except ValueError:
        raise InvalidTransitionError(str(current), str(value)) from None


def apply_transition(
    request: ServiceRequest,
    target: str | RequestStatus,
    caller: Caller,
    now: datetime,
    notes: str | None = None,
) -> ServiceRequest:
    """
    Validate and apply a status change.

    Authorization is checked first, so an outsider is rejected whatever
    the requested transition. A caller who is only the requesting client may
    cancel but not drive the work forward.

    Returns:
        A new ServiceRequest; the input is left untouched.

    Raises:
        PermissionDeniedError: caller may not perform this change
        InvalidTransitionError: target not reachable from the current status
    """
    relation = authorize_caller(request, caller)

    current = RequestStatus(request.status)
    new_status = _parse_status(target, current)

    if new_status not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(str(current), str(new_status))

    if relation == "client" and new_status is not RequestStatus.CANCELLED:
        raise PermissionDeniedError(
            "Requesters can only cancel their own service requests",
            operation="update_status",
            details={"current_status": str(current), "attempted_status": str(new_status)},
        )

    if notes is not None and len(notes) > 1000:
        raise ValidationError("Notes must be at most 1000 characters", operation="update_status")

    changes: dict = {"status": new_status, "updated_at": now}
    if notes:
        changes["notes"] = notes
    if new_status is RequestStatus.ACCEPTED:
        changes["accepted_at"] = now
    elif new_status is RequestStatus.COMPLETED:
        changes["completed_at"] = now

    return replace(request, **changes)
