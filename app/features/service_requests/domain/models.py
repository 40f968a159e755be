"""
Domain models for service requests.

Plain dataclasses loaded by the repository; the lifecycle rules that mutate
them live in lifecycle.py.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum


class RequestStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class ServiceRequest:
    """Represents a service_requests row joined with its provider's owner."""

    id: str
    user_id: str  # the requesting client
    provider_id: str
    provider_user_id: str | None  # owner of the provider listing
    service_category: str
    description: str
    location: str
    status: RequestStatus
    created_at: datetime
    updated_at: datetime | None = None
    preferred_date: date | None = None
    budget_min: float | None = None
    budget_max: float | None = None
    urgency: str | None = None
    contact_phone: str | None = None
    notes: str | None = None
    accepted_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (RequestStatus.COMPLETED, RequestStatus.CANCELLED)
