"""
Request and response models for the service request endpoints.
"""

from datetime import date, datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from ..domain.models import RequestStatus, ServiceRequest
from ..repository.service_request_repository import ServiceRequestView

Urgency = Literal["low", "medium", "high"]


class ServiceRequestCreate(BaseModel):
    provider_id: UUID
    service_category: str = Field(..., min_length=1)
    description: str = Field(..., min_length=10, max_length=1000)
    location: str = Field(..., min_length=1)
    preferred_date: date | None = None
    budget_min: float | None = Field(None, ge=0)
    budget_max: float | None = Field(None, ge=0)
    urgency: Urgency | None = None
    contact_phone: str | None = Field(None, pattern=r"^\+?[0-9 ()\-]{7,20}$")

    @model_validator(mode="after")
    def _strip_description(self):
        self.description = self.description.strip()
        if len(self.description) < 10:
            raise ValueError("description must contain at least 10 non-blank characters")
        return self


class StatusUpdateRequest(BaseModel):
    # pending is never a valid target
    status: Literal["accepted", "in_progress", "completed", "cancelled"]
    notes: str | None = Field(None, max_length=1000)


class ServiceRequestResponse(BaseModel):
    id: str
    user_id: str
    provider_id: str
    service_category: str
    description: str
    location: str
    status: RequestStatus
    preferred_date: date | None
    budget_min: float | None
    budget_max: float | None
    urgency: str | None
    contact_phone: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime | None
    accepted_at: datetime | None
    completed_at: datetime | None
    provider: dict[str, Any] | None = None
    requester: dict[str, Any] | None = None

    @classmethod
    def from_domain(
        cls, request: ServiceRequest, provider: dict | None = None, requester: dict | None = None
    ) -> "ServiceRequestResponse":
        return cls(
            id=request.id,
            user_id=request.user_id,
            provider_id=request.provider_id,
            service_category=request.service_category,
            description=request.description,
            location=request.location,
            status=request.status,
            preferred_date=request.preferred_date,
            budget_min=request.budget_min,
            budget_max=request.budget_max,
            urgency=request.urgency,
            contact_phone=request.contact_phone,
            notes=request.notes,
            created_at=request.created_at,
            updated_at=request.updated_at,
            accepted_at=request.accepted_at,
            completed_at=request.completed_at,
            provider=provider,
            requester=requester,
        )

    @classmethod
    def from_view(cls, view: ServiceRequestView) -> "ServiceRequestResponse":
        return cls.from_domain(view.request, provider=view.provider, requester=view.requester)


class ServiceRequestEnvelope(BaseModel):
    status: str = "success"
    service_request: ServiceRequestResponse


class RequestPagination(BaseModel):
    current_page: int
    items_per_page: int


class ServiceRequestListResponse(BaseModel):
    status: str = "success"
    requests: list[ServiceRequestResponse]
    pagination: RequestPagination
