"""
Service request routes.

Usage:
    1. POST /api/service-requests - create a request for a provider (rate limited)
    2. GET /api/service-requests/my-requests - requests the caller made
    3. GET /api/service-requests/provider-requests - requests to the caller's providers
    4. PATCH /api/service-requests/{id}/status - move a request through its lifecycle
    5. GET /api/service-requests/{id} - single request (client, provider owner or admin)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.auth.verify import current_caller
from app.middleware.rate_limit_dependencies import rate_limit_service_request_creation
from app.models.domain.user_domain import Caller

from ..domain.models import RequestStatus
from ..services.service_request_service import NewServiceRequest, service_request_service
from .schemas import (
    RequestPagination,
    ServiceRequestCreate,
    ServiceRequestEnvelope,
    ServiceRequestListResponse,
    ServiceRequestResponse,
    StatusUpdateRequest,
)

router = APIRouter(prefix="/api/service-requests", tags=["service-requests"])


@router.post(
    "",
    response_model=ServiceRequestEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit_service_request_creation)],
)
async def create_service_request(
    body: ServiceRequestCreate,
    caller: Caller = Depends(current_caller),
):
    created = await service_request_service.create_request(
        caller,
        NewServiceRequest(
            provider_id=str(body.provider_id),
            service_category=body.service_category,
            description=body.description,
            location=body.location,
            preferred_date=body.preferred_date,
            budget_min=body.budget_min,
            budget_max=body.budget_max,
            urgency=body.urgency,
            contact_phone=body.contact_phone,
        ),
    )
    return ServiceRequestEnvelope(service_request=ServiceRequestResponse.from_domain(created))


@router.get("/my-requests", response_model=ServiceRequestListResponse)
async def list_my_requests(
    status_filter: RequestStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    caller: Caller = Depends(current_caller),
):
    views = await service_request_service.list_my_requests(caller, status_filter, page, limit)
    return ServiceRequestListResponse(
        requests=[ServiceRequestResponse.from_view(v) for v in views],
        pagination=RequestPagination(current_page=page, items_per_page=limit),
    )


@router.get("/provider-requests", response_model=ServiceRequestListResponse)
async def list_provider_requests(
    status_filter: RequestStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    caller: Caller = Depends(current_caller),
):
    views = await service_request_service.list_provider_requests(caller, status_filter, page, limit)
    return ServiceRequestListResponse(
        requests=[ServiceRequestResponse.from_view(v) for v in views],
        pagination=RequestPagination(current_page=page, items_per_page=limit),
    )


@router.patch("/{request_id}/status", response_model=ServiceRequestEnvelope)
async def update_service_request_status(
    request_id: UUID,
    body: StatusUpdateRequest,
    caller: Caller = Depends(current_caller),
):
    notes = body.notes.strip() if body.notes else None
    updated = await service_request_service.update_status(
        caller, str(request_id), body.status, notes=notes
    )
    return ServiceRequestEnvelope(service_request=ServiceRequestResponse.from_domain(updated))


@router.get("/{request_id}", response_model=ServiceRequestEnvelope)
async def get_service_request(request_id: UUID, caller: Caller = Depends(current_caller)):
    view = await service_request_service.get_request(caller, str(request_id))
    return ServiceRequestEnvelope(service_request=ServiceRequestResponse.from_view(view))
