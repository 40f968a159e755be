"""
Service provider directory routes.

Listing and detail are public; creating requires a login; edits and
deletes are limited to the owner or an admin; verification is admin-only.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from app.auth.verify import current_caller, require_admin
from app.models.domain.user_domain import Caller

from ..domain.models import ProviderFilters
from ..services.provider_service import provider_service
from .schemas import (
    ProviderCreateRequest,
    ProviderEnvelope,
    ProviderListResponse,
    ProviderResponse,
    ProviderUpdateRequest,
    ProviderVerifyRequest,
)

router = APIRouter(prefix="/api/service-providers", tags=["service-providers"])


@router.get("", response_model=ProviderListResponse)
async def list_providers(
    category: str | None = Query(None),
    location: str | None = Query(None),
    verified: bool | None = Query(None),
    search: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    filters = ProviderFilters(
        category=category.strip() if category else None,
        location=location.strip() if location else None,
        verified=verified,
        search=search.strip() if search else None,
    )
    result = await provider_service.list_providers(filters, page, limit)
    return ProviderListResponse.from_page(result)


@router.get("/{provider_id}", response_model=ProviderEnvelope)
async def get_provider(provider_id: UUID):
    provider = await provider_service.get_provider(str(provider_id))
    return ProviderEnvelope(provider=ProviderResponse.from_domain(provider))


@router.post("", response_model=ProviderEnvelope, status_code=status.HTTP_201_CREATED)
async def create_provider(
    body: ProviderCreateRequest,
    caller: Caller = Depends(current_caller),
):
    provider = await provider_service.create_provider(caller, body.model_dump())
    return ProviderEnvelope(provider=ProviderResponse.from_domain(provider))


@router.patch("/{provider_id}", response_model=ProviderEnvelope)
async def update_provider(
    provider_id: UUID,
    body: ProviderUpdateRequest,
    caller: Caller = Depends(current_caller),
):
    changes = body.model_dump(exclude_unset=True)
    provider = await provider_service.update_provider(caller, str(provider_id), changes)
    return ProviderEnvelope(provider=ProviderResponse.from_domain(provider))


@router.delete("/{provider_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_provider(provider_id: UUID, caller: Caller = Depends(current_caller)):
    await provider_service.delete_provider(caller, str(provider_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{provider_id}/verify", response_model=ProviderEnvelope)
async def verify_provider(
    provider_id: UUID,
    body: ProviderVerifyRequest,
    admin: Caller = Depends(require_admin),
):
    provider = await provider_service.set_verification(admin, str(provider_id), body.verified)
    return ProviderEnvelope(provider=ProviderResponse.from_domain(provider))
