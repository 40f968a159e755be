"""
Request and response models for the provider directory endpoints.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from ..domain.models import Provider, ProviderPage

PHONE_PATTERN = r"^\+?[0-9 ()\-]{7,20}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
URL_PATTERN = r"^https?://\S+$"


class ProviderCreateRequest(BaseModel):
    business_name: str = Field(..., min_length=2, max_length=100)
    business_description: str = Field(..., min_length=10, max_length=1000)
    category: str = Field(..., min_length=1)
    subcategory: str | None = None
    location: str = Field(..., min_length=1)
    phone: str | None = Field(None, pattern=PHONE_PATTERN)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    website: str | None = Field(None, pattern=URL_PATTERN)


class ProviderUpdateRequest(BaseModel):
    business_name: str | None = Field(None, min_length=2, max_length=100)
    business_description: str | None = Field(None, min_length=10, max_length=1000)
    category: str | None = None
    subcategory: str | None = None
    location: str | None = None
    phone: str | None = Field(None, pattern=PHONE_PATTERN)
    email: str | None = Field(None, pattern=EMAIL_PATTERN)
    website: str | None = Field(None, pattern=URL_PATTERN)


class ProviderVerifyRequest(BaseModel):
    verified: bool


class ProviderResponse(BaseModel):
    id: str
    user_id: str
    business_name: str
    business_description: str
    category: str
    subcategory: str | None
    location: str
    phone: str | None
    email: str
    website: str | None
    verified: bool
    verified_at: datetime | None
    rating_average: float | None
    rating_count: int
    created_at: datetime
    updated_at: datetime | None
    service_category: dict[str, Any] | None

    @classmethod
    def from_domain(cls, provider: Provider) -> "ProviderResponse":
        return cls(
            id=provider.id,
            user_id=provider.user_id,
            business_name=provider.business_name,
            business_description=provider.business_description,
            category=provider.category,
            subcategory=provider.subcategory,
            location=provider.location,
            phone=provider.phone,
            email=provider.email,
            website=provider.website,
            verified=provider.verified,
            verified_at=provider.verified_at,
            rating_average=provider.rating_average,
            rating_count=provider.rating_count,
            created_at=provider.created_at,
            updated_at=provider.updated_at,
            service_category=provider.service_category,
        )


class PaginationMeta(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool


class ProviderListResponse(BaseModel):
    status: str = "success"
    providers: list[ProviderResponse]
    pagination: PaginationMeta

    @classmethod
    def from_page(cls, page: ProviderPage) -> "ProviderListResponse":
        return cls(
            providers=[ProviderResponse.from_domain(p) for p in page.providers],
            pagination=PaginationMeta(
                current_page=page.page,
                total_pages=page.total_pages,
                total_items=page.total_items,
                items_per_page=page.limit,
                has_next_page=page.has_next_page,
                has_prev_page=page.has_prev_page,
            ),
        )


class ProviderEnvelope(BaseModel):
    status: str = "success"
    provider: ProviderResponse
