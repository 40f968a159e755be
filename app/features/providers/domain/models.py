"""
Domain models for the provider directory.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True)
class Provider:
    """Represents a service_providers row."""

    id: str
    user_id: str
    business_name: str
    business_description: str
    category: str
    location: str
    email: str
    verified: bool
    created_at: datetime
    subcategory: str | None = None
    phone: str | None = None
    website: str | None = None
    rating_average: float | None = None
    rating_count: int = 0
    verified_at: datetime | None = None
    updated_at: datetime | None = None
    service_category: dict | None = None


@dataclass(slots=True)
class ProviderFilters:
    category: str | None = None
    location: str | None = None
    verified: bool | None = None
    search: str | None = None


@dataclass(slots=True)
class ProviderPage:
    providers: list[Provider]
    page: int
    limit: int
    total_items: int
    total_pages: int = field(init=False)

    def __post_init__(self):
        self.total_pages = -(-self.total_items // self.limit) if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1
