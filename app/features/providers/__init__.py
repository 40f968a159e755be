"""
Service provider directory feature package.
"""

from .api.router import router as providers_router  # noqa: F401
from .domain.models import Provider, ProviderFilters  # noqa: F401
