"""
Service request feature package.

Keeps the request lifecycle (domain rules), its Postgres repository, the
service layer and the HTTP router together.
"""

from .api.router import router as service_requests_router  # noqa: F401
from .domain.lifecycle import apply_transition, authorize_caller  # noqa: F401
from .domain.models import RequestStatus, ServiceRequest  # noqa: F401
