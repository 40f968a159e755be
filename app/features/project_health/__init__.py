"""
Project health feature package.

Health scoring and insight rules (pure domain), the Postgres and Redis
stores, the periodic automation cycle and the dashboard router.
"""

from .api.router import router as dashboard_router  # noqa: F401
from .services.automation_service import (  # noqa: F401
    AutomationEvent,
    CycleReport,
    ProjectAutomationService,
)
from .services.dashboard_service import DashboardService  # noqa: F401
