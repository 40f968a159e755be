"""
Dashboard routes.

Usage:
    1. GET /api/dashboard/{user_id} - metrics, projects, focus and insights (self or admin)
    2. GET /api/dashboard/projects/{project_id}/health - live score, factors and history
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from app.auth.verify import current_caller
from app.models.domain.user_domain import Caller

from ..services.dashboard_service import dashboard_service
from .schemas import DashboardResponse, ProjectHealthResponse

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/projects/{project_id}/health", response_model=ProjectHealthResponse)
async def get_project_health(project_id: UUID, caller: Caller = Depends(current_caller)):
    detail = await dashboard_service.get_project_health(caller, str(project_id))
    return ProjectHealthResponse.from_domain(detail)


@router.get("/{user_id}", response_model=DashboardResponse)
async def get_dashboard(user_id: UUID, caller: Caller = Depends(current_caller)):
    dashboard = await dashboard_service.get_dashboard(caller, str(user_id))
    return DashboardResponse.from_domain(dashboard)
