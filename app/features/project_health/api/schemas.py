"""
Response models for the dashboard endpoints.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from ..domain.models import Activity, FocusItem, HealthRecord, InsightSnapshot, Milestone
from ..services.dashboard_service import Dashboard, ProjectHealthDetail, ProjectSummary


class MilestoneResponse(BaseModel):
    id: str
    title: str
    due_date: datetime
    status: str

    @classmethod
    def from_domain(cls, milestone: Milestone) -> "MilestoneResponse":
        return cls(
            id=milestone.id,
            title=milestone.title,
            due_date=milestone.due_date,
            status=str(milestone.status),
        )


class ActivityResponse(BaseModel):
    id: str
    project_id: str
    user_id: str | None
    description: str
    created_at: datetime

    @classmethod
    def from_domain(cls, activity: Activity) -> "ActivityResponse":
        return cls(
            id=activity.id,
            project_id=activity.project_id,
            user_id=activity.user_id,
            description=activity.description,
            created_at=activity.created_at,
        )


class DashboardMetricsResponse(BaseModel):
    total_projects: int
    active_projects: int
    average_health: float
    upcoming_deadlines: int
    total_budget: float
    total_spent: float


class ProjectSummaryResponse(BaseModel):
    id: str
    name: str
    health_score: int
    status: str
    upcoming_milestones: list[MilestoneResponse]
    recent_activity: ActivityResponse | None
    team_size: int
    budget_utilization: float

    @classmethod
    def from_domain(cls, summary: ProjectSummary) -> "ProjectSummaryResponse":
        return cls(
            id=summary.id,
            name=summary.name,
            health_score=summary.health_score,
            status=summary.status,
            upcoming_milestones=[MilestoneResponse.from_domain(m) for m in summary.upcoming_milestones],
            recent_activity=(
                ActivityResponse.from_domain(summary.recent_activity)
                if summary.recent_activity
                else None
            ),
            team_size=summary.team_size,
            budget_utilization=summary.budget_utilization,
        )


class FocusItemResponse(BaseModel):
    priority: str
    type: str
    action: str
    project_id: str
    project_name: str
    milestone_id: str | None = None
    metadata: dict[str, Any] = {}

    @classmethod
    def from_domain(cls, item: FocusItem) -> "FocusItemResponse":
        return cls(
            priority=str(item.priority),
            type=item.type,
            action=item.action,
            project_id=item.project_id,
            project_name=item.project_name,
            milestone_id=item.milestone_id,
            metadata=dict(item.metadata),
        )


class InsightItemResponse(BaseModel):
    type: str
    message: str
    project_id: str


class InsightSnapshotResponse(BaseModel):
    timestamp: datetime
    insights: list[InsightItemResponse]
    recommendations: list[InsightItemResponse]

    @classmethod
    def from_domain(cls, snapshot: InsightSnapshot) -> "InsightSnapshotResponse":
        return cls(
            timestamp=snapshot.timestamp,
            insights=[InsightItemResponse(**i.to_dict()) for i in snapshot.insights],
            recommendations=[InsightItemResponse(**r.to_dict()) for r in snapshot.recommendations],
        )


class DashboardResponse(BaseModel):
    status: str = "success"
    metrics: DashboardMetricsResponse
    projects: list[ProjectSummaryResponse]
    todays_focus: list[FocusItemResponse]
    insights: InsightSnapshotResponse | None
    recent_activities: list[ActivityResponse]

    @classmethod
    def from_domain(cls, dashboard: Dashboard) -> "DashboardResponse":
        m = dashboard.metrics
        return cls(
            metrics=DashboardMetricsResponse(
                total_projects=m.total_projects,
                active_projects=m.active_projects,
                average_health=m.average_health,
                upcoming_deadlines=m.upcoming_deadlines,
                total_budget=m.total_budget,
                total_spent=m.total_spent,
            ),
            projects=[ProjectSummaryResponse.from_domain(p) for p in dashboard.projects],
            todays_focus=[FocusItemResponse.from_domain(f) for f in dashboard.todays_focus],
            insights=(
                InsightSnapshotResponse.from_domain(dashboard.insights)
                if dashboard.insights
                else None
            ),
            recent_activities=[ActivityResponse.from_domain(a) for a in dashboard.recent_activities],
        )


class HealthRecordResponse(BaseModel):
    score: int
    timestamp: datetime
    factors: dict[str, Any]

    @classmethod
    def from_domain(cls, record: HealthRecord) -> "HealthRecordResponse":
        return cls(score=record.score, timestamp=record.timestamp, factors=record.factors.to_dict())


class ProjectHealthResponse(BaseModel):
    status: str = "success"
    project_id: str
    project_name: str
    score: int
    stored_score: int
    factors: dict[str, Any]
    history: list[HealthRecordResponse]

    @classmethod
    def from_domain(cls, detail: ProjectHealthDetail) -> "ProjectHealthResponse":
        return cls(
            project_id=detail.project_id,
            project_name=detail.project_name,
            score=detail.score,
            stored_score=detail.stored_score,
            factors=detail.factors.to_dict(),
            history=[HealthRecordResponse.from_domain(r) for r in detail.history],
        )
