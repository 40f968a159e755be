"""
Dashboard read model: metrics, project summaries, today's focus and the
latest insights for one project owner.
"""

from dataclasses import dataclass, field
from datetime import timedelta

from app.core.clock import Clock, utc_now
from app.core.errors import PermissionDeniedError
from app.infrastructure.observability.logging import get_logger
from app.models.domain.user_domain import Caller

from ..domain.insights import build_todays_focus
from ..domain.models import (
    Activity,
    FocusItem,
    HealthFactors,
    HealthRecord,
    InsightSnapshot,
    Milestone,
    Project,
)
from ..domain.scoring import budget_utilization, calculate_health_score, get_health_factors
from ..repository.project_repository import ProjectRepository
from ..repository.snapshot_repository import RedisSnapshotRepository
from ..repository.stores import ProjectStore, SnapshotStore

logger = get_logger(__name__)

UPCOMING_DEADLINE_WINDOW = timedelta(days=7)
SUMMARY_MILESTONES = 3
RECENT_ACTIVITY_LIMIT = 10
HEALTH_HISTORY_LIMIT = 30


@dataclass(slots=True)
class DashboardMetrics:
    total_projects: int
    active_projects: int
    average_health: float
    upcoming_deadlines: int
    total_budget: float
    total_spent: float


@dataclass(slots=True)
class ProjectSummary:
    id: str
    name: str
    health_score: int
    status: str
    upcoming_milestones: list[Milestone]
    recent_activity: Activity | None
    team_size: int
    budget_utilization: float


@dataclass(slots=True)
class Dashboard:
    metrics: DashboardMetrics
    projects: list[ProjectSummary]
    todays_focus: list[FocusItem]
    insights: InsightSnapshot | None
    recent_activities: list[Activity] = field(default_factory=list)


@dataclass(slots=True)
class ProjectHealthDetail:
    project_id: str
    project_name: str
    score: int
    stored_score: int
    factors: HealthFactors
    history: list[HealthRecord]


def _metrics(projects: list[Project], now) -> DashboardMetrics:
    horizon = now + UPCOMING_DEADLINE_WINDOW
    # Overdue milestones count as upcoming deadlines too
    upcoming = sum(
        1
        for p in projects
        for m in p.milestones
        if not m.is_completed and m.due_date < horizon
    )
    return DashboardMetrics(
        total_projects=len(projects),
        active_projects=sum(1 for p in projects if p.status == "active"),
        average_health=(
            sum(p.health_score for p in projects) / len(projects) if projects else 0.0
        ),
        upcoming_deadlines=upcoming,
        total_budget=sum(p.budget_total or 0.0 for p in projects),
        total_spent=sum(p.spent for p in projects),
    )


def _summary(project: Project) -> ProjectSummary:
    return ProjectSummary(
        id=project.id,
        name=project.name,
        health_score=project.health_score,
        status=project.status,
        upcoming_milestones=project.milestones[:SUMMARY_MILESTONES],
        recent_activity=project.activities[0] if project.activities else None,
        team_size=len(project.team_members),
        budget_utilization=budget_utilization(project),
    )


class DashboardService:
    def __init__(
        self,
        project_store: ProjectStore,
        snapshot_store: SnapshotStore,
        clock: Clock = utc_now,
    ):
        self.project_store = project_store
        self.snapshot_store = snapshot_store
        self.clock = clock

    @staticmethod
    def _ensure_can_view(caller: Caller, owner_id: str) -> None:
        if caller.user_id != owner_id and not caller.is_admin:
            raise PermissionDeniedError(
                "You can only view your own dashboard", operation="get_dashboard"
            )

    async def get_dashboard(self, caller: Caller, user_id: str) -> Dashboard:
        self._ensure_can_view(caller, user_id)

        now = self.clock()
        projects = await self.project_store.list_dashboard_projects(user_id)
        insights = await self.snapshot_store.latest_insight_snapshot()

        recent = sorted(
            (a for p in projects for a in p.activities),
            key=lambda a: a.created_at,
            reverse=True,
        )[:RECENT_ACTIVITY_LIMIT]

        logger.debug("Dashboard assembled", user_id=user_id, projects=len(projects))

        return Dashboard(
            metrics=_metrics(projects, now),
            projects=[_summary(p) for p in projects],
            todays_focus=build_todays_focus(projects, now),
            insights=insights,
            recent_activities=recent,
        )

    async def get_project_health(self, caller: Caller, project_id: str) -> ProjectHealthDetail:
        project = await self.project_store.get_project_with_details(project_id)
        if caller.user_id != project.owner_id and not caller.is_admin:
            raise PermissionDeniedError(
                "You can only view health of your own projects", operation="get_project_health"
            )

        now = self.clock()
        history = await self.snapshot_store.list_health_history(project_id, HEALTH_HISTORY_LIMIT)

        return ProjectHealthDetail(
            project_id=project.id,
            project_name=project.name,
            score=calculate_health_score(project, now),
            stored_score=project.health_score,
            factors=get_health_factors(project, now),
            history=history,
        )


dashboard_service = DashboardService(
    project_store=ProjectRepository(),
    snapshot_store=RedisSnapshotRepository(),
)
