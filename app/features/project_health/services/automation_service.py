"""
Project automation cycle.

One cycle rescores every project, records health history, raises deadline
events and stores the day's insight snapshot. Stores and the clock are
injected; ``project_automation_service`` at the bottom is the default
wiring used by the worker.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from app.core.clock import Clock, utc_now
from app.core.errors import NotFoundError, StoreError
from app.infrastructure.observability.logging import get_logger

from ..domain.insights import generate_daily_insights
from ..domain.models import HealthRecord
from ..domain.scoring import calculate_health_score, find_approaching_deadlines, get_health_factors
from ..repository.project_repository import ProjectRepository
from ..repository.snapshot_repository import RedisSnapshotRepository
from ..repository.stores import ProjectStore, SnapshotStore

logger = get_logger(__name__)

LOW_HEALTH_THRESHOLD = 50
UPCOMING_MILESTONE_WINDOW = timedelta(days=7)

EVENT_LOW_HEALTH = "low_health"
EVENT_DEADLINE_APPROACHING = "deadline_approaching"
EVENT_INSIGHTS_GENERATED = "insights_generated"


@dataclass(slots=True, frozen=True)
class AutomationEvent:
    kind: str
    payload: dict[str, Any]
    timestamp: datetime


@dataclass(slots=True)
class CycleReport:
    started_at: datetime | None = None
    finished_at: datetime | None = None
    skipped: bool = False
    reason: str | None = None
    projects_scored: int = 0
    project_failures: int = 0
    deadline_alerts: int = 0
    insights: int = 0
    recommendations: int = 0
    events: list[AutomationEvent] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        if self.skipped:
            return {"skipped": True, "reason": self.reason}
        duration = (
            (self.finished_at - self.started_at).total_seconds()
            if self.started_at and self.finished_at
            else 0
        )
        return {
            "job_run": "project_automation",
            "start_time": self.started_at.isoformat() if self.started_at else None,
            "total_duration_seconds": round(duration, 2),
            "projects_scored": self.projects_scored,
            "project_failures": self.project_failures,
            "deadline_alerts": self.deadline_alerts,
            "insights": self.insights,
            "recommendations": self.recommendations,
            "events_count": len(self.events),
            "errors_count": len(self.errors),
        }


class ProjectAutomationService:
    """Runs the periodic project health cycle."""

    def __init__(
        self,
        project_store: ProjectStore,
        snapshot_store: SnapshotStore,
        clock: Clock = utc_now,
        events: asyncio.Queue | None = None,
    ):
        self.project_store = project_store
        self.snapshot_store = snapshot_store
        self.clock = clock
        self.events = events
        self.is_running = False
        self.last_run_time: datetime | None = None

    async def run_once(self) -> CycleReport:
        """
        Run a single automation cycle.

        A failure on one project is recorded in the report and the cycle
        moves on. Failing to load the project list, the upcoming milestones
        or to store the insight snapshot aborts the cycle with StoreError.
        """
        if self.is_running:
            logger.warning("Project automation already running, skipping this iteration")
            return CycleReport(skipped=True, reason="already_running")

        self.is_running = True
        report = CycleReport(started_at=self.clock())
        try:
            logger.info("Starting project automation cycle")

            await self._update_health_scores(report)
            await self._check_deadlines(report)
            await self._generate_insights(report)

            report.finished_at = self.clock()
            self.last_run_time = report.finished_at
            logger.info("Project automation cycle completed", **report.to_dict())
            return report

        except StoreError as e:
            logger.error(
                "Project automation cycle failed",
                error=e.message,
                operation=e.operation,
            )
            raise

        finally:
            self.is_running = False

    async def _emit(self, report: CycleReport, kind: str, payload: dict[str, Any]) -> None:
        event = AutomationEvent(kind=kind, payload=payload, timestamp=self.clock())
        report.events.append(event)
        if self.events is not None:
            await self.events.put(event)

    async def _update_health_scores(self, report: CycleReport) -> None:
        projects = await self.project_store.list_projects_with_details()
        now = self.clock()

        for project in projects:
            try:
                score = calculate_health_score(project, now)
                factors = get_health_factors(project, now)

                await self.project_store.update_health_score(project.id, score)
                await self.snapshot_store.append_health_history(
                    HealthRecord(project_id=project.id, score=score, timestamp=now, factors=factors)
                )
                report.projects_scored += 1

                if score < LOW_HEALTH_THRESHOLD:
                    await self._emit(
                        report,
                        EVENT_LOW_HEALTH,
                        {"project_id": project.id, "project_name": project.name, "score": score},
                    )

            # A project deleted mid-cycle counts as a per-project failure
            except (StoreError, NotFoundError) as e:
                report.project_failures += 1
                report.errors.append(
                    {"project_id": project.id, "error": e.message, "operation": e.operation}
                )
                logger.warning(
                    "Failed to update project health",
                    project_id=project.id,
                    error=e.message,
                    operation=e.operation,
                )

    async def _check_deadlines(self, report: CycleReport) -> None:
        now = self.clock()
        milestones = await self.project_store.list_upcoming_milestones(
            now, now + UPCOMING_MILESTONE_WINDOW
        )

        for alert in find_approaching_deadlines(milestones, now):
            report.deadline_alerts += 1
            await self._emit(
                report,
                EVENT_DEADLINE_APPROACHING,
                {
                    "milestone_id": alert.milestone_id,
                    "milestone_title": alert.milestone_title,
                    "project_id": alert.project_id,
                    "due_date": alert.due_date.isoformat(),
                    "days_until": alert.days_until,
                    "priority": str(alert.priority),
                },
            )

    async def _generate_insights(self, report: CycleReport) -> None:
        # Reload so the snapshot sees the scores written above
        projects = await self.project_store.list_projects_with_details()
        snapshot = generate_daily_insights(projects, self.clock())

        await self.snapshot_store.append_insight_snapshot(snapshot)

        report.insights = len(snapshot.insights)
        report.recommendations = len(snapshot.recommendations)
        await self._emit(report, EVENT_INSIGHTS_GENERATED, snapshot.to_dict())

    def get_job_status(self) -> dict:
        return {
            "job_name": "project_automation",
            "is_running": self.is_running,
            "last_run_time": self.last_run_time.isoformat() if self.last_run_time else None,
        }


project_automation_service = ProjectAutomationService(
    project_store=ProjectRepository(),
    snapshot_store=RedisSnapshotRepository(),
)
