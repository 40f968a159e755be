"""
Daily insights and today's focus list.

Both read the stored ``health_score`` of each project (the value the last
automation cycle wrote), not a freshly computed one.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from .models import (
    PRIORITY_RANK,
    FocusItem,
    InsightItem,
    InsightSnapshot,
    Priority,
    Project,
)
from .scoring import is_overdue

HEALTH_WARNING_THRESHOLD = 70
BUDGET_REVIEW_RATIO = 0.8
FOCUS_LIMIT = 5
DUE_SOON_WINDOW = timedelta(hours=24)


def generate_daily_insights(projects: Iterable[Project], now: datetime) -> InsightSnapshot:
    insights: list[InsightItem] = []
    recommendations: list[InsightItem] = []

    for project in projects:
        if project.health_score < HEALTH_WARNING_THRESHOLD:
            insights.append(
                InsightItem(
                    type="warning",
                    message=(
                        f'Project "{project.name}" health is below optimal '
                        f"({project.health_score}%)"
                    ),
                    project_id=project.id,
                )
            )

        if project.budget_total and project.spent > project.budget_total * BUDGET_REVIEW_RATIO:
            recommendations.append(
                InsightItem(
                    type="budget",
                    message=f'Review budget allocation for "{project.name}"',
                    project_id=project.id,
                )
            )

    return InsightSnapshot(
        timestamp=now,
        insights=tuple(insights),
        recommendations=tuple(recommendations),
    )


def _milestone_metadata(milestone) -> dict:
    return {
        "milestone_id": milestone.id,
        "title": milestone.title,
        "due_date": milestone.due_date.isoformat(),
        "status": str(milestone.status),
    }


def build_todays_focus(
    projects: Sequence[Project], now: datetime, limit: int = FOCUS_LIMIT
) -> list[FocusItem]:
    """
    Rank what needs attention today.

    Sources, in order: overdue milestones (urgent), milestones due within the
    next 24 hours (high), projects below the health threshold (medium).
    ``sorted`` is stable, so items of equal priority keep source order.
    """
    items: list[FocusItem] = []

    for project in projects:
        for milestone in project.milestones:
            if is_overdue(milestone, now):
                items.append(
                    FocusItem(
                        priority=Priority.URGENT,
                        type="milestone",
                        action=f"Complete overdue milestone: {milestone.title}",
                        project_id=project.id,
                        project_name=project.name,
                        milestone_id=milestone.id,
                        metadata=_milestone_metadata(milestone),
                    )
                )

    due_by = now + DUE_SOON_WINDOW
    for project in projects:
        for milestone in project.milestones:
            if not milestone.is_completed and now <= milestone.due_date <= due_by:
                items.append(
                    FocusItem(
                        priority=Priority.HIGH,
                        type="milestone",
                        action=f"{milestone.title} due soon",
                        project_id=project.id,
                        project_name=project.name,
                        milestone_id=milestone.id,
                        metadata=_milestone_metadata(milestone),
                    )
                )

    for project in projects:
        if project.health_score < HEALTH_WARNING_THRESHOLD:
            items.append(
                FocusItem(
                    priority=Priority.MEDIUM,
                    type="health",
                    action=f"Review project health: {project.name} ({project.health_score}%)",
                    project_id=project.id,
                    project_name=project.name,
                    metadata={"health_score": project.health_score},
                )
            )

    ranked = sorted(items, key=lambda item: PRIORITY_RANK[item.priority])
    return ranked[:limit]
