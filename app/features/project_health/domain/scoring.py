"""
Project health scoring.

The score is recomputed from scratch every cycle: start at 100, subtract
fixed penalties, clamp to [0, 100]. Running it twice on the same snapshot
gives the same number.
"""

import math
from collections.abc import Iterable
from datetime import datetime, timedelta

from .models import DeadlineAlert, HealthFactors, Milestone, Priority, Project

MAX_SCORE = 100
OVERDUE_MILESTONE_PENALTY = 10
BUDGET_CRITICAL_PERCENT = 90
BUDGET_CRITICAL_PENALTY = 20
BUDGET_WARNING_PERCENT = 75
BUDGET_WARNING_PENALTY = 10
INACTIVE_TEAM_PENALTY = 15

ACTIVITY_WINDOW = timedelta(days=7)
ENGAGEMENT_WINDOW = timedelta(days=3)
DEADLINE_WINDOW = timedelta(days=3)
URGENT_WINDOW = timedelta(days=1)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def is_overdue(milestone: Milestone, now: datetime) -> bool:
    return not milestone.is_completed and milestone.due_date < now


def overdue_milestones(project: Project, now: datetime) -> list[Milestone]:
    return [m for m in project.milestones if is_overdue(m, now)]


def budget_utilization(project: Project) -> float:
    """Percent of budget spent; 0 when there is no budget."""
    if not project.budget_total:
        return 0.0
    return project.spent / project.budget_total * 100


def _active_members(project: Project, now: datetime, window: timedelta) -> int:
    cutoff = now - window
    return sum(1 for m in project.team_members if m.last_active and m.last_active > cutoff)


def calculate_health_score(project: Project, now: datetime) -> int:
    score = MAX_SCORE

    score -= len(overdue_milestones(project, now)) * OVERDUE_MILESTONE_PENALTY

    utilization = budget_utilization(project)
    if utilization > BUDGET_CRITICAL_PERCENT:
        score -= BUDGET_CRITICAL_PENALTY
    elif utilization > BUDGET_WARNING_PERCENT:
        score -= BUDGET_WARNING_PENALTY

    if _active_members(project, now, ACTIVITY_WINDOW) == 0:
        score -= INACTIVE_TEAM_PENALTY

    return max(0, min(MAX_SCORE, score))


def milestone_completion(project: Project) -> int:
    if not project.milestones:
        return 100
    completed = sum(1 for m in project.milestones if m.is_completed)
    return round_half_up(completed / len(project.milestones) * 100)


def budget_health(project: Project) -> float:
    if not project.budget_total:
        return 100.0
    return max(0.0, 100 - budget_utilization(project))


def team_engagement(project: Project, now: datetime) -> int:
    if not project.team_members:
        return 0
    active = _active_members(project, now, ENGAGEMENT_WINDOW)
    return round_half_up(active / len(project.team_members) * 100)


def get_health_factors(
    project: Project, now: datetime, document_status: int | None = None
) -> HealthFactors:
    """
    Report the health factors shown next to the score.

    None of these feed into calculate_health_score. ``document_status`` is
    passed through untouched; it comes from document tracking, which does
    not exist yet, so it is normally None.
    """
    return HealthFactors(
        milestone_completion=milestone_completion(project),
        budget_health=budget_health(project),
        team_engagement=team_engagement(project, now),
        document_status=document_status,
    )


def deadline_alert(milestone: Milestone, now: datetime) -> DeadlineAlert | None:
    """Alert for a milestone due within the next 3 days, else None."""
    if milestone.is_completed:
        return None
    remaining = milestone.due_date - now
    if remaining < timedelta(0) or remaining > DEADLINE_WINDOW:
        return None

    return DeadlineAlert(
        milestone_id=milestone.id,
        milestone_title=milestone.title,
        project_id=milestone.project_id,
        due_date=milestone.due_date,
        days_until=math.ceil(remaining / timedelta(days=1)),
        priority=Priority.URGENT if remaining <= URGENT_WINDOW else Priority.HIGH,
    )


def find_approaching_deadlines(milestones: Iterable[Milestone], now: datetime) -> list[DeadlineAlert]:
    alerts = (deadline_alert(m, now) for m in milestones)
    return [a for a in alerts if a is not None]
