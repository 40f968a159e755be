"""
Tests for the dashboard read model.
"""

from datetime import timedelta

import pytest

from app.core.errors import NotFoundError, PermissionDeniedError
from app.features.project_health.domain.models import InsightSnapshot, MilestoneStatus, Priority
from app.features.project_health.services.dashboard_service import DashboardService
from app.models.domain.user_domain import Caller
from tests.factories import NOW, make_activity, make_milestone, make_project

OWNER = Caller(user_id="owner-1")


def _service(project_store, snapshot_store):
    return DashboardService(project_store, snapshot_store, clock=lambda: NOW)


@pytest.fixture
def populated_store(fake_project_store):
    website = make_project(
        "p1",
        name="Website",
        budget_total=1000,
        spent=400,
        health_score=60,
        milestones=[
            make_milestone("p1", milestone_id="late", due_in=-timedelta(days=1)),
            make_milestone("p1", milestone_id="soon", due_in=timedelta(days=2)),
            make_milestone("p1", milestone_id="far", due_in=timedelta(days=20)),
            make_milestone(
                "p1", milestone_id="done", due_in=timedelta(days=1), status=MilestoneStatus.COMPLETED
            ),
        ],
        activities=[make_activity("p1", minutes, f"a{minutes}") for minutes in (5, 50, 500)],
    )
    app_project = make_project(
        "p2",
        name="App",
        budget_total=None,
        health_score=90,
        status="completed",
        activities=[make_activity("p2", minutes, f"b{minutes}") for minutes in range(1, 12)],
    )
    other = make_project("p3", owner_id="someone-else")
    fake_project_store.projects = {p.id: p for p in (website, app_project, other)}
    return fake_project_store


@pytest.mark.asyncio
async def test_dashboard_metrics(populated_store, fake_snapshot_store):
    dashboard = await _service(populated_store, fake_snapshot_store).get_dashboard(OWNER, "owner-1")

    metrics = dashboard.metrics
    assert metrics.total_projects == 2
    assert metrics.active_projects == 1
    assert metrics.average_health == 75
    # overdue + due in 2 days; the 20-day and completed ones are excluded
    assert metrics.upcoming_deadlines == 2
    assert metrics.total_budget == 1000
    assert metrics.total_spent == 400


@pytest.mark.asyncio
async def test_dashboard_project_summaries(populated_store, fake_snapshot_store):
    dashboard = await _service(populated_store, fake_snapshot_store).get_dashboard(OWNER, "owner-1")

    website = dashboard.projects[0]
    assert website.budget_utilization == pytest.approx(40)
    assert [m.id for m in website.upcoming_milestones] == ["late", "soon", "far"]
    assert website.recent_activity.id == "a5"
    assert website.team_size == 1
    assert dashboard.projects[1].budget_utilization == 0


@pytest.mark.asyncio
async def test_dashboard_focus_and_recent_activities(populated_store, fake_snapshot_store):
    dashboard = await _service(populated_store, fake_snapshot_store).get_dashboard(OWNER, "owner-1")

    assert [f.priority for f in dashboard.todays_focus] == [Priority.URGENT, Priority.MEDIUM]
    assert len(dashboard.recent_activities) == 10
    assert dashboard.recent_activities[0].id == "b1"
    created = [a.created_at for a in dashboard.recent_activities]
    assert created == sorted(created, reverse=True)


@pytest.mark.asyncio
async def test_dashboard_includes_latest_insights(populated_store, fake_snapshot_store):
    await fake_snapshot_store.append_insight_snapshot(InsightSnapshot(timestamp=NOW - timedelta(days=1)))
    await fake_snapshot_store.append_insight_snapshot(InsightSnapshot(timestamp=NOW))

    dashboard = await _service(populated_store, fake_snapshot_store).get_dashboard(OWNER, "owner-1")

    assert dashboard.insights.timestamp == NOW


@pytest.mark.asyncio
async def test_dashboard_for_user_without_projects(fake_project_store, fake_snapshot_store):
    dashboard = await _service(fake_project_store, fake_snapshot_store).get_dashboard(
        Caller(user_id="new-user"), "new-user"
    )

    assert dashboard.metrics.total_projects == 0
    assert dashboard.metrics.average_health == 0
    assert dashboard.todays_focus == []
    assert dashboard.insights is None


@pytest.mark.asyncio
async def test_dashboard_of_another_user_is_forbidden(populated_store, fake_snapshot_store):
    with pytest.raises(PermissionDeniedError):
        await _service(populated_store, fake_snapshot_store).get_dashboard(
            Caller(user_id="intruder"), "owner-1"
        )


@pytest.mark.asyncio
async def test_admin_can_view_any_dashboard(populated_store, fake_snapshot_store):
    dashboard = await _service(populated_store, fake_snapshot_store).get_dashboard(
        Caller(user_id="admin-1", role="admin"), "owner-1"
    )
    assert dashboard.metrics.total_projects == 2


@pytest.mark.asyncio
async def test_project_health_detail(populated_store, fake_snapshot_store):
    detail = await _service(populated_store, fake_snapshot_store).get_project_health(OWNER, "p1")

    # one overdue milestone
    assert detail.score == 90
    assert detail.stored_score == 60
    assert detail.factors.milestone_completion == 25
    assert detail.history == []


@pytest.mark.asyncio
async def test_project_health_requires_ownership(populated_store, fake_snapshot_store):
    service = _service(populated_store, fake_snapshot_store)

    with pytest.raises(PermissionDeniedError):
        await service.get_project_health(OWNER, "p3")
    with pytest.raises(NotFoundError):
        await service.get_project_health(OWNER, "missing")
