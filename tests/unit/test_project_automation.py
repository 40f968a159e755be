"""
Tests for the project automation cycle.
"""

import asyncio
from datetime import timedelta

import pytest

from app.core.errors import StoreError
from app.features.project_health.services.automation_service import (
    EVENT_DEADLINE_APPROACHING,
    EVENT_INSIGHTS_GENERATED,
    EVENT_LOW_HEALTH,
    ProjectAutomationService,
)
from tests.factories import NOW, make_member, make_milestone, make_project


def _service(project_store, snapshot_store, events=None):
    return ProjectAutomationService(
        project_store=project_store,
        snapshot_store=snapshot_store,
        clock=lambda: NOW,
        events=events,
    )


@pytest.mark.asyncio
async def test_cycle_scores_projects_and_records_history(fake_project_store, fake_snapshot_store):
    fake_project_store.projects = {
        "p1": make_project("p1", budget_total=1000, spent=920, health_score=100),
        "p2": make_project("p2"),
    }
    fake_project_store.projects["p1"].milestones = [make_milestone("p1", due_in=-timedelta(days=1))]

    report = await _service(fake_project_store, fake_snapshot_store).run_once()

    assert report.projects_scored == 2
    assert report.project_failures == 0
    assert fake_project_store.score_updates == [("p1", 70), ("p2", 100)]
    history = fake_snapshot_store.health_history["p1"]
    assert history[0].score == 70
    assert history[0].timestamp == NOW
    assert history[0].factors.document_status is None


@pytest.mark.asyncio
async def test_store_error_on_one_project_does_not_abort_cycle(
    fake_project_store, fake_snapshot_store
):
    fake_project_store.projects = {"p1": make_project("p1"), "p2": make_project("p2")}
    fake_project_store.failing_updates = {"p1"}

    report = await _service(fake_project_store, fake_snapshot_store).run_once()

    assert report.projects_scored == 1
    assert report.project_failures == 1
    assert report.errors[0]["project_id"] == "p1"
    assert fake_project_store.score_updates == [("p2", 100)]
    assert len(fake_snapshot_store.insight_snapshots) == 1


@pytest.mark.asyncio
async def test_project_deleted_mid_cycle_does_not_abort_cycle(
    fake_project_store, fake_snapshot_store
):
    fake_project_store.projects = {"p1": make_project("p1"), "p2": make_project("p2")}
    fake_project_store.deleted = {"p1"}

    report = await _service(fake_project_store, fake_snapshot_store).run_once()

    assert report.projects_scored == 1
    assert report.project_failures == 1
    assert report.errors[0] == {
        "project_id": "p1",
        "error": "Project not found",
        "operation": "update_health_score",
    }
    assert fake_project_store.score_updates == [("p2", 100)]
    assert "p1" not in fake_snapshot_store.health_history
    assert len(fake_snapshot_store.insight_snapshots) == 1


@pytest.mark.asyncio
async def test_low_health_and_deadline_events_are_queued(fake_project_store, fake_snapshot_store):
    sick = make_project(
        "p1",
        budget_total=100,
        spent=99,
        team_members=[make_member("p1", active_ago=timedelta(days=30))],
        milestones=[
            make_milestone("p1", milestone_id=f"late-{i}", due_in=-timedelta(days=i + 1))
            for i in range(3)
        ],
    )
    fake_project_store.projects = {"p1": sick}
    fake_project_store.upcoming = [
        make_milestone("p1", milestone_id="soon", due_in=timedelta(hours=10)),
        make_milestone("p1", milestone_id="next-week", due_in=timedelta(days=5)),
    ]
    queue: asyncio.Queue = asyncio.Queue()

    report = await _service(fake_project_store, fake_snapshot_store, events=queue).run_once()

    kinds = []
    while not queue.empty():
        kinds.append(queue.get_nowait().kind)

    assert kinds == [EVENT_LOW_HEALTH, EVENT_DEADLINE_APPROACHING, EVENT_INSIGHTS_GENERATED]
    assert [e.kind for e in report.events] == kinds
    assert report.deadline_alerts == 1
    assert report.events[1].payload["milestone_id"] == "soon"
    assert report.events[1].payload["priority"] == "urgent"


@pytest.mark.asyncio
async def test_insights_use_freshly_written_scores(fake_project_store, fake_snapshot_store):
    # Stored score is stale; the cycle rewrites it before generating insights
    fake_project_store.projects = {
        "p1": make_project(
            "p1",
            name="Website",
            health_score=100,
            budget_total=100,
            spent=80,
            team_members=[],
            milestones=[make_milestone("p1", due_in=-timedelta(days=1))],
        ),
    }

    report = await _service(fake_project_store, fake_snapshot_store).run_once()

    snapshot = fake_snapshot_store.insight_snapshots[0]
    assert report.insights == 1
    assert snapshot.insights[0].message == 'Project "Website" health is below optimal (65%)'


@pytest.mark.asyncio
async def test_overlapping_cycle_is_skipped(fake_project_store, fake_snapshot_store):
    service = _service(fake_project_store, fake_snapshot_store)
    service.is_running = True

    report = await service.run_once()

    assert report.skipped is True
    assert report.to_dict() == {"skipped": True, "reason": "already_running"}
    assert fake_project_store.score_updates == []


@pytest.mark.asyncio
async def test_cycle_level_store_error_propagates_and_resets_guard(fake_snapshot_store):
    class BrokenStore:
        async def list_projects_with_details(self):
            raise StoreError("database down", operation="fetch_all")

    service = _service(BrokenStore(), fake_snapshot_store)

    with pytest.raises(StoreError):
        await service.run_once()

    assert service.is_running is False


@pytest.mark.asyncio
async def test_report_summary(fake_project_store, fake_snapshot_store):
    fake_project_store.projects = {"p1": make_project("p1")}

    report = await _service(fake_project_store, fake_snapshot_store).run_once()
    summary = report.to_dict()

    assert summary["job_run"] == "project_automation"
    assert summary["projects_scored"] == 1
    assert summary["events_count"] == 1
    assert summary["total_duration_seconds"] == 0
