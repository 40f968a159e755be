"""
Row mapping and error behaviour of the Postgres project repository.
"""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from app.core.errors import NotFoundError
from app.features.project_health.domain.models import MilestoneStatus
from app.features.project_health.repository import project_repository
from app.features.project_health.repository.project_repository import ProjectRepository

CREATED = datetime(2024, 5, 1, tzinfo=UTC)


def _fake_fetch_all(rows_by_table: dict[str, list[dict]]):
    async def _fetch_all(query, params=()):
        for table, rows in rows_by_table.items():
            if f"FROM {table}" in query:
                return rows
        return []

    return _fetch_all


@pytest.mark.asyncio
async def test_list_projects_groups_details(monkeypatch):
    rows = {
        "projects": [
            {"id": "p1", "name": "Website", "owner_id": "o1", "status": "active",
             "budget_total": Decimal("1000.00"), "health_score": 80},
            {"id": "p2", "name": "App", "owner_id": "o1", "status": "active",
             "budget_total": None, "health_score": None},
        ],
        "milestones": [
            {"id": "m1", "project_id": "p1", "title": "Design", "due_date": CREATED,
             "status": "completed"},
        ],
        "transactions": [
            {"id": "t1", "project_id": "p1", "amount": Decimal("250.50"), "created_at": CREATED},
        ],
        "team_members": [
            {"id": "tm1", "project_id": "p2", "user_id": "u1", "last_active": None},
        ],
    }
    monkeypatch.setattr(project_repository, "fetch_all", _fake_fetch_all(rows))

    projects = await ProjectRepository().list_projects_with_details()

    website, app_project = projects
    assert website.budget_total == 1000.0
    assert website.spent == 250.5
    assert website.milestones[0].status is MilestoneStatus.COMPLETED
    assert website.team_members == []
    assert app_project.health_score == 100
    assert app_project.budget_total is None
    assert app_project.team_members[0].user_id == "u1"


@pytest.mark.asyncio
async def test_get_project_missing_raises_not_found(monkeypatch):
    monkeypatch.setattr(project_repository, "fetch_one", AsyncMock(return_value=None))

    with pytest.raises(NotFoundError):
        await ProjectRepository().get_project_with_details("missing")


@pytest.mark.asyncio
async def test_update_health_score_missing_project(monkeypatch):
    monkeypatch.setattr(project_repository, "execute_query", AsyncMock(return_value=0))

    with pytest.raises(NotFoundError):
        await ProjectRepository().update_health_score("missing", 50)


@pytest.mark.asyncio
async def test_empty_project_list_skips_detail_queries(monkeypatch):
    fetch_all = AsyncMock(return_value=[])
    monkeypatch.setattr(project_repository, "fetch_all", fetch_all)

    assert await ProjectRepository().list_dashboard_projects("o1") == []
    assert fetch_all.await_count == 1
