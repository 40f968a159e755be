"""
Dashboard endpoints with in-memory stores.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.features.project_health.services.dashboard_service import dashboard_service
from app.main import app
from app.models.domain.user_domain import Caller
from tests.factories import NOW, make_activity, make_milestone, make_project

OWNER_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"
PROJECT_ID = "c56a4180-65aa-42ec-a945-5fd21dec0538"


@pytest.fixture
def stores(monkeypatch, fake_project_store, fake_snapshot_store):
    project = make_project(
        PROJECT_ID,
        name="Website",
        owner_id=OWNER_ID,
        health_score=55,
        budget_total=2000,
        spent=500,
        milestones=[make_milestone(PROJECT_ID, due_in=-timedelta(days=2), title="Wireframes")],
        activities=[make_activity(PROJECT_ID, 10, "a1")],
    )
    fake_project_store.projects = {PROJECT_ID: project}
    monkeypatch.setattr(dashboard_service, "project_store", fake_project_store)
    monkeypatch.setattr(dashboard_service, "snapshot_store", fake_snapshot_store)
    monkeypatch.setattr(dashboard_service, "clock", lambda: NOW)
    return fake_project_store, fake_snapshot_store


@pytest.fixture
def client_as(apply_auth_override):
    def _client(caller: Caller) -> TestClient:
        apply_auth_override(app, caller)
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()


def test_owner_gets_dashboard(stores, client_as):
    response = client_as(Caller(user_id=OWNER_ID)).get(f"/api/dashboard/{OWNER_ID}")

    assert response.status_code == 200
    body = response.json()
    assert body["metrics"]["total_projects"] == 1
    assert body["metrics"]["upcoming_deadlines"] == 1
    assert body["projects"][0]["budget_utilization"] == 25
    assert body["projects"][0]["recent_activity"]["id"] == "a1"
    assert [f["priority"] for f in body["todays_focus"]] == ["urgent", "medium"]
    assert body["todays_focus"][0]["action"] == "Complete overdue milestone: Wireframes"
    assert body["insights"] is None
    assert len(body["recent_activities"]) == 1


def test_other_user_dashboard_forbidden(stores, client_as):
    response = client_as(Caller(user_id="someone-else")).get(f"/api/dashboard/{OWNER_ID}")

    assert response.status_code == 403
    assert response.json()["error_code"] == "permission_denied"


def test_project_health_endpoint(stores, client_as):
    response = client_as(Caller(user_id=OWNER_ID)).get(
        f"/api/dashboard/projects/{PROJECT_ID}/health"
    )

    assert response.status_code == 200
    body = response.json()
    assert body["score"] == 90
    assert body["stored_score"] == 55
    assert body["factors"]["document_status"] is None
    assert body["history"] == []


def test_project_health_unknown_project(stores, client_as):
    response = client_as(Caller(user_id=OWNER_ID)).get(
        "/api/dashboard/projects/00000000-0000-0000-0000-000000000000/health"
    )

    assert response.status_code == 404
