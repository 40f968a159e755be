"""
Store interfaces the project health services depend on.

Structured records (Postgres) and unstructured snapshots (Redis) are two
separate contracts so either can be swapped or faked on its own.
"""

from datetime import datetime
from typing import Protocol

from ..domain.models import HealthRecord, InsightSnapshot, Milestone, Project


class ProjectStore(Protocol):
    async def list_projects_with_details(self) -> list[Project]: ...

    async def get_project_with_details(self, project_id: str) -> Project: ...

    async def update_health_score(self, project_id: str, score: int) -> None: ...

    async def list_upcoming_milestones(self, start: datetime, end: datetime) -> list[Milestone]: ...

    async def list_dashboard_projects(self, owner_id: str) -> list[Project]: ...


class SnapshotStore(Protocol):
    async def append_health_history(self, record: HealthRecord) -> None: ...

    async def list_health_history(self, project_id: str, limit: int = 30) -> list[HealthRecord]: ...

    async def append_insight_snapshot(self, snapshot: InsightSnapshot) -> None: ...

    async def latest_insight_snapshot(self) -> InsightSnapshot | None: ...
