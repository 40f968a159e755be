"""
Postgres repository for projects and their milestones, transactions,
team members and activities.
"""

from collections import defaultdict
from datetime import datetime
from typing import Any

from app.core.errors import NotFoundError
from app.db.helpers import execute_query, fetch_all, fetch_one
from app.infrastructure.observability.logging import get_logger

from ..domain.models import (
    Activity,
    Milestone,
    MilestoneStatus,
    Project,
    TeamMember,
    Transaction,
)

logger = get_logger(__name__)

DASHBOARD_MILESTONES_PER_PROJECT = 5
DASHBOARD_ACTIVITIES_PER_PROJECT = 20

_PROJECT_COLUMNS = "id, name, owner_id, status, budget_total, health_score"


def _row_to_project(row: dict[str, Any]) -> Project:
    budget = row.get("budget_total")
    return Project(
        id=str(row["id"]),
        name=row["name"],
        owner_id=str(row["owner_id"]),
        status=row.get("status") or "active",
        budget_total=float(budget) if budget is not None else None,
        health_score=int(row.get("health_score") if row.get("health_score") is not None else 100),
    )


def _row_to_milestone(row: dict[str, Any]) -> Milestone:
    return Milestone(
        id=str(row["id"]),
        project_id=str(row["project_id"]),
        title=row["title"],
        due_date=row["due_date"],
        status=MilestoneStatus(row["status"]),
    )


def _row_to_transaction(row: dict[str, Any]) -> Transaction:
    return Transaction(
        id=str(row["id"]),
        project_id=str(row["project_id"]),
        amount=float(row["amount"]),
        created_at=row["created_at"],
    )


def _row_to_member(row: dict[str, Any]) -> TeamMember:
    return TeamMember(
        id=str(row["id"]),
        project_id=str(row["project_id"]),
        user_id=str(row["user_id"]) if row.get("user_id") else None,
        last_active=row.get("last_active"),
    )


def _row_to_activity(row: dict[str, Any]) -> Activity:
    return Activity(
        id=str(row["id"]),
        project_id=str(row["project_id"]),
        description=row.get("description") or "",
        created_at=row["created_at"],
        user_id=str(row["user_id"]) if row.get("user_id") else None,
    )


def _group(rows: list[dict[str, Any]], convert) -> dict[str, list]:
    grouped: dict[str, list] = defaultdict(list)
    for row in rows:
        grouped[str(row["project_id"])].append(convert(row))
    return grouped


class ProjectRepository:
    """ProjectStore backed by the Supabase Postgres database."""

    async def _attach_details(
        self,
        projects: list[Project],
        *,
        milestone_limit: int | None = None,
        with_activities: bool = False,
    ) -> list[Project]:
        if not projects:
            return projects

        ids = [p.id for p in projects]

        if milestone_limit is None:
            milestone_rows = await fetch_all(
                """
                SELECT id, project_id, title, due_date, status
                FROM milestones
                WHERE project_id = ANY(%s)
                ORDER BY due_date ASC
                """,
                (ids,),
            )
        else:
            milestone_rows = await fetch_all(
                """
                SELECT id, project_id, title, due_date, status
                FROM (
                    SELECT m.*,
                        ROW_NUMBER() OVER (PARTITION BY project_id ORDER BY due_date ASC) AS rn
                    FROM milestones m
                    WHERE project_id = ANY(%s)
                ) ranked
                WHERE rn <= %s
                ORDER BY due_date ASC
                """,
                (ids, milestone_limit),
            )

        transaction_rows = await fetch_all(
            """
            SELECT id, project_id, amount, created_at
            FROM transactions
            WHERE project_id = ANY(%s)
            ORDER BY created_at DESC
            """,
            (ids,),
        )
        member_rows = await fetch_all(
            """
            SELECT id, project_id, user_id, last_active
            FROM team_members
            WHERE project_id = ANY(%s)
            """,
            (ids,),
        )

        milestones = _group(milestone_rows, _row_to_milestone)
        transactions = _group(transaction_rows, _row_to_transaction)
        members = _group(member_rows, _row_to_member)

        activities: dict[str, list] = {}
        if with_activities:
            activity_rows = await fetch_all(
                """
                SELECT id, project_id, user_id, description, created_at
                FROM (
                    SELECT a.*,
                        ROW_NUMBER() OVER (PARTITION BY project_id ORDER BY created_at DESC) AS rn
                    FROM activities a
                    WHERE project_id = ANY(%s)
                ) ranked
                WHERE rn <= %s
                ORDER BY created_at DESC
                """,
                (ids, DASHBOARD_ACTIVITIES_PER_PROJECT),
            )
            activities = _group(activity_rows, _row_to_activity)

        for project in projects:
            project.milestones = milestones.get(project.id, [])
            project.transactions = transactions.get(project.id, [])
            project.team_members = members.get(project.id, [])
            project.activities = activities.get(project.id, [])

        return projects

    async def list_projects_with_details(self) -> list[Project]:
        rows = await fetch_all(f"SELECT {_PROJECT_COLUMNS} FROM projects ORDER BY created_at ASC")
        projects = [_row_to_project(row) for row in rows]
        return await self._attach_details(projects)

    async def get_project_with_details(self, project_id: str) -> Project:
        row = await fetch_one(f"SELECT {_PROJECT_COLUMNS} FROM projects WHERE id = %s", (project_id,))
        if not row:
            raise NotFoundError("Project not found", operation="get_project")
        projects = await self._attach_details([_row_to_project(row)])
        return projects[0]

    async def update_health_score(self, project_id: str, score: int) -> None:
        affected = await execute_query(
            "UPDATE projects SET health_score = %s, updated_at = NOW() WHERE id = %s",
            (score, project_id),
        )
        if affected == 0:
            raise NotFoundError("Project not found", operation="update_health_score")
        logger.debug("Stored project health score", project_id=project_id, score=score)

    async def list_upcoming_milestones(self, start: datetime, end: datetime) -> list[Milestone]:
        rows = await fetch_all(
            """
            SELECT id, project_id, title, due_date, status
            FROM milestones
            WHERE status <> 'completed'
              AND due_date >= %s
              AND due_date <= %s
            ORDER BY due_date ASC
            """,
            (start, end),
        )
        return [_row_to_milestone(row) for row in rows]

    async def list_dashboard_projects(self, owner_id: str) -> list[Project]:
        rows = await fetch_all(
            f"SELECT {_PROJECT_COLUMNS} FROM projects WHERE owner_id = %s ORDER BY created_at ASC",
            (owner_id,),
        )
        projects = [_row_to_project(row) for row in rows]
        return await self._attach_details(
            projects,
            milestone_limit=DASHBOARD_MILESTONES_PER_PROJECT,
            with_activities=True,
        )
