"""
Domain models for project health.

Project snapshots are loaded in full (milestones, transactions, team
members) by the structured store and handed to the pure functions in
scoring.py and insights.py. Derived records (InsightSnapshot, FocusItem,
DeadlineAlert) are frozen: they are produced once and never edited.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class MilestoneStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Priority(StrEnum):
    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_RANK: dict[Priority, int] = {
    Priority.URGENT: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


@dataclass(slots=True)
class Milestone:
    id: str
    project_id: str
    title: str
    due_date: datetime
    status: MilestoneStatus

    @property
    def is_completed(self) -> bool:
        return self.status == MilestoneStatus.COMPLETED


@dataclass(slots=True)
class Transaction:
    id: str
    project_id: str
    amount: float
    created_at: datetime


@dataclass(slots=True)
class TeamMember:
    id: str
    project_id: str
    user_id: str | None
    last_active: datetime | None


@dataclass(slots=True)
class Activity:
    id: str
    project_id: str
    description: str
    created_at: datetime
    user_id: str | None = None


@dataclass(slots=True)
class Project:
    """A project with everything the health engine reads."""

    id: str
    name: str
    owner_id: str
    status: str
    budget_total: float | None
    health_score: int
    milestones: list[Milestone] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    team_members: list[TeamMember] = field(default_factory=list)
    activities: list[Activity] = field(default_factory=list)

    @property
    def spent(self) -> float:
        return sum(t.amount for t in self.transactions)


@dataclass(slots=True, frozen=True)
class HealthFactors:
    milestone_completion: int
    budget_health: float
    team_engagement: int
    # Supplied by document tracking; None until that exists
    document_status: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "milestone_completion": self.milestone_completion,
            "budget_health": self.budget_health,
            "team_engagement": self.team_engagement,
            "document_status": self.document_status,
        }


@dataclass(slots=True, frozen=True)
class HealthRecord:
    """One health-history entry appended to the snapshot store per cycle."""

    project_id: str
    score: int
    timestamp: datetime
    factors: HealthFactors

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "score": self.score,
            "timestamp": self.timestamp.isoformat(),
            "factors": self.factors.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HealthRecord":
        return cls(
            project_id=data["project_id"],
            score=int(data["score"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            factors=HealthFactors(**data["factors"]),
        )


@dataclass(slots=True, frozen=True)
class DeadlineAlert:
    milestone_id: str
    milestone_title: str
    project_id: str
    due_date: datetime
    days_until: int
    priority: Priority


@dataclass(slots=True, frozen=True)
class InsightItem:
    type: str  # "warning" or "budget"
    message: str
    project_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "message": self.message, "project_id": self.project_id}


@dataclass(slots=True, frozen=True)
class InsightSnapshot:
    """All insights of one automation cycle."""

    timestamp: datetime
    insights: tuple[InsightItem, ...] = ()
    recommendations: tuple[InsightItem, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "insights": [i.to_dict() for i in self.insights],
            "recommendations": [r.to_dict() for r in self.recommendations],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InsightSnapshot":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            insights=tuple(InsightItem(**i) for i in data.get("insights", [])),
            recommendations=tuple(InsightItem(**r) for r in data.get("recommendations", [])),
        )


@dataclass(slots=True, frozen=True)
class FocusItem:
    priority: Priority
    type: str  # "milestone" or "health"
    action: str
    project_id: str
    project_name: str
    milestone_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
