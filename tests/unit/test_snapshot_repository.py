"""
Tests for the Redis snapshot store against an in-memory list client.
"""

from datetime import timedelta

import pytest

from app.features.project_health.domain.models import (
    HealthFactors,
    HealthRecord,
    InsightItem,
    InsightSnapshot,
)
from app.features.project_health.repository.snapshot_repository import RedisSnapshotRepository
from tests.factories import NOW


class FakeListRedis:
    def __init__(self):
        self.lists: dict[str, list[str]] = {}

    async def push_capped(self, key: str, value: str, max_len: int) -> int:
        items = self.lists.setdefault(key, [])
        items.insert(0, value)
        del items[max_len:]
        return len(items)

    async def list_range(self, key: str, start: int = 0, end: int = -1) -> list[str]:
        items = self.lists.get(key, [])
        return items[start:] if end == -1 else items[start : end + 1]


def _record(project_id: str, score: int, minutes: int) -> HealthRecord:
    return HealthRecord(
        project_id=project_id,
        score=score,
        timestamp=NOW + timedelta(minutes=minutes),
        factors=HealthFactors(milestone_completion=50, budget_health=80.5, team_engagement=100),
    )


@pytest.mark.asyncio
async def test_health_history_is_newest_first_and_capped():
    client = FakeListRedis()
    repo = RedisSnapshotRepository(client=client, health_history_max=3, insight_history_max=2)

    for minute, score in enumerate([90, 80, 70, 60]):
        await repo.append_health_history(_record("p1", score, minute))

    history = await repo.list_health_history("p1", limit=10)

    assert [r.score for r in history] == [60, 70, 80]
    assert history[0].factors.budget_health == 80.5
    assert history[0].timestamp == NOW + timedelta(minutes=3)
    assert list(client.lists) == ["health_history:p1"]


@pytest.mark.asyncio
async def test_health_history_limit():
    repo = RedisSnapshotRepository(client=FakeListRedis())
    for minute in range(5):
        await repo.append_health_history(_record("p1", 50 + minute, minute))

    assert len(await repo.list_health_history("p1", limit=2)) == 2


@pytest.mark.asyncio
async def test_latest_insight_snapshot():
    repo = RedisSnapshotRepository(client=FakeListRedis())
    assert await repo.latest_insight_snapshot() is None

    older = InsightSnapshot(timestamp=NOW)
    newer = InsightSnapshot(
        timestamp=NOW + timedelta(minutes=5),
        insights=(InsightItem(type="warning", message="low", project_id="p1"),),
    )
    await repo.append_insight_snapshot(older)
    await repo.append_insight_snapshot(newer)

    assert await repo.latest_insight_snapshot() == newer
