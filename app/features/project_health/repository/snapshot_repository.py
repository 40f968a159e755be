"""
Redis-backed snapshot store for health history and daily insights.

Snapshots are append-only JSON documents kept in capped Redis lists,
newest first:

    health_history:{project_id}  -> HealthRecord JSON
    daily_insights               -> InsightSnapshot JSON
"""

import json

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.services.redis_client import FastRedisClient, fast_redis

from ..domain.models import HealthRecord, InsightSnapshot

logger = get_logger(__name__)

HEALTH_HISTORY_KEY = "health_history:{project_id}"
DAILY_INSIGHTS_KEY = "daily_insights"


class RedisSnapshotRepository:
    """SnapshotStore backed by Redis lists."""

    def __init__(
        self,
        client: FastRedisClient = fast_redis,
        health_history_max: int = settings.HEALTH_HISTORY_MAX_ENTRIES,
        insight_history_max: int = settings.INSIGHT_HISTORY_MAX_ENTRIES,
    ):
        self.client = client
        self.health_history_max = health_history_max
        self.insight_history_max = insight_history_max

    async def append_health_history(self, record: HealthRecord) -> None:
        key = HEALTH_HISTORY_KEY.format(project_id=record.project_id)
        await self.client.push_capped(key, json.dumps(record.to_dict()), self.health_history_max)

    async def list_health_history(self, project_id: str, limit: int = 30) -> list[HealthRecord]:
        key = HEALTH_HISTORY_KEY.format(project_id=project_id)
        raw = await self.client.list_range(key, 0, limit - 1)
        return [HealthRecord.from_dict(json.loads(item)) for item in raw]

    async def append_insight_snapshot(self, snapshot: InsightSnapshot) -> None:
        await self.client.push_capped(
            DAILY_INSIGHTS_KEY, json.dumps(snapshot.to_dict()), self.insight_history_max
        )
        logger.debug(
            "Insight snapshot stored",
            insights=len(snapshot.insights),
            recommendations=len(snapshot.recommendations),
        )

    async def latest_insight_snapshot(self) -> InsightSnapshot | None:
        raw = await self.client.list_range(DAILY_INSIGHTS_KEY, 0, 0)
        if not raw:
            return None
        return InsightSnapshot.from_dict(json.loads(raw[0]))
