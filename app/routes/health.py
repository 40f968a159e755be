"""
Health check endpoints: liveness, basic health and readiness with
database pool and Redis checks.
"""

import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.config import settings
from app.db.pool import db_health_check
from app.infrastructure.observability.logging import log_health_check
from app.services.redis_client import fast_redis

router = APIRouter(tags=["health"])

SERVICE_NAME = "marketplace-backend"


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/live")
async def live():
    return {"status": "alive"}


async def _check_redis() -> dict:
    t0 = time.time()
    redis_ok = await fast_redis.ping()
    latency_ms = round((time.time() - t0) * 1000, 1)
    log_health_check("redis", redis_ok, latency_ms)
    return {"ok": redis_ok, "latency_ms": latency_ms}


async def _check_database() -> dict:
    t0 = time.time()
    db_health = await db_health_check()
    latency_ms = round((time.time() - t0) * 1000, 1)

    is_healthy = db_health.get("healthy", False)
    check = {"ok": is_healthy, "latency_ms": latency_ms}

    if "pool_stats" in db_health:
        pool_stats = db_health["pool_stats"]
        check.update(
            {
                "pool_size": pool_stats.get("pool_size", 0),
                "pool_available": pool_stats.get("pool_available", 0),
                "pool_utilization_percent": pool_stats.get("pool_utilization_percent", 0),
                "connection_time_ms": db_health.get("connection_time_ms", 0),
            }
        )

    if "warnings" in db_health:
        check["warnings"] = db_health["warnings"]

    if not is_healthy:
        check["error"] = db_health.get("error", "Database unhealthy")

    log_health_check("database", is_healthy, latency_ms, error=check.get("error"))
    return check


def _check_configuration() -> dict:
    issues = []
    if not settings.SUPABASE_DB_URL:
        issues.append("SUPABASE_DB_URL not set")
    if not settings.UPSTASH_REDIS_REST_URL:
        issues.append("UPSTASH_REDIS_REST_URL not set")

    return {
        "ok": not issues,
        "issues": issues or None,
        "environment": settings.environment,
    }


@router.get("/readyz")
async def readyz():
    """Readiness check across Redis, the database pool and configuration."""
    checks = {
        "redis": await _check_redis(),
        "database": await _check_database(),
        "configuration": _check_configuration(),
    }
    overall_ok = all(check["ok"] for check in checks.values())

    body = {"overall_ok": overall_ok, "checks": checks, "timestamp": time.time()}
    return JSONResponse(status_code=200 if overall_ok else 503, content=body)
