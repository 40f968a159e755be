"""
Rate Limiter - Redis-based request rate limiting.

Sliding window rate limiting using Redis sorted sets, used to throttle
service request creation per user.

Design:
- Sliding window algorithm (fair and accurate)
- Atomic Lua script, no check-then-set race
- Fail-open behavior (if Redis is down, allow requests)

Usage:
    from app.middleware.rate_limiter import rate_limiter

    allowed, info = await rate_limiter.check_rate_limit(
        key="service_requests:user-123",
        limit=5,
        window_seconds=900,
    )
"""

import time

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.services.redis_client import fast_redis

logger = get_logger(__name__)


class RateLimiter:
    """
    Redis-based rate limiter using a sliding window.

    Every allowed request is stored in a sorted set scored by its timestamp;
    entries older than the window are dropped before counting.
    """

    # Returns: {allowed (0 or 1), current_count, oldest_timestamp or 0}
    RATE_LIMIT_LUA_SCRIPT = """
    local key = KEYS[1]
    local limit = tonumber(ARGV[1])
    local window_seconds = tonumber(ARGV[2])
    local current_time = tonumber(ARGV[3])
    local unique_id = ARGV[4]

    local window_start = current_time - window_seconds
    redis.call('ZREMRANGEBYSCORE', key, 0, window_start)

    local current_count = redis.call('ZCARD', key)

    if current_count >= limit then
        local oldest_entries = redis.call('ZRANGE', key, 0, 0, 'WITHSCORES')
        local oldest_timestamp = 0
        if #oldest_entries > 0 then
            oldest_timestamp = tonumber(oldest_entries[2])
        end
        return {0, current_count, oldest_timestamp}
    end

    redis.call('ZADD', key, current_time, unique_id)
    redis.call('EXPIRE', key, window_seconds * 2)

    return {1, current_count + 1, 0}
    """

    def __init__(self, default_limit: int = 100, window_seconds: int = 60, fail_open: bool = True):
        self.default_limit = default_limit
        self.window_seconds = window_seconds
        self.fail_open = fail_open

    async def check_rate_limit(
        self,
        key: str,
        limit: int | None = None,
        window_seconds: int | None = None,
    ) -> tuple[bool, dict]:
        """
        Check if rate limit is exceeded for given key.

        Args:
            key: Rate limit key (e.g., "service_requests:123")
            limit: Request limit for this window (None = use default)
            window_seconds: Time window (None = use default)

        Returns:
            Tuple of (allowed, info) where info carries limit, remaining and
            retry_after seconds.
        """
        limit = limit or self.default_limit
        window_seconds = window_seconds or self.window_seconds

        redis_key = f"ratelimit:{key}"
        current_time = int(time.time())

        if not fast_redis.client:
            logger.warning("Redis not initialized for rate limiting", fail_open=self.fail_open)
            return self.fail_open, self._create_info_dict(
                allowed=self.fail_open,
                limit=limit,
                remaining=limit if self.fail_open else 0,
                error="redis_not_initialized",
            )

        try:
            unique_id = f"{current_time}:{time.time_ns()}"

            result = await fast_redis.client.eval(
                self.RATE_LIMIT_LUA_SCRIPT,
                1,
                redis_key,
                limit,
                window_seconds,
                current_time,
                unique_id,
            )

            allowed = bool(result[0])
            current_count = int(result[1])
            oldest_timestamp = int(result[2]) if result[2] else 0

            if not allowed:
                if oldest_timestamp > 0:
                    retry_after = max(1, (oldest_timestamp + window_seconds) - current_time)
                else:
                    retry_after = window_seconds

                return False, self._create_info_dict(
                    allowed=False,
                    limit=limit,
                    remaining=0,
                    retry_after=retry_after,
                    window_seconds=window_seconds,
                )

            return True, self._create_info_dict(
                allowed=True,
                limit=limit,
                remaining=max(0, limit - current_count),
                window_seconds=window_seconds,
            )

        except Exception as e:
            logger.error(
                "Rate limiter Redis error",
                error=str(e),
                error_type=type(e).__name__,
                key=key,
                limit=limit,
            )
            return self.fail_open, self._create_info_dict(
                allowed=self.fail_open,
                limit=limit,
                remaining=limit if self.fail_open else 0,
                error="rate_limiter_error",
            )

    def _create_info_dict(
        self,
        allowed: bool,
        limit: int,
        remaining: int,
        retry_after: int | None = None,
        window_seconds: int | None = None,
        error: str | None = None,
    ) -> dict:
        info = {
            "allowed": allowed,
            "limit": limit,
            "remaining": remaining,
            "retry_after": retry_after,
        }

        if window_seconds is not None:
            info["window_seconds"] = window_seconds

        if error:
            info["error"] = error

        return info


# Global singleton
rate_limiter = RateLimiter(
    default_limit=settings.SERVICE_REQUEST_RATE_LIMIT,
    window_seconds=settings.SERVICE_REQUEST_RATE_WINDOW_SECONDS,
    fail_open=settings.RATE_LIMIT_FAIL_OPEN,
)
