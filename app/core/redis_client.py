"""Redis connection and the JSON cache used for doctor profiles."""

import json
from typing import Any, cast

import redis
import structlog
from redis.exceptions import RedisError

from app.config import settings

logger = structlog.get_logger(__name__)

_redis_client: redis.Redis | None = None


def get_redis_client() -> redis.Redis:
    """Return the process-wide Redis client, connecting lazily."""
    global _redis_client

    if _redis_client is None:
        _redis_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            username=settings.redis_username,
            password=settings.redis_password or None,
            decode_responses=settings.redis_decode_responses,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30,
        )

    return _redis_client


async def check_redis_connection() -> bool:
    """Ping Redis."""
    try:
        return bool(get_redis_client().ping())
    except RedisError:
        return False


def close_redis_connection() -> None:
    """Close the Redis client if one was opened."""
    global _redis_client

    if _redis_client is not None:
        _redis_client.close()
        _redis_client = None


class CacheManager:
    """
    JSON values in Redis.

    The cache is an optimisation only. Redis errors are logged and reported
    as a miss (reads) or ``False`` (writes) so requests keep working from the
    database while Redis is down. Values are stored with ``json.dumps(...,
    default=str)``, so UUIDs, decimals and datetimes come back as strings.
    """

    def __init__(self, redis_client: redis.Redis, default_ttl: int | None = None):
        """Initialize cache manager with Redis client."""
        self.redis = redis_client
        self.default_ttl = default_ttl

    def get_json(self, key: str) -> Any | None:
        """Return the decoded value stored under ``key`` or None."""
        try:
            value = cast(str | None, self.redis.get(key))
        except RedisError as e:
            logger.warning("cache_read_failed", key=key, error=str(e))
            return None

        return json.loads(value) if value else None

    def set_json(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """
        Store ``value`` as JSON.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl: Expiry in seconds; falls back to ``default_ttl``, no expiry if neither is set

        Returns:
            True if stored
        """
        payload = json.dumps(value, default=str)
        ttl = ttl or self.default_ttl
        try:
            if ttl:
                self.redis.setex(key, ttl, payload)
            else:
                self.redis.set(key, payload)
        except RedisError as e:
            logger.warning("cache_write_failed", key=key, error=str(e))
            return False
        return True

    def delete(self, key: str) -> bool:
        """Drop ``key``; True if the command reached Redis."""
        try:
            self.redis.delete(key)
        except RedisError as e:
            logger.warning("cache_delete_failed", key=key, error=str(e))
            return False
        return True
