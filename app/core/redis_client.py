"""Redis connection and the doctor-profile cache."""

import json
from typing import Any, cast
from uuid import UUID

import redis
import structlog

from app.config import settings

logger = structlog.get_logger(__name__)

DOCTOR_KEY_PREFIX = "doctor:"

# Shared connection, created on first use
_redis_client: redis.Redis | None = None


def get_redis_client() -> redis.Redis:
    """Get or create the Redis client."""
    global _redis_client

    if _redis_client is None:
        _redis_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            username=settings.redis_username,
            password=settings.redis_password or None,
            decode_responses=settings.redis_decode_responses,
            socket_connect_timeout=2,
            socket_timeout=2,
            health_check_interval=30,
        )

    return _redis_client


async def check_redis_connection() -> bool:
    """Ping Redis; always False while caching is disabled."""
    if not settings.cache_enabled:
        return False
    try:
        return bool(get_redis_client().ping())
    except redis.RedisError as e:
        logger.warning("redis_ping_failed", error=str(e))
        return False


def close_redis_connection() -> None:
    """Close Redis connection."""
    global _redis_client

    if _redis_client is not None:
        _redis_client.close()
        _redis_client = None


class CacheManager:
    """
    JSON cache for doctor profiles.

    Redis failures are logged and reported as misses (or as nothing written)
    so the database stays the source of truth.
    """

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client

    @staticmethod
    def doctor_key(doctor_id: UUID | str) -> str:
        """Cache key of one doctor profile."""
        return f"{DOCTOR_KEY_PREFIX}{doctor_id}"

    def get_json(self, key: str) -> Any | None:
        """
        Read and decode a cached JSON document.

        Args:
            key: Cache key

        Returns:
            Decoded value, or None on a miss, a Redis error or a corrupt entry
        """
        try:
            raw = cast(str | bytes | None, self.redis.get(key))
        except redis.RedisError as e:
            logger.warning("cache_read_failed", key=key, error=str(e))
            return None

        if not raw:
            return None

        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("cache_entry_corrupt", key=key)
            return None

    def set_json(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """
        Encode and store a JSON document.

        Args:
            key: Cache key
            value: JSON-serialisable value
            ttl: Expiry in seconds; no expiry when omitted

        Returns:
            True when Redis accepted the write
        """
        try:
            payload = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            logger.warning("cache_encode_failed", key=key, error=str(e))
            return False

        try:
            if ttl:
                self.redis.setex(key, ttl, payload)
            else:
                self.redis.set(key, payload)
        except redis.RedisError as e:
            logger.warning("cache_write_failed", key=key, error=str(e))
            return False
        return True

    def delete_pattern(self, pattern: str) -> int:
        """
        Delete every key matching a glob pattern.

        Returns:
            Number of keys removed, 0 on Redis errors
        """
        try:
            keys = list(self.redis.scan_iter(match=pattern, count=500))
            if not keys:
                return 0
            return cast(int, self.redis.delete(*keys))
        except redis.RedisError as e:
            logger.warning("cache_delete_failed", pattern=pattern, error=str(e))
            return 0

    def invalidate_doctors(self) -> int:
        """Drop every cached doctor profile."""
        return self.delete_pattern(f"{DOCTOR_KEY_PREFIX}*")
