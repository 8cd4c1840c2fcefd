"""Optional Redis cache connection (used for health reporting)."""

import logging
from typing import Literal

import redis

logger = logging.getLogger(__name__)

CacheStatus = Literal["connected", "error", "not_configured"]

SOCKET_TIMEOUT_SEC = 2.0


class Cache:
    """Thin owner of a redis-py client; connects lazily on first command."""

    def __init__(self, url: str, password: str | None = None) -> None:
        self.client = redis.Redis.from_url(
            url,
            password=password,
            socket_connect_timeout=SOCKET_TIMEOUT_SEC,
            socket_timeout=SOCKET_TIMEOUT_SEC,
        )

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.warning("Redis ping failed: %s", e)
            return False

    def close(self) -> None:
        self.client.close()
        logger.info("Redis connection closed")


def cache_status(cache: Cache | None) -> CacheStatus:
    """Report cache connectivity for the health endpoint."""
    if cache is None:
        return "not_configured"
    return "connected" if cache.ping() else "error"
