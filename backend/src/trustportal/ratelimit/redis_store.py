"""Redis-backed rate limit counters.

Shares fixed-window counters between all API instances. The window is
anchored by an EXPIRE set on the first request of each window.
"""

import logging

from redis import Redis
from redis.exceptions import RedisError

from .ports import RateLimitStorePort

logger = logging.getLogger(__name__)

KEY_PREFIX = "rate_limit:"


class RedisRateLimitStore(RateLimitStorePort):
    """Fixed-window counters stored as Redis integers.

    Redis failures degrade gracefully: the request is treated as within
    limits and the error is logged.

    Args:
        client: Redis client (decode_responses is not required)
    """

    def __init__(self, client: Redis):
        self.redis = client

    @classmethod
    def from_url(cls, url: str) -> "RedisRateLimitStore":
        return cls(Redis.from_url(url, decode_responses=True))

    def increment(self, key: str, window_seconds: int, max_requests: int) -> bool:
        redis_key = f"{KEY_PREFIX}{key}"
        try:
            pipe = self.redis.pipeline()
            pipe.incr(redis_key)
            pipe.ttl(redis_key)
            count, ttl = pipe.execute()

            # New window (or a key that lost its expiry)
            if count == 1 or ttl == -1:
                self.redis.expire(redis_key, window_seconds)

            return count > max_requests
        except RedisError as e:
            logger.error(f"Rate limit check failed for {key}: {e}")
            return False

    def delete(self, key: str) -> None:
        try:
            self.redis.delete(f"{KEY_PREFIX}{key}")
        except RedisError as e:
            logger.error(f"Failed to delete rate limit key {key}: {e}")

    def reset(self) -> None:
        """Delete all rate limit keys."""
        try:
            keys = list(self.redis.scan_iter(match=f"{KEY_PREFIX}*"))
            if keys:
                self.redis.delete(*keys)
        except RedisError as e:
            logger.error(f"Failed to reset rate limit keys: {e}")
