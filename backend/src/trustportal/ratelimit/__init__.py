"""Rate limiting for email-sending endpoints."""

from .limiter import (
    EMAIL_LIMIT_MESSAGE,
    IP_LIMIT_MESSAGE,
    EmailRateLimiter,
    RateLimitExceeded,
    RateLimitRule,
    create_rate_limit_store,
    get_client_ip,
    rate_limit_key,
)
from .memory_store import InMemoryRateLimitStore, RateLimitEntry
from .ports import RateLimitStorePort
from .redis_store import RedisRateLimitStore

__all__ = [
    "EMAIL_LIMIT_MESSAGE",
    "IP_LIMIT_MESSAGE",
    "EmailRateLimiter",
    "RateLimitExceeded",
    "RateLimitRule",
    "create_rate_limit_store",
    "get_client_ip",
    "rate_limit_key",
    "InMemoryRateLimitStore",
    "RateLimitEntry",
    "RateLimitStorePort",
    "RedisRateLimitStore",
]
