"""Rate limiting for email-sending endpoints.

Two independent fixed-window checks run per request:
- per client IP: 10 requests per 15 minutes
- per target email address: 5 requests per hour

The IP check runs first and short-circuits. Limits are configurable via
Settings (RATE_LIMIT_*).
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from ..config import Settings
from ..observability.metrics import rate_limit_rejections_total
from .memory_store import InMemoryRateLimitStore
from .ports import RateLimitStorePort
from .redis_store import RedisRateLimitStore

logger = logging.getLogger(__name__)

IP_LIMIT_MESSAGE = "Too many requests. Please try again later."
EMAIL_LIMIT_MESSAGE = "Too many requests for this email address. Please try again later."


class RateLimitExceeded(Exception):
    """Raised when a request exceeds one of the rate limits.

    Attributes:
        message: Client-facing error message
        classifier: Which check failed ("ip" or "email")
        retry_after: Window length of the failing check, in seconds
    """

    def __init__(self, message: str, classifier: str, retry_after: int):
        super().__init__(message)
        self.message = message
        self.classifier = classifier
        self.retry_after = retry_after


@dataclass(frozen=True)
class RateLimitRule:
    """Window and ceiling for one classifier."""
    classifier: str
    window_seconds: int
    max_requests: int
    message: str


def get_client_ip(headers: Mapping[str, str], peer_host: Optional[str]) -> str:
    """Resolve the client IP address.

    Precedence: first X-Forwarded-For entry, X-Real-IP, transport peer
    address, then "unknown".

    Args:
        headers: Request headers (case-insensitive mapping)
        peer_host: Transport-level peer address, if known
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return peer_host or "unknown"


def rate_limit_key(classifier: str, identifier: str) -> str:
    """Build a counter key, e.g. "email:jane@x.com"."""
    return f"{classifier}:{identifier}"


class EmailRateLimiter:
    """Rate limit policy for endpoints that trigger outgoing email.

    Args:
        store: Counter store (in-memory or Redis)
        ip_rule: Per-IP rule
        email_rule: Per-email-address rule
    """

    def __init__(
        self,
        store: RateLimitStorePort,
        ip_rule: RateLimitRule,
        email_rule: RateLimitRule,
    ):
        self.store = store
        self.ip_rule = ip_rule
        self.email_rule = email_rule

    @classmethod
    def from_settings(cls, store: RateLimitStorePort, settings: Settings) -> "EmailRateLimiter":
        return cls(
            store=store,
            ip_rule=RateLimitRule(
                classifier="ip",
                window_seconds=settings.RATE_LIMIT_IP_WINDOW_SECONDS,
                max_requests=settings.RATE_LIMIT_IP_MAX_REQUESTS,
                message=IP_LIMIT_MESSAGE,
            ),
            email_rule=RateLimitRule(
                classifier="email",
                window_seconds=settings.RATE_LIMIT_EMAIL_WINDOW_SECONDS,
                max_requests=settings.RATE_LIMIT_EMAIL_MAX_REQUESTS,
                message=EMAIL_LIMIT_MESSAGE,
            ),
        )

    def check(self, key: str, window_seconds: int, max_requests: int) -> bool:
        """Count a request for key; True if the limit is exceeded."""
        return self.store.increment(key, window_seconds, max_requests)

    def _enforce(self, rule: RateLimitRule, identifier: str) -> None:
        key = rate_limit_key(rule.classifier, identifier)
        if self.check(key, rule.window_seconds, rule.max_requests):
            rate_limit_rejections_total.labels(classifier=rule.classifier).inc()
            logger.warning(f"Rate limit exceeded for {key}")
            raise RateLimitExceeded(rule.message, rule.classifier, rule.window_seconds)

    def enforce(self, client_ip: str, email: Optional[str] = None) -> None:
        """Apply the IP check, then the email check when an address is given.

        Raises:
            RateLimitExceeded: If either limit is exceeded
        """
        self._enforce(self.ip_rule, client_ip)

        if email and isinstance(email, str):
            self._enforce(self.email_rule, email.lower())


def create_rate_limit_store(settings: Settings) -> RateLimitStorePort:
    """Build the configured rate limit store.

    RATE_LIMIT_BACKEND=redis shares counters between instances; the
    default in-memory store does not.
    """
    backend = settings.RATE_LIMIT_BACKEND.lower()
    if backend == "redis":
        logger.info("Using Redis rate limit store")
        return RedisRateLimitStore.from_url(settings.REDIS_URL)
    if backend != "memory":
        raise ValueError(f"Unknown RATE_LIMIT_BACKEND: {settings.RATE_LIMIT_BACKEND}")
    logger.info("Using in-memory rate limit store (not shared across instances)")
    return InMemoryRateLimitStore()


async def run_sweeper(store: InMemoryRateLimitStore, interval_seconds: float) -> None:
    """Periodically delete expired in-memory entries until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        removed = store.sweep()
        if removed:
            logger.info(f"Swept {removed} expired rate limit entries")
