"""Unit tests for the email rate limit policy and client IP resolution"""

import pytest

from trustportal.config import Settings
from trustportal.ratelimit.limiter import (
    EMAIL_LIMIT_MESSAGE,
    IP_LIMIT_MESSAGE,
    EmailRateLimiter,
    RateLimitExceeded,
    create_rate_limit_store,
    get_client_ip,
)
from trustportal.ratelimit.memory_store import InMemoryRateLimitStore
from trustportal.ratelimit.redis_store import RedisRateLimitStore


@pytest.fixture
def store():
    return InMemoryRateLimitStore()


@pytest.fixture
def limiter(store):
    return EmailRateLimiter.from_settings(store, Settings())


class TestGetClientIp:
    """Test IP resolution precedence"""

    def test_forwarded_for_first_entry(self):
        headers = {"x-forwarded-for": " 203.0.113.7 , 10.0.0.1", "x-real-ip": "10.0.0.2"}
        assert get_client_ip(headers, "127.0.0.1") == "203.0.113.7"

    def test_real_ip_when_no_forwarded_for(self):
        assert get_client_ip({"x-real-ip": "10.0.0.2"}, "127.0.0.1") == "10.0.0.2"

    def test_peer_address(self):
        assert get_client_ip({}, "127.0.0.1") == "127.0.0.1"

    def test_unknown(self):
        assert get_client_ip({}, None) == "unknown"


class TestEmailRateLimiter:
    """Test the per-IP and per-email policy"""

    def test_default_policy_from_settings(self, limiter):
        assert limiter.ip_rule.window_seconds == 900
        assert limiter.ip_rule.max_requests == 10
        assert limiter.email_rule.window_seconds == 3600
        assert limiter.email_rule.max_requests == 5

    def test_ip_limit(self, limiter):
        for i in range(10):
            limiter.enforce("1.2.3.4")

        with pytest.raises(RateLimitExceeded) as exc_info:
            limiter.enforce("1.2.3.4")

        assert exc_info.value.classifier == "ip"
        assert exc_info.value.message == IP_LIMIT_MESSAGE
        assert exc_info.value.retry_after == 900

    def test_email_limit_across_ips(self, limiter):
        for i in range(5):
            limiter.enforce(f"10.0.0.{i}", "Jane@X.com")

        with pytest.raises(RateLimitExceeded) as exc_info:
            limiter.enforce("10.0.0.99", "jane@x.com")

        assert exc_info.value.classifier == "email"
        assert exc_info.value.message == EMAIL_LIMIT_MESSAGE
        assert exc_info.value.retry_after == 3600

    def test_email_key_is_lowercased(self, limiter, store):
        limiter.enforce("1.2.3.4", "Jane@X.COM")
        assert store.get_entry("email:jane@x.com").count == 1

    def test_ip_check_short_circuits(self, limiter, store):
        for _ in range(10):
            limiter.enforce("1.2.3.4")

        with pytest.raises(RateLimitExceeded):
            limiter.enforce("1.2.3.4", "fresh@x.com")

        assert store.get_entry("email:fresh@x.com") is None

    def test_no_email_skips_email_check(self, limiter, store):
        limiter.enforce("1.2.3.4", None)
        limiter.enforce("1.2.3.4", "")
        assert store.size() == 1

    def test_check_contract(self, limiter):
        assert limiter.check("custom:key", 60, 1) is False
        assert limiter.check("custom:key", 60, 1) is True


class TestCreateRateLimitStore:
    """Test backend selection"""

    def test_memory_backend(self):
        store = create_rate_limit_store(Settings(RATE_LIMIT_BACKEND="memory"))
        assert isinstance(store, InMemoryRateLimitStore)

    def test_redis_backend(self):
        store = create_rate_limit_store(
            Settings(RATE_LIMIT_BACKEND="redis", REDIS_URL="redis://localhost:6379/15")
        )
        assert isinstance(store, RedisRateLimitStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_rate_limit_store(Settings(RATE_LIMIT_BACKEND="memcached"))
