"""
Tests for the per-IP rate limiter and client address resolution
"""

import time
from types import SimpleNamespace

import pytest

from rsvp.core.config import settings
from rsvp.utils.security import get_client_ip, rate_limit_check, rate_limiter

@pytest.fixture(autouse=True)
def clean_limiter():
    rate_limiter.clear()
    yield
    rate_limiter.clear()

def make_request(headers=None, host="10.0.0.1"):
    return SimpleNamespace(headers=headers or {}, client=SimpleNamespace(host=host))

class TestRateLimiter:
    """Test the in-memory limiter"""

    def test_limit_is_enforced(self):
        assert rate_limit_check("1.2.3.4", limit=2) is True
        assert rate_limit_check("1.2.3.4", limit=2) is True
        assert rate_limit_check("1.2.3.4", limit=2) is False
        assert rate_limit_check("5.6.7.8", limit=2) is True

    def test_idle_clients_are_dropped(self):
        rate_limiter["1.2.3.4"] = [time.time() - 120]
        rate_limiter["9.9.9.9"] = []

        rate_limit_check("5.6.7.8")

        assert "1.2.3.4" not in rate_limiter
        assert "9.9.9.9" not in rate_limiter
        assert list(rate_limiter) == ["5.6.7.8"]

    def test_active_clients_are_kept(self):
        rate_limiter["1.2.3.4"] = [time.time() - 120, time.time() - 5]

        rate_limit_check("5.6.7.8")

        assert len(rate_limiter["1.2.3.4"]) == 2

    def test_old_requests_no_longer_count(self):
        rate_limiter["1.2.3.4"] = [time.time() - 120, time.time() - 90]

        assert rate_limit_check("1.2.3.4", limit=1) is True
        assert len(rate_limiter["1.2.3.4"]) == 1

class TestClientIp:
    """Test which address the limiter is keyed on"""

    def test_forwarded_headers_ignored_by_default(self, monkeypatch):
        monkeypatch.setattr(settings, "TRUST_PROXY_HEADERS", False)
        request = make_request({"X-Forwarded-For": "203.0.113.7", "X-Real-IP": "203.0.113.8"})

        assert get_client_ip(request) == "10.0.0.1"

    def test_forwarded_headers_behind_trusted_proxy(self, monkeypatch):
        monkeypatch.setattr(settings, "TRUST_PROXY_HEADERS", True)

        assert get_client_ip(make_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.2"})) == "203.0.113.7"
        assert get_client_ip(make_request({"X-Real-IP": "203.0.113.8"})) == "203.0.113.8"
        assert get_client_ip(make_request()) == "10.0.0.1"
