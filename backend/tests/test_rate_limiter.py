import types

import pytest

from spark_rentals.core.exceptions import RateLimitExceededError
from spark_rentals.services import rate_limiter as rate_limiter_module
from spark_rentals.services.rate_limiter import InMemoryRateLimiter


@pytest.fixture
def clock(monkeypatch):
    now = [1000.0]
    monkeypatch.setattr(rate_limiter_module, "time", types.SimpleNamespace(monotonic=lambda: now[0]))
    return now


def test_limit_applies_per_key(clock):
    limiter = InMemoryRateLimiter()
    assert limiter.allow("login:a", 2, 60) is True
    assert limiter.allow("login:a", 2, 60) is True
    assert limiter.allow("login:a", 2, 60) is False
    assert limiter.allow("login:b", 2, 60) is True


def test_window_slides(clock):
    limiter = InMemoryRateLimiter()
    limiter.allow("k", 1, 60)
    assert limiter.allow("k", 1, 60) is False
    clock[0] += 61
    assert limiter.allow("k", 1, 60) is True


def test_idle_keys_are_dropped(clock):
    limiter = InMemoryRateLimiter()
    for i in range(5000):
        limiter.allow(f"login:1.2.3.4:user{i}@example.com", 10, 60)
    assert len(limiter) == 5000

    clock[0] += 61
    limiter.allow("login:1.2.3.4:fresh@example.com", 10, 60)
    assert len(limiter) == 1


def test_disabled_limit_stores_nothing(clock):
    limiter = InMemoryRateLimiter()
    assert limiter.allow("k", 0, 60) is True
    assert len(limiter) == 0


def test_enforce_raises_rate_limited(clock):
    limiter = InMemoryRateLimiter()
    limiter.enforce("k", 1, 60, "slow down")
    with pytest.raises(RateLimitExceededError, match="slow down") as exc_info:
        limiter.enforce("k", 1, 60, "slow down")
    assert exc_info.value.status_code == 429
    assert limiter.allow("k", 1, 60) is False
    assert len(limiter) == 1
