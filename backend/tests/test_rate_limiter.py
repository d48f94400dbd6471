"""
Sliding-window rate limiter.
"""
from datetime import datetime, timedelta, timezone

from utils.rate_limiter import RateLimiter

START = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_allows_up_to_the_limit():
    limiter = RateLimiter()
    results = [limiter.check_rate_limit("ip", 3, 15, now=START + timedelta(seconds=i)) for i in range(4)]
    assert [allowed for allowed, _ in results] == [True, True, True, False]


def test_retry_after_counts_down_to_the_oldest_attempt():
    limiter = RateLimiter()
    for i in range(2):
        limiter.check_rate_limit("ip", 2, 1, now=START + timedelta(seconds=i * 10))
    allowed, retry_after = limiter.check_rate_limit("ip", 2, 1, now=START + timedelta(seconds=30))
    assert not allowed
    assert retry_after == 30


def test_window_slides():
    limiter = RateLimiter()
    limiter.check_rate_limit("ip", 1, 1, now=START)
    assert limiter.check_rate_limit("ip", 1, 1, now=START + timedelta(seconds=30))[0] is False
    assert limiter.check_rate_limit("ip", 1, 1, now=START + timedelta(minutes=1, seconds=1))[0] is True


def test_rejected_attempts_are_not_recorded():
    limiter = RateLimiter()
    limiter.check_rate_limit("ip", 1, 1, now=START)
    for i in range(5):
        limiter.check_rate_limit("ip", 1, 1, now=START + timedelta(seconds=10 + i))
    assert len(limiter.attempts["ip"]) == 1


def test_keys_are_independent_and_resettable():
    limiter = RateLimiter()
    limiter.check_rate_limit("a", 1, 1, now=START)
    assert limiter.check_rate_limit("b", 1, 1, now=START)[0] is True
    limiter.reset("a")
    assert limiter.check_rate_limit("a", 1, 1, now=START)[0] is True


def test_sweep_forgets_expired_keys_only():
    limiter = RateLimiter()
    limiter.check_rate_limit("old", 5, 1, now=START)
    limiter.check_rate_limit("login", 5, 15, now=START)
    limiter.check_rate_limit("fresh", 5, 1, now=START + timedelta(minutes=2))

    assert limiter.sweep(now=START + timedelta(minutes=2, seconds=30)) == 1
    assert set(limiter.attempts) == {"login", "fresh"}
    assert set(limiter.windows) == {"login", "fresh"}


def test_distinct_clients_do_not_accumulate(monkeypatch):
    monkeypatch.setattr("utils.rate_limiter.SWEEP_EVERY", 10)
    limiter = RateLimiter()
    for i in range(25):
        limiter.check_rate_limit(f"10.0.0.{i}", 5, 1, now=START + timedelta(minutes=2 * i))
    assert len(limiter.attempts) < 10
