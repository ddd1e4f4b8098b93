"""
Tests for the check-in rate limiter and UTC helpers
"""

import time
from datetime import datetime, timedelta, timezone

from attendance.utils import security
from attendance.utils.timeutils import to_naive_utc, utcnow

def test_rate_limit_blocks_after_limit():
    assert all(security.rate_limit_check("user:1", limit=3) for _ in range(3))
    assert security.rate_limit_check("user:1", limit=3) is False
    assert security.rate_limit_check("user:2", limit=3) is True

def test_rate_limit_evicts_idle_keys():
    security.rate_limiter["user:idle"] = [time.time() - 120]

    security.rate_limit_check("user:1", limit=3)

    assert "user:idle" not in security.rate_limiter
    assert "user:1" in security.rate_limiter

def test_to_naive_utc_converts_offsets():
    aware = datetime(2026, 3, 7, 17, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_naive_utc(aware) == datetime(2026, 3, 7, 15, 0)

def test_to_naive_utc_keeps_naive_values():
    naive = datetime(2026, 3, 7, 17, 0)
    assert to_naive_utc(naive) is naive
    assert to_naive_utc(None) is None

def test_utcnow_is_naive_utc():
    now = utcnow()
    assert now.tzinfo is None
    assert abs(now - datetime.now(timezone.utc).replace(tzinfo=None)) < timedelta(seconds=5)
