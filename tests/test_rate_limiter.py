"""
Tests for question quota enforcement.
"""
import json
import threading
import time
from datetime import datetime, timedelta

import pytest

from refaq.config.loader import RateLimitConfig
from refaq.core.errors import RateLimitError
from refaq.core.rate_limiter import USAGE_KEY, RateLimiter
from refaq.storage.repository import MemoryUsageStore


class FakeClock:
    """Settable clock for deterministic window rollover."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class SlowUsageStore(MemoryUsageStore):
    """Memory store whose reads are slow enough to interleave threads."""

    def get(self, key):
        time.sleep(0.05)
        return super().get(key)


class TestRateLimiter:
    """Test daily and hourly gating."""

    def setup_method(self):
        """Set up a limiter with small limits."""
        self.clock = FakeClock(datetime(2024, 5, 1, 10, 15))
        self.store = MemoryUsageStore()
        self.limiter = RateLimiter(
            self.store,
            RateLimitConfig(daily=3, hourly=2),
            clock=self.clock
        )

    def test_fresh_store_allows(self):
        """Test an empty store starts with full quotas."""
        decision = self.limiter.check_limit()

        assert decision.can_ask is True
        assert decision.remaining_daily == 3
        assert decision.remaining_hourly == 2
        assert decision.message is None

    def test_record_usage_persists_flat_json(self):
        """Test usage is stored as a flat JSON record under the fixed key."""
        self.limiter.record_usage()

        record = json.loads(self.store.get(USAGE_KEY))
        assert record == {
            "dailyCount": 1,
            "hourlyCount": 1,
            "lastResetDate": "2024-05-01",
            "lastResetHour": 10,
        }

    def test_hourly_limit_denies_with_next_hour(self):
        """Test hourly denial names the next hour boundary."""
        self.limiter.record_usage()
        self.limiter.record_usage()

        decision = self.limiter.check_limit()

        assert decision.can_ask is False
        assert decision.remaining_hourly == 0
        assert decision.remaining_daily == 1
        assert "11:00" in decision.message
        assert "hourly limit of 2" in decision.message

    def test_daily_limit_denies_and_resets_next_day(self):
        """Test 3 usages exhaust the day and a new day restores the quota."""
        self.limiter.record_usage()
        self.limiter.record_usage()
        self.clock.advance(hours=1)
        self.limiter.record_usage()

        decision = self.limiter.check_limit()
        assert decision.can_ask is False
        assert decision.remaining_daily == 0
        assert "daily limit of 3" in decision.message
        assert "tomorrow" in decision.message

        self.clock.advance(days=1)
        decision = self.limiter.check_limit()
        assert decision.can_ask is True
        assert decision.remaining_daily == 3

    def test_daily_check_runs_before_hourly(self):
        """Test the daily message wins when both windows are exhausted."""
        limiter = RateLimiter(self.store, RateLimitConfig(daily=2, hourly=2), clock=self.clock)
        limiter.record_usage()
        limiter.record_usage()

        decision = limiter.check_limit()

        assert decision.can_ask is False
        assert "daily limit" in decision.message

    def test_new_hour_resets_hourly_only(self):
        """Test hour rollover zeroes the hourly count but keeps the daily one."""
        self.limiter.record_usage()
        self.limiter.record_usage()
        self.clock.advance(hours=1)

        usage = self.limiter.usage()
        assert usage.hourly_count == 0
        assert usage.daily_count == 2
        assert usage.last_reset_hour == 11

    def test_same_hour_next_day_resets_hourly(self):
        """Test the same clock hour on a later day is a fresh hourly window."""
        self.limiter.record_usage()
        self.limiter.record_usage()
        self.clock.advance(days=1)

        decision = self.limiter.check_limit()
        assert decision.remaining_hourly == 2

    def test_enforce_raises_with_decision(self):
        """Test enforce raises RateLimitError carrying the decision."""
        self.limiter.record_usage()
        self.limiter.record_usage()

        with pytest.raises(RateLimitError) as excinfo:
            self.limiter.enforce()

        assert excinfo.value.decision.can_ask is False
        assert excinfo.value.decision.remaining_hourly == 0

    def test_enforce_returns_decision_when_allowed(self):
        """Test enforce passes through when quota remains."""
        decision = self.limiter.enforce()
        assert decision.can_ask is True

    def test_acquire_counts_and_reports_remaining(self):
        """Test acquire records the question and returns the quota left."""
        decision = self.limiter.acquire()

        assert decision.can_ask is True
        assert decision.remaining_daily == 2
        assert decision.remaining_hourly == 1
        assert self.limiter.usage().daily_count == 1

    def test_acquire_denied_is_not_counted(self):
        """Test a denied acquire raises and leaves the counters alone."""
        self.limiter.acquire()
        self.limiter.acquire()

        with pytest.raises(RateLimitError) as excinfo:
            self.limiter.acquire()

        assert "hourly limit of 2" in excinfo.value.decision.message
        assert self.limiter.usage().hourly_count == 2

    def test_concurrent_acquire_respects_limit(self):
        """Test parallel callers cannot all pass before any is counted."""
        limiter = RateLimiter(
            SlowUsageStore(),
            RateLimitConfig(daily=1, hourly=1),
            clock=self.clock
        )
        allowed = []
        denied = []

        def ask():
            try:
                allowed.append(limiter.acquire())
            except RateLimitError as e:
                denied.append(e)

        threads = [threading.Thread(target=ask) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(allowed) == 1
        assert len(denied) == 3
        assert limiter.usage().daily_count == 1

    @pytest.mark.parametrize("raw", [
        "not json",
        "[1, 2]",
        "null",
        '{"dailyCount": 1}',
        '{"dailyCount": "1", "hourlyCount": 0, "lastResetDate": "2024-05-01", "lastResetHour": 10}',
        '{"dailyCount": -4, "hourlyCount": 0, "lastResetDate": "2024-05-01", "lastResetHour": 10}',
    ])
    def test_corrupt_record_reinitializes(self, raw):
        """Test corrupt records read as zero counters for the current window."""
        self.store.set(USAGE_KEY, raw)

        decision = self.limiter.check_limit()
        assert decision.can_ask is True
        assert decision.remaining_daily == 3

        self.limiter.record_usage()
        assert json.loads(self.store.get(USAGE_KEY))["dailyCount"] == 1

    def test_disabled_gate_always_allows(self):
        """Test a disabled gate allows but still counts usage."""
        limiter = RateLimiter(
            self.store,
            RateLimitConfig(enabled=False, daily=1, hourly=1),
            clock=self.clock
        )
        limiter.record_usage()
        limiter.record_usage()

        decision = limiter.check_limit()
        assert decision.can_ask is True
        assert limiter.usage().daily_count == 2

    def test_disabled_gate_reports_actual_remaining(self):
        """Test a disabled gate still reports what is left of each window."""
        limiter = RateLimiter(
            self.store,
            RateLimitConfig(enabled=False, daily=3, hourly=2),
            clock=self.clock
        )
        limiter.record_usage()

        decision = limiter.check_limit()
        assert decision.can_ask is True
        assert decision.remaining_daily == 2
        assert decision.remaining_hourly == 1
        assert decision.message is None
