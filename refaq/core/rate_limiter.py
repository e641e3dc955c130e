"""
Question quota enforcement.

Tracks how many questions were asked in the current day and hour and gates
new ones against operator-set limits.

Check Order:
1. Daily limit - Denial message points to tomorrow
2. Hourly limit - Denial message names the next hour boundary
"""

import json
import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Callable, Optional

from .errors import RateLimitError
from refaq.config.loader import RateLimitConfig
from refaq.storage.models import UsageCounters
from refaq.storage.repository import UsageStore

logger = logging.getLogger(__name__)

USAGE_KEY = "reFAQ_user_limits"


@dataclass(frozen=True)
class RateDecision:
    """Outcome of a quota check."""
    can_ask: bool
    remaining_daily: int
    remaining_hourly: int
    message: Optional[str] = None


class RateLimiter:
    """Daily and hourly question gate over an injected store.

    Counters are normalized against the wall clock before every read and
    every write, so a stale day or hour always reads as zero.
    """

    def __init__(
        self,
        store: UsageStore,
        config: Optional[RateLimitConfig] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        """Initialize the limiter.

        Args:
            store: Key-value store holding the usage record
            config: Limits and the enabled flag (defaults to RateLimitConfig())
            clock: Source of the current local time
        """
        self.store = store
        self.config = config or RateLimitConfig()
        self.clock = clock
        self._lock = threading.Lock()

    @property
    def daily_limit(self) -> int:
        return self.config.daily

    @property
    def hourly_limit(self) -> int:
        return self.config.hourly

    def usage(self) -> UsageCounters:
        """Current counters, normalized to the present day and hour."""
        with self._lock:
            return self._normalize(self._load(), self.clock())

    def check_limit(self) -> RateDecision:
        """Decide whether another question may be asked right now."""
        with self._lock:
            now = self.clock()
            counters = self._normalize(self._load(), now)
        return self._decide(counters, now)

    def enforce(self) -> RateDecision:
        """Check the quota and raise when it is exhausted.

        Raises:
            RateLimitError: If the daily or hourly limit is reached
        """
        decision = self.check_limit()
        if not decision.can_ask:
            logger.info("Question denied: %s", decision.message)
            raise RateLimitError(decision.message, decision)
        return decision

    def acquire(self) -> RateDecision:
        """Check the quota and count one question in a single locked step.

        Concurrent callers cannot all pass the check before any of them is
        counted. The returned decision reports the quota left afterwards.

        Raises:
            RateLimitError: If the daily or hourly limit is reached
        """
        with self._lock:
            now = self.clock()
            counters = self._normalize(self._load(), now)
            decision = self._decide(counters, now)
            if decision.can_ask:
                counters = self._increment(counters)
                self._save(counters)

        if not decision.can_ask:
            logger.info("Question denied: %s", decision.message)
            raise RateLimitError(decision.message, decision)

        logger.debug(
            "Recorded question (daily=%d, hourly=%d)",
            counters.daily_count, counters.hourly_count
        )
        return RateDecision(
            True,
            max(self.daily_limit - counters.daily_count, 0),
            max(self.hourly_limit - counters.hourly_count, 0)
        )

    def record_usage(self) -> None:
        """Count one question against both windows and persist."""
        with self._lock:
            counters = self._increment(self._normalize(self._load(), self.clock()))
            self._save(counters)
        logger.debug(
            "Recorded question (daily=%d, hourly=%d)",
            counters.daily_count, counters.hourly_count
        )

    def _decide(self, counters: UsageCounters, now: datetime) -> RateDecision:
        remaining_daily = max(self.daily_limit - counters.daily_count, 0)
        remaining_hourly = max(self.hourly_limit - counters.hourly_count, 0)

        if not self.config.enabled:
            return RateDecision(True, remaining_daily, remaining_hourly)

        if counters.daily_count >= self.daily_limit:
            return RateDecision(
                can_ask=False,
                remaining_daily=0,
                remaining_hourly=remaining_hourly,
                message=(
                    f"You've reached your daily limit of {self.daily_limit} questions. "
                    "Please come back tomorrow to continue asking questions about Re Protocol!"
                )
            )

        if counters.hourly_count >= self.hourly_limit:
            next_hour = (now + timedelta(hours=1)).hour
            return RateDecision(
                can_ask=False,
                remaining_daily=remaining_daily,
                remaining_hourly=0,
                message=(
                    f"You've reached your hourly limit of {self.hourly_limit} questions. "
                    f"Please wait until {next_hour}:00 to ask more questions."
                )
            )

        return RateDecision(True, remaining_daily, remaining_hourly)

    @staticmethod
    def _increment(counters: UsageCounters) -> UsageCounters:
        return replace(
            counters,
            daily_count=counters.daily_count + 1,
            hourly_count=counters.hourly_count + 1
        )

    def _load(self) -> UsageCounters:
        raw = self.store.get(USAGE_KEY)
        if raw is None:
            return UsageCounters.fresh(self.clock())
        try:
            return UsageCounters.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding corrupt usage record: %s", e)
            return UsageCounters.fresh(self.clock())

    def _save(self, counters: UsageCounters) -> None:
        self.store.set(USAGE_KEY, json.dumps(counters.to_dict()))

    @staticmethod
    def _normalize(counters: UsageCounters, now: datetime) -> UsageCounters:
        today = now.date().isoformat()
        if counters.last_reset_date != today:
            # same clock hour on a later day is still a new hourly window
            counters = replace(counters, daily_count=0, hourly_count=0, last_reset_date=today)
        if counters.last_reset_hour != now.hour:
            counters = replace(counters, hourly_count=0, last_reset_hour=now.hour)
        return counters
