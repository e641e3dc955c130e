"""
Data models for storage layer.

Defines the persisted usage-counter record.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class UsageCounters:
    """Question counts for the current day and hour.

    The date/hour identifiers name the window the counts belong to; a
    reader seeing a different wall-clock day or hour must treat the
    matching count as zero.
    """
    daily_count: int
    hourly_count: int
    last_reset_date: str
    last_reset_hour: int

    def __post_init__(self):
        """Validate counter values."""
        if self.daily_count < 0 or self.hourly_count < 0:
            raise ValueError("counts must be >= 0")
        if not 0 <= self.last_reset_hour <= 23:
            raise ValueError("last_reset_hour must be between 0 and 23")

    @classmethod
    def fresh(cls, now: datetime) -> "UsageCounters":
        """Zero counters for the day and hour of ``now``."""
        return cls(
            daily_count=0,
            hourly_count=0,
            last_reset_date=now.date().isoformat(),
            last_reset_hour=now.hour
        )

    def to_dict(self) -> Dict[str, Any]:
        """Flat JSON-ready layout of the persisted record."""
        return {
            "dailyCount": self.daily_count,
            "hourlyCount": self.hourly_count,
            "lastResetDate": self.last_reset_date,
            "lastResetHour": self.last_reset_hour,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UsageCounters":
        """Build counters from the persisted layout.

        Raises:
            KeyError: If a field is missing
            ValueError: If a field has an invalid value
            TypeError: If a field has the wrong type
        """
        daily = data["dailyCount"]
        hourly = data["hourlyCount"]
        date = data["lastResetDate"]
        hour = data["lastResetHour"]
        for value in (daily, hourly, hour):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError("counter fields must be integers")
        if not isinstance(date, str):
            raise TypeError("lastResetDate must be a string")
        return cls(
            daily_count=daily,
            hourly_count=hourly,
            last_reset_date=date,
            last_reset_hour=hour
        )
