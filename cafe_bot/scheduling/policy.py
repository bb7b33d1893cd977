"""
Pickup Time Window Policy

Immutable business-hours rule set used by the pickup resolver:
timezone, open weekdays, daily pickup window and minimum lead time.

Author: Café Pickup Bot Team
Version: 3.0.0
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from cafe_bot.core.config import Settings


@dataclass(frozen=True)
class TimeWindowPolicy:
    """
    Business-hours rules for pickups.

    Attributes:
        timezone: Timezone all pickup instants are expressed in
        open_weekdays: Weekdays with pickup (Monday = 0, Sunday = 6)
        window_start: First pickup clock time of an open day
        window_end: Last pickup clock time of an open day (inclusive)
        lead_time: Minimum delay between "now" and the earliest pickup
    """
    timezone: ZoneInfo
    open_weekdays: frozenset[int]
    window_start: time
    window_end: time
    lead_time: timedelta

    def __post_init__(self) -> None:
        if not self.open_weekdays:
            raise ValueError("Policy needs at least one open weekday")
        if any(day < 0 or day > 6 for day in self.open_weekdays):
            raise ValueError(f"Invalid weekdays: {sorted(self.open_weekdays)}")
        if self.window_start > self.window_end:
            raise ValueError(
                f"Pickup window start {self.window_start} is after end {self.window_end}"
            )
        if self.lead_time < timedelta(0):
            raise ValueError("Lead time must not be negative")

    @classmethod
    def from_settings(cls, settings: Settings) -> "TimeWindowPolicy":
        """Build the policy from application settings."""
        return cls(
            timezone=ZoneInfo(settings.business_timezone),
            open_weekdays=settings.open_weekdays_set,
            window_start=settings.pickup_window_start_time,
            window_end=settings.pickup_window_end_time,
            lead_time=timedelta(minutes=settings.min_lead_minutes),
        )

    def is_open(self, day: date) -> bool:
        return day.weekday() in self.open_weekdays

    def window_bounds(self, day: date) -> tuple[datetime, datetime]:
        """Return the aware window start and end datetimes of a day."""
        start = datetime.combine(day, self.window_start, tzinfo=self.timezone)
        end = datetime.combine(day, self.window_end, tzinfo=self.timezone)
        return start, end

    def next_open_start(self, after: date) -> datetime:
        """Window start of the first open weekday strictly after ``after``."""
        day = after
        for _ in range(7):
            day += timedelta(days=1)
            if self.is_open(day):
                return self.window_bounds(day)[0]
        # Unreachable while __post_init__ guarantees an open weekday
        raise ValueError("No open weekday configured")
