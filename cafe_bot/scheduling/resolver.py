"""
Pickup Time Resolver

Computes the earliest feasible pickup instant and turns a customer's
free-text clock time ("7", "07:15", "7.15") into a validated pickup
instant on an open day inside the pickup window.

A requested time that lies inside the window but before the earliest
feasible instant is never rejected: it snaps forward to that instant.

Example:
    >>> resolver = PickupTimeResolver(policy)
    >>> result = resolver.resolve("08:00", now)
    >>> if result.success:
    ...     print(format_pickup(result.pickup_at))

Author: Café Pickup Bot Team
Version: 3.0.0
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from enum import Enum
from typing import Optional

from cafe_bot.scheduling.policy import TimeWindowPolicy

logger = logging.getLogger(__name__)

_TIME_PATTERN = re.compile(r"^(\d{1,2})(?:[:.](\d{2}))?$")


class PickupFailure(str, Enum):
    """Reasons a free-text pickup time was not accepted."""
    UNPARSEABLE = "unparseable"
    OUTSIDE_WINDOW = "outside_window"


@dataclass
class PickupResolution:
    """
    Result of resolving a free-text pickup time.

    Attributes:
        success: Whether a pickup instant was produced
        pickup_at: Validated pickup instant (policy timezone)
        failure: Failure kind when success is False
        requested: Clock time the customer asked for, when it parsed
    """
    success: bool
    pickup_at: Optional[datetime] = None
    failure: Optional[PickupFailure] = None
    requested: Optional[time] = None


def parse_clock_time(text: str) -> Optional[time]:
    """Parse ``hour[(:|.)minute]``; returns None for anything else."""
    match = _TIME_PATTERN.match((text or "").strip())
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2)) if match.group(2) is not None else 0
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


class PickupTimeResolver:
    """Applies a TimeWindowPolicy to "now" and to customer input."""

    def __init__(self, policy: TimeWindowPolicy):
        self.policy = policy

    def earliest_feasible_pickup(self, now: datetime) -> datetime:
        """
        Earliest pickup instant for an order placed at ``now``.

        The result is at least ``now + lead_time``, on an open weekday and
        within the pickup window. A candidate after the window end rolls to
        the next open day instead of wrapping within the same day.

        Args:
            now: Timezone-aware current time

        Returns:
            Aware datetime in the policy timezone
        """
        tz = self.policy.timezone
        candidate = (now.astimezone(timezone.utc) + self.policy.lead_time).astimezone(tz)
        if candidate.second or candidate.microsecond:
            candidate = candidate.replace(second=0, microsecond=0) + timedelta(minutes=1)

        day = candidate.date()
        if not self.policy.is_open(day):
            return self.policy.next_open_start(day)

        start, end = self.policy.window_bounds(day)
        if candidate < start:
            return start
        if candidate > end:
            return self.policy.next_open_start(day)
        return candidate

    def resolve(self, free_text: str, now: datetime) -> PickupResolution:
        """
        Validate and normalize a free-text pickup time.

        Args:
            free_text: Customer input such as "7", "07:15" or "7.15"
            now: Timezone-aware current time

        Returns:
            PickupResolution with the pickup instant or a failure kind
        """
        requested = parse_clock_time(free_text)
        if requested is None:
            return PickupResolution(success=False, failure=PickupFailure.UNPARSEABLE)

        earliest = self.earliest_feasible_pickup(now)
        target = datetime.combine(earliest.date(), requested, tzinfo=self.policy.timezone)

        start, end = self.policy.window_bounds(target.date())
        if target < start or target > end:
            return PickupResolution(
                success=False,
                failure=PickupFailure.OUTSIDE_WINDOW,
                requested=requested,
            )

        if target < earliest:
            logger.debug(f"Requested {requested:%H:%M} snapped forward to {earliest.isoformat()}")
            target = earliest

        if not self.policy.is_open(target.date()):
            target = self.policy.next_open_start(target.date())

        return PickupResolution(success=True, pickup_at=target, requested=requested)
