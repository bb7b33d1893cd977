"""
Scheduling Module

Business-hours policy and pickup time resolution.

Usage:
    from cafe_bot.scheduling import PickupTimeResolver, TimeWindowPolicy

    resolver = PickupTimeResolver(TimeWindowPolicy.from_settings(settings))
    earliest = resolver.earliest_feasible_pickup(now)
"""

from cafe_bot.scheduling.formatting import format_clock, format_pickup, format_weekdays
from cafe_bot.scheduling.policy import TimeWindowPolicy
from cafe_bot.scheduling.resolver import (
    PickupFailure,
    PickupResolution,
    PickupTimeResolver,
    parse_clock_time,
)

__all__ = [
    "TimeWindowPolicy",
    "PickupTimeResolver",
    "PickupResolution",
    "PickupFailure",
    "parse_clock_time",
    "format_pickup",
    "format_clock",
    "format_weekdays",
]
