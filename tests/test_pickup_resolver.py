"""
Tests for pickup scheduling: business policy, earliest feasible pickup
and free-text time resolution.
"""

from datetime import date, time, timedelta, timezone

import pytest

from cafe_bot.core.config import Settings
from cafe_bot.scheduling import PickupFailure, TimeWindowPolicy, parse_clock_time

from tests.conftest import BERLIN, berlin, monday


# ============================================================================
# Policy
# ============================================================================

class TestTimeWindowPolicy:
    """Policy construction and calendar helpers"""

    def test_from_settings(self):
        settings = Settings(
            _env_file=None,
            business_timezone="Europe/Vienna",
            open_weekdays="1,2,3,4,5",
            pickup_window_start="08:30",
            pickup_window_end="12:00",
            min_lead_minutes=45,
        )
        policy = TimeWindowPolicy.from_settings(settings)

        assert policy.timezone.key == "Europe/Vienna"
        assert policy.open_weekdays == frozenset({1, 2, 3, 4, 5})
        assert policy.window_start == time(8, 30)
        assert policy.window_end == time(12, 0)
        assert policy.lead_time == timedelta(minutes=45)

    def test_rejects_no_open_days(self):
        with pytest.raises(ValueError):
            TimeWindowPolicy(BERLIN, frozenset(), time(7), time(15), timedelta(minutes=30))

    def test_rejects_inverted_window(self):
        with pytest.raises(ValueError):
            TimeWindowPolicy(BERLIN, frozenset({0}), time(15), time(7), timedelta(minutes=30))

    def test_next_open_start_skips_weekend(self, policy):
        friday = date(2026, 10, 23)
        assert policy.next_open_start(friday) == berlin(2026, 10, 26, 7, 0)

    def test_next_open_start_is_strictly_after(self, policy):
        assert policy.next_open_start(date(2026, 10, 19)) == berlin(2026, 10, 20, 7, 0)

    def test_window_bounds_are_aware(self, policy):
        start, end = policy.window_bounds(date(2026, 10, 19))
        assert start == monday(7, 0)
        assert end == monday(15, 0)
        assert start.tzinfo is BERLIN


# ============================================================================
# Earliest feasible pickup
# ============================================================================

class TestEarliestFeasiblePickup:
    """Earliest pickup instant for a given 'now'"""

    def test_adds_lead_time_inside_window(self, resolver):
        assert resolver.earliest_feasible_pickup(monday(10, 0)) == monday(10, 30)

    def test_raises_to_window_start(self, resolver):
        assert resolver.earliest_feasible_pickup(monday(5, 0)) == monday(7, 0)

    def test_lead_time_reaching_window_end_exactly(self, resolver):
        assert resolver.earliest_feasible_pickup(monday(14, 30)) == monday(15, 0)

    def test_rolls_to_next_open_day_after_window_end(self, resolver):
        assert resolver.earliest_feasible_pickup(monday(14, 45)) == berlin(2026, 10, 20, 7, 0)

    def test_friday_evening_rolls_to_monday(self, resolver):
        friday_evening = berlin(2026, 10, 23, 18, 0)
        assert resolver.earliest_feasible_pickup(friday_evening) == berlin(2026, 10, 26, 7, 0)

    def test_closed_day_rolls_to_next_open_day(self, resolver):
        saturday_noon = berlin(2026, 10, 24, 12, 0)
        assert resolver.earliest_feasible_pickup(saturday_noon) == berlin(2026, 10, 26, 7, 0)

    def test_lead_time_crossing_midnight_into_open_day(self, resolver):
        sunday_late = berlin(2026, 10, 25, 23, 50)
        assert resolver.earliest_feasible_pickup(sunday_late) == berlin(2026, 10, 26, 7, 0)

    def test_rounds_seconds_up_to_next_minute(self, resolver):
        assert resolver.earliest_feasible_pickup(berlin(2026, 10, 19, 10, 0, 20)) == monday(10, 31)

    def test_accepts_other_timezones(self, resolver):
        utc_now = monday(10, 0).astimezone(timezone.utc)
        result = resolver.earliest_feasible_pickup(utc_now)
        assert result == monday(10, 30)
        assert result.tzinfo is BERLIN

    def test_properties_hold_across_two_weeks(self, resolver, policy):
        now = berlin(2026, 10, 19, 0, 0)
        end = now + timedelta(days=14)
        while now < end:
            earliest = resolver.earliest_feasible_pickup(now)
            start, stop = policy.window_bounds(earliest.date())

            assert earliest >= now + policy.lead_time
            assert earliest.weekday() in policy.open_weekdays
            assert start <= earliest <= stop
            now += timedelta(minutes=17)


# ============================================================================
# Parsing
# ============================================================================

class TestParseClockTime:
    """Syntax of free-text clock times"""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("7", time(7, 0)),
            ("07", time(7, 0)),
            ("7:15", time(7, 15)),
            ("07:15", time(7, 15)),
            ("7.15", time(7, 15)),
            (" 08:00 ", time(8, 0)),
            ("0", time(0, 0)),
            ("23:59", time(23, 59)),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_clock_time(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["", "abc", "24", "7:60", "7:5", "7:155", "-1", "7:15 Uhr", "halb acht", "7,15", "123"],
    )
    def test_invalid(self, text):
        assert parse_clock_time(text) is None


# ============================================================================
# Resolution
# ============================================================================

class TestResolve:
    """Turning free text into a validated pickup instant"""

    def test_time_inside_window(self, resolver):
        result = resolver.resolve("12:15", monday(10, 0))
        assert result.success
        assert result.pickup_at == monday(12, 15)
        assert result.requested == time(12, 15)

    def test_early_time_snaps_to_earliest(self, resolver):
        result = resolver.resolve("07:00", monday(10, 0))
        assert result.success
        assert result.pickup_at == monday(10, 30)

    def test_time_after_window_is_rejected(self, resolver):
        result = resolver.resolve("16:00", monday(10, 0))
        assert not result.success
        assert result.failure == PickupFailure.OUTSIDE_WINDOW
        assert result.pickup_at is None

    def test_time_before_window_is_rejected(self, resolver):
        result = resolver.resolve("6:59", monday(10, 0))
        assert result.failure == PickupFailure.OUTSIDE_WINDOW

    def test_window_end_is_inclusive(self, resolver):
        result = resolver.resolve("15:00", monday(10, 0))
        assert result.success
        assert result.pickup_at == monday(15, 0)

    def test_one_minute_past_window_end_is_rejected(self, resolver):
        result = resolver.resolve("15:01", monday(10, 0))
        assert result.failure == PickupFailure.OUTSIDE_WINDOW

    def test_unparseable(self, resolver):
        result = resolver.resolve("morgen früh", monday(10, 0))
        assert not result.success
        assert result.failure == PickupFailure.UNPARSEABLE
        assert result.requested is None

    def test_uses_date_of_earliest_pickup(self, resolver):
        result = resolver.resolve("08:00", monday(16, 0))
        assert result.success
        assert result.pickup_at == berlin(2026, 10, 20, 8, 0)

    def test_weekend_order_lands_on_monday(self, resolver):
        result = resolver.resolve("9.30", berlin(2026, 10, 24, 11, 0))
        assert result.pickup_at == berlin(2026, 10, 26, 9, 30)

    def test_never_outside_open_window(self, resolver, policy):
        texts = ["0", "6", "7", "7:30", "10", "12:45", "14.59", "15", "15:01", "23:59"]
        now = berlin(2026, 10, 19, 0, 0)
        end = now + timedelta(days=7)
        while now < end:
            for text in texts:
                result = resolver.resolve(text, now)
                if not result.success:
                    continue
                start, stop = policy.window_bounds(result.pickup_at.date())
                assert result.pickup_at.weekday() in policy.open_weekdays
                assert start <= result.pickup_at <= stop
                assert result.pickup_at >= resolver.earliest_feasible_pickup(now)
            now += timedelta(minutes=53)
