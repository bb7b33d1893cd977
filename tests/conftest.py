"""
Shared fixtures for the café ordering bot tests.

All tests run against a fixed business policy (Europe/Berlin, Monday to
Friday, pickup 07:00-15:00, 30 minutes lead time) and a controllable clock.
2026-10-19 is a Monday.
"""

from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from cafe_bot.conversation import ConversationEngine, InMemorySessionStore
from cafe_bot.scheduling import PickupTimeResolver, TimeWindowPolicy
from cafe_bot.services.notifications import MockNotificationService

BERLIN = ZoneInfo("Europe/Berlin")
OWNER = "whatsapp:+4930123456"
CUSTOMER = "whatsapp:+4915112345678"
PAYPAL_LINK = "https://paypal.me/cafeammarkt"


def berlin(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=BERLIN)


def monday(hour: int = 10, minute: int = 0) -> datetime:
    return berlin(2026, 10, 19, hour, minute)


class FakeClock:
    """Callable clock whose time the test sets explicitly."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def policy() -> TimeWindowPolicy:
    return TimeWindowPolicy(
        timezone=BERLIN,
        open_weekdays=frozenset({0, 1, 2, 3, 4}),
        window_start=time(7, 0),
        window_end=time(15, 0),
        lead_time=timedelta(minutes=30),
    )


@pytest.fixture
def resolver(policy) -> PickupTimeResolver:
    return PickupTimeResolver(policy)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(monday(10, 0))


@pytest.fixture
def store(clock) -> InMemorySessionStore:
    return InMemorySessionStore(clock=clock)


@pytest.fixture
def notifier() -> MockNotificationService:
    return MockNotificationService(failure_rate=0.0)


@pytest.fixture
def engine(store, resolver, notifier, clock) -> ConversationEngine:
    return ConversationEngine(
        store=store,
        resolver=resolver,
        notification_service=notifier,
        owner_address=OWNER,
        payment_link=PAYPAL_LINK,
        cafe_name="Café am Markt",
        clock=clock,
    )
