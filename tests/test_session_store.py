"""
Tests for the in-memory session store: CRUD, idle expiry and
per-customer serialization.
"""

import asyncio
from datetime import timedelta

import pytest

from cafe_bot.conversation import ConversationState, InMemorySessionStore, Session

from tests.conftest import FakeClock, monday


class TestSessionCrud:
    """get / put / delete / has_active"""

    def test_get_missing_returns_none(self, store):
        assert store.get("c1") is None
        assert not store.has_active("c1")

    def test_put_then_get(self, store):
        session = Session(state=ConversationState.ASK_ORDER)
        store.put("c1", session)

        assert store.get("c1") is session
        assert store.has_active("c1")
        assert len(store) == 1

    def test_put_replaces(self, store):
        store.put("c1", Session())
        replacement = Session(state=ConversationState.CONFIRM)
        store.put("c1", replacement)

        assert store.get("c1") is replacement
        assert len(store) == 1

    def test_delete(self, store):
        store.put("c1", Session())
        store.delete("c1")
        assert store.get("c1") is None

    def test_delete_missing_is_noop(self, store):
        store.delete("nobody")
        assert len(store) == 0

    def test_put_stamps_last_activity(self, store, clock):
        session = Session()
        store.put("c1", session)
        assert session.last_activity == clock.now


class TestSessionExpiry:
    """Idle sessions are dropped when a TTL is configured"""

    def test_no_ttl_never_expires(self):
        clock = FakeClock(monday(8, 0))
        store = InMemorySessionStore(clock=clock)
        store.put("c1", Session())

        clock.advance(days=30)
        assert store.has_active("c1")

    def test_expires_after_ttl(self):
        clock = FakeClock(monday(8, 0))
        store = InMemorySessionStore(ttl=timedelta(minutes=30), clock=clock)
        store.put("c1", Session())

        clock.advance(minutes=30)
        assert store.has_active("c1")

        clock.advance(minutes=1)
        assert store.get("c1") is None
        assert len(store) == 0

    def test_put_extends_lifetime(self):
        clock = FakeClock(monday(8, 0))
        store = InMemorySessionStore(ttl=timedelta(minutes=30), clock=clock)
        session = Session()
        store.put("c1", session)

        clock.advance(minutes=20)
        store.put("c1", session)
        clock.advance(minutes=20)

        assert store.get("c1") is session

    def test_touch_extends_lifetime(self):
        clock = FakeClock(monday(8, 0))
        store = InMemorySessionStore(ttl=timedelta(minutes=30), clock=clock)
        store.put("c1", Session(state=ConversationState.ASK_ORDER))

        clock.advance(minutes=20)
        store.touch("c1")
        clock.advance(minutes=20)

        session = store.get("c1")
        assert session.state == ConversationState.ASK_ORDER
        assert session.last_activity == monday(8, 20)

    def test_touch_missing_is_noop(self, store):
        store.touch("nobody")
        assert len(store) == 0


class TestCustomerLock:
    """Per-customer serialization"""

    @pytest.mark.asyncio
    async def test_same_customer_is_serialized(self, store):
        events = []

        async def worker(name):
            async with store.lock("c1"):
                events.append(f"{name}-in")
                await asyncio.sleep(0.01)
                events.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))
        assert events == ["a-in", "a-out", "b-in", "b-out"]

    @pytest.mark.asyncio
    async def test_different_customers_run_concurrently(self, store):
        events = []

        async def worker(customer):
            async with store.lock(customer):
                events.append(f"{customer}-in")
                await asyncio.sleep(0.01)
                events.append(f"{customer}-out")

        await asyncio.gather(worker("c1"), worker("c2"))
        assert events[:2] == ["c1-in", "c2-in"]

    @pytest.mark.asyncio
    async def test_locks_are_released(self, store):
        async with store.lock("c1"):
            assert "c1" in store._locks
        assert store._locks == {}

    @pytest.mark.asyncio
    async def test_lock_released_on_error(self, store):
        with pytest.raises(RuntimeError):
            async with store.lock("c1"):
                raise RuntimeError("boom")

        assert store._locks == {}
        async with store.lock("c1"):
            pass
