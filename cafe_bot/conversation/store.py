"""
Session Store

Keyed storage of conversation sessions, one per customer id.

The store also hands out a per-customer lock: the engine holds it for the
whole read-modify-write of one message, so two messages from the same
customer never interleave, while different customers proceed in parallel.

Author: Café Pickup Bot Team
Version: 3.0.0
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import AsyncContextManager, AsyncIterator, Callable, Optional

from cafe_bot.conversation.models import Session

logger = logging.getLogger(__name__)


class BaseSessionStore(ABC):
    """
    Abstract base class for session stores.

    Implementations keep at most one Session per customer id.
    """

    @abstractmethod
    def get(self, customer_id: str) -> Optional[Session]:
        """Return the active session, or None when there is none."""
        pass

    @abstractmethod
    def put(self, customer_id: str, session: Session) -> None:
        """Create or replace the session of a customer."""
        pass

    @abstractmethod
    def delete(self, customer_id: str) -> None:
        """Remove the session of a customer (no-op when absent)."""
        pass

    def has_active(self, customer_id: str) -> bool:
        return self.get(customer_id) is not None

    def touch(self, customer_id: str) -> None:
        """Count a message as activity without changing the session."""
        session = self.get(customer_id)
        if session is not None:
            self.put(customer_id, session)

    @abstractmethod
    def lock(self, customer_id: str) -> AsyncContextManager[None]:
        """Async context manager serializing work for one customer."""
        pass


@dataclass
class _KeyLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class InMemorySessionStore(BaseSessionStore):
    """
    Process-local session store.

    Args:
        ttl: Idle time after which a session counts as expired (None = never)
        clock: Returns the current aware UTC time; injectable for tests
    """

    def __init__(
        self,
        ttl: Optional[timedelta] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.ttl = ttl
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sessions: dict[str, Session] = {}
        self._locks: dict[str, _KeyLock] = {}

    def get(self, customer_id: str) -> Optional[Session]:
        session = self._sessions.get(customer_id)
        if session is None:
            return None
        if self.ttl is not None and self._clock() - session.last_activity > self.ttl:
            logger.info(f"Session expired for {customer_id} (idle since {session.last_activity.isoformat()})")
            del self._sessions[customer_id]
            return None
        return session

    def put(self, customer_id: str, session: Session) -> None:
        session.last_activity = self._clock()
        self._sessions[customer_id] = session

    def delete(self, customer_id: str) -> None:
        self._sessions.pop(customer_id, None)

    def __len__(self) -> int:
        return len(self._sessions)

    @asynccontextmanager
    async def lock(self, customer_id: str) -> AsyncIterator[None]:
        entry = self._locks.get(customer_id)
        if entry is None:
            entry = self._locks[customer_id] = _KeyLock()
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                del self._locks[customer_id]
