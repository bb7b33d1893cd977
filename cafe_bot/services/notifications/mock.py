"""
Mock Notification Service

Simulates WhatsApp delivery for development.
No actual messages are sent - just logged and kept in memory.

Author: Café Pickup Bot Team
Version: 3.0.0
"""

import asyncio
import logging
import random
import uuid

from cafe_bot.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
)

logger = logging.getLogger(__name__)


class MockNotificationService(BaseNotificationService):
    """
    Mock notification service for development and tests.

    Attributes:
        failure_rate: Probability of a simulated delivery failure (0.0-1.0)
        min_latency: Minimum simulated latency in seconds
        max_latency: Maximum simulated latency in seconds
        sent: (to, body) pairs of every successful delivery
    """

    def __init__(
        self,
        failure_rate: float = 0.0,
        min_latency: float = 0.0,
        max_latency: float = 0.0,
    ):
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency
        self.sent: list[tuple[str, str]] = []
        logger.info(f"MockNotificationService initialized (failure_rate={failure_rate:.0%})")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def _simulate_latency(self) -> None:
        """Simulate network latency."""
        if self.max_latency > 0:
            await asyncio.sleep(random.uniform(self.min_latency, self.max_latency))

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    async def send_message(
        self,
        to: str,
        body: str,
    ) -> NotificationResult:
        """Simulate sending a WhatsApp message."""
        await self._simulate_latency()

        if self._should_fail():
            logger.warning(f"Mock message failed (simulated) to {to}")
            return NotificationResult(
                success=False,
                error_message="Simulated delivery failure",
                provider="mock"
            )

        message_id = f"SM_mock_{uuid.uuid4().hex[:12]}"
        self.sent.append((to, body))
        logger.info(f"Mock message sent to {to}: {body[:50]}... (ID: {message_id})")

        return NotificationResult(
            success=True,
            message_id=message_id,
            provider="mock"
        )

    async def health_check(self) -> bool:
        """Mock always returns healthy."""
        return True
