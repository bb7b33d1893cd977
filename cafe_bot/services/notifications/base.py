"""
Notification Service Abstract Base Class

Defines the interface for delivering a text message to the shop owner
when a customer confirms an order. Supports both Mock (development) and
Real (production, Twilio WhatsApp) implementations.

Author: Café Pickup Bot Team
Version: 3.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class NotificationResult:
    """Result from sending a notification."""
    success: bool
    message_id: Optional[str] = None
    error_message: Optional[str] = None
    provider: str = "unknown"


class DispatchError(Exception):
    """Raised when the owner notification for a confirmed order fails."""

    def __init__(self, result: NotificationResult):
        self.result = result
        super().__init__(
            f"Notification via {result.provider} failed: {result.error_message or 'unknown error'}"
        )


class BaseNotificationService(ABC):
    """Abstract base class for notification services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def send_message(
        self,
        to: str,
        body: str,
    ) -> NotificationResult:
        """Send a text message to a messaging address."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service connectivity."""
        pass
