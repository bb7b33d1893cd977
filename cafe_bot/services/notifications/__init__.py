"""
Notification Service Factory

Returns Mock or Real notification service based on ENV_MODE.

Author: Café Pickup Bot Team
Version: 3.0.0
"""

import logging
from functools import lru_cache

from cafe_bot.core.config import get_settings
from cafe_bot.services.notifications.base import (
    BaseNotificationService,
    DispatchError,
    NotificationResult,
)
from cafe_bot.services.notifications.mock import MockNotificationService
from cafe_bot.services.notifications.real import RealNotificationService

logger = logging.getLogger(__name__)


@lru_cache()
def get_notification_service() -> BaseNotificationService:
    """Get the configured notification service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Notification Service: Using MockNotificationService (development mode)")
        return MockNotificationService(failure_rate=0.05, min_latency=0.1, max_latency=0.3)
    else:
        logger.info(f"Notification Service: Using RealNotificationService ({settings.env_mode.value} mode)")
        return RealNotificationService(settings)


def reset_notification_service() -> None:
    """Clear the cached service instance."""
    get_notification_service.cache_clear()


__all__ = [
    "get_notification_service",
    "reset_notification_service",
    "BaseNotificationService",
    "DispatchError",
    "MockNotificationService",
    "NotificationResult",
    "RealNotificationService",
]
