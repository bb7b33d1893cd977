"""
                        Services Module

Contains the outbound integrations with the hybrid architecture pattern.
Each service has Mock (development) and Real (production) implementations.

Services:
    - notifications: Owner notification over Twilio WhatsApp
"""

from cafe_bot.services.notifications import get_notification_service

__all__ = ["get_notification_service"]
