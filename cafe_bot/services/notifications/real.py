"""
Real Notification Service

Production implementation delivering owner notifications over
WhatsApp through the Twilio Messaging API.

Author: Café Pickup Bot Team
Version: 3.0.0
"""

import asyncio
import logging
from typing import Optional

from twilio.base.exceptions import TwilioException
from twilio.rest import Client as TwilioClient

from cafe_bot.core.config import Settings, get_settings
from cafe_bot.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
)

logger = logging.getLogger(__name__)


class RealNotificationService(BaseNotificationService):
    """Production notification service using Twilio WhatsApp."""

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()

        if settings.twilio_account_sid and settings.twilio_auth_token:
            self.twilio_client = TwilioClient(
                settings.twilio_account_sid,
                settings.twilio_auth_token
            )
            self.twilio_from = settings.twilio_whatsapp_from
            self.account_sid = settings.twilio_account_sid
        else:
            self.twilio_client = None
            self.twilio_from = None
            self.account_sid = None
            logger.warning("Twilio credentials not configured")

        logger.info("RealNotificationService initialized")

    @property
    def provider_name(self) -> str:
        return "twilio"

    async def send_message(
        self,
        to: str,
        body: str,
    ) -> NotificationResult:
        """Send a WhatsApp message via Twilio."""
        if not self.twilio_client:
            return NotificationResult(
                success=False,
                error_message="Twilio not configured",
                provider="twilio"
            )

        try:
            # The Twilio client is blocking; keep the event loop free
            result = await asyncio.to_thread(
                self.twilio_client.messages.create,
                body=body,
                from_=self.twilio_from,
                to=to,
            )

            logger.info(f"WhatsApp message sent to {to}: {result.sid}")

            return NotificationResult(
                success=True,
                message_id=result.sid,
                provider="twilio"
            )

        except TwilioException as e:
            logger.error(f"Twilio error: {e}")
            return NotificationResult(
                success=False,
                error_message=str(e),
                provider="twilio"
            )

    async def health_check(self) -> bool:
        """Check the Twilio account is reachable."""
        if not self.twilio_client:
            return False
        try:
            await asyncio.to_thread(self.twilio_client.api.v2010.accounts(self.account_sid).fetch)
            return True
        except TwilioException as e:
            logger.error(f"Twilio health check failed: {e}")
            return False
