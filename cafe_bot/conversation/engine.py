"""
Conversation Engine

Drives the WhatsApp ordering dialogue for each customer, one inbound
message at a time:

    NEW -> ASK_PICKUP -> ASK_ORDER -> ASK_PAYMENT -> CONFIRM -> (done)

Global commands are checked before the current step:
    - abbrechen / storno / stop: drop the conversation
    - neu / start: drop the conversation and start over immediately

On confirmation the shop owner is notified and the session is removed.

Author: Café Pickup Bot Team
Version: 3.0.0
"""

import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional

from cafe_bot.conversation import messages
from cafe_bot.conversation.models import ConversationState, Order, Session
from cafe_bot.conversation.payment import parse_payment
from cafe_bot.conversation.store import BaseSessionStore, InMemorySessionStore
from cafe_bot.core.config import get_settings
from cafe_bot.scheduling import PickupTimeResolver, TimeWindowPolicy
from cafe_bot.services.notifications import (
    BaseNotificationService,
    DispatchError,
    NotificationResult,
    get_notification_service,
)

logger = logging.getLogger(__name__)

CANCEL_COMMANDS = frozenset({"abbrechen", "storno", "stop"})
RESTART_COMMANDS = frozenset({"neu", "start"})

MIN_ORDER_TEXT_LENGTH = 2

StateHandler = Callable[[str, str, Optional[Session], datetime], Awaitable[list[str]]]


class ConversationEngine:
    """
    Per-customer state machine for pickup orders.

    Args:
        store: Session storage; also serializes messages per customer
        resolver: Pickup time rules
        notification_service: Delivers confirmed orders to the owner
        owner_address: Messaging address of the shop owner (None = not configured)
        payment_link: Optional link added to PayPal confirmations
        cafe_name: Name used in the greeting
        clock: Returns the current aware time; defaults to the policy timezone
    """

    def __init__(
        self,
        store: BaseSessionStore,
        resolver: PickupTimeResolver,
        notification_service: BaseNotificationService,
        owner_address: Optional[str],
        payment_link: Optional[str] = None,
        cafe_name: str = "Café",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.resolver = resolver
        self.notification_service = notification_service
        self.owner_address = owner_address
        self.payment_link = payment_link
        self.cafe_name = cafe_name
        self._clock = clock or (lambda: datetime.now(resolver.policy.timezone))

        self._handlers: dict[ConversationState, StateHandler] = {
            ConversationState.NEW: self._handle_new,
            ConversationState.ASK_PICKUP: self._handle_ask_pickup,
            ConversationState.ASK_ORDER: self._handle_ask_order,
            ConversationState.ASK_PAYMENT: self._handle_ask_payment,
            ConversationState.CONFIRM: self._handle_confirm,
        }

        logger.info(
            f"ConversationEngine initialized "
            f"(notifications={notification_service.provider_name}, "
            f"payment_link={'yes' if payment_link else 'no'})"
        )

    async def handle_message(self, customer_id: str, body: str) -> list[str]:
        """
        Process one inbound message and return the reply segments.

        Messages of the same customer are handled strictly one after the
        other. Unexpected errors (including a failed owner notification)
        produce a generic apology; the session is left as it was.
        """
        async with self.store.lock(customer_id):
            try:
                return await self._process(customer_id, body)
            except Exception as e:
                logger.exception(f"Error handling message from {customer_id}: {e}")
                return messages.build_error()

    async def _process(self, customer_id: str, body: str) -> list[str]:
        text = (body or "").strip()
        command = text.lower()
        now = self._clock()

        if command in CANCEL_COMMANDS:
            self.store.delete(customer_id)
            logger.info(f"Conversation cancelled by {customer_id}")
            return messages.build_cancelled()

        if command in RESTART_COMMANDS:
            self.store.delete(customer_id)
            logger.info(f"Conversation restarted by {customer_id}")
            session = None
        else:
            session = self.store.get(customer_id)
            if session is not None:
                self.store.touch(customer_id)

        state = session.state if session is not None else ConversationState.NEW
        handler = self._handlers.get(state)
        if handler is None:
            logger.warning(f"Unknown state {state!r} for {customer_id}, resetting")
            self.store.delete(customer_id)
            return self._pickup_greeting(now)

        return await handler(customer_id, text, session, now)

    # =========================================================================
    # STATE HANDLERS
    # =========================================================================

    async def _handle_new(
        self,
        customer_id: str,
        text: str,
        session: Optional[Session],
        now: datetime,
    ) -> list[str]:
        self.store.put(customer_id, Session(state=ConversationState.ASK_PICKUP))
        logger.info(f"New conversation with {customer_id}")
        return self._pickup_greeting(now)

    async def _handle_ask_pickup(
        self,
        customer_id: str,
        text: str,
        session: Session,
        now: datetime,
    ) -> list[str]:
        result = self.resolver.resolve(text, now)
        if not result.success:
            logger.info(f"Pickup time rejected for {customer_id}: {result.failure.value} ({text!r})")
            earliest = self.resolver.earliest_feasible_pickup(now)
            return messages.build_pickup_error(
                result.failure, self.resolver.policy, earliest, requested=result.requested
            )

        session.pickup_at = result.pickup_at
        session.state = ConversationState.ASK_ORDER
        self.store.put(customer_id, session)
        logger.info(f"{customer_id}: pickup at {result.pickup_at.isoformat()}")
        return messages.build_ask_order(result.pickup_at)

    async def _handle_ask_order(
        self,
        customer_id: str,
        text: str,
        session: Session,
        now: datetime,
    ) -> list[str]:
        if len(text) < MIN_ORDER_TEXT_LENGTH:
            return messages.build_short_order()

        session.order_text = text
        session.state = ConversationState.ASK_PAYMENT
        self.store.put(customer_id, session)
        return messages.build_payment_options()

    async def _handle_ask_payment(
        self,
        customer_id: str,
        text: str,
        session: Session,
        now: datetime,
    ) -> list[str]:
        choice = parse_payment(text)
        if not choice.recognized:
            return messages.build_unrecognized_payment()

        session.payment = choice.method
        session.state = ConversationState.CONFIRM
        self.store.put(customer_id, session)
        return messages.build_summary(session.pickup_at, session.order_text, session.payment)

    async def _handle_confirm(
        self,
        customer_id: str,
        text: str,
        session: Session,
        now: datetime,
    ) -> list[str]:
        if text.lower() != messages.AFFIRMATIVE:
            return messages.build_confirm_reprompt()

        order = Order.from_session(customer_id, session)
        await self._dispatch(order)
        self.store.delete(customer_id)
        logger.info(f"Order confirmed for {customer_id} ({order.payment.value})")
        return messages.build_final_confirmation(order, self.payment_link)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _pickup_greeting(self, now: datetime) -> list[str]:
        earliest = self.resolver.earliest_feasible_pickup(now)
        return messages.build_greeting(self.cafe_name, self.resolver.policy, earliest)

    async def _dispatch(self, order: Order) -> None:
        """Notify the shop owner; raises DispatchError on failure."""
        if not self.owner_address:
            raise DispatchError(NotificationResult(
                success=False,
                error_message="Owner address not configured",
                provider=self.notification_service.provider_name,
            ))
        result = await self.notification_service.send_message(
            self.owner_address,
            messages.build_owner_notification(order),
        )
        if not result.success:
            raise DispatchError(result)
        logger.info(f"Owner notified about order from {order.customer_id} (ID: {result.message_id})")


# Singleton instance
_engine_instance: Optional[ConversationEngine] = None


def get_conversation_engine() -> ConversationEngine:
    """Get the process-wide conversation engine, built from settings."""
    global _engine_instance

    if _engine_instance is None:
        settings = get_settings()
        ttl = (
            timedelta(minutes=settings.session_ttl_minutes)
            if settings.session_ttl_minutes
            else None
        )
        _engine_instance = ConversationEngine(
            store=InMemorySessionStore(ttl=ttl),
            resolver=PickupTimeResolver(TimeWindowPolicy.from_settings(settings)),
            notification_service=get_notification_service(),
            owner_address=settings.owner_address,
            payment_link=settings.paypal_link,
            cafe_name=settings.cafe_name,
        )

    return _engine_instance


def reset_conversation_engine() -> None:
    """Drop the singleton (and with it every in-memory session)."""
    global _engine_instance
    _engine_instance = None
