"""
Conversation Models

Session state kept between messages of one customer, and the transient
order handed to the owner notification on confirmation.

Author: Café Pickup Bot Team
Version: 3.0.0
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class ConversationState(str, Enum):
    """
    Steps of the ordering dialogue.

    NEW is never stored: a customer without a stored session is in NEW.
    """
    NEW = "new"
    ASK_PICKUP = "ask_pickup"
    ASK_ORDER = "ask_order"
    ASK_PAYMENT = "ask_payment"
    CONFIRM = "confirm"


class PaymentMethod(str, Enum):
    PAYPAL = "paypal"
    ON_SITE = "on_site"

    @property
    def label(self) -> str:
        """German display label."""
        return PAYMENT_LABELS[self]


PAYMENT_LABELS = {
    PaymentMethod.PAYPAL: "PayPal",
    PaymentMethod.ON_SITE: "Vor Ort",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    """
    Mutable per-customer conversation state.

    Attributes:
        state: Current dialogue step
        pickup_at: Validated pickup instant (set in ASK_PICKUP)
        order_text: Free-text order contents (set in ASK_ORDER)
        payment: Chosen payment method (set in ASK_PAYMENT)
        last_activity: UTC time of the last write, used for idle expiry
    """
    state: ConversationState = ConversationState.ASK_PICKUP
    pickup_at: Optional[datetime] = None
    order_text: Optional[str] = None
    payment: Optional[PaymentMethod] = None
    last_activity: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class Order:
    """Confirmed order assembled from a session; not stored."""
    customer_id: str
    pickup_at: datetime
    order_text: str
    payment: PaymentMethod

    @classmethod
    def from_session(cls, customer_id: str, session: Session) -> "Order":
        if session.pickup_at is None or not session.order_text or session.payment is None:
            raise ValueError(f"Session for {customer_id} is incomplete: {session}")
        return cls(
            customer_id=customer_id,
            pickup_at=session.pickup_at,
            order_text=session.order_text,
            payment=session.payment,
        )
