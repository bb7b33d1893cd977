"""
Payment choice tokenizer.

Maps a free-text answer to a payment method. "paypal" anywhere in the
text means PayPal, "vor" (as in "vor Ort") means paying on site.
"""

from dataclasses import dataclass
from typing import Optional

from cafe_bot.conversation.models import PaymentMethod


@dataclass(frozen=True)
class PaymentChoice:
    method: Optional[PaymentMethod] = None

    @property
    def recognized(self) -> bool:
        return self.method is not None


def parse_payment(text: str) -> PaymentChoice:
    normalized = (text or "").strip().lower()
    if "paypal" in normalized:
        return PaymentChoice(PaymentMethod.PAYPAL)
    if "vor" in normalized:
        return PaymentChoice(PaymentMethod.ON_SITE)
    return PaymentChoice()
