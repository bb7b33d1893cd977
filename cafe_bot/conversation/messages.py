"""
Reply templates for the ordering dialogue.

All customer-facing text is German. ``*bold*`` is rendered by WhatsApp.
"""

from datetime import datetime, time
from typing import Optional

from cafe_bot.conversation.models import Order, PaymentMethod
from cafe_bot.scheduling import (
    PickupFailure,
    TimeWindowPolicy,
    format_clock,
    format_pickup,
    format_weekdays,
)

AFFIRMATIVE = "ja"


def _window_text(policy: TimeWindowPolicy) -> str:
    return (
        f"{format_weekdays(policy.open_weekdays)} zwischen "
        f"{format_clock(policy.window_start)} und {format_clock(policy.window_end)} Uhr"
    )


def build_pickup_help(policy: TimeWindowPolicy, earliest: datetime) -> str:
    return (
        f"Abholung ist {_window_text(policy)} möglich.\n"
        f"Frühestmöglich: *{format_pickup(earliest)}*\n\n"
        "Wann möchtest du abholen? Antworte mit einer Uhrzeit, z. B. *08:30*."
    )


def build_greeting(cafe_name: str, policy: TimeWindowPolicy, earliest: datetime) -> list[str]:
    return [
        f"Hallo! 👋 Willkommen beim *{cafe_name}*.\n\n"
        f"{build_pickup_help(policy, earliest)}\n\n"
        "Mit *abbrechen* kannst du jederzeit abbrechen, mit *neu* von vorne beginnen."
    ]


def build_pickup_error(
    failure: PickupFailure,
    policy: TimeWindowPolicy,
    earliest: datetime,
    requested: Optional[time] = None,
) -> list[str]:
    if failure == PickupFailure.OUTSIDE_WINDOW:
        subject = f"*{format_clock(requested)} Uhr*" if requested is not None else "Diese Uhrzeit"
        reason = f"{subject} liegt außerhalb unserer Abholzeiten."
    else:
        reason = "Das habe ich nicht als Uhrzeit erkannt. Bitte schreibe z. B. *7*, *07:15* oder *7.15*."
    return [f"{reason}\n\n{build_pickup_help(policy, earliest)}"]


def build_ask_order(pickup_at: datetime) -> list[str]:
    return [
        f"Abholung: *{format_pickup(pickup_at)}* ✅\n\n"
        "Was möchtest du bestellen? (z. B. *2x Cappuccino, 1x Croissant*)"
    ]


def build_short_order() -> list[str]:
    return ["Bitte beschreibe deine Bestellung etwas genauer, z. B. *1x Latte Macchiato*."]


def build_payment_options() -> list[str]:
    return [
        "Wie möchtest du bezahlen?\n"
        "• *PayPal*\n"
        "• *Vor Ort* (bar oder mit Karte bei Abholung)"
    ]


def build_unrecognized_payment() -> list[str]:
    return ["Bitte antworte mit *PayPal* oder *Vor Ort*."]


def build_summary(pickup_at: datetime, order_text: str, payment: PaymentMethod) -> list[str]:
    return [
        "Bitte prüfe deine Bestellung:\n\n"
        f"🕒 Abholung: *{format_pickup(pickup_at)}*\n"
        f"🧾 Bestellung: {order_text}\n"
        f"💳 Zahlung: *{payment.label}*\n\n"
        f"Antworte mit *{AFFIRMATIVE}*, um verbindlich zu bestellen."
    ]


def build_confirm_reprompt() -> list[str]:
    return [f"Bitte antworte mit *{AFFIRMATIVE}*, um zu bestellen, oder mit *abbrechen*."]


def build_final_confirmation(order: Order, payment_link: Optional[str] = None) -> list[str]:
    text = (
        "Danke! Deine Bestellung ist eingegangen. 🎉\n"
        f"Abholung: *{format_pickup(order.pickup_at)}*"
    )
    if order.payment == PaymentMethod.PAYPAL:
        text += "\n\nBitte bezahle vor der Abholung per PayPal."
        if payment_link:
            text += f"\n{payment_link}"
    return [text]


def build_cancelled() -> list[str]:
    return ["Alles klar, deine Bestellung wurde abgebrochen. Schreib uns einfach, wenn du neu bestellen möchtest."]


def build_error() -> list[str]:
    return [
        "Entschuldigung, da ist etwas schiefgelaufen. 🙈\n"
        "Bitte versuche es noch einmal oder schreibe *neu*, um von vorne zu beginnen."
    ]


def build_owner_notification(order: Order) -> str:
    """Summary sent to the shop owner for a confirmed order."""
    return (
        "🆕 Neue Bestellung\n"
        f"Kunde: {order.customer_id}\n"
        f"Abholung: {format_pickup(order.pickup_at)}\n"
        f"Zahlung: {order.payment.label}\n"
        f"Bestellung: {order.order_text}"
    )
