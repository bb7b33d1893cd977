"""Tests for the payment choice tokenizer."""

import pytest

from cafe_bot.conversation import PaymentMethod, parse_payment


@pytest.mark.parametrize(
    "text,expected",
    [
        ("PayPal", PaymentMethod.PAYPAL),
        ("paypal bitte", PaymentMethod.PAYPAL),
        ("  PAYPAL ", PaymentMethod.PAYPAL),
        ("vor Ort", PaymentMethod.ON_SITE),
        ("Vor ort bar", PaymentMethod.ON_SITE),
        ("ich zahle vor Ort", PaymentMethod.ON_SITE),
    ],
)
def test_recognized(text, expected):
    choice = parse_payment(text)
    assert choice.recognized
    assert choice.method == expected


@pytest.mark.parametrize("text", ["", "bar", "Karte", "Überweisung", None])
def test_unrecognized(text):
    choice = parse_payment(text)
    assert not choice.recognized
    assert choice.method is None


def test_paypal_wins_over_on_site():
    assert parse_payment("paypal vor der Abholung").method == PaymentMethod.PAYPAL


def test_labels():
    assert PaymentMethod.PAYPAL.label == "PayPal"
    assert PaymentMethod.ON_SITE.label == "Vor Ort"
