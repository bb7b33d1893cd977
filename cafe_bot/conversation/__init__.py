"""
Conversation Module

WhatsApp ordering dialogue: session models and storage, the payment
tokenizer, reply templates and the state machine driving them.

Usage:
    from cafe_bot.conversation import ConversationEngine

    replies = await engine.handle_message("whatsapp:+491701234567", "08:00")
"""

from cafe_bot.conversation.engine import (
    get_conversation_engine,
    reset_conversation_engine,
    CANCEL_COMMANDS,
    RESTART_COMMANDS,
    ConversationEngine,
)
from cafe_bot.conversation.models import (
    ConversationState,
    Order,
    PaymentMethod,
    Session,
)
from cafe_bot.conversation.payment import PaymentChoice, parse_payment
from cafe_bot.conversation.store import BaseSessionStore, InMemorySessionStore

__all__ = [
    "ConversationEngine",
    "get_conversation_engine",
    "reset_conversation_engine",
    "CANCEL_COMMANDS",
    "RESTART_COMMANDS",
    "ConversationState",
    "Order",
    "PaymentMethod",
    "Session",
    "PaymentChoice",
    "parse_payment",
    "BaseSessionStore",
    "InMemorySessionStore",
]
