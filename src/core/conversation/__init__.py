"""
Conversation state machine for the commerce bot.

The engine itself lives in ``src.core.conversation.engine``; this package
root only exposes the lightweight state and message types so that order
models can import them without pulling in the engine.
"""

from src.core.conversation.states import ConversationState
from src.core.conversation.messages import (
    AdminOverride,
    ButtonSelection,
    CategorySelection,
    InboundEvent,
    InboundMessage,
    ListSelection,
    ProductLine,
    ProductOrder,
    TextMessage,
    UnsupportedMessage,
)

__all__ = [
    "ConversationState",
    "AdminOverride",
    "ButtonSelection",
    "CategorySelection",
    "InboundEvent",
    "InboundMessage",
    "ListSelection",
    "ProductLine",
    "ProductOrder",
    "TextMessage",
    "UnsupportedMessage",
]
