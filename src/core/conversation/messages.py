"""
Normalized inbound events.

The webhook parser turns each platform message into exactly one of the
variants below, so the engine matches on types instead of raw strings.
"""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class TextMessage:
    """Free text typed by the customer."""
    body: str


@dataclass(frozen=True)
class AdminOverride:
    """Operator command that hands the chat back to the bot."""
    body: str = ""


@dataclass(frozen=True)
class ListSelection:
    """Row picked from an interactive list (main menu)."""
    option_id: str


@dataclass(frozen=True)
class ButtonSelection:
    """Reply button pressed."""
    button_id: str


@dataclass(frozen=True)
class CategorySelection:
    """Category button pressed; ``category`` is the catalog key."""
    category: str


@dataclass(frozen=True)
class ProductLine:
    sku: str
    quantity: int


@dataclass(frozen=True)
class ProductOrder:
    """Cart sent from the in-chat catalog."""
    items: tuple[ProductLine, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class UnsupportedMessage:
    """Anything the bot cannot interpret (images, stickers, locations...)."""
    kind: str


InboundMessage = Union[
    TextMessage,
    AdminOverride,
    ListSelection,
    ButtonSelection,
    CategorySelection,
    ProductOrder,
    UnsupportedMessage,
]


@dataclass(frozen=True)
class InboundEvent:
    """One message attributed to a sender handle."""
    sender: str
    message: InboundMessage
    message_id: str | None = None
