"""
Conversation states stored on the customer profile.
"""

from enum import Enum


class ConversationState(str, Enum):
    """What the bot expects from the customer's next free-text message."""

    DEFAULT = "default"                        # Main menu / free chat
    AWAITING_NAME = "awaiting_name"            # Checkout: customer name
    AWAITING_ADDRESS = "awaiting_address"      # Checkout: shipping address
    AWAITING_ORDER_ID = "awaiting_order_id"    # Order tracking
    AWAITING_AGENT = "awaiting_agent"          # Handed off to a human

    @classmethod
    def parse(cls, value: str | None) -> "ConversationState":
        """Map a stored value to a state, falling back to DEFAULT."""
        if not value:
            return cls.DEFAULT
        try:
            return cls(value)
        except ValueError:
            return cls.DEFAULT
