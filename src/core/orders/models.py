"""
Order domain records: customer profile, cart item, order.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from src.core.conversation.states import ConversationState


class OrderStatus(str, Enum):
    """Order status enum."""
    PROCESSING = "Processing"    # Just placed, waiting for fulfillment
    SHIPPED = "Shipped"          # Handed to the courier
    DELIVERED = "Delivered"      # Received by the customer
    CANCELLED = "Cancelled"      # Cancelled by the shop


@dataclass
class Profile:
    """Customer profile keyed by WhatsApp ID."""
    phone_id: str
    name: Optional[str] = None
    address: Optional[str] = None
    state: ConversationState = ConversationState.DEFAULT
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class CartItem:
    """Single cart line."""
    sku: str
    quantity: int
    added_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class OrderItem:
    """Snapshot of a cart line taken at checkout."""
    sku: str
    quantity: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"sku": self.sku, "quantity": self.quantity}

    @classmethod
    def from_dict(cls, data: dict) -> "OrderItem":
        return cls(sku=str(data["sku"]), quantity=int(data["quantity"]))


@dataclass
class Order:
    """Placed order."""
    order_id: str
    phone_id: str
    customer_name: str
    address: str
    items: tuple[OrderItem, ...] = ()
    # Raw string when fulfillment wrote a status outside OrderStatus
    status: Union[OrderStatus, str] = OrderStatus.PROCESSING
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def status_label(self) -> str:
        if isinstance(self.status, OrderStatus):
            return self.status.value
        return str(self.status)
