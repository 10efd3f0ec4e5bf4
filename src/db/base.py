"""
Base interface for the profile/cart/order store.
Lets the conversation engine run against SQL or in-memory storage.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.core.conversation.states import ConversationState
from src.core.orders.models import CartItem, Order, OrderItem, OrderStatus, Profile


class BaseStore(ABC):
    """Abstract base class for stores.

    Every operation is atomic for a single entity. Implementations raise
    ``StoreError`` when the backend fails.
    """

    @abstractmethod
    async def get_or_create_profile(self, phone_id: str) -> Profile:
        """Return the profile for ``phone_id``, creating it on first contact."""
        pass

    @abstractmethod
    async def set_state(self, phone_id: str, state: ConversationState) -> None:
        pass

    @abstractmethod
    async def update_fields(self, phone_id: str, **fields) -> None:
        """Update profile attributes (``name``, ``address``)."""
        pass

    @abstractmethod
    async def add_cart_item(self, phone_id: str, sku: str, quantity: int) -> CartItem:
        """Add ``quantity`` of ``sku``; repeated adds accumulate."""
        pass

    @abstractmethod
    async def list_cart(self, phone_id: str) -> list[CartItem]:
        pass

    @abstractmethod
    async def clear_cart(self, phone_id: str) -> None:
        pass

    @abstractmethod
    async def create_order(
        self,
        phone_id: str,
        name: str,
        address: str,
        items: list[OrderItem],
    ) -> str:
        """Store an order snapshot and return its generated order ID."""
        pass

    @abstractmethod
    async def get_order(self, order_id: str) -> Optional[Order]:
        """Look up an order by its exact (normalized) ID."""
        pass

    @abstractmethod
    async def update_order_status(self, order_id: str, status: OrderStatus) -> bool:
        """Set order status; returns False when the order does not exist."""
        pass
