"""
Orders module for the commerce bot.
Handles cart/order records, order IDs and text rendering.
"""

from src.core.orders.models import (
    CartItem,
    Order,
    OrderItem,
    OrderStatus,
    Profile,
)
from src.core.orders.ids import generate_order_id, normalize_order_id
from src.core.orders.formatting import (
    format_cart,
    format_items_summary,
    format_order_confirmation,
    format_order_status,
)

__all__ = [
    # Models
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Profile",
    # IDs
    "generate_order_id",
    "normalize_order_id",
    # Formatting
    "format_cart",
    "format_items_summary",
    "format_order_confirmation",
    "format_order_status",
]
