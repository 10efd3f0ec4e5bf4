"""
Text rendering for carts and orders.
"""

from typing import Iterable

from src.core.orders.models import CartItem, Order, OrderItem


def format_items_summary(items: Iterable[CartItem | OrderItem]) -> str:
    """Format cart or order lines, one per line, without trailing separators."""
    text = ""
    for item in items:
        text += f"• {item.sku} × {item.quantity}\n"
    return text.rstrip("\n")


def format_cart(items: list[CartItem]) -> str:
    """Format the cart shown from the main menu."""
    total = sum(item.quantity for item in items)
    return (
        "🛒 *Your cart*\n\n"
        f"{format_items_summary(items)}\n\n"
        f"*Total items:* {total}"
    )


def format_order_confirmation(order: Order) -> str:
    """Format the confirmation sent right after checkout."""
    lines = [
        "✅ *Order placed!*",
        "",
        f"*Order ID:* {order.order_id}",
        f"*Name:* {order.customer_name}",
        f"*Ship to:* {order.address}",
        "",
        "*Items:*",
        format_items_summary(order.items) or "(no items)",
        "",
        "Keep your order ID to track it from the menu.",
    ]
    return "\n".join(lines)


def format_order_status(order: Order) -> str:
    """Format order status for tracking."""
    lines = [
        f"📦 *Order {order.order_id}*",
        f"*Status:* {order.status_label}",
        f"*Placed:* {order.created_at.strftime('%d.%m.%Y %H:%M')}",
    ]
    if order.items:
        lines.append("")
        lines.append(format_items_summary(order.items))
    return "\n".join(lines)
