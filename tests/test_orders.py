"""Order ID and formatting tests."""

import re

from src.core.conversation.states import ConversationState
from src.core.orders import (
    CartItem,
    Order,
    OrderItem,
    format_cart,
    format_items_summary,
    format_order_status,
    generate_order_id,
    normalize_order_id,
)


def test_generated_ids_have_prefix_and_numeric_suffix() -> None:
    for _ in range(50):
        assert re.fullmatch(r"ORD-\d{6}", generate_order_id("ord"))


def test_generated_ids_survive_normalization() -> None:
    order_id = generate_order_id()
    assert normalize_order_id(f"  {order_id.lower()}\n") == order_id


def test_items_summary_has_no_trailing_separator() -> None:
    summary = format_items_summary([CartItem("A", 1), CartItem("B", 2)])
    assert summary == "• A × 1\n• B × 2"
    assert format_items_summary([]) == ""


def test_cart_total() -> None:
    assert "*Total items:* 3" in format_cart([CartItem("A", 1), CartItem("B", 2)])


def test_order_status_text() -> None:
    order = Order("ORD-123456", "1", "Alice", "x", items=(OrderItem("A", 2),))
    text = format_order_status(order)
    assert "ORD-123456" in text
    assert "Processing" in text
    assert text.endswith("• A × 2")


def test_state_parse_backfills_default() -> None:
    assert ConversationState.parse(None) is ConversationState.DEFAULT
    assert ConversationState.parse("bogus") is ConversationState.DEFAULT
    assert ConversationState.parse("awaiting_name") is ConversationState.AWAITING_NAME
