"""Webhook envelope parsing tests."""

from src.bot.parser import parse_message, parse_webhook
from src.core.conversation.messages import (
    AdminOverride,
    ButtonSelection,
    CategorySelection,
    ListSelection,
    ProductLine,
    ProductOrder,
    TextMessage,
    UnsupportedMessage,
)


def envelope(*messages, statuses=False) -> dict:
    changes = []
    for message in messages:
        changes.append({"field": "messages", "value": {"messaging_product": "whatsapp", "messages": [message]}})
    if statuses:
        changes.append({"field": "messages", "value": {"statuses": [{"id": "wamid.1", "status": "read"}]}})
    return {
        "object": "whatsapp_business_account",
        "entry": [{"id": "WABA_ID", "changes": changes}],
    }


def text_message(body: str, sender: str = "15550001111") -> dict:
    return {"from": sender, "id": "wamid.x", "type": "text", "text": {"body": body}}


class TestParseMessage:
    def test_text(self) -> None:
        event = parse_message(text_message("Hello there"))
        assert event.sender == "15550001111"
        assert event.message == TextMessage(body="Hello there")
        assert event.message_id == "wamid.x"

    def test_admin_override(self) -> None:
        event = parse_message(text_message("!resume please"), admin_command="!resume")
        assert isinstance(event.message, AdminOverride)

    def test_admin_command_must_be_prefix(self) -> None:
        event = parse_message(text_message("please !resume"), admin_command="!resume")
        assert isinstance(event.message, TextMessage)

    def test_list_reply(self) -> None:
        event = parse_message({
            "from": "1",
            "type": "interactive",
            "interactive": {"type": "list_reply", "list_reply": {"id": "view_cart", "title": "View cart"}},
        })
        assert event.message == ListSelection(option_id="view_cart")

    def test_button_reply(self) -> None:
        event = parse_message({
            "from": "1",
            "type": "interactive",
            "interactive": {"type": "button_reply", "button_reply": {"id": "checkout", "title": "Checkout"}},
        })
        assert event.message == ButtonSelection(button_id="checkout")

    def test_category_button(self) -> None:
        event = parse_message({
            "from": "1",
            "type": "interactive",
            "interactive": {"type": "button_reply", "button_reply": {"id": "category_selector_groceries"}},
        })
        assert event.message == CategorySelection(category="groceries")

    def test_template_quick_reply(self) -> None:
        event = parse_message({"from": "1", "type": "button", "button": {"payload": "menu", "text": "Menu"}})
        assert event.message == ButtonSelection(button_id="menu")

    def test_order(self) -> None:
        event = parse_message({
            "from": "1",
            "type": "order",
            "order": {
                "catalog_id": "123",
                "product_items": [
                    {"product_retailer_id": "GRC-RICE-5KG", "quantity": 2, "item_price": 12.5, "currency": "USD"},
                    {"product_retailer_id": "GRC-OIL-1L", "quantity": "3"},
                    {"product_retailer_id": "GRC-TEA-250G", "quantity": "lots"},
                ],
            },
        })
        assert event.message == ProductOrder(items=(
            ProductLine("GRC-RICE-5KG", 2),
            ProductLine("GRC-OIL-1L", 3),
        ))

    def test_unsupported(self) -> None:
        event = parse_message({"from": "1", "type": "image", "image": {"id": "media"}})
        assert event.message == UnsupportedMessage(kind="image")

    def test_missing_sender(self) -> None:
        assert parse_message({"type": "text", "text": {"body": "hi"}}) is None


class TestParseWebhook:
    def test_one_event_per_change(self) -> None:
        events = parse_webhook(envelope(text_message("a", "1"), text_message("b", "2")))
        assert [(e.sender, e.message.body) for e in events] == [("1", "a"), ("2", "b")]

    def test_only_first_message_of_a_change(self) -> None:
        payload = envelope(text_message("first"))
        payload["entry"][0]["changes"][0]["value"]["messages"].append(text_message("second"))

        events = parse_webhook(payload)

        assert len(events) == 1
        assert events[0].message.body == "first"

    def test_status_updates_are_ignored(self) -> None:
        assert parse_webhook(envelope(statuses=True)) == []

    def test_malformed_entries_are_skipped(self) -> None:
        payload = {"object": "whatsapp_business_account", "entry": ["junk", {"changes": [None, {}]}]}
        assert parse_webhook(payload) == []

    def test_malformed_message_does_not_drop_its_neighbours(self) -> None:
        broken = {"from": "2", "id": "wamid.bad", "type": "text", "text": "oops"}

        events = parse_webhook(envelope(text_message("hi", "1"), broken, text_message("menu", "3")))

        assert [(e.sender, e.message.body) for e in events] == [("1", "hi"), ("3", "menu")]
