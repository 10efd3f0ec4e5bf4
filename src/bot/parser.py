"""
WhatsApp webhook envelope parsing.

Turns the Graph API ``whatsapp_business_account`` payload into normalized
``InboundEvent`` objects, one per change record that carries a message.
"""

import logging
from typing import Any, Optional

from src.config import settings
from src.core.conversation.catalog import CATEGORY_BUTTON_PREFIX
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

logger = logging.getLogger(__name__)


def parse_webhook(payload: dict[str, Any], admin_command: Optional[str] = None) -> list[InboundEvent]:
    """
    Extract inbound events from a webhook delivery.

    Only the first message of each change record is used. Change records
    without messages (delivery/read statuses) are skipped, and a malformed
    message is skipped without affecting the other records.

    Args:
        payload: Decoded JSON body of the POST request
        admin_command: Text prefix treated as operator override

    Returns:
        Events in envelope order
    """
    events: list[InboundEvent] = []

    for entry in payload.get("entry") or []:
        if not isinstance(entry, dict):
            continue
        for change in entry.get("changes") or []:
            if not isinstance(change, dict):
                continue
            value = change.get("value") or {}
            messages = value.get("messages") or []
            if not messages or not isinstance(messages[0], dict):
                continue

            try:
                event = parse_message(messages[0], admin_command)
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning(f"Malformed message {messages[0].get('id')} skipped: {e}")
                continue
            if event is not None:
                events.append(event)

    return events


def parse_message(message: dict[str, Any], admin_command: Optional[str] = None) -> Optional[InboundEvent]:
    """Normalize one Graph API message record."""
    sender = message.get("from")
    if not sender:
        logger.warning(f"Message without sender skipped: {message.get('id')}")
        return None

    return InboundEvent(
        sender=str(sender),
        message=_parse_body(message, admin_command or settings.admin_resume_command),
        message_id=message.get("id"),
    )


def _parse_body(message: dict[str, Any], admin_command: str) -> InboundMessage:
    kind = message.get("type", "unknown")

    if kind == "text":
        body = (message.get("text") or {}).get("body") or ""
        if admin_command and body.strip().startswith(admin_command):
            return AdminOverride(body=body)
        return TextMessage(body=body)

    if kind == "interactive":
        interactive = message.get("interactive") or {}
        reply_type = interactive.get("type")
        if reply_type == "list_reply":
            return ListSelection(option_id=(interactive.get("list_reply") or {}).get("id", ""))
        if reply_type == "button_reply":
            return _parse_button((interactive.get("button_reply") or {}).get("id", ""))
        return UnsupportedMessage(kind=f"interactive:{reply_type}")

    if kind == "button":
        # Quick-reply button on a template message
        return _parse_button((message.get("button") or {}).get("payload", ""))

    if kind == "order":
        return _parse_order(message.get("order") or {})

    return UnsupportedMessage(kind=kind)


def _parse_button(button_id: str) -> InboundMessage:
    if button_id.startswith(CATEGORY_BUTTON_PREFIX):
        return CategorySelection(category=button_id[len(CATEGORY_BUTTON_PREFIX):])
    return ButtonSelection(button_id=button_id)


def _parse_order(order: dict[str, Any]) -> ProductOrder:
    lines = []
    for item in order.get("product_items") or []:
        sku = item.get("product_retailer_id")
        try:
            quantity = int(item.get("quantity", 0))
        except (TypeError, ValueError):
            logger.warning(f"Bad quantity for {sku}: {item.get('quantity')!r}")
            continue
        if not sku:
            continue
        lines.append(ProductLine(sku=str(sku), quantity=quantity))
    return ProductOrder(items=tuple(lines))
