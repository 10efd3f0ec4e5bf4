"""
Outbound WhatsApp messaging.
"""

from src.integrations.whatsapp.base import BaseMessenger, Button, ListRow, TemplateArgs
from src.integrations.whatsapp.client import WhatsAppMessenger

__all__ = [
    "BaseMessenger",
    "Button",
    "ListRow",
    "TemplateArgs",
    "WhatsAppMessenger",
]
