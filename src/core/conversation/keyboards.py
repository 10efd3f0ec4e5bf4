"""
Buttons and lists sent by the conversation engine.
"""

from src.core.conversation.catalog import CATEGORIES, CATEGORY_BUTTON_PREFIX, MAIN_MENU
from src.integrations.whatsapp.base import Button, ListRow

CHECKOUT_BUTTON_ID = "checkout"
MENU_BUTTON_ID = "menu"


def get_main_menu_rows() -> list[ListRow]:
    """Rows of the main menu list."""
    return [
        ListRow(id=option.id, title=option.title, description=option.description)
        for option in MAIN_MENU
    ]


def get_category_buttons() -> list[Button]:
    """One button per category."""
    return [
        Button(id=f"{CATEGORY_BUTTON_PREFIX}{category.key}", title=category.title)
        for category in CATEGORIES
    ]


def get_cart_buttons() -> list[Button]:
    """Buttons under the cart summary."""
    return [
        Button(id=CHECKOUT_BUTTON_ID, title="✅ Checkout"),
        Button(id=MENU_BUTTON_ID, title="🛍️ Continue shopping"),
    ]


def get_order_added_buttons() -> list[Button]:
    """Buttons after a catalog order is added to the cart."""
    return [
        Button(id=CHECKOUT_BUTTON_ID, title="✅ Checkout"),
        Button(id=MENU_BUTTON_ID, title="📋 Main menu"),
    ]
