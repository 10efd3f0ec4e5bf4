"""
Static catalog: main menu options and product categories.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MenuOption:
    id: str
    title: str
    description: str
    implemented: bool = True


MAIN_MENU: tuple[MenuOption, ...] = (
    MenuOption("browse_categories", "🛍️ Shop by category", "Browse our product categories"),
    MenuOption("view_cart", "🛒 View cart", "See what you've added so far"),
    MenuOption("track_order", "📦 Track order", "Check the status of an order"),
    MenuOption("special_offers", "🏷️ Special offers", "Deals of the week", implemented=False),
    MenuOption("store_info", "🏪 Store info", "Opening hours and contacts", implemented=False),
    MenuOption("talk_to_agent", "🙋 Talk to an agent", "Chat with a human"),
)

MENU_OPTIONS: dict[str, MenuOption] = {option.id: option for option in MAIN_MENU}


@dataclass(frozen=True)
class Category:
    key: str
    title: str
    skus: tuple[str, ...] = ()

    @property
    def available(self) -> bool:
        return bool(self.skus)


# Retailer IDs as configured in the WhatsApp commerce catalog
GROCERY_SKUS: tuple[str, ...] = (
    "GRC-RICE-5KG",
    "GRC-ATTA-10KG",
    "GRC-OIL-1L",
    "GRC-SUGAR-1KG",
    "GRC-TEA-250G",
)

CATEGORIES: tuple[Category, ...] = (
    Category("groceries", "Groceries", GROCERY_SKUS),
    Category("electronics", "Electronics"),
    Category("fashion", "Fashion"),
)

CATEGORY_BY_KEY: dict[str, Category] = {category.key: category for category in CATEGORIES}

CATEGORY_BUTTON_PREFIX = "category_selector_"

# Classifier labels that mean "show me products"
BROWSE_INTENTS = frozenset({"browse_category", "browse_products", "shop_category"})
CATEGORY_ENTITY = "category:category"


def find_category(name: str) -> Category | None:
    """Resolve a category key or display name, case-insensitively."""
    key = name.strip().lower()
    if key in CATEGORY_BY_KEY:
        return CATEGORY_BY_KEY[key]
    for category in CATEGORIES:
        if category.title.lower() == key:
            return category
    return None
