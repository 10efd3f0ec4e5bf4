"""
Reply copy used by the conversation engine.
"""

MAIN_MENU_BODY = """👋 *Welcome to our store!*

Pick an option from the menu below, or just tell me what you're looking for."""

MAIN_MENU_BUTTON = "Open menu"
MAIN_MENU_SECTION = "Main menu"

CATEGORY_PROMPT = "🛍️ Which category would you like to browse?"

CATEGORY_UNAVAILABLE = (
    "😔 Sorry, *{category}* isn't available yet. "
    "Please pick another category:"
)

PRODUCT_LIST_BODY = "Tap a product to see details and add it to your cart."

CART_EMPTY = "🛒 Your cart is empty. Open the menu to start shopping!"

CART_ACK = "👍 Added {count} item(s) to your cart. Ready to check out?"

ASK_NAME = "📝 Great! What name should we put on the order?"
ASK_ADDRESS = "Thanks, {name}! 📍 What's the shipping address?"

ASK_ORDER_ID = (
    "📦 Please send your order ID (for example *ORD-123456*).\n"
    "Type *menu* to go back."
)
ORDER_NOT_FOUND = (
    "❌ I couldn't find an order with ID *{order_id}*. "
    "Please check it and try again, or type *menu* to go back."
)

AGENT_HANDOFF = (
    "🙋 A member of our team will reply here shortly. "
    "The bot is paused until they're done."
)

RESUMED = "🤖 The bot is back. Type *menu* to see the options."

COMING_SOON = "🚧 *{title}* is coming soon. Stay tuned!"
UNKNOWN_OPTION = "🤔 Sorry, I don't recognise the option \"{option}\". Type *menu* to see what I can do."

FALLBACK = "🤔 Sorry, I didn't understand that. Type *menu* to see what I can do."

ERROR = "😔 Something went wrong on our side. Please try again in a moment."
