"""
Conversation engine.

Given a customer's persisted state and one inbound message, decides the next
state and performs the side effects (cart/order mutations, outbound
messages). One call to ``handle`` is one turn: exactly one state transition,
any number of sends.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from src.config import settings
from src.core.conversation import keyboards, texts
from src.core.conversation.catalog import (
    BROWSE_INTENTS,
    CATEGORY_ENTITY,
    MENU_OPTIONS,
    find_category,
)
from src.core.conversation.locks import HandleLocks
from src.core.conversation.messages import (
    AdminOverride,
    ButtonSelection,
    CategorySelection,
    InboundEvent,
    InboundMessage,
    ListSelection,
    ProductOrder,
    TextMessage,
    UnsupportedMessage,
)
from src.core.conversation.states import ConversationState
from src.core.errors import StoreError, ValidationError
from src.core.orders import (
    Order,
    OrderItem,
    Profile,
    format_cart,
    format_order_confirmation,
    format_order_status,
    normalize_order_id,
)
from src.db.base import BaseStore
from src.integrations.nlp.base import BaseIntentClassifier, IntentResult
from src.integrations.whatsapp.base import BaseMessenger, TemplateArgs

logger = logging.getLogger(__name__)

GREETING_KEYWORDS = frozenset({"hi", "hello", "menu"})
TRACKING_EXIT_KEYWORDS = frozenset({"menu", "hi", "cancel"})
STATE_WRITE_ATTEMPTS = 2


class ConversationEngine:
    """State machine driving one customer conversation per handle."""

    def __init__(
        self,
        store: BaseStore,
        messenger: BaseMessenger,
        classifier: BaseIntentClassifier,
        locks: Optional[HandleLocks] = None,
        template_name: Optional[str] = None,
        template_language: Optional[str] = None,
    ):
        self.store = store
        self.messenger = messenger
        self.classifier = classifier
        self.locks = locks or HandleLocks()
        self.template_name = template_name or settings.order_confirmation_template
        self.template_language = template_language or settings.template_language

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    async def handle(self, event: InboundEvent) -> Optional[ConversationState]:
        """
        Process one inbound event.

        Turns for the same sender are serialized; turns for different
        senders run independently.

        Returns:
            State after the turn, or None if the profile could not be loaded
        """
        async with self.locks.hold(event.sender):
            return await self._run_turn(event)

    async def _run_turn(self, event: InboundEvent) -> Optional[ConversationState]:
        to = event.sender

        try:
            profile = await self.store.get_or_create_profile(to)
        except StoreError as e:
            logger.error(f"Cannot load profile for {to}: {e}")
            await self._send(self.messenger.send_text, to, texts.ERROR)
            return None

        current = profile.state
        logger.info(f"{to} [{current.value}] <- {type(event.message).__name__}")

        try:
            next_state = await self._dispatch(profile, event.message)
        except StoreError as e:
            logger.warning(f"Store failure for {to} in state {current.value}, keeping state: {e}")
            await self._send(self.messenger.send_text, to, texts.ERROR)
            return current

        if next_state != current and not await self._persist_state(to, next_state):
            return current

        logger.debug(f"{to}: {current.value} -> {next_state.value}")
        return next_state

    async def _persist_state(self, to: str, state: ConversationState) -> bool:
        for attempt in range(1, STATE_WRITE_ATTEMPTS + 1):
            try:
                await self.store.set_state(to, state)
                return True
            except StoreError as e:
                logger.error(
                    f"Failed to persist state {state.value} for {to} "
                    f"(attempt {attempt}/{STATE_WRITE_ATTEMPTS}): {e}"
                )
        return False

    async def _dispatch(self, profile: Profile, message: InboundMessage) -> ConversationState:
        state = profile.state
        to = profile.phone_id

        if isinstance(message, AdminOverride):
            await self._send(self.messenger.send_text, to, texts.RESUMED)
            return ConversationState.DEFAULT

        if state == ConversationState.AWAITING_AGENT:
            # A human is handling this chat
            logger.info(f"{to} is waiting for an agent, message left for the team")
            return state

        if isinstance(message, TextMessage):
            return await self._handle_text(profile, message.body)

        if isinstance(message, ListSelection):
            return await self._handle_menu_option(to, state, message.option_id)

        if isinstance(message, CategorySelection):
            await self._handle_category(to, message.category)
            return state

        if isinstance(message, ButtonSelection):
            return await self._handle_button(to, state, message.button_id)

        if isinstance(message, ProductOrder):
            await self._handle_product_order(to, message)
            return state

        if isinstance(message, UnsupportedMessage):
            logger.info(f"Unsupported {message.kind} message from {to}")
        await self._send(self.messenger.send_text, to, texts.FALLBACK)
        return state

    # =========================================================================
    # FREE TEXT
    # =========================================================================

    async def _handle_text(self, profile: Profile, body: str) -> ConversationState:
        state = profile.state
        to = profile.phone_id

        if state == ConversationState.AWAITING_NAME:
            return await self._handle_name(to, body)

        if state == ConversationState.AWAITING_ADDRESS:
            return await self._complete_checkout(profile, body)

        if state == ConversationState.AWAITING_ORDER_ID:
            return await self._handle_order_lookup(to, body)

        if body.strip().lower() in GREETING_KEYWORDS:
            await self._send_main_menu(to)
            return state

        await self._handle_free_text(to, body)
        return state

    async def _handle_free_text(self, to: str, body: str) -> None:
        """Route unrecognized text through the intent classifier."""
        try:
            result = await self.classifier.classify(body)
        except Exception as e:
            logger.error(f"Intent classifier failed: {e}", exc_info=True)
            result = IntentResult()

        category = result.first_value(CATEGORY_ENTITY)
        if category:
            await self._handle_category(to, category)
        elif result.intent in BROWSE_INTENTS:
            await self._send_category_selector(to)
        else:
            logger.debug(f"No actionable intent for {to}: {result.intent!r}")
            await self._send(self.messenger.send_text, to, texts.FALLBACK)

    # =========================================================================
    # CHECKOUT
    # =========================================================================

    async def _handle_name(self, to: str, body: str) -> ConversationState:
        name = body.strip()
        if not name:
            await self._send(self.messenger.send_text, to, texts.ASK_NAME)
            return ConversationState.AWAITING_NAME

        await self.store.update_fields(to, name=name)
        await self._send(self.messenger.send_text, to, texts.ASK_ADDRESS.format(name=name))
        return ConversationState.AWAITING_ADDRESS

    async def _complete_checkout(self, profile: Profile, body: str) -> ConversationState:
        to = profile.phone_id
        address = body.strip()
        name = profile.name or ""

        cart = await self.store.list_cart(to)
        items = [OrderItem(sku=item.sku, quantity=item.quantity) for item in cart]
        order_id = await self.store.create_order(to, name, address, items)

        # The order exists from here on; later store failures must not undo the turn
        try:
            await self.store.clear_cart(to)
        except StoreError as e:
            logger.error(f"Order {order_id} placed but cart of {to} not cleared: {e}")
        try:
            await self.store.update_fields(to, address=address)
        except StoreError as e:
            logger.error(f"Order {order_id} placed but address of {to} not saved: {e}")

        order = Order(
            order_id=order_id,
            phone_id=to,
            customer_name=name,
            address=address,
            items=tuple(items),
        )
        await self._send(self.messenger.send_text, to, format_order_confirmation(order))
        await self._send(
            self.messenger.send_template,
            to,
            TemplateArgs(
                name=self.template_name,
                language=self.template_language,
                body_parameters=[name or "there", order_id],
            ),
        )
        logger.info(f"Checkout complete for {to}: {order_id}")
        return ConversationState.DEFAULT

    # =========================================================================
    # ORDER TRACKING
    # =========================================================================

    async def _handle_order_lookup(self, to: str, body: str) -> ConversationState:
        if body.strip().lower() in TRACKING_EXIT_KEYWORDS:
            await self._send_main_menu(to)
            return ConversationState.DEFAULT

        order_id = normalize_order_id(body)
        order = await self.store.get_order(order_id)
        if order is None:
            await self._send(
                self.messenger.send_text, to, texts.ORDER_NOT_FOUND.format(order_id=order_id)
            )
            return ConversationState.AWAITING_ORDER_ID

        await self._send(self.messenger.send_text, to, format_order_status(order))
        await self._send_main_menu(to)
        return ConversationState.DEFAULT

    # =========================================================================
    # MENUS, BUTTONS, CATALOG
    # =========================================================================

    async def _handle_menu_option(
        self, to: str, state: ConversationState, option_id: str
    ) -> ConversationState:
        if option_id == "browse_categories":
            await self._send_category_selector(to)
            return state

        if option_id == "view_cart":
            cart = await self.store.list_cart(to)
            if not cart:
                await self._send(self.messenger.send_text, to, texts.CART_EMPTY)
            else:
                await self._send(
                    self.messenger.send_buttons, to, format_cart(cart), keyboards.get_cart_buttons()
                )
            return state

        if option_id == "track_order":
            await self._send(self.messenger.send_text, to, texts.ASK_ORDER_ID)
            return ConversationState.AWAITING_ORDER_ID

        if option_id == "talk_to_agent":
            await self._send(self.messenger.send_text, to, texts.AGENT_HANDOFF)
            return ConversationState.AWAITING_AGENT

        option = MENU_OPTIONS.get(option_id)
        if option is not None:
            await self._send(
                self.messenger.send_text, to, texts.COMING_SOON.format(title=option.title)
            )
        else:
            logger.warning(f"Unknown menu option {option_id!r} from {to}")
            await self._send(
                self.messenger.send_text, to, texts.UNKNOWN_OPTION.format(option=option_id)
            )
        return state

    async def _handle_button(
        self, to: str, state: ConversationState, button_id: str
    ) -> ConversationState:
        if button_id == keyboards.CHECKOUT_BUTTON_ID:
            await self._send(self.messenger.send_text, to, texts.ASK_NAME)
            return ConversationState.AWAITING_NAME

        if button_id == keyboards.MENU_BUTTON_ID:
            await self._send_main_menu(to)
            return state

        logger.warning(f"Unknown button {button_id!r} from {to}")
        await self._send(self.messenger.send_text, to, texts.FALLBACK)
        return state

    async def _handle_category(self, to: str, name: str) -> None:
        category = find_category(name)
        if category is None:
            logger.warning(f"Catalog gap: {to} asked for unknown category {name!r}")
            title = name.strip()
        elif not category.available:
            title = category.title
        else:
            sent = await self._send(
                self.messenger.send_product_list,
                to,
                category.title,
                texts.PRODUCT_LIST_BODY,
                list(category.skus),
            )
            if sent:
                return
            title = category.title

        await self._send(
            self.messenger.send_buttons,
            to,
            texts.CATEGORY_UNAVAILABLE.format(category=title),
            keyboards.get_category_buttons(),
        )

    async def _handle_product_order(self, to: str, message: ProductOrder) -> None:
        added = 0
        for line in message.items:
            if line.quantity <= 0:
                logger.warning(f"Skipping {line.sku} with quantity {line.quantity} from {to}")
                continue
            await self.store.add_cart_item(to, line.sku, line.quantity)
            added += line.quantity

        await self._send(
            self.messenger.send_buttons,
            to,
            texts.CART_ACK.format(count=added),
            keyboards.get_order_added_buttons(),
        )

    # =========================================================================
    # SENDING
    # =========================================================================

    async def _send_main_menu(self, to: str) -> None:
        await self._send(
            self.messenger.send_list,
            to,
            texts.MAIN_MENU_BODY,
            texts.MAIN_MENU_BUTTON,
            keyboards.get_main_menu_rows(),
            texts.MAIN_MENU_SECTION,
        )

    async def _send_category_selector(self, to: str) -> None:
        await self._send(
            self.messenger.send_buttons, to, texts.CATEGORY_PROMPT, keyboards.get_category_buttons()
        )

    async def _send(self, method: Callable[..., Awaitable[bool]], *args: Any) -> bool:
        """Call a messenger method; a rejected payload is logged and skipped."""
        try:
            return await method(*args)
        except ValidationError as e:
            logger.error(f"Outbound {method.__name__} rejected: {e}")
            return False
