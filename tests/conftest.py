"""
Shared fixtures: in-memory store, recording messenger, stub classifier.
"""

from typing import Optional

import pytest

from src.core.conversation.engine import ConversationEngine
from src.core.conversation.states import ConversationState
from src.core.errors import StoreError
from src.core.orders import CartItem, Order, OrderItem, OrderStatus, Profile, generate_order_id
from src.db.base import BaseStore
from src.integrations.nlp.base import BaseIntentClassifier, IntentResult
from src.integrations.whatsapp.base import (
    BaseMessenger,
    Button,
    ListRow,
    TemplateArgs,
    validate_buttons,
    validate_rows,
    validate_skus,
)


class InMemoryStore(BaseStore):
    """Dict-backed store. Names in ``failing`` raise StoreError."""

    def __init__(self) -> None:
        self.profiles: dict[str, Profile] = {}
        self.carts: dict[str, dict[str, CartItem]] = {}
        self.orders: dict[str, Order] = {}
        self.failing: set[str] = set()

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise StoreError(f"{operation} failed")

    async def get_or_create_profile(self, phone_id: str) -> Profile:
        self._check("get_or_create_profile")
        profile = self.profiles.setdefault(phone_id, Profile(phone_id=phone_id))
        return Profile(
            phone_id=profile.phone_id,
            name=profile.name,
            address=profile.address,
            state=profile.state,
            created_at=profile.created_at,
        )

    async def set_state(self, phone_id: str, state: ConversationState) -> None:
        self._check("set_state")
        self.profiles.setdefault(phone_id, Profile(phone_id=phone_id)).state = state

    async def update_fields(self, phone_id: str, **fields) -> None:
        self._check("update_fields")
        profile = self.profiles.setdefault(phone_id, Profile(phone_id=phone_id))
        for key, value in fields.items():
            setattr(profile, key, value)

    async def add_cart_item(self, phone_id: str, sku: str, quantity: int) -> CartItem:
        self._check("add_cart_item")
        cart = self.carts.setdefault(phone_id, {})
        if sku in cart:
            cart[sku].quantity += quantity
        else:
            cart[sku] = CartItem(sku=sku, quantity=quantity)
        return CartItem(sku=sku, quantity=cart[sku].quantity)

    async def list_cart(self, phone_id: str) -> list[CartItem]:
        self._check("list_cart")
        return [
            CartItem(sku=item.sku, quantity=item.quantity, added_at=item.added_at)
            for item in self.carts.get(phone_id, {}).values()
        ]

    async def clear_cart(self, phone_id: str) -> None:
        self._check("clear_cart")
        self.carts.pop(phone_id, None)

    async def create_order(self, phone_id: str, name: str, address: str, items: list[OrderItem]) -> str:
        self._check("create_order")
        order_id = generate_order_id()
        while order_id in self.orders:
            order_id = generate_order_id()
        self.orders[order_id] = Order(
            order_id=order_id,
            phone_id=phone_id,
            customer_name=name,
            address=address,
            items=tuple(OrderItem(sku=item.sku, quantity=item.quantity) for item in items),
        )
        return order_id

    async def get_order(self, order_id: str) -> Optional[Order]:
        self._check("get_order")
        return self.orders.get(order_id)

    async def update_order_status(self, order_id: str, status: OrderStatus) -> bool:
        self._check("update_order_status")
        if order_id not in self.orders:
            return False
        self.orders[order_id].status = status
        return True


class RecordingMessenger(BaseMessenger):
    """Records sends as (kind, to, payload) and validates like the real client."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, dict]] = []

    async def send_text(self, to: str, body: str) -> bool:
        self.sent.append(("text", to, {"body": body}))
        return True

    async def send_buttons(self, to: str, body: str, buttons: list[Button]) -> bool:
        validate_buttons(buttons)
        self.sent.append(("buttons", to, {"body": body, "buttons": [b.id for b in buttons]}))
        return True

    async def send_list(
        self,
        to: str,
        body: str,
        button_text: str,
        rows: list[ListRow],
        section_title: str | None = None,
    ) -> bool:
        validate_rows(rows)
        self.sent.append(("list", to, {"body": body, "rows": [row.id for row in rows]}))
        return True

    async def send_product_list(self, to: str, header: str, body: str, skus: list[str]) -> bool:
        validate_skus(skus)
        self.sent.append(("product_list", to, {"header": header, "skus": list(skus)}))
        return True

    async def send_template(self, to: str, template: TemplateArgs) -> bool:
        self.sent.append(("template", to, {
            "name": template.name,
            "parameters": list(template.body_parameters),
        }))
        return True

    def kinds(self) -> list[str]:
        return [kind for kind, _, _ in self.sent]

    def texts(self) -> list[str]:
        return [payload["body"] for kind, _, payload in self.sent if kind == "text"]

    def clear(self) -> None:
        self.sent.clear()


class StubClassifier(BaseIntentClassifier):
    """Returns a fixed result; optionally raises."""

    def __init__(self, result: Optional[IntentResult] = None, error: Optional[Exception] = None):
        self.result = result or IntentResult()
        self.error = error
        self.calls: list[str] = []

    async def classify(self, text: str) -> IntentResult:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.result

    @property
    def name(self) -> str:
        return "stub"


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def messenger() -> RecordingMessenger:
    return RecordingMessenger()


@pytest.fixture
def classifier() -> StubClassifier:
    return StubClassifier()


@pytest.fixture
def engine(store, messenger, classifier) -> ConversationEngine:
    return ConversationEngine(
        store=store,
        messenger=messenger,
        classifier=classifier,
        template_name="order_confirmation",
        template_language="en_US",
    )
