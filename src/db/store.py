"""
SQL implementation of the store on top of async SQLAlchemy.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.core.conversation.states import ConversationState
from src.core.errors import StoreError
from src.core.orders.ids import generate_order_id
from src.core.orders.models import CartItem, Order, OrderItem, OrderStatus, Profile
from src.db.base import BaseStore
from src.db.models import CartLine, Customer, OrderRecord
from src.db.sqlite import Database

logger = logging.getLogger(__name__)

PROFILE_FIELDS = {"name", "address"}
ORDER_ID_ATTEMPTS = 5


def _to_profile(row: Customer) -> Profile:
    return Profile(
        phone_id=row.phone_id,
        name=row.name,
        address=row.address,
        state=ConversationState.parse(row.state),
        created_at=row.created_at,
    )


def _to_order(row: OrderRecord) -> Order:
    try:
        status = OrderStatus(row.status)
    except ValueError:
        # Fulfillment may write statuses the bot doesn't know; show them as-is
        logger.warning(f"Order {row.order_id} has unknown status {row.status!r}")
        status = row.status or OrderStatus.PROCESSING.value

    return Order(
        order_id=row.order_id,
        phone_id=row.phone_id,
        customer_name=row.customer_name,
        address=row.address,
        items=tuple(OrderItem.from_dict(item) for item in row.items or []),
        status=status,
        created_at=row.created_at,
    )


class SqlStore(BaseStore):
    """Store backed by a relational database."""

    def __init__(self, database: Database):
        self.db = database

    async def _get_customer(self, session, phone_id: str) -> Optional[Customer]:
        result = await session.execute(
            select(Customer).where(Customer.phone_id == phone_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create_profile(self, phone_id: str) -> Profile:
        try:
            async with self.db.session() as session:
                customer = await self._get_customer(session, phone_id)
                if customer is None:
                    customer = Customer(phone_id=phone_id, state=ConversationState.DEFAULT.value)
                    session.add(customer)
                    await session.flush()
                    logger.info(f"Created profile for {phone_id}")
                elif customer.state is None:
                    customer.state = ConversationState.DEFAULT.value
                return _to_profile(customer)
        except IntegrityError:
            # Concurrent first contact from the same handle
            async with self.db.session() as session:
                customer = await self._get_customer(session, phone_id)
                if customer is None:
                    raise StoreError(f"Profile for {phone_id} vanished after insert race")
                return _to_profile(customer)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load profile {phone_id}: {e}") from e

    async def set_state(self, phone_id: str, state: ConversationState) -> None:
        await self._update_customer(phone_id, {"state": ConversationState(state).value})

    async def update_fields(self, phone_id: str, **fields) -> None:
        unknown = set(fields) - PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")
        await self._update_customer(phone_id, fields)

    async def _update_customer(self, phone_id: str, values: dict) -> None:
        try:
            async with self.db.session() as session:
                customer = await self._get_customer(session, phone_id)
                if customer is None:
                    customer = Customer(phone_id=phone_id, state=ConversationState.DEFAULT.value)
                    session.add(customer)
                for key, value in values.items():
                    setattr(customer, key, value)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update profile {phone_id}: {e}") from e

    async def add_cart_item(self, phone_id: str, sku: str, quantity: int) -> CartItem:
        if quantity <= 0:
            raise ValueError(f"Quantity must be positive, got {quantity}")
        try:
            async with self.db.session() as session:
                result = await session.execute(
                    select(CartLine).where(CartLine.phone_id == phone_id, CartLine.sku == sku)
                )
                line = result.scalar_one_or_none()
                if line is None:
                    line = CartLine(phone_id=phone_id, sku=sku, quantity=quantity)
                    session.add(line)
                else:
                    line.quantity += quantity
                await session.flush()
                return CartItem(sku=line.sku, quantity=line.quantity, added_at=line.added_at)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to add {sku} to cart of {phone_id}: {e}") from e

    async def list_cart(self, phone_id: str) -> list[CartItem]:
        try:
            async with self.db.session() as session:
                result = await session.execute(
                    select(CartLine)
                    .where(CartLine.phone_id == phone_id)
                    .order_by(CartLine.added_at, CartLine.id)
                )
                return [
                    CartItem(sku=line.sku, quantity=line.quantity, added_at=line.added_at)
                    for line in result.scalars()
                ]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read cart of {phone_id}: {e}") from e

    async def clear_cart(self, phone_id: str) -> None:
        try:
            async with self.db.session() as session:
                await session.execute(delete(CartLine).where(CartLine.phone_id == phone_id))
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to clear cart of {phone_id}: {e}") from e

    async def create_order(
        self,
        phone_id: str,
        name: str,
        address: str,
        items: list[OrderItem],
    ) -> str:
        snapshot = [OrderItem(sku=item.sku, quantity=item.quantity).to_dict() for item in items]

        for attempt in range(1, ORDER_ID_ATTEMPTS + 1):
            order_id = generate_order_id()
            try:
                async with self.db.session() as session:
                    session.add(OrderRecord(
                        order_id=order_id,
                        phone_id=phone_id,
                        customer_name=name,
                        address=address,
                        items=snapshot,
                        status=OrderStatus.PROCESSING.value,
                        created_at=datetime.utcnow(),
                    ))
                logger.info(f"Order {order_id} created for {phone_id} ({len(snapshot)} lines)")
                return order_id
            except IntegrityError:
                logger.warning(f"Order ID collision on {order_id} (attempt {attempt})")
            except SQLAlchemyError as e:
                raise StoreError(f"Failed to create order for {phone_id}: {e}") from e

        raise StoreError(f"Could not allocate a unique order ID for {phone_id}")

    async def get_order(self, order_id: str) -> Optional[Order]:
        try:
            async with self.db.session() as session:
                result = await session.execute(
                    select(OrderRecord).where(OrderRecord.order_id == order_id)
                )
                row = result.scalar_one_or_none()
                return _to_order(row) if row else None
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to look up order {order_id}: {e}") from e

    async def update_order_status(self, order_id: str, status: OrderStatus) -> bool:
        try:
            async with self.db.session() as session:
                result = await session.execute(
                    select(OrderRecord).where(OrderRecord.order_id == order_id)
                )
                row = result.scalar_one_or_none()
                if row is None:
                    return False
                row.status = OrderStatus(status).value
                return True
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update order {order_id}: {e}") from e
