"""
SQLAlchemy models for the commerce bot.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


# =============================================================================
# CUSTOMER
# =============================================================================


class Customer(Base):
    """Customer profile, one per WhatsApp ID."""

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    phone_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Conversation state; NULL rows are backfilled to "default" on read
    state: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, default="default")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, phone_id='{self.phone_id}', state='{self.state}')>"


# =============================================================================
# CART
# =============================================================================


class CartLine(Base):
    """Cart entry; quantities accumulate per (customer, SKU)."""

    __tablename__ = "cart_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    phone_id: Mapped[str] = mapped_column(String(64), nullable=False)
    sku: Mapped[str] = mapped_column(String(128), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    added_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("phone_id", "sku", name="uq_cart_phone_sku"),
        Index("ix_cart_items_phone", "phone_id"),
    )

    def __repr__(self) -> str:
        return f"<CartLine(phone_id='{self.phone_id}', sku='{self.sku}', qty={self.quantity})>"


# =============================================================================
# ORDERS
# =============================================================================


class OrderRecord(Base):
    """Placed order with an immutable snapshot of the cart."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    phone_id: Mapped[str] = mapped_column(String(64), nullable=False)

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # JSON list of {"sku", "quantity"}
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="Processing")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (Index("ix_orders_phone", "phone_id"),)

    def __repr__(self) -> str:
        return f"<OrderRecord(order_id='{self.order_id}', status='{self.status}')>"
