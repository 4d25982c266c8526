"""
Order Models: Order, OrderItem.

Orders are an append-only audit trail: they are never deleted and their
items are snapshots taken at checkout.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from food_shared.config.constants import OrderStatus

from .base import Base, BigIntPK, TimestampMixin, enum_column
from .restaurant import Restaurant
from .user import Address


class Order(TimestampMixin, Base):
    """
    A checked-out cart.

    ``total_amount`` equals the sum of the items' ``line_total`` and never
    changes afterwards. ``total_item_count`` is the number of lines.
    """

    __tablename__ = "food_order"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    customer_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("app_user.id"), nullable=False, index=True
    )
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    delivery_address_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("address.id")
    )
    status: Mapped[OrderStatus] = mapped_column(
        enum_column(OrderStatus), nullable=False, default=OrderStatus.PENDING, index=True
    )
    total_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    total_item_count: Mapped[int] = mapped_column(Integer, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    restaurant: Mapped[Restaurant] = relationship()
    delivery_address: Mapped[Optional[Address]] = relationship()
    items: Mapped[list["OrderItem"]] = relationship(
        cascade="all, delete-orphan", order_by="OrderItem.id"
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_order_restaurant_status", "restaurant_id", "status"),
        CheckConstraint("total_amount >= 0", name="ck_order_total_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, status='{self.status.value if self.status else None}', total={self.total_amount})>"


class OrderItem(Base):
    """Immutable snapshot of a cart line at checkout time."""

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("food_order.id"), nullable=False, index=True
    )
    food_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("food.id"), nullable=False, index=True
    )
    food_name: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[int] = mapped_column(Integer, nullable=False)
    customizations: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    line_total: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_item_quantity"),
        CheckConstraint("unit_price >= 0", name="ck_order_item_unit_price"),
    )

    def __repr__(self) -> str:
        return f"<OrderItem(id={self.id}, order_id={self.order_id}, food_id={self.food_id}, qty={self.quantity})>"
