"""
Cart Models: Cart, CartItem.

A Cart and its items form one aggregate. ``Cart.total`` is always the
sum of its items' ``line_total``; the ``version`` column makes concurrent
writers to the same cart fail instead of overwriting each other.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    ForeignKey,
    Integer,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, BigIntPK, TimestampMixin
from .restaurant import Food


class Cart(TimestampMixin, Base):
    """One cart per customer, created at signup."""

    __tablename__ = "cart"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    customer_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    items: Mapped[list["CartItem"]] = relationship(
        cascade="all, delete-orphan", order_by="CartItem.id"
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint("total >= 0", name="ck_cart_total_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Cart(id={self.id}, customer_id={self.customer_id}, total={self.total}, items={len(self.items)})>"


class CartItem(Base):
    """
    A line in a cart.

    Lines are keyed by (food_id, customizations); ``customizations`` is
    stored sorted and de-duplicated so the key compares by value.
    """

    __tablename__ = "cart_item"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    cart_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("cart.id", ondelete="CASCADE"), nullable=False, index=True
    )
    food_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("food.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    customizations: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    unit_price: Mapped[int] = mapped_column(Integer, nullable=False)
    line_total: Mapped[int] = mapped_column(Integer, nullable=False)

    food: Mapped[Optional[Food]] = relationship()

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_cart_item_quantity"),
        CheckConstraint("unit_price >= 0", name="ck_cart_item_unit_price"),
    )

    @property
    def merge_key(self) -> tuple[int, tuple[str, ...]]:
        return (self.food_id, tuple(self.customizations or ()))

    def __repr__(self) -> str:
        return f"<CartItem(id={self.id}, cart_id={self.cart_id}, food_id={self.food_id}, qty={self.quantity})>"
