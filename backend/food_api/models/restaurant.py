"""
Restaurant and Menu Models: Restaurant, Category, Food, IngredientCategory, IngredientItem.

Menu entities keep only the owning restaurant's id; there is no
collection on Restaurant pointing back at them.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from .base import Base, BigIntPK, SoftDeleteMixin, TimestampMixin
from .user import Address


food_ingredient = Table(
    "food_ingredient",
    Base.metadata,
    Column("food_id", BigInteger, ForeignKey("food.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "ingredient_id",
        BigInteger,
        ForeignKey("ingredient_item.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Restaurant(SoftDeleteMixin, TimestampMixin, Base):
    """
    A restaurant run by exactly one owner.

    ``owner_id`` is fixed at creation. New restaurants start closed.
    A deleted restaurant keeps its row and its owner binding.
    """

    __tablename__ = "restaurant"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    owner_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("app_user.id"), nullable=False, unique=True, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    cuisine_type: Mapped[Optional[str]] = mapped_column(Text, index=True)
    opening_hours: Mapped[Optional[str]] = mapped_column(Text)
    contact_information: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    address_id: Mapped[Optional[int]] = mapped_column(BigInteger, ForeignKey("address.id"))

    address: Mapped[Optional[Address]] = relationship()

    @validates("owner_id")
    def _validate_owner_id(self, key: str, value: int) -> int:
        current = self.__dict__.get("owner_id")
        if current is not None and current != value:
            raise ValueError("owner_id cannot change once a restaurant is created")
        return value

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, name='{self.name}', owner_id={self.owner_id}, open={self.open})>"


class Category(Base):
    """A food category on one restaurant's menu."""

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("restaurant_id", "name", name="uq_category_restaurant_name"),
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}', restaurant_id={self.restaurant_id})>"


class Food(SoftDeleteMixin, TimestampMixin, Base):
    """
    A dish on a restaurant's menu.

    ``price`` is in minor currency units. Carts and orders snapshot it;
    changing it never rewrites existing order items.
    """

    __tablename__ = "food"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    category_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("category.id"), nullable=False, index=True
    )
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    vegetarian: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    seasonal: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    category: Mapped[Category] = relationship()
    ingredients: Mapped[list["IngredientItem"]] = relationship(
        secondary=food_ingredient, order_by="IngredientItem.id"
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_food_price_non_negative"),
        Index("ix_food_restaurant_category", "restaurant_id", "category_id"),
    )

    def __repr__(self) -> str:
        return f"<Food(id={self.id}, name='{self.name}', price={self.price}, available={self.available})>"


class IngredientCategory(Base):
    """A group of ingredients (e.g. "Salsas") belonging to one restaurant."""

    __tablename__ = "ingredient_category"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )

    items: Mapped[list["IngredientItem"]] = relationship(order_by="IngredientItem.id")

    def __repr__(self) -> str:
        return f"<IngredientCategory(id={self.id}, name='{self.name}')>"


class IngredientItem(Base):
    __tablename__ = "ingredient_item"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    category_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("ingredient_category.id"), nullable=False, index=True
    )
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    in_stock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<IngredientItem(id={self.id}, name='{self.name}', in_stock={self.in_stock})>"
