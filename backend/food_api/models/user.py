"""
User Models: User, Address, Favorite.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from food_shared.config.constants import Role

from .base import Base, BigIntPK, TimestampMixin, enum_column, utcnow

# Address book: many-to-many between users and saved addresses
user_address = Table(
    "user_address",
    Base.metadata,
    Column("user_id", BigInteger, ForeignKey("app_user.id", ondelete="CASCADE"), primary_key=True),
    Column("address_id", BigInteger, ForeignKey("address.id", ondelete="CASCADE"), primary_key=True),
)


class User(TimestampMixin, Base):
    """
    A customer, a restaurant owner or an administrator.

    Every user gets exactly one Cart at signup; it lives as long as the user.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True, index=True)
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[Role] = mapped_column(enum_column(Role), nullable=False, default=Role.CUSTOMER)

    # Relationships
    addresses: Mapped[list["Address"]] = relationship(secondary=user_address, order_by="Address.id")
    favorites: Mapped[list["Favorite"]] = relationship(
        cascade="all, delete-orphan", order_by="Favorite.id"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role='{self.role.value if self.role else None}')>"


class Address(Base):
    """A postal address, saved in users' address books and referenced by orders."""

    __tablename__ = "address"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    street: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(Text, nullable=False)
    state: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Address(id={self.id}, city='{self.city}')>"


class Favorite(Base):
    """
    A restaurant in a user's favorites list.

    Title, description and images are a snapshot taken when the favorite
    was added; later edits to the restaurant are not reflected here.
    """

    __tablename__ = "favorite"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "restaurant_id", name="uq_favorite_user_restaurant"),
    )

    def __repr__(self) -> str:
        return f"<Favorite(user_id={self.user_id}, restaurant_id={self.restaurant_id})>"
