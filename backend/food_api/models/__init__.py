"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class, TimestampMixin, SoftDeleteMixin, column helpers
- user: User, Address, Favorite
- restaurant: Restaurant, Category, Food, IngredientCategory, IngredientItem
- cart: Cart, CartItem
- order: Order, OrderItem
"""

from .base import Base, SoftDeleteMixin, TimestampMixin
from .user import User, Address, Favorite, user_address
from .restaurant import (
    Restaurant,
    Category,
    Food,
    IngredientCategory,
    IngredientItem,
    food_ingredient,
)
from .cart import Cart, CartItem
from .order import Order, OrderItem

__all__ = [
    "Base",
    "TimestampMixin",
    "SoftDeleteMixin",
    "User",
    "Address",
    "Favorite",
    "user_address",
    "Restaurant",
    "Category",
    "Food",
    "IngredientCategory",
    "IngredientItem",
    "food_ingredient",
    "Cart",
    "CartItem",
    "Order",
    "OrderItem",
]
