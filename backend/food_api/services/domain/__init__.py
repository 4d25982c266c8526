"""
Domain Services - application layer.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Model (entity)

Usage:
    from food_api.services.domain import OrderService

    service = OrderService(db, AuthorizationGuard())
    order = service.checkout(principal, restaurant_id, delivery_address)
"""

from .pricing import PricingEngine
from .cart_service import CartService
from .order_service import OrderService
from .favorite_service import FavoriteService
from .restaurant_service import RestaurantService
from .menu_service import MenuService
from .user_service import UserService

__all__ = [
    "PricingEngine",
    "CartService",
    "OrderService",
    "FavoriteService",
    "RestaurantService",
    "MenuService",
    "UserService",
]
