"""
Authorization for restaurant-scoped operations.

Usage:
    from food_api.services.permissions import AuthorizationGuard

    guard = AuthorizationGuard()
    guard.authorize(principal, restaurant.owner_id, resource="Restaurante", resource_id=restaurant.id)
"""

from .guard import AuthorizationGuard

__all__ = ["AuthorizationGuard"]
