"""
FastAPI dependencies for domain collaborators.

Usage:
    @router.put("/{order_id}/{status}")
    def update_status(
        guard: AuthorizationGuard = Depends(get_guard),
        db: Session = Depends(get_db),
    ):
        OrderService(db, guard).update_status(...)
"""

from food_api.services.domain.pricing import PricingEngine
from food_api.services.permissions import AuthorizationGuard


def get_guard() -> AuthorizationGuard:
    return AuthorizationGuard()


def get_pricing() -> PricingEngine:
    return PricingEngine()
