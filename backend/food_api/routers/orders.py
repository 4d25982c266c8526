"""
Orders router.

Customer endpoints live under /api/orders; restaurant-side endpoints
(status changes, restaurant order lists) under /api/admin/orders.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from food_shared.infrastructure.db import get_db
from food_shared.security.auth import Principal, current_principal
from food_shared.utils.schemas import CheckoutRequest, OrderOutput
from food_api.routers._common import get_guard, get_pricing
from food_api.services.domain import OrderService, PricingEngine
from food_api.services.permissions import AuthorizationGuard
from food_api.services.projections import order_output


router = APIRouter(prefix="/api/orders", tags=["orders"])
admin_router = APIRouter(prefix="/api/admin/orders", tags=["admin-orders"])


def get_order_service(
    db: Session = Depends(get_db),
    guard: AuthorizationGuard = Depends(get_guard),
    pricing: PricingEngine = Depends(get_pricing),
) -> OrderService:
    return OrderService(db, guard, pricing=pricing)


# =============================================================================
# Customer
# =============================================================================


@router.post("", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
def checkout(
    body: CheckoutRequest,
    principal: Principal = Depends(current_principal),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    """
    Check out the caller's cart into a new order and empty the cart.

    Not idempotent: a retried request creates a second order if the cart
    was refilled in between.
    """
    order = service.checkout(principal, body.restaurant_id, body.delivery_address)
    return order_output(order)


@router.get("/user", response_model=list[OrderOutput])
def list_my_orders(
    principal: Principal = Depends(current_principal),
    service: OrderService = Depends(get_order_service),
) -> list[OrderOutput]:
    return [order_output(order) for order in service.list_by_customer(principal)]


@router.get("/{order_id}", response_model=OrderOutput)
def get_order(
    order_id: int,
    principal: Principal = Depends(current_principal),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    return order_output(service.find_by_id(order_id, principal))


@router.put("/{order_id}/cancel", response_model=OrderOutput)
def cancel_order(
    order_id: int,
    principal: Principal = Depends(current_principal),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    return order_output(service.cancel(order_id, principal))


# =============================================================================
# Restaurant side
# =============================================================================


@admin_router.get("/restaurant/{restaurant_id}", response_model=list[OrderOutput])
def list_restaurant_orders(
    restaurant_id: int,
    order_status: str | None = Query(default=None),
    principal: Principal = Depends(current_principal),
    service: OrderService = Depends(get_order_service),
) -> list[OrderOutput]:
    orders = service.list_by_restaurant(restaurant_id, order_status, principal)
    return [order_output(order) for order in orders]


@admin_router.put("/{order_id}/{order_status}", response_model=OrderOutput)
def update_order_status(
    order_id: int,
    order_status: str,
    principal: Principal = Depends(current_principal),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    """Advance an order: PENDIENTE → EN_PREPARACION → EN_CAMINO → ENTREGADO."""
    return order_output(service.update_status(order_id, order_status, principal))
