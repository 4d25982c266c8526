"""
Cart router.
Every endpoint works on the authenticated user's own cart.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from food_shared.infrastructure.db import get_db
from food_shared.security.auth import Principal, current_principal
from food_shared.utils.schemas import AddCartItemRequest, CartOutput, UpdateCartItemRequest
from food_api.routers._common import get_pricing
from food_api.services.domain import CartService, PricingEngine
from food_api.services.projections import cart_output


router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_cart_service(
    db: Session = Depends(get_db),
    pricing: PricingEngine = Depends(get_pricing),
) -> CartService:
    return CartService(db, pricing)


@router.get("", response_model=CartOutput)
def get_cart(
    principal: Principal = Depends(current_principal),
    service: CartService = Depends(get_cart_service),
) -> CartOutput:
    return cart_output(service.find_by_customer(principal.id))


@router.post("/items", response_model=CartOutput)
def add_item(
    body: AddCartItemRequest,
    principal: Principal = Depends(current_principal),
    service: CartService = Depends(get_cart_service),
) -> CartOutput:
    """
    Add a food to the cart.

    A line with the same food and the same customizations is merged.
    """
    cart = service.add_item(principal.id, body.food_id, body.quantity, body.customizations)
    return cart_output(cart)


@router.put("/items/{item_id}", response_model=CartOutput)
def update_item_quantity(
    item_id: int,
    body: UpdateCartItemRequest,
    principal: Principal = Depends(current_principal),
    service: CartService = Depends(get_cart_service),
) -> CartOutput:
    """Set a line's quantity. Zero or less removes it."""
    return cart_output(service.update_item_quantity(principal.id, item_id, body.quantity))


@router.delete("/items/{item_id}", response_model=CartOutput)
def remove_item(
    item_id: int,
    principal: Principal = Depends(current_principal),
    service: CartService = Depends(get_cart_service),
) -> CartOutput:
    return cart_output(service.remove_item(principal.id, item_id))


@router.delete("", response_model=CartOutput)
def clear_cart(
    principal: Principal = Depends(current_principal),
    service: CartService = Depends(get_cart_service),
) -> CartOutput:
    return cart_output(service.clear(principal.id))
