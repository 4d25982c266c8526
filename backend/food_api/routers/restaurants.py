"""
Restaurants router.

Public browsing and favorites under /api/restaurants; owner management
under /api/admin/restaurants.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from food_shared.infrastructure.db import get_db
from food_shared.security.auth import Principal, current_principal
from food_shared.utils.schemas import (
    FavoriteOutput,
    RestaurantCreateRequest,
    RestaurantOutput,
    RestaurantUpdateRequest,
)
from food_api.routers._common import get_guard
from food_api.services.domain import FavoriteService, RestaurantService
from food_api.services.permissions import AuthorizationGuard
from food_api.services.projections import favorite_output, restaurant_output


router = APIRouter(prefix="/api/restaurants", tags=["restaurants"])
admin_router = APIRouter(prefix="/api/admin/restaurants", tags=["admin-restaurants"])


def get_restaurant_service(
    db: Session = Depends(get_db),
    guard: AuthorizationGuard = Depends(get_guard),
) -> RestaurantService:
    return RestaurantService(db, guard)


# =============================================================================
# Public / customer
# =============================================================================


@router.get("", response_model=list[RestaurantOutput])
def list_restaurants(
    principal: Principal = Depends(current_principal),
    service: RestaurantService = Depends(get_restaurant_service),
) -> list[RestaurantOutput]:
    return [restaurant_output(r) for r in service.list_all()]


@router.get("/search", response_model=list[RestaurantOutput])
def search_restaurants(
    keyword: str = Query(min_length=1, max_length=100),
    principal: Principal = Depends(current_principal),
    service: RestaurantService = Depends(get_restaurant_service),
) -> list[RestaurantOutput]:
    return [restaurant_output(r) for r in service.search(keyword)]


@router.get("/favorites", response_model=list[FavoriteOutput])
def list_favorites(
    principal: Principal = Depends(current_principal),
    db: Session = Depends(get_db),
) -> list[FavoriteOutput]:
    return [favorite_output(f) for f in FavoriteService(db).list_favorites(principal)]


@router.get("/{restaurant_id}", response_model=RestaurantOutput)
def get_restaurant(
    restaurant_id: int,
    principal: Principal = Depends(current_principal),
    service: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantOutput:
    return restaurant_output(service.get(restaurant_id))


@router.put("/{restaurant_id}/add-favorites", response_model=FavoriteOutput)
def add_favorite(
    restaurant_id: int,
    principal: Principal = Depends(current_principal),
    db: Session = Depends(get_db),
) -> FavoriteOutput:
    """Add a restaurant to the caller's favorites (fails if already there)."""
    return favorite_output(FavoriteService(db).add_favorite(principal, restaurant_id))


# =============================================================================
# Owner / admin
# =============================================================================


@admin_router.post("", response_model=RestaurantOutput, status_code=status.HTTP_201_CREATED)
def create_restaurant(
    body: RestaurantCreateRequest,
    principal: Principal = Depends(current_principal),
    service: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantOutput:
    """Create the caller's restaurant, or return it if one already exists."""
    return restaurant_output(service.create(principal, body))


@admin_router.get("/user", response_model=RestaurantOutput)
def get_my_restaurant(
    principal: Principal = Depends(current_principal),
    service: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantOutput:
    return restaurant_output(service.get_by_owner(principal.id))


@admin_router.put("/{restaurant_id}", response_model=RestaurantOutput)
def update_restaurant(
    restaurant_id: int,
    body: RestaurantUpdateRequest,
    principal: Principal = Depends(current_principal),
    service: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantOutput:
    return restaurant_output(service.update(restaurant_id, body, principal))


@admin_router.put("/{restaurant_id}/status", response_model=RestaurantOutput)
def toggle_restaurant_status(
    restaurant_id: int,
    principal: Principal = Depends(current_principal),
    service: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantOutput:
    """Open a closed restaurant or close an open one."""
    return restaurant_output(service.toggle_open(restaurant_id, principal))


@admin_router.delete("/{restaurant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_restaurant(
    restaurant_id: int,
    principal: Principal = Depends(current_principal),
    service: RestaurantService = Depends(get_restaurant_service),
) -> None:
    """Soft delete a restaurant and take its foods off the menu."""
    service.delete(restaurant_id, principal)
