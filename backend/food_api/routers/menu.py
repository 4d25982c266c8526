"""
Menu router: categories, foods and ingredients.

Reads are available to any authenticated user; writes under /api/admin
are checked against the owning restaurant by the AuthorizationGuard.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from food_shared.infrastructure.db import get_db
from food_shared.security.auth import Principal, current_principal
from food_shared.utils.schemas import (
    CategoryCreateRequest,
    CategoryOutput,
    FoodCreateRequest,
    FoodOutput,
    FoodPriceUpdateRequest,
    IngredientCategoryCreateRequest,
    IngredientCategoryOutput,
    IngredientItemCreateRequest,
    IngredientItemOutput,
)
from food_api.routers._common import get_guard
from food_api.services.domain import MenuService
from food_api.services.permissions import AuthorizationGuard
from food_api.services.projections import food_output, ingredient_category_output


router = APIRouter(prefix="/api", tags=["menu"])
admin_router = APIRouter(prefix="/api/admin", tags=["admin-menu"])


def get_menu_service(
    db: Session = Depends(get_db),
    guard: AuthorizationGuard = Depends(get_guard),
) -> MenuService:
    return MenuService(db, guard)


# =============================================================================
# Categories
# =============================================================================


@admin_router.post("/categories", response_model=CategoryOutput, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreateRequest,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> CategoryOutput:
    """Create a category in the caller's restaurant."""
    return CategoryOutput.model_validate(service.create_category(principal, body.name))


@router.get("/categories/restaurant/{restaurant_id}", response_model=list[CategoryOutput])
def list_categories(
    restaurant_id: int,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> list[CategoryOutput]:
    return [CategoryOutput.model_validate(c) for c in service.list_categories(restaurant_id)]


# =============================================================================
# Foods
# =============================================================================


@admin_router.post("/foods", response_model=FoodOutput, status_code=status.HTTP_201_CREATED)
def create_food(
    body: FoodCreateRequest,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> FoodOutput:
    return food_output(service.create_food(principal, body))


@admin_router.put("/foods/{food_id}", response_model=FoodOutput)
def toggle_food_availability(
    food_id: int,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> FoodOutput:
    return food_output(service.toggle_availability(food_id, principal))


@admin_router.patch("/foods/{food_id}/price", response_model=FoodOutput)
def update_food_price(
    food_id: int,
    body: FoodPriceUpdateRequest,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> FoodOutput:
    """Change the current price. Existing orders keep the price they were placed at."""
    return food_output(service.update_price(food_id, body.price, principal))


@admin_router.delete("/foods/{food_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_food(
    food_id: int,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> None:
    """Soft delete a food. Orders that already contain it are unaffected."""
    service.delete_food(food_id, principal)


@router.get("/foods/search", response_model=list[FoodOutput])
def search_foods(
    name: str = Query(min_length=1, max_length=100),
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> list[FoodOutput]:
    return [food_output(f) for f in service.search_foods(name)]


@router.get("/foods/restaurant/{restaurant_id}", response_model=list[FoodOutput])
def list_restaurant_foods(
    restaurant_id: int,
    vegetarian: bool = False,
    nonveg: bool = False,
    seasonal: bool = False,
    food_category: str | None = None,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> list[FoodOutput]:
    foods = service.list_restaurant_foods(
        restaurant_id,
        vegetarian=vegetarian,
        nonveg=nonveg,
        seasonal=seasonal,
        category=food_category,
    )
    return [food_output(f) for f in foods]


@router.get("/foods/{food_id}", response_model=FoodOutput)
def get_food(
    food_id: int,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> FoodOutput:
    return food_output(service.get_food(food_id))


# =============================================================================
# Ingredients
# =============================================================================


@admin_router.post(
    "/ingredients/category",
    response_model=IngredientCategoryOutput,
    status_code=status.HTTP_201_CREATED,
)
def create_ingredient_category(
    body: IngredientCategoryCreateRequest,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> IngredientCategoryOutput:
    return ingredient_category_output(service.create_ingredient_category(principal, body))


@admin_router.post(
    "/ingredients",
    response_model=IngredientItemOutput,
    status_code=status.HTTP_201_CREATED,
)
def create_ingredient_item(
    body: IngredientItemCreateRequest,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> IngredientItemOutput:
    return IngredientItemOutput.model_validate(service.create_ingredient_item(principal, body))


@admin_router.put("/ingredients/{ingredient_id}/stock", response_model=IngredientItemOutput)
def toggle_ingredient_stock(
    ingredient_id: int,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> IngredientItemOutput:
    return IngredientItemOutput.model_validate(service.toggle_stock(ingredient_id, principal))


@admin_router.get("/ingredients/restaurant/{restaurant_id}", response_model=list[IngredientItemOutput])
def list_ingredients(
    restaurant_id: int,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> list[IngredientItemOutput]:
    return [IngredientItemOutput.model_validate(i) for i in service.list_ingredients(restaurant_id)]


@admin_router.get(
    "/ingredients/restaurant/{restaurant_id}/category",
    response_model=list[IngredientCategoryOutput],
)
def list_ingredient_categories(
    restaurant_id: int,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> list[IngredientCategoryOutput]:
    categories = service.list_ingredient_categories(restaurant_id)
    return [ingredient_category_output(c) for c in categories]


@admin_router.get("/ingredients/category/{category_id}", response_model=list[IngredientItemOutput])
def list_category_ingredients(
    category_id: int,
    principal: Principal = Depends(current_principal),
    service: MenuService = Depends(get_menu_service),
) -> list[IngredientItemOutput]:
    items = service.list_ingredient_items_by_category(category_id)
    return [IngredientItemOutput.model_validate(i) for i in items]
