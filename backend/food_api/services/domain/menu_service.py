"""
Menu Domain Service: categories, foods and ingredients.

Every mutation resolves the owning restaurant first and passes its
``owner_id`` to the AuthorizationGuard before touching anything.
Deleted foods and restaurants (``is_active=False``) are invisible to reads.
"""

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from food_shared.config.constants import ErrorMessages, Limits
from food_shared.config.logging import get_logger
from food_shared.infrastructure.db import unit_of_work
from food_shared.security.auth import Principal
from food_shared.utils.exceptions import NotFoundError, OperationNotAllowedError
from food_shared.utils.schemas import (
    FoodCreateRequest,
    IngredientCategoryCreateRequest,
    IngredientItemCreateRequest,
)
from food_shared.utils.validators import escape_like_pattern, sanitize_search_term
from food_api.models import Category, Food, IngredientCategory, IngredientItem, Restaurant
from food_api.services.permissions import AuthorizationGuard

logger = get_logger(__name__)


class MenuService:
    def __init__(self, db: Session, guard: AuthorizationGuard):
        self._db = db
        self._guard = guard

    # =========================================================================
    # Categories
    # =========================================================================

    def create_category(self, actor: Principal, name: str, restaurant_id: int | None = None) -> Category:
        """
        Create a food category.

        Without ``restaurant_id`` the category goes to the actor's own restaurant.
        """
        with unit_of_work(self._db, "crear categoría"):
            if restaurant_id is None:
                restaurant = self._owned_restaurant(actor)
            else:
                restaurant = self._restaurant(restaurant_id)
            self._guard.authorize(actor, restaurant.owner_id, resource="Categoría", resource_id=restaurant.id)

            category = Category(name=name, restaurant_id=restaurant.id)
            self._db.add(category)

        logger.info("Category created", category_id=category.id, restaurant_id=restaurant.id)
        return category

    def list_categories(self, restaurant_id: int) -> list[Category]:
        self._restaurant(restaurant_id)
        return list(
            self._db.scalars(
                select(Category).where(Category.restaurant_id == restaurant_id).order_by(Category.id)
            )
        )

    # =========================================================================
    # Foods
    # =========================================================================

    def create_food(self, actor: Principal, request: FoodCreateRequest) -> Food:
        with unit_of_work(self._db, "crear comida"):
            restaurant = self._restaurant(request.restaurant_id)
            self._guard.authorize(actor, restaurant.owner_id, resource="Comida", resource_id=restaurant.id)

            category = self._db.get(Category, request.category_id)
            if category is None:
                raise NotFoundError("Categoría", request.category_id)
            if category.restaurant_id != restaurant.id:
                raise OperationNotAllowedError(
                    ErrorMessages.CATEGORY_OTHER_RESTAURANT,
                    category_id=category.id,
                    restaurant_id=restaurant.id,
                )

            ingredients = self._restaurant_ingredients(restaurant.id, request.ingredient_ids)
            food = Food(
                name=request.name,
                description=request.description,
                price=request.price,
                restaurant_id=restaurant.id,
                category_id=category.id,
                category=category,
                available=True,
                vegetarian=request.vegetarian,
                seasonal=request.seasonal,
                images=list(request.images),
                ingredients=ingredients,
            )
            self._db.add(food)

        logger.info("Food created", food_id=food.id, restaurant_id=restaurant.id, price=food.price)
        return food

    def toggle_availability(self, food_id: int, actor: Principal) -> Food:
        with unit_of_work(self._db, "cambiar disponibilidad"):
            food = self.get_food(food_id)
            self._authorize_food(actor, food)
            food.available = not food.available
            food.touch()

        logger.info("Food availability toggled", food_id=food_id, available=food.available)
        return food

    def update_price(self, food_id: int, price: int, actor: Principal) -> Food:
        """
        Change a food's current price.

        Carts pick up the new price on their next change; existing orders keep theirs.
        """
        if isinstance(price, bool) or not isinstance(price, int) or not (
            Limits.MIN_PRICE <= price <= Limits.MAX_PRICE
        ):
            raise OperationNotAllowedError("Precio inválido", food_id=food_id, price=price)

        with unit_of_work(self._db, "actualizar precio"):
            food = self.get_food(food_id)
            self._authorize_food(actor, food)
            previous = food.price
            food.price = price
            food.touch()

        logger.info("Food price updated", food_id=food_id, from_price=previous, to_price=price)
        return food

    def delete_food(self, food_id: int, actor: Principal) -> Food:
        """
        Take a food off the menu for good.

        The row is kept so cart lines and order items that point at it stay
        valid; checkout refuses carts that still hold it.
        """
        with unit_of_work(self._db, "eliminar comida"):
            food = self.get_food(food_id)
            self._authorize_food(actor, food)
            food.soft_delete(actor.id, actor.email)
            food.available = False
            food.touch()

        logger.info("Food deleted", food_id=food_id, restaurant_id=food.restaurant_id, actor_id=actor.id)
        return food

    def get_food(self, food_id: int) -> Food:
        food = self._db.get(Food, food_id)
        if food is None or not food.is_active:
            raise NotFoundError("Comida", food_id)
        return food

    def search_foods(self, keyword: str) -> list[Food]:
        """Case-insensitive match on food name or category name."""
        term = sanitize_search_term(keyword)
        if not term:
            return []
        pattern = f"%{escape_like_pattern(term)}%"
        stmt = (
            select(Food)
            .join(Category, Food.category_id == Category.id)
            .where(
                Food.is_active.is_(True),
                or_(
                    Food.name.ilike(pattern, escape="\\"),
                    Category.name.ilike(pattern, escape="\\"),
                ),
            )
            .order_by(Food.id)
        )
        return list(self._db.scalars(stmt))

    def list_restaurant_foods(
        self,
        restaurant_id: int,
        vegetarian: bool = False,
        nonveg: bool = False,
        seasonal: bool = False,
        category: str | None = None,
    ) -> list[Food]:
        """
        Foods of one restaurant with optional filters.

        ``vegetarian`` keeps only vegetarian dishes, ``nonveg`` only the
        others; passing both yields nothing. ``category`` matches the
        category name exactly.
        """
        self._restaurant(restaurant_id)
        stmt = select(Food).where(Food.restaurant_id == restaurant_id, Food.is_active.is_(True))
        if vegetarian:
            stmt = stmt.where(Food.vegetarian.is_(True))
        if nonveg:
            stmt = stmt.where(Food.vegetarian.is_(False))
        if seasonal:
            stmt = stmt.where(Food.seasonal.is_(True))
        if category:
            stmt = stmt.join(Category, Food.category_id == Category.id).where(Category.name == category)
        return list(self._db.scalars(stmt.order_by(Food.id)))

    # =========================================================================
    # Ingredients
    # =========================================================================

    def create_ingredient_category(
        self, actor: Principal, request: IngredientCategoryCreateRequest
    ) -> IngredientCategory:
        with unit_of_work(self._db, "crear categoría de ingredientes"):
            restaurant = self._restaurant(request.restaurant_id)
            self._guard.authorize(
                actor, restaurant.owner_id, resource="Categoría de ingredientes", resource_id=restaurant.id
            )
            category = IngredientCategory(name=request.name, restaurant_id=restaurant.id)
            self._db.add(category)

        logger.info("Ingredient category created", category_id=category.id, restaurant_id=restaurant.id)
        return category

    def create_ingredient_item(self, actor: Principal, request: IngredientItemCreateRequest) -> IngredientItem:
        with unit_of_work(self._db, "crear ingrediente"):
            restaurant = self._restaurant(request.restaurant_id)
            self._guard.authorize(actor, restaurant.owner_id, resource="Ingrediente", resource_id=restaurant.id)

            category = self._db.get(IngredientCategory, request.category_id)
            if category is None:
                raise NotFoundError("Categoría de ingredientes", request.category_id)
            if category.restaurant_id != restaurant.id:
                raise OperationNotAllowedError(
                    ErrorMessages.INGREDIENT_CATEGORY_OTHER_RESTAURANT,
                    category_id=category.id,
                    restaurant_id=restaurant.id,
                )

            item = IngredientItem(
                name=request.name,
                category_id=category.id,
                restaurant_id=restaurant.id,
                in_stock=True,
            )
            category.items.append(item)

        logger.info("Ingredient created", ingredient_id=item.id, category_id=category.id)
        return item

    def toggle_stock(self, ingredient_id: int, actor: Principal) -> IngredientItem:
        with unit_of_work(self._db, "cambiar stock de ingrediente"):
            item = self._db.get(IngredientItem, ingredient_id)
            if item is None:
                raise NotFoundError("Ingrediente", ingredient_id)
            restaurant = self._restaurant(item.restaurant_id)
            self._guard.authorize(actor, restaurant.owner_id, resource="Ingrediente", resource_id=item.id)
            item.in_stock = not item.in_stock

        logger.info("Ingredient stock toggled", ingredient_id=ingredient_id, in_stock=item.in_stock)
        return item

    def list_ingredients(self, restaurant_id: int) -> list[IngredientItem]:
        self._restaurant(restaurant_id)
        return list(
            self._db.scalars(
                select(IngredientItem)
                .where(IngredientItem.restaurant_id == restaurant_id)
                .order_by(IngredientItem.id)
            )
        )

    def list_ingredient_categories(self, restaurant_id: int) -> list[IngredientCategory]:
        self._restaurant(restaurant_id)
        return list(
            self._db.scalars(
                select(IngredientCategory)
                .where(IngredientCategory.restaurant_id == restaurant_id)
                .order_by(IngredientCategory.id)
            )
        )

    def list_ingredient_items_by_category(self, category_id: int) -> list[IngredientItem]:
        category = self._db.get(IngredientCategory, category_id)
        if category is None:
            raise NotFoundError("Categoría de ingredientes", category_id)
        self._restaurant(category.restaurant_id)
        return list(category.items)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _restaurant(self, restaurant_id: int) -> Restaurant:
        restaurant = self._db.get(Restaurant, restaurant_id)
        if restaurant is None or not restaurant.is_active:
            raise NotFoundError("Restaurante", restaurant_id)
        return restaurant

    def _owned_restaurant(self, actor: Principal) -> Restaurant:
        restaurant = self._db.scalar(select(Restaurant).where(Restaurant.owner_id == actor.id))
        if restaurant is None or not restaurant.is_active:
            raise OperationNotAllowedError(ErrorMessages.OWNER_HAS_NO_RESTAURANT, actor_id=actor.id)
        return restaurant

    def _authorize_food(self, actor: Principal, food: Food) -> None:
        restaurant = self._restaurant(food.restaurant_id)
        self._guard.authorize(actor, restaurant.owner_id, resource="Comida", resource_id=food.id)

    def _restaurant_ingredients(self, restaurant_id: int, ingredient_ids: list[int]) -> list[IngredientItem]:
        if not ingredient_ids:
            return []
        wanted = set(ingredient_ids)
        found = list(
            self._db.scalars(
                select(IngredientItem).where(
                    IngredientItem.id.in_(wanted),
                    IngredientItem.restaurant_id == restaurant_id,
                )
            )
        )
        missing = wanted - {item.id for item in found}
        if missing:
            raise NotFoundError("Ingrediente", min(missing), restaurant_id=restaurant_id)
        return found
