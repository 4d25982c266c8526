"""
Restaurant Domain Service.

Each owner runs at most one restaurant. Updates, open/close toggles and
deletes go through the AuthorizationGuard. Deletes are soft: the row stays
with ``is_active=False`` and disappears from every read here.
"""

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from food_shared.config.constants import ErrorMessages, Role
from food_shared.config.logging import get_logger
from food_shared.infrastructure.db import unit_of_work
from food_shared.security.auth import Principal
from food_shared.utils.exceptions import NotFoundError, OperationNotAllowedError
from food_shared.utils.schemas import RestaurantCreateRequest, RestaurantUpdateRequest
from food_shared.utils.validators import escape_like_pattern, sanitize_search_term
from food_api.models import Address, Food, Restaurant
from food_api.services.permissions import AuthorizationGuard

logger = get_logger(__name__)


class RestaurantService:
    def __init__(self, db: Session, guard: AuthorizationGuard):
        self._db = db
        self._guard = guard

    def create(self, owner: Principal, request: RestaurantCreateRequest) -> Restaurant:
        """
        Register the owner's restaurant.

        If the owner already has one it is returned unchanged. New
        restaurants start closed. An owner whose restaurant was deleted
        cannot register another.
        """
        self._guard.require_role(owner, Role.OWNER)

        existing = self._find_by_owner(owner.id)
        if existing is not None and not existing.is_active:
            raise OperationNotAllowedError(
                ErrorMessages.OWNER_RESTAURANT_DELETED, owner_id=owner.id, restaurant_id=existing.id
            )
        if existing is not None:
            logger.info("Owner already has a restaurant", owner_id=owner.id, restaurant_id=existing.id)
            return existing

        with unit_of_work(self._db, "crear restaurante"):
            address = None
            if request.address is not None:
                address = Address(
                    street=request.address.street,
                    city=request.address.city,
                    state=request.address.state,
                )
            restaurant = Restaurant(
                owner_id=owner.id,
                name=request.name,
                description=request.description,
                cuisine_type=request.cuisine_type,
                opening_hours=request.opening_hours,
                contact_information=(
                    request.contact_information.model_dump()
                    if request.contact_information is not None
                    else None
                ),
                images=list(request.images),
                address=address,
                open=False,
            )
            self._db.add(restaurant)

        logger.info("Restaurant created", restaurant_id=restaurant.id, owner_id=owner.id)
        return restaurant

    def update(self, restaurant_id: int, request: RestaurantUpdateRequest, actor: Principal) -> Restaurant:
        with unit_of_work(self._db, "actualizar restaurante"):
            restaurant = self.get(restaurant_id)
            self._guard.authorize(actor, restaurant.owner_id, resource="Restaurante", resource_id=restaurant_id)

            changes = request.model_dump(exclude_unset=True)
            for field in ("name", "description", "cuisine_type", "opening_hours", "images"):
                if field in changes:
                    setattr(restaurant, field, changes[field])
            if "contact_information" in changes:
                restaurant.contact_information = changes["contact_information"]
            restaurant.touch()

        logger.info("Restaurant updated", restaurant_id=restaurant_id, fields=sorted(changes))
        return restaurant

    def toggle_open(self, restaurant_id: int, actor: Principal) -> Restaurant:
        with unit_of_work(self._db, "cambiar estado del restaurante"):
            restaurant = self.get(restaurant_id)
            self._guard.authorize(actor, restaurant.owner_id, resource="Restaurante", resource_id=restaurant_id)
            restaurant.open = not restaurant.open
            restaurant.touch()

        logger.info("Restaurant open status toggled", restaurant_id=restaurant_id, open=restaurant.open)
        return restaurant

    def delete(self, restaurant_id: int, actor: Principal) -> int:
        """
        Soft delete a restaurant together with its foods.

        Orders already placed keep pointing at the restaurant and its
        owner can still move them along. Returns the number of foods
        taken off the menu.
        """
        with unit_of_work(self._db, "eliminar restaurante"):
            restaurant = self.get(restaurant_id)
            self._guard.authorize(actor, restaurant.owner_id, resource="Restaurante", resource_id=restaurant_id)

            foods = list(
                self._db.scalars(
                    select(Food).where(Food.restaurant_id == restaurant_id, Food.is_active.is_(True))
                )
            )
            for food in foods:
                food.soft_delete(actor.id, actor.email)
                food.available = False
            restaurant.soft_delete(actor.id, actor.email)
            restaurant.open = False
            restaurant.touch()

        logger.info(
            "Restaurant deleted",
            restaurant_id=restaurant_id,
            actor_id=actor.id,
            foods_deleted=len(foods),
        )
        return len(foods)

    def get(self, restaurant_id: int) -> Restaurant:
        restaurant = self._db.get(Restaurant, restaurant_id)
        if restaurant is None or not restaurant.is_active:
            raise NotFoundError("Restaurante", restaurant_id)
        return restaurant

    def get_by_owner(self, owner_id: int) -> Restaurant:
        restaurant = self._find_by_owner(owner_id)
        if restaurant is None or not restaurant.is_active:
            raise NotFoundError("Restaurante", owner_id=owner_id)
        return restaurant

    def list_all(self) -> list[Restaurant]:
        stmt = select(Restaurant).where(Restaurant.is_active.is_(True)).order_by(Restaurant.id)
        return list(self._db.scalars(stmt))

    def search(self, keyword: str) -> list[Restaurant]:
        """Case-insensitive match on name or cuisine type."""
        term = sanitize_search_term(keyword)
        if not term:
            return []
        pattern = f"%{escape_like_pattern(term)}%"
        stmt = (
            select(Restaurant)
            .where(
                Restaurant.is_active.is_(True),
                or_(
                    Restaurant.name.ilike(pattern, escape="\\"),
                    Restaurant.cuisine_type.ilike(pattern, escape="\\"),
                ),
            )
            .order_by(Restaurant.id)
        )
        return list(self._db.scalars(stmt))

    def _find_by_owner(self, owner_id: int) -> Restaurant | None:
        return self._db.scalar(select(Restaurant).where(Restaurant.owner_id == owner_id))
