"""
Favorite Domain Service.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from food_shared.config.constants import ErrorMessages
from food_shared.config.logging import get_logger
from food_shared.infrastructure.db import unit_of_work
from food_shared.security.auth import Principal
from food_shared.utils.exceptions import NotFoundError, OperationNotAllowedError
from food_api.models import Favorite, Restaurant

logger = get_logger(__name__)


class FavoriteService:
    def __init__(self, db: Session):
        self._db = db

    def add_favorite(self, user: Principal, restaurant_id: int) -> Favorite:
        """
        Snapshot a restaurant into the user's favorites.

        Raises:
            NotFoundError: The restaurant does not exist.
            OperationNotAllowedError: It is already a favorite.
        """
        with unit_of_work(self._db, "agregar favorito"):
            restaurant = self._db.get(Restaurant, restaurant_id)
            if restaurant is None or not restaurant.is_active:
                raise NotFoundError("Restaurante", restaurant_id)

            existing = self._db.scalar(
                select(Favorite.id).where(
                    Favorite.user_id == user.id,
                    Favorite.restaurant_id == restaurant_id,
                )
            )
            if existing is not None:
                raise OperationNotAllowedError(
                    ErrorMessages.DUPLICATE_FAVORITE,
                    user_id=user.id,
                    restaurant_id=restaurant_id,
                )

            favorite = Favorite(
                user_id=user.id,
                restaurant_id=restaurant.id,
                title=restaurant.name,
                description=restaurant.description,
                images=list(restaurant.images or []),
            )
            self._db.add(favorite)

        logger.info("Favorite added", user_id=user.id, restaurant_id=restaurant_id)
        return favorite

    def list_favorites(self, user: Principal) -> list[Favorite]:
        return list(
            self._db.scalars(
                select(Favorite).where(Favorite.user_id == user.id).order_by(Favorite.id)
            )
        )
