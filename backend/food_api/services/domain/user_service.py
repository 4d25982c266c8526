"""
User Domain Service.

Signup creates the user and their cart in one transaction, so every
user has exactly one cart from the start.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from food_shared.config.logging import get_logger, mask_email
from food_shared.infrastructure.db import unit_of_work
from food_shared.utils.exceptions import DuplicateEntityError, NotFoundError
from food_shared.utils.schemas import SignupRequest
from food_api.models import Cart, User

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self._db = db

    def register(self, request: SignupRequest) -> User:
        email = request.email.lower()
        with unit_of_work(self._db, "registro de usuario"):
            if self._db.scalar(select(User.id).where(User.email == email)) is not None:
                raise DuplicateEntityError("Usuario", email=mask_email(email))

            user = User(email=email, full_name=request.full_name, role=request.role)
            self._db.add(user)
            self._db.flush()
            self._db.add(Cart(customer_id=user.id, total=0))

        logger.info("User registered", user_id=user.id, role=user.role.value, email=mask_email(email))
        return user

    def get_profile(self, user_id: int) -> User:
        user = self._db.get(User, user_id)
        if user is None:
            raise NotFoundError("Usuario", user_id)
        return user
