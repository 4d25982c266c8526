"""
Cart Domain Service.

Every customer has exactly one cart. Each public mutation is one unit of
work: the item change, the total recompute and the commit happen
together or not at all.
"""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from food_shared.config.constants import ErrorMessages, Limits
from food_shared.config.logging import get_logger
from food_shared.infrastructure.db import unit_of_work
from food_shared.utils.exceptions import (
    AccessDeniedError,
    NotFoundError,
    OperationNotAllowedError,
)
from food_shared.utils.validators import normalize_customizations
from food_api.models import Cart, CartItem, Food
from food_api.services.domain.pricing import PricingEngine

logger = get_logger(__name__)


class CartService:
    """
    Usage:
        service = CartService(db)
        cart = service.add_item(customer_id, food_id=5, quantity=2, customizations=["sin cebolla"])
    """

    def __init__(self, db: Session, pricing: PricingEngine | None = None):
        self._db = db
        self._pricing = pricing or PricingEngine()

    # =========================================================================
    # Queries
    # =========================================================================

    def find_by_customer(self, customer_id: int) -> Cart:
        """
        Return the customer's cart.

        Carts are created at signup, so a miss means that invariant was broken.
        """
        cart = self._db.scalar(select(Cart).where(Cart.customer_id == customer_id))
        if cart is None:
            raise NotFoundError("Carrito", customer_id=customer_id)
        return cart

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_item(
        self,
        customer_id: int,
        food_id: int,
        quantity: int,
        customizations: Iterable[str] | None = None,
    ) -> Cart:
        """
        Add ``quantity`` of a food to the cart.

        A line with the same food and the same set of customizations is
        merged (quantity incremented); otherwise a new line is appended.
        The line is priced at the food's current price.
        """
        if quantity < Limits.MIN_QUANTITY:
            raise OperationNotAllowedError(
                f"La cantidad mínima es {Limits.MIN_QUANTITY}", quantity=quantity
            )
        key = normalize_customizations(customizations)

        with unit_of_work(self._db, "agregar ítem al carrito"):
            cart = self.find_by_customer(customer_id)
            food = self._db.get(Food, food_id)
            if food is None or not food.is_active:
                raise NotFoundError("Comida", food_id)
            if not food.available:
                # Not enforced; the line is still added
                logger.warning("Unavailable food added to cart", food_id=food_id, cart_id=cart.id)

            line = self._find_line(cart, food.id, key)
            if line is not None:
                new_quantity = line.quantity + quantity
                self._check_max_quantity(new_quantity)
                line.quantity = new_quantity
                line.unit_price = food.price
            else:
                self._check_max_quantity(quantity)
                line = CartItem(
                    food_id=food.id,
                    food=food,
                    quantity=quantity,
                    customizations=key,
                    unit_price=food.price,
                    line_total=0,
                )
                cart.items.append(line)

            self._pricing.reprice(cart)
            cart.touch()

        logger.info(
            "Item added to cart",
            cart_id=cart.id,
            food_id=food_id,
            quantity=quantity,
            total=cart.total,
        )
        return cart

    def update_item_quantity(self, customer_id: int, item_id: int, quantity: int) -> Cart:
        """Set a line's quantity; zero or less removes the line."""
        with unit_of_work(self._db, "actualizar cantidad del carrito"):
            cart, line = self._owned_line(customer_id, item_id)
            if quantity <= 0:
                cart.items.remove(line)
            else:
                self._check_max_quantity(quantity)
                line.quantity = quantity
                if line.food is not None:
                    line.unit_price = line.food.price

            self._pricing.reprice(cart)
            cart.touch()

        logger.info(
            "Cart item quantity updated",
            cart_id=cart.id,
            item_id=item_id,
            quantity=quantity,
            total=cart.total,
        )
        return cart

    def remove_item(self, customer_id: int, item_id: int) -> Cart:
        with unit_of_work(self._db, "eliminar ítem del carrito"):
            cart, line = self._owned_line(customer_id, item_id)
            cart.items.remove(line)
            self._pricing.reprice(cart)
            cart.touch()

        logger.info("Item removed from cart", cart_id=cart.id, item_id=item_id, total=cart.total)
        return cart

    def clear(self, customer_id: int) -> Cart:
        with unit_of_work(self._db, "vaciar carrito"):
            cart = self.find_by_customer(customer_id)
            if not cart.items and cart.total == 0:
                return cart
            self.clear_items(cart)

        logger.info("Cart cleared", cart_id=cart.id, customer_id=customer_id)
        return cart

    def clear_items(self, cart: Cart) -> None:
        """
        Empty ``cart`` without committing.

        For callers that already own the transaction (checkout).
        """
        cart.items.clear()
        self._pricing.reprice(cart)
        cart.touch()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _owned_line(self, customer_id: int, item_id: int) -> tuple[Cart, CartItem]:
        line = self._db.get(CartItem, item_id)
        if line is None:
            raise NotFoundError("Ítem del carrito", item_id)

        cart = self.find_by_customer(customer_id)
        if line.cart_id != cart.id:
            raise AccessDeniedError(
                actor_id=customer_id,
                resource="Ítem del carrito",
                resource_id=item_id,
                detail=ErrorMessages.CART_ITEM_ACCESS_DENIED,
            )
        return cart, line

    @staticmethod
    def _find_line(cart: Cart, food_id: int, customizations: list[str]) -> CartItem | None:
        key = (food_id, tuple(customizations))
        for line in cart.items:
            if line.merge_key == key:
                return line
        return None

    @staticmethod
    def _check_max_quantity(quantity: int) -> None:
        if quantity > Limits.MAX_QUANTITY:
            raise OperationNotAllowedError(
                f"La cantidad máxima por ítem es {Limits.MAX_QUANTITY}", quantity=quantity
            )
