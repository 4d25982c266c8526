"""
Order Domain Service.

Checkout turns the customer's cart into an Order and empties the cart in
the same transaction. Status changes follow the closed transition table
in ``food_shared.config.constants``.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from food_shared.config.constants import (
    ORDER_TRANSITION_INITIATORS,
    ORDER_TRANSITIONS,
    ErrorMessages,
    OrderStatus,
    TransitionInitiator,
)
from food_shared.config.logging import get_logger
from food_shared.infrastructure.db import unit_of_work
from food_shared.security.auth import Principal
from food_shared.utils.exceptions import (
    AccessDeniedError,
    InvalidTransitionError,
    NotFoundError,
    OperationNotAllowedError,
)
from food_shared.utils.schemas import AddressInput
from food_api.models import Address, Order, OrderItem, Restaurant, User
from food_api.services.domain.cart_service import CartService
from food_api.services.domain.pricing import PricingEngine
from food_api.services.permissions import AuthorizationGuard

logger = get_logger(__name__)


class OrderService:
    """
    Usage:
        service = OrderService(db, AuthorizationGuard())
        order = service.checkout(principal, restaurant_id=3, delivery_address=address)
        service.update_status(order.id, "EN_PREPARACION", owner_principal)
    """

    def __init__(
        self,
        db: Session,
        guard: AuthorizationGuard,
        cart_service: CartService | None = None,
        pricing: PricingEngine | None = None,
    ):
        self._db = db
        self._guard = guard
        self._pricing = pricing or PricingEngine()
        self._carts = cart_service or CartService(db, self._pricing)

    # =========================================================================
    # Checkout
    # =========================================================================

    def checkout(
        self,
        customer: Principal,
        restaurant_id: int,
        delivery_address: AddressInput,
    ) -> Order:
        """
        Create an order from the customer's cart and empty the cart.

        Each order item snapshots the food's price at this moment, so later
        price edits never change the order's value. Not idempotent: calling
        twice with a refilled cart creates two orders.

        Raises:
            NotFoundError: Restaurant (or the customer's cart) does not exist.
            OperationNotAllowedError: The cart is empty, or holds foods that are
                deleted or belong to another restaurant.
        """
        with unit_of_work(self._db, "checkout"):
            user = self._db.get(User, customer.id)
            if user is None:
                raise NotFoundError("Usuario", customer.id)
            address = self._resolve_address(user, delivery_address)

            restaurant = self._db.get(Restaurant, restaurant_id)
            if restaurant is None or not restaurant.is_active:
                raise NotFoundError("Restaurante", restaurant_id)

            cart = self._carts.find_by_customer(customer.id)
            if not cart.items:
                raise OperationNotAllowedError(
                    ErrorMessages.EMPTY_CART_CHECKOUT,
                    customer_id=customer.id,
                    restaurant_id=restaurant_id,
                )
            for line in cart.items:
                if line.food.restaurant_id != restaurant.id:
                    raise OperationNotAllowedError(
                        ErrorMessages.CART_FOREIGN_FOOD,
                        customer_id=customer.id,
                        restaurant_id=restaurant.id,
                        food_id=line.food_id,
                        food_restaurant_id=line.food.restaurant_id,
                    )
                if not line.food.is_active:
                    raise OperationNotAllowedError(
                        ErrorMessages.CART_FOOD_REMOVED, customer_id=customer.id, food_id=line.food_id
                    )

            order = Order(
                customer_id=customer.id,
                restaurant_id=restaurant.id,
                restaurant=restaurant,
                delivery_address=address,
                status=OrderStatus.PENDING,
            )
            for line in cart.items:
                food = line.food
                unit_price = food.price
                order.items.append(
                    OrderItem(
                        food_id=food.id,
                        food_name=food.name,
                        quantity=line.quantity,
                        unit_price=unit_price,
                        customizations=list(line.customizations or []),
                        line_total=self._pricing.line_total(line.quantity, unit_price),
                    )
                )
            order.total_amount = self._pricing.aggregate_total(order.items)
            order.total_item_count = self._pricing.item_count(order.items)

            self._db.add(order)
            self._carts.clear_items(cart)

        logger.info(
            "Order created",
            order_id=order.id,
            customer_id=customer.id,
            restaurant_id=restaurant.id,
            total_amount=order.total_amount,
            total_item_count=order.total_item_count,
        )
        return order

    def _resolve_address(self, user: User, payload: AddressInput) -> Address:
        # Reuse only when the id is already in this user's address book
        if payload.id is not None:
            for saved in user.addresses:
                if saved.id == payload.id:
                    return saved

        address = Address(street=payload.street, city=payload.city, state=payload.state)
        user.addresses.append(address)
        return address

    # =========================================================================
    # Status changes
    # =========================================================================

    def update_status(self, order_id: int, new_status: OrderStatus | str, actor: Principal) -> Order:
        """
        Advance an order on behalf of its restaurant.

        Raises:
            AccessDeniedError: Actor is neither the restaurant's owner nor an admin.
            OperationNotAllowedError: Unknown status, or not allowed from the current one.
        """
        with unit_of_work(self._db, "actualizar estado de orden"):
            order = self._get_order(order_id)
            self._guard.authorize(actor, order.restaurant.owner_id, resource="Orden", resource_id=order.id)

            target = self._parse_status(new_status)
            previous = order.status
            self._transition(order, target, TransitionInitiator.RESTAURANT)

        logger.info(
            "Order status updated",
            order_id=order.id,
            from_status=previous.value,
            to_status=target.value,
            actor_id=actor.id,
        )
        return order

    def cancel(self, order_id: int, actor: Principal) -> Order:
        """Cancel a pending order; only the customer who placed it may do so."""
        with unit_of_work(self._db, "cancelar orden"):
            order = self._get_order(order_id)
            if actor.id != order.customer_id:
                raise AccessDeniedError(
                    actor_id=actor.id,
                    resource="Orden",
                    resource_id=order.id,
                    detail=ErrorMessages.ORDER_ACCESS_DENIED,
                )
            if order.status != OrderStatus.PENDING:
                raise OperationNotAllowedError(
                    ErrorMessages.ORDER_NOT_CANCELLABLE.format(status=order.status.value),
                    order_id=order.id,
                    status=order.status.value,
                )
            self._transition(order, OrderStatus.CANCELADO, TransitionInitiator.CUSTOMER)

        logger.info("Order canceled", order_id=order.id, customer_id=actor.id)
        return order

    def _transition(self, order: Order, target: OrderStatus, initiator: TransitionInitiator) -> None:
        current = order.status
        if target not in ORDER_TRANSITIONS[current]:
            raise InvalidTransitionError("Orden", current.value, target.value, order_id=order.id)
        if ORDER_TRANSITION_INITIATORS[(current, target)] != initiator:
            raise InvalidTransitionError(
                "Orden",
                current.value,
                target.value,
                order_id=order.id,
                initiator=initiator.value,
            )
        order.status = target
        order.touch()

    @staticmethod
    def _parse_status(value: OrderStatus | str) -> OrderStatus:
        if isinstance(value, OrderStatus):
            return value
        status = OrderStatus.parse(value)
        if status is None:
            raise OperationNotAllowedError(
                ErrorMessages.INVALID_ORDER_STATUS.format(status=value), status=value
            )
        return status

    # =========================================================================
    # Queries
    # =========================================================================

    def list_by_customer(self, customer: Principal) -> list[Order]:
        return list(
            self._db.scalars(
                select(Order)
                .where(Order.customer_id == customer.id)
                .order_by(Order.created_at.desc(), Order.id.desc())
            )
        )

    def list_by_restaurant(
        self,
        restaurant_id: int,
        status: OrderStatus | str | None,
        actor: Principal,
    ) -> list[Order]:
        """Orders of a restaurant, optionally filtered by status. Owner or admin only."""
        restaurant = self._db.get(Restaurant, restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurante", restaurant_id)
        self._guard.authorize(actor, restaurant.owner_id, resource="Restaurante", resource_id=restaurant_id)

        stmt = select(Order).where(Order.restaurant_id == restaurant_id)
        if status:
            stmt = stmt.where(Order.status == self._parse_status(status))
        return list(self._db.scalars(stmt.order_by(Order.created_at.desc(), Order.id.desc())))

    def find_by_id(self, order_id: int, actor: Principal) -> Order:
        """Visible to the customer who placed it, the restaurant's owner and admins."""
        order = self._get_order(order_id)
        if actor.id == order.customer_id:
            return order
        if self._guard.check(actor, order.restaurant.owner_id):
            return order
        raise AccessDeniedError(
            actor_id=actor.id,
            resource="Orden",
            resource_id=order_id,
            detail=ErrorMessages.ORDER_ACCESS_DENIED,
        )

    def _get_order(self, order_id: int) -> Order:
        order = self._db.get(Order, order_id)
        if order is None:
            raise NotFoundError("Orden", order_id)
        return order
