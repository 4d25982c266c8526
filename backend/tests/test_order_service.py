"""
Tests for OrderService: checkout, status lifecycle and visibility.
"""

from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from food_shared.config.constants import ErrorMessages, OrderStatus
from food_shared.utils.exceptions import (
    AccessDeniedError,
    InvalidTransitionError,
    NotFoundError,
    OperationNotAllowedError,
)
from food_shared.utils.schemas import AddressInput
from food_api.models import Address, Order
from food_api.services.domain import CartService, MenuService, OrderService, RestaurantService
from food_api.services.permissions import AuthorizationGuard


ADDRESS = AddressInput(street="Av. Siempre Viva 742", city="Santiago", state="RM")


def order_count(db_session) -> int:
    return db_session.scalar(select(func.count()).select_from(Order))


@pytest.fixture
def order_service(db_session):
    return OrderService(db_session, AuthorizationGuard())


@pytest.fixture
def filled_cart(db_session, customer, food_f1, food_f2):
    """Customer cart with 2 x F1 (500) and 1 x F2 (300)."""
    service = CartService(db_session)
    service.add_item(customer.id, food_f1.id, 2)
    return service.add_item(customer.id, food_f2.id, 1)


@pytest.fixture
def placed_order(order_service, filled_cart, customer, seed_restaurant, as_principal):
    return order_service.checkout(as_principal(customer), seed_restaurant.id, ADDRESS)


class TestCheckout:
    def test_checkout_snapshots_cart_and_empties_it(
        self, db_session, order_service, filled_cart, customer, seed_restaurant, as_principal
    ):
        """Should create a pending order with the cart's lines and clear the cart."""
        order = order_service.checkout(as_principal(customer), seed_restaurant.id, ADDRESS)

        assert order.status == OrderStatus.PENDING
        assert order.total_amount == 1300
        assert order.total_item_count == 2
        assert order.restaurant_id == seed_restaurant.id
        assert sorted((i.food_name, i.quantity, i.unit_price) for i in order.items) == [
            ("Bife de chorizo", 2, 500),
            ("Ensalada mixta", 1, 300),
        ]

        cart = CartService(db_session).find_by_customer(customer.id)
        assert cart.items == []
        assert cart.total == 0

    def test_empty_cart_rejected_and_no_order_created(
        self, db_session, order_service, customer, seed_restaurant, as_principal
    ):
        with pytest.raises(OperationNotAllowedError):
            order_service.checkout(as_principal(customer), seed_restaurant.id, ADDRESS)

        assert order_count(db_session) == 0

    def test_unknown_restaurant_not_found(self, order_service, filled_cart, customer, as_principal):
        with pytest.raises(NotFoundError):
            order_service.checkout(as_principal(customer), 9999, ADDRESS)

    def test_failure_while_clearing_cart_rolls_back_everything(
        self, db_session, order_service, filled_cart, customer, seed_restaurant, as_principal
    ):
        """Should leave no order and an intact cart when the cart clear fails."""
        with patch.object(CartService, "clear_items", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                order_service.checkout(as_principal(customer), seed_restaurant.id, ADDRESS)

        assert order_count(db_session) == 0
        cart = CartService(db_session).find_by_customer(customer.id)
        assert len(cart.items) == 2
        assert cart.total == 1300

    def test_later_price_change_does_not_touch_order(
        self, db_session, placed_order, food_f1, owner, as_principal
    ):
        MenuService(db_session, AuthorizationGuard()).update_price(food_f1.id, 900, as_principal(owner))
        db_session.expire_all()

        order = db_session.get(Order, placed_order.id)
        assert order.total_amount == 1300
        assert {i.food_name: i.unit_price for i in order.items}["Bife de chorizo"] == 500

    def test_saved_address_is_reused(
        self, db_session, order_service, filled_cart, customer, seed_restaurant, as_principal
    ):
        first = order_service.checkout(as_principal(customer), seed_restaurant.id, ADDRESS)
        saved_id = first.delivery_address.id

        CartService(db_session).add_item(customer.id, first.items[0].food_id, 1)
        reuse = AddressInput(id=saved_id, street="ignorada", city="ignorada", state="ignorada")
        second = order_service.checkout(as_principal(customer), seed_restaurant.id, reuse)

        assert second.delivery_address.id == saved_id
        assert db_session.scalar(select(func.count()).select_from(Address)) == 1

    def test_foreign_address_id_creates_new_address(
        self, db_session, order_service, filled_cart, customer, seed_restaurant, as_principal
    ):
        """Should not attach another user's address even if its id is given."""
        stranger = Address(street="Otra 1", city="Lima", state="LIM")
        db_session.add(stranger)
        db_session.commit()

        payload = AddressInput(id=stranger.id, street="Mía 2", city="Santiago", state="RM")
        order = order_service.checkout(as_principal(customer), seed_restaurant.id, payload)

        assert order.delivery_address.id != stranger.id
        assert order.delivery_address.street == "Mía 2"

    def test_food_from_another_restaurant_rejected(
        self, db_session, order_service, filled_cart, sushi_roll, customer, seed_restaurant, as_principal
    ):
        """Should refuse a cart that mixes foods of two restaurants and keep it intact."""
        CartService(db_session).add_item(customer.id, sushi_roll.id, 1)

        with pytest.raises(OperationNotAllowedError) as exc_info:
            order_service.checkout(as_principal(customer), seed_restaurant.id, ADDRESS)

        assert exc_info.value.detail == ErrorMessages.CART_FOREIGN_FOOD
        assert order_count(db_session) == 0
        assert len(CartService(db_session).find_by_customer(customer.id).items) == 3

    def test_cart_of_one_restaurant_checked_out_to_another_rejected(
        self, db_session, order_service, filled_cart, other_restaurant, customer, as_principal
    ):
        with pytest.raises(OperationNotAllowedError):
            order_service.checkout(as_principal(customer), other_restaurant.id, ADDRESS)
        assert order_count(db_session) == 0

    def test_deleted_food_in_cart_rejected(
        self, db_session, order_service, filled_cart, food_f2, customer, owner, seed_restaurant, as_principal
    ):
        MenuService(db_session, AuthorizationGuard()).delete_food(food_f2.id, as_principal(owner))

        with pytest.raises(OperationNotAllowedError) as exc_info:
            order_service.checkout(as_principal(customer), seed_restaurant.id, ADDRESS)
        assert exc_info.value.detail == ErrorMessages.CART_FOOD_REMOVED

    def test_deleted_restaurant_not_found(
        self, db_session, order_service, filled_cart, customer, owner, seed_restaurant, as_principal
    ):
        RestaurantService(db_session, AuthorizationGuard()).delete(seed_restaurant.id, as_principal(owner))

        with pytest.raises(NotFoundError):
            order_service.checkout(as_principal(customer), seed_restaurant.id, ADDRESS)
        assert order_count(db_session) == 0


class TestStatusLifecycle:
    def test_full_forward_path(self, order_service, placed_order, owner, as_principal):
        actor = as_principal(owner)
        for status in ("EN_PREPARACION", "EN_CAMINO", "ENTREGADO"):
            order = order_service.update_status(placed_order.id, status, actor)
            assert order.status.value == status

    def test_status_is_case_insensitive(self, order_service, placed_order, owner, as_principal):
        order = order_service.update_status(placed_order.id, "en_preparacion", as_principal(owner))
        assert order.status == OrderStatus.EN_PREPARACION

    def test_status_accepts_state_name(self, db_session, order_service, placed_order, owner, as_principal):
        """Should read "PENDING" as the pending state, not as an unknown status."""
        with pytest.raises(InvalidTransitionError):
            order_service.update_status(placed_order.id, "PENDING", as_principal(owner))
        assert db_session.get(Order, placed_order.id).status == OrderStatus.PENDING

    def test_skipping_a_step_is_rejected(self, order_service, placed_order, owner, as_principal):
        with pytest.raises(InvalidTransitionError):
            order_service.update_status(placed_order.id, "ENTREGADO", as_principal(owner))

    def test_owner_cannot_cancel(self, order_service, placed_order, owner, as_principal):
        """Should reserve the cancel transition for the customer."""
        with pytest.raises(InvalidTransitionError):
            order_service.update_status(placed_order.id, "CANCELADO", as_principal(owner))

    def test_unknown_status_rejected(self, db_session, order_service, placed_order, owner, as_principal):
        with pytest.raises(OperationNotAllowedError):
            order_service.update_status(placed_order.id, "PERDIDO", as_principal(owner))
        assert db_session.get(Order, placed_order.id).status == OrderStatus.PENDING

    def test_other_owner_denied(self, order_service, placed_order, other_owner, other_restaurant, as_principal):
        with pytest.raises(AccessDeniedError):
            order_service.update_status(placed_order.id, "EN_PREPARACION", as_principal(other_owner))

    def test_admin_may_advance(self, order_service, placed_order, admin, as_principal):
        order = order_service.update_status(placed_order.id, "EN_PREPARACION", as_principal(admin))
        assert order.status == OrderStatus.EN_PREPARACION

    def test_orders_of_deleted_restaurant_can_still_advance(
        self, db_session, order_service, placed_order, seed_restaurant, owner, as_principal
    ):
        actor = as_principal(owner)
        RestaurantService(db_session, AuthorizationGuard()).delete(seed_restaurant.id, actor)

        order = order_service.update_status(placed_order.id, "EN_PREPARACION", actor)
        assert order.status == OrderStatus.EN_PREPARACION


class TestCancel:
    def test_customer_cancels_pending_order(self, order_service, placed_order, customer, as_principal):
        order = order_service.cancel(placed_order.id, as_principal(customer))
        assert order.status == OrderStatus.CANCELADO

    def test_cannot_cancel_once_in_preparation(
        self, order_service, placed_order, customer, owner, as_principal
    ):
        order_service.update_status(placed_order.id, "EN_PREPARACION", as_principal(owner))

        with pytest.raises(OperationNotAllowedError) as exc_info:
            order_service.cancel(placed_order.id, as_principal(customer))
        assert "EN_PREPARACION" in exc_info.value.detail

    def test_cannot_cancel_on_the_way(self, order_service, placed_order, customer, owner, as_principal):
        actor = as_principal(owner)
        order_service.update_status(placed_order.id, "EN_PREPARACION", actor)
        order_service.update_status(placed_order.id, "EN_CAMINO", actor)

        with pytest.raises(OperationNotAllowedError):
            order_service.cancel(placed_order.id, as_principal(customer))

    def test_only_placing_customer_can_cancel(
        self, order_service, placed_order, other_customer, owner, as_principal
    ):
        with pytest.raises(AccessDeniedError):
            order_service.cancel(placed_order.id, as_principal(other_customer))
        with pytest.raises(AccessDeniedError):
            order_service.cancel(placed_order.id, as_principal(owner))


class TestQueries:
    def test_list_by_customer(self, order_service, placed_order, customer, other_customer, as_principal):
        assert [o.id for o in order_service.list_by_customer(as_principal(customer))] == [placed_order.id]
        assert order_service.list_by_customer(as_principal(other_customer)) == []

    def test_list_by_restaurant_with_filter(
        self, order_service, placed_order, seed_restaurant, owner, as_principal
    ):
        actor = as_principal(owner)

        assert len(order_service.list_by_restaurant(seed_restaurant.id, None, actor)) == 1
        assert len(order_service.list_by_restaurant(seed_restaurant.id, "PENDIENTE", actor)) == 1
        assert order_service.list_by_restaurant(seed_restaurant.id, "ENTREGADO", actor) == []

    @pytest.mark.parametrize("status", ["PENDING", "pending", "Pendiente"])
    def test_list_by_restaurant_accepts_state_names(
        self, order_service, placed_order, seed_restaurant, owner, as_principal, status
    ):
        orders = order_service.list_by_restaurant(seed_restaurant.id, status, as_principal(owner))
        assert [o.id for o in orders] == [placed_order.id]

    def test_list_by_restaurant_requires_ownership(
        self, order_service, placed_order, seed_restaurant, other_owner, as_principal
    ):
        with pytest.raises(AccessDeniedError):
            order_service.list_by_restaurant(seed_restaurant.id, None, as_principal(other_owner))

    def test_list_by_restaurant_invalid_filter(
        self, order_service, seed_restaurant, owner, as_principal
    ):
        with pytest.raises(OperationNotAllowedError):
            order_service.list_by_restaurant(seed_restaurant.id, "PERDIDO", as_principal(owner))

    def test_find_by_id_visibility(
        self, order_service, placed_order, customer, owner, admin, other_customer, as_principal
    ):
        """Should show the order to its customer, the restaurant owner and admins only."""
        for user in (customer, owner, admin):
            assert order_service.find_by_id(placed_order.id, as_principal(user)).id == placed_order.id

        with pytest.raises(AccessDeniedError):
            order_service.find_by_id(placed_order.id, as_principal(other_customer))

    def test_find_by_id_not_found(self, order_service, customer, as_principal):
        with pytest.raises(NotFoundError):
            order_service.find_by_id(12345, as_principal(customer))
