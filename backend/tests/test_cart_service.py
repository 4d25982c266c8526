"""
Tests for CartService domain service.
"""

import pytest

from food_shared.utils.exceptions import (
    AccessDeniedError,
    NotFoundError,
    OperationNotAllowedError,
)
from food_api.models import CartItem
from food_api.services.domain import CartService


class TestAddItem:
    def test_new_line_is_priced_at_current_price(self, db_session, customer, food_f1):
        """Should append a line with unit price and line total from the food."""
        cart = CartService(db_session).add_item(customer.id, food_f1.id, 2)

        assert len(cart.items) == 1
        line = cart.items[0]
        assert line.unit_price == 500
        assert line.line_total == 1000
        assert cart.total == 1000

    def test_same_food_and_customizations_merge(self, db_session, customer, food_f1):
        """Should increment quantity instead of adding a second line."""
        service = CartService(db_session)
        service.add_item(customer.id, food_f1.id, 1, ["sin sal", "bien cocido"])
        cart = service.add_item(customer.id, food_f1.id, 2, ["bien cocido", "sin sal"])

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3
        assert cart.items[0].customizations == ["bien cocido", "sin sal"]
        assert cart.total == 1500

    def test_different_customizations_make_separate_lines(self, db_session, customer, food_f1):
        service = CartService(db_session)
        service.add_item(customer.id, food_f1.id, 1, ["sin sal"])
        cart = service.add_item(customer.id, food_f1.id, 1)

        assert len(cart.items) == 2
        assert cart.total == 1000

    def test_total_sums_all_lines(self, db_session, customer, food_f1, food_f2):
        service = CartService(db_session)
        service.add_item(customer.id, food_f1.id, 2)
        cart = service.add_item(customer.id, food_f2.id, 1)

        assert cart.total == 1300
        assert cart.total == sum(line.line_total for line in cart.items)

    def test_zero_quantity_rejected(self, db_session, customer, food_f1):
        with pytest.raises(OperationNotAllowedError):
            CartService(db_session).add_item(customer.id, food_f1.id, 0)

    def test_quantity_above_limit_rejected(self, db_session, customer, food_f1):
        """Should refuse a merge that pushes a line over the per-line cap."""
        service = CartService(db_session)
        service.add_item(customer.id, food_f1.id, 60)

        with pytest.raises(OperationNotAllowedError):
            service.add_item(customer.id, food_f1.id, 40)

        cart = service.find_by_customer(customer.id)
        assert cart.items[0].quantity == 60
        assert cart.total == 30000

    def test_unknown_food_not_found(self, db_session, customer):
        with pytest.raises(NotFoundError) as exc_info:
            CartService(db_session).add_item(customer.id, 9999, 1)
        assert exc_info.value.entity == "Comida"

    def test_deleted_food_not_found(self, db_session, customer, make_food):
        food = make_food("Sopaipilla", 150)
        food.soft_delete(None, None)
        db_session.commit()

        with pytest.raises(NotFoundError):
            CartService(db_session).add_item(customer.id, food.id, 1)
        assert CartService(db_session).find_by_customer(customer.id).items == []

    def test_unavailable_food_still_added(self, db_session, customer, make_food):
        food = make_food("Humita", 250, available=False)

        cart = CartService(db_session).add_item(customer.id, food.id, 1)

        assert cart.total == 250

    def test_merge_reprices_at_current_price(self, db_session, customer, food_f1):
        """Should price a merged line at the food's price at merge time."""
        service = CartService(db_session)
        service.add_item(customer.id, food_f1.id, 1)
        food_f1.price = 600
        db_session.commit()

        cart = service.add_item(customer.id, food_f1.id, 1)

        assert cart.items[0].unit_price == 600
        assert cart.total == 1200


class TestUpdateAndRemove:
    def test_update_quantity_recomputes_total(self, db_session, customer, food_f1, food_f2):
        service = CartService(db_session)
        service.add_item(customer.id, food_f1.id, 1)
        cart = service.add_item(customer.id, food_f2.id, 1)
        line_id = cart.items[0].id

        cart = service.update_item_quantity(customer.id, line_id, 3)

        assert cart.total == 3 * 500 + 300

    def test_update_to_zero_removes_line(self, db_session, customer, food_f1):
        service = CartService(db_session)
        cart = service.add_item(customer.id, food_f1.id, 2)
        line_id = cart.items[0].id

        cart = service.update_item_quantity(customer.id, line_id, 0)

        assert cart.items == []
        assert cart.total == 0
        assert db_session.get(CartItem, line_id) is None

    def test_remove_item(self, db_session, customer, food_f1, food_f2):
        service = CartService(db_session)
        service.add_item(customer.id, food_f1.id, 2)
        cart = service.add_item(customer.id, food_f2.id, 1)
        line_id = cart.items[0].id

        cart = service.remove_item(customer.id, line_id)

        assert len(cart.items) == 1
        assert cart.total == 300

    def test_foreign_line_access_denied(self, db_session, customer, other_customer, food_f1):
        """Should refuse to touch a line that lives in someone else's cart."""
        service = CartService(db_session)
        cart = service.add_item(customer.id, food_f1.id, 2)
        line_id = cart.items[0].id

        with pytest.raises(AccessDeniedError):
            service.remove_item(other_customer.id, line_id)
        with pytest.raises(AccessDeniedError):
            service.update_item_quantity(other_customer.id, line_id, 5)

        cart = service.find_by_customer(customer.id)
        assert cart.items[0].quantity == 2

    def test_unknown_line_not_found(self, db_session, customer):
        with pytest.raises(NotFoundError):
            CartService(db_session).remove_item(customer.id, 4242)


class TestClear:
    def test_clear_empties_cart(self, db_session, customer, food_f1):
        service = CartService(db_session)
        service.add_item(customer.id, food_f1.id, 2)

        cart = service.clear(customer.id)

        assert cart.items == []
        assert cart.total == 0

    def test_clear_empty_cart_is_noop(self, db_session, customer):
        cart = CartService(db_session).clear(customer.id)
        assert cart.total == 0

    def test_missing_cart_not_found(self, db_session, customer):
        db_session.delete(CartService(db_session).find_by_customer(customer.id))
        db_session.commit()

        with pytest.raises(NotFoundError):
            CartService(db_session).find_by_customer(customer.id)
