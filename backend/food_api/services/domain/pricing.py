"""
Monetary totals for carts and orders.

All amounts are integers in minor currency units. Aggregates are always
recomputed from the lines, never patched incrementally.
"""

import operator
from collections.abc import Iterable, Sequence
from typing import Protocol


class PricedLine(Protocol):
    quantity: int
    unit_price: int


class PricingEngine:
    def line_total(self, quantity: int, unit_price: int) -> int:
        """``quantity * unit_price`` in integer arithmetic."""
        quantity = _as_amount(quantity, "quantity")
        unit_price = _as_amount(unit_price, "unit_price")
        return quantity * unit_price

    def aggregate_total(self, items: Iterable[PricedLine]) -> int:
        return sum(self.line_total(item.quantity, item.unit_price) for item in items)

    def item_count(self, items: Sequence[PricedLine]) -> int:
        """Number of lines (not units)."""
        return len(items)

    def reprice(self, cart) -> int:
        """
        Recompute every line total of ``cart`` and its aggregate total.

        Returns the new total.
        """
        for item in cart.items:
            item.line_total = self.line_total(item.quantity, item.unit_price)
        cart.total = self.aggregate_total(cart.items)
        return cart.total


def _as_amount(value: int, name: str) -> int:
    # Rejects floats, Decimals and bools; money never leaves integer arithmetic
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, got bool")
    try:
        amount = operator.index(value)
    except TypeError:
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}") from None
    if amount < 0:
        raise ValueError(f"{name} must not be negative")
    return amount
