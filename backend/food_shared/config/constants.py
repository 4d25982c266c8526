"""
Centralized constants for the backend application.

Usage:
    from food_shared.config.constants import Role, OrderStatus, ORDER_TRANSITIONS

    if principal.role == Role.ADMIN:
        ...

    if new_status in ORDER_TRANSITIONS[order.status]:
        ...
"""

from enum import Enum
from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Role(str, Enum):
    """
    Closed set of user roles.

    Values match the role strings stored in tokens and in the user table.
    Compare members to members (``role == Role.ADMIN``); coerce incoming
    strings with ``Role(value)``.
    """

    CUSTOMER = "ROLE_CUSTOMER"
    OWNER = "ROLE_RESTAURANT_OWNER"
    ADMIN = "ROLE_ADMIN"


# =============================================================================
# Order Status
# =============================================================================


class OrderStatus(str, Enum):
    """Order status values as persisted and exchanged with clients."""

    PENDING = "PENDIENTE"
    EN_PREPARACION = "EN_PREPARACION"
    EN_CAMINO = "EN_CAMINO"
    ENTREGADO = "ENTREGADO"
    CANCELADO = "CANCELADO"

    @classmethod
    def parse(cls, value: str) -> "OrderStatus | None":
        """
        Return the member for ``value`` or None.

        Accepts the wire value or the member name, case-insensitive, so
        ``"PENDING"`` and ``"pendiente"`` both resolve to ``PENDING``.
        """
        normalized = value.strip().upper()
        for member in cls:
            if normalized in (member.value, member.name):
                return member
        return None


class TransitionInitiator(str, Enum):
    """Which side of the order may request a given transition."""

    RESTAURANT = "restaurant"
    CUSTOMER = "customer"


# Valid order status transitions (from -> [allowed to states])
# PENDIENTE → EN_PREPARACION → EN_CAMINO → ENTREGADO, and PENDIENTE → CANCELADO
ORDER_TRANSITIONS: Final[dict[OrderStatus, list[OrderStatus]]] = {
    OrderStatus.PENDING: [OrderStatus.EN_PREPARACION, OrderStatus.CANCELADO],
    OrderStatus.EN_PREPARACION: [OrderStatus.EN_CAMINO],
    OrderStatus.EN_CAMINO: [OrderStatus.ENTREGADO],
    OrderStatus.ENTREGADO: [],  # Terminal state
    OrderStatus.CANCELADO: [],  # Terminal state
}

# Format: (from_status, to_status) -> initiator
ORDER_TRANSITION_INITIATORS: Final[dict[tuple[OrderStatus, OrderStatus], TransitionInitiator]] = {
    (OrderStatus.PENDING, OrderStatus.EN_PREPARACION): TransitionInitiator.RESTAURANT,
    (OrderStatus.EN_PREPARACION, OrderStatus.EN_CAMINO): TransitionInitiator.RESTAURANT,
    (OrderStatus.EN_CAMINO, OrderStatus.ENTREGADO): TransitionInitiator.RESTAURANT,
    # Only the customer who placed the order can cancel it
    (OrderStatus.PENDING, OrderStatus.CANCELADO): TransitionInitiator.CUSTOMER,
}

TERMINAL_ORDER_STATUSES: Final[frozenset[OrderStatus]] = frozenset(
    status for status, targets in ORDER_TRANSITIONS.items() if not targets
)


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # Quantity limits
    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 99

    # Price limits (minor currency units)
    MIN_PRICE: Final[int] = 0
    MAX_PRICE: Final[int] = 100_000_00

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 200
    MAX_DESCRIPTION_LENGTH: Final[int] = 2000
    MAX_URL_LENGTH: Final[int] = 2048
    MAX_SEARCH_TERM_LENGTH: Final[int] = 100
    MAX_CUSTOMIZATION_LENGTH: Final[int] = 100
    MAX_CUSTOMIZATIONS: Final[int] = 20
    MAX_IMAGES: Final[int] = 10


# =============================================================================
# Error Messages (Spanish)
# =============================================================================


class ErrorMessages:
    """Standardized error messages in Spanish."""

    # Auth errors
    NOT_AUTHENTICATED: Final[str] = "No autenticado"
    INVALID_TOKEN: Final[str] = "Token inválido"
    TOKEN_EXPIRED: Final[str] = "Token expirado"
    ACCESS_DENIED: Final[str] = "No tienes permiso para realizar esta acción sobre {resource}"
    CART_ITEM_ACCESS_DENIED: Final[str] = "No tienes permiso para modificar este ítem del carrito."
    ORDER_ACCESS_DENIED: Final[str] = "No tienes permiso para ver esta orden."

    # Business rule errors
    EMPTY_CART_CHECKOUT: Final[str] = "No se puede crear una orden desde un carrito vacío."
    ORDER_NOT_CANCELLABLE: Final[str] = "La orden no puede ser cancelada en estado {status}."
    INVALID_ORDER_STATUS: Final[str] = "Estado de orden inválido: {status}"
    DUPLICATE_FAVORITE: Final[str] = "Este restaurante ya está en tu lista de favoritos."
    CATEGORY_OTHER_RESTAURANT: Final[str] = "La categoría no pertenece a este restaurante."
    INGREDIENT_CATEGORY_OTHER_RESTAURANT: Final[str] = (
        "La categoría de ingredientes no pertenece a este restaurante."
    )
    OWNER_HAS_NO_RESTAURANT: Final[str] = "El usuario no tiene un restaurante registrado."
    OWNER_RESTAURANT_DELETED: Final[str] = "El restaurante de este usuario fue eliminado."
    CUSTOMER_ROLE_REQUIRED: Final[str] = "Solo los clientes pueden realizar esta acción."
    OWNER_ROLE_REQUIRED: Final[str] = "Solo los dueños de restaurante pueden realizar esta acción."
    ADMIN_SIGNUP_FORBIDDEN: Final[str] = "No se puede registrar una cuenta de administrador."
    CART_FOREIGN_FOOD: Final[str] = "El carrito contiene comidas de otro restaurante."
    CART_FOOD_REMOVED: Final[str] = "El carrito contiene comidas que ya no están en el menú."

    # Concurrency
    CONCURRENT_MODIFICATION: Final[str] = (
        "El recurso fue modificado por otra operación. Intenta nuevamente."
    )
