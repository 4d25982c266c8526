"""
Centralized HTTP exceptions for consistent error handling.

Every domain failure is one of three kinds:
    NotFoundError            - the referenced entity does not exist (404)
    AccessDeniedError        - the actor may not touch the resource (403)
    OperationNotAllowedError - a business rule forbids the operation (409)

Usage:
    from food_shared.utils.exceptions import NotFoundError, AccessDeniedError

    raise NotFoundError("Restaurante", restaurant_id)
    raise AccessDeniedError(actor_id=7, resource="Restaurante", resource_id=3)
    raise OperationNotAllowedError("No se puede crear una orden desde un carrito vacío.")
"""

from typing import Any

from fastapi import HTTPException, status

from food_shared.config.constants import ErrorMessages
from food_shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 401 Unauthorized Errors
# =============================================================================


class UnauthorizedError(AppException):
    """Missing, malformed or expired credentials (401)."""

    def __init__(self, detail: str = ErrorMessages.NOT_AUTHENTICATED, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            log_level="warning",
            headers={"WWW-Authenticate": "Bearer"},
            **log_context,
        )


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Comida", 123)
        raise NotFoundError("Carrito", customer_id=customer_id)
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} con ID {entity_id} no encontrado"
        else:
            detail = f"{entity} no encontrado"

        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 403 Forbidden Errors
# =============================================================================


class AccessDeniedError(AppException):
    """
    Authorization failure (403).

    Carries the actor and the resource it tried to touch so the denial
    can be audited from the log line alone.
    """

    def __init__(
        self,
        actor_id: int | None = None,
        resource: str | None = None,
        resource_id: int | str | None = None,
        detail: str | None = None,
        **log_context: Any,
    ):
        if detail is None:
            detail = ErrorMessages.ACCESS_DENIED.format(resource=resource or "este recurso")

        self.actor_id = actor_id
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            log_level="warning",
            actor_id=actor_id,
            resource=resource,
            resource_id=resource_id,
            **log_context,
        )


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409).

    Usage:
        raise ConflictError("El recurso fue modificado por otra operación")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class OperationNotAllowedError(ConflictError):
    """A business rule forbids the requested operation."""


class InvalidTransitionError(OperationNotAllowedError):
    """Invalid status transition."""

    def __init__(self, entity: str, from_status: str, to_status: str, **log_context: Any):
        detail = f"Transición inválida de '{from_status}' a '{to_status}' para {entity}"
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(detail, entity=entity, from_status=from_status, to_status=to_status, **log_context)


class DuplicateEntityError(ConflictError):
    """Entity already exists."""

    def __init__(self, entity: str, identifier: str | None = None, **log_context: Any):
        if identifier:
            detail = f"{entity} con identificador '{identifier}' ya existe"
        else:
            detail = f"{entity} ya existe"

        super().__init__(detail, entity=entity, identifier=identifier, **log_context)


class ConcurrentModificationError(ConflictError):
    """Another transaction updated the same row first (optimistic lock lost)."""

    def __init__(self, **log_context: Any):
        super().__init__(ErrorMessages.CONCURRENT_MODIFICATION, **log_context)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """Internal server error (500)."""

    def __init__(self, detail: str = "Error interno del servidor", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """Database operation failed."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Error de base de datos durante {operation}. Por favor intente de nuevo."
        super().__init__(detail, operation=operation, **log_context)
