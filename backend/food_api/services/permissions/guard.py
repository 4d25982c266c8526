"""
Ownership guard for restaurant-scoped mutations.

One AuthorizationGuard instance is created per request and injected into
every service that mutates a Restaurant, Category, Food, Ingredient or an
order's status. For nested resources the owner id passed in is the owning
restaurant's ``owner_id``, never the row's own id.
"""

from __future__ import annotations

from food_shared.config.constants import ErrorMessages, Role
from food_shared.security.auth import Principal
from food_shared.utils.exceptions import AccessDeniedError


class AuthorizationGuard:
    """
    Usage:
        guard = AuthorizationGuard()

        if guard.check(principal, restaurant.owner_id):
            ...

        guard.authorize(principal, restaurant.owner_id, resource="Restaurante", resource_id=restaurant.id)
    """

    def check(self, actor: Principal, owner_id: int | None) -> bool:
        """Pure predicate: admins always pass, otherwise the actor must be the owner."""
        if actor.role == Role.ADMIN:
            return True
        return owner_id is not None and actor.id == owner_id

    def authorize(
        self,
        actor: Principal,
        owner_id: int | None,
        resource: str,
        resource_id: int | str | None = None,
    ) -> None:
        """
        Raise AccessDeniedError unless ``check`` passes.

        Call before any state change so a denial leaves nothing to roll back.
        """
        if not self.check(actor, owner_id):
            raise AccessDeniedError(
                actor_id=actor.id,
                resource=resource,
                resource_id=resource_id,
                actor_role=actor.role.value,
            )

    def require_role(self, actor: Principal, *roles: Role) -> None:
        """Raise AccessDeniedError unless the actor holds one of ``roles`` (admins always pass)."""
        if actor.role == Role.ADMIN or actor.role in roles:
            return
        if roles == (Role.CUSTOMER,):
            detail = ErrorMessages.CUSTOMER_ROLE_REQUIRED
        elif roles == (Role.OWNER,):
            detail = ErrorMessages.OWNER_ROLE_REQUIRED
        else:
            detail = None
        raise AccessDeniedError(
            actor_id=actor.id,
            detail=detail,
            actor_role=actor.role.value,
            required_roles=[role.value for role in roles],
        )
