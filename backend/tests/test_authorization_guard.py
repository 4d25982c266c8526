"""
Tests for the AuthorizationGuard ownership checks.
"""

import pytest

from food_shared.config.constants import ErrorMessages, Role
from food_shared.security.auth import Principal
from food_shared.utils.exceptions import AccessDeniedError
from food_api.services.permissions import AuthorizationGuard


OWNER = Principal(id=10, role=Role.OWNER)
OTHER_OWNER = Principal(id=11, role=Role.OWNER)
ADMIN = Principal(id=1, role=Role.ADMIN)
CUSTOMER = Principal(id=20, role=Role.CUSTOMER)


class TestCheck:
    def test_owner_passes(self):
        """Should allow the actor whose id is the owner id."""
        assert AuthorizationGuard().check(OWNER, 10) is True

    def test_other_owner_fails(self):
        """Should reject an owner of a different restaurant."""
        assert AuthorizationGuard().check(OTHER_OWNER, 10) is False

    def test_admin_always_passes(self):
        """Should allow admins regardless of ownership."""
        guard = AuthorizationGuard()
        assert guard.check(ADMIN, 10) is True
        assert guard.check(ADMIN, None) is True

    def test_missing_owner_fails_for_non_admin(self):
        """Should reject non-admins when the resource has no owner."""
        assert AuthorizationGuard().check(OWNER, None) is False


class TestAuthorize:
    def test_denial_carries_actor_and_resource(self):
        """Should raise AccessDeniedError describing who touched what."""
        with pytest.raises(AccessDeniedError) as exc_info:
            AuthorizationGuard().authorize(OTHER_OWNER, 10, resource="Restaurante", resource_id=3)

        error = exc_info.value
        assert error.status_code == 403
        assert error.actor_id == OTHER_OWNER.id
        assert error.resource == "Restaurante"
        assert error.resource_id == 3

    def test_owner_is_authorized(self):
        AuthorizationGuard().authorize(OWNER, 10, resource="Restaurante", resource_id=3)


class TestRequireRole:
    def test_customer_required(self):
        """Should reject an owner from a customer-only action."""
        with pytest.raises(AccessDeniedError) as exc_info:
            AuthorizationGuard().require_role(OWNER, Role.CUSTOMER)
        assert exc_info.value.detail == ErrorMessages.CUSTOMER_ROLE_REQUIRED

    def test_owner_required(self):
        with pytest.raises(AccessDeniedError) as exc_info:
            AuthorizationGuard().require_role(CUSTOMER, Role.OWNER)
        assert exc_info.value.detail == ErrorMessages.OWNER_ROLE_REQUIRED

    def test_admin_passes_any_role(self):
        guard = AuthorizationGuard()
        guard.require_role(ADMIN, Role.OWNER)
        guard.require_role(ADMIN, Role.CUSTOMER)
