"""
Tests for JWT signing, verification and the Principal type.
"""

import jwt
import pytest

from food_shared.config.constants import ErrorMessages, Role
from food_shared.security.auth import (
    Principal,
    get_bearer_token,
    sign_jwt,
    sign_principal_token,
    verify_jwt,
)
from food_shared.utils.exceptions import UnauthorizedError


class TestPrincipal:
    def test_role_string_is_coerced(self):
        principal = Principal(id=3, role="ROLE_ADMIN")
        assert principal.role is Role.ADMIN

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError):
            Principal(id=3, role="ROLE_SUPERUSER")

    def test_from_claims(self):
        principal = Principal.from_claims({"sub": "12", "role": "ROLE_CUSTOMER", "email": "a@b.com"})
        assert principal == Principal(id=12, role=Role.CUSTOMER, email="a@b.com")


class TestTokens:
    def test_round_trip(self, test_settings):
        token = sign_principal_token(Principal(id=5, role=Role.OWNER, email="o@x.com"), test_settings)

        claims = verify_jwt(token, test_settings)

        assert claims["sub"] == "5"
        assert claims["role"] == Role.OWNER.value
        assert claims["iss"] == test_settings.jwt_issuer

    def test_expired_token(self, test_settings):
        token = sign_principal_token(Principal(id=5, role=Role.OWNER), test_settings, ttl_seconds=-60)

        with pytest.raises(UnauthorizedError) as exc_info:
            verify_jwt(token, test_settings)
        assert exc_info.value.detail == ErrorMessages.TOKEN_EXPIRED

    def test_wrong_secret(self, test_settings):
        other = test_settings.model_copy(update={"jwt_secret": "another-secret-of-sufficient-length!!"})
        token = sign_principal_token(Principal(id=5, role=Role.OWNER), other)

        with pytest.raises(UnauthorizedError):
            verify_jwt(token, test_settings)

    def test_unknown_role_claim(self, test_settings):
        token = sign_jwt({"sub": "5", "role": "ROLE_ROOT"}, test_settings)

        with pytest.raises(UnauthorizedError):
            verify_jwt(token, test_settings)

    def test_missing_subject(self, test_settings):
        token = sign_jwt({"role": Role.CUSTOMER.value}, test_settings)

        with pytest.raises(UnauthorizedError):
            verify_jwt(token, test_settings)

    def test_wrong_audience(self, test_settings):
        token = jwt.encode(
            {"sub": "1", "role": Role.CUSTOMER.value, "aud": "someone-else", "iss": test_settings.jwt_issuer},
            test_settings.jwt_secret,
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError):
            verify_jwt(token, test_settings)


class TestHeaderParsing:
    def test_bearer_token_extracted(self):
        assert get_bearer_token("Bearer abc.def") == "abc.def"

    @pytest.mark.parametrize("header", [None, "", "Token abc"])
    def test_bad_headers(self, header):
        with pytest.raises(UnauthorizedError):
            get_bearer_token(header)
