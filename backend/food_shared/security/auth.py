"""
Authentication utilities.

Tokens are HS256 JWTs carrying ``sub`` (user id), ``role`` and ``email``.
The signing secret, issuer and audience come from the Settings instance
the application factory stored on ``app.state``; nothing here reads
module-level configuration.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Any

import jwt
from fastapi import Depends, Header, Request

from food_shared.config.constants import ErrorMessages, Role
from food_shared.config.logging import get_logger
from food_shared.config.settings import Settings
from food_shared.utils.exceptions import UnauthorizedError

logger = get_logger(__name__)


# =============================================================================
# Principal
# =============================================================================


@dataclass(frozen=True)
class Principal:
    """The authenticated actor behind a request."""

    id: int
    role: Role
    email: str | None = None

    def __post_init__(self) -> None:
        # Coerce raw claim strings into the closed enum; unknown values raise ValueError
        if not isinstance(self.role, Role):
            object.__setattr__(self, "role", Role(self.role))

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> Principal:
        return cls(id=int(claims["sub"]), role=Role(claims["role"]), email=claims.get("email"))


# =============================================================================
# JWT Functions
# =============================================================================


def sign_jwt(
    payload: dict[str, Any],
    settings: Settings,
    ttl_seconds: int | None = None,
) -> str:
    """
    Sign a JWT token with the given payload.

    Args:
        payload: Claims to include in the token (sub, role, email).
        settings: Source of secret, issuer, audience and default lifetime.
        ttl_seconds: Token lifetime in seconds. Defaults to access token expiry.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": now,
        "exp": now + ttl_seconds,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, settings.jwt_secret, algorithm="HS256")


def sign_principal_token(principal: Principal, settings: Settings, ttl_seconds: int | None = None) -> str:
    return sign_jwt(
        {"sub": str(principal.id), "role": principal.role.value, "email": principal.email},
        settings,
        ttl_seconds=ttl_seconds,
    )


def verify_jwt(token: str, settings: Settings) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Raises:
        UnauthorizedError: If the token is invalid, expired or lacks required claims.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError(ErrorMessages.TOKEN_EXPIRED)
    except jwt.InvalidTokenError as e:
        # Log the actual error, return a generic message to the client
        raise UnauthorizedError(ErrorMessages.INVALID_TOKEN, error=str(e))

    if "sub" not in payload or "role" not in payload:
        raise UnauthorizedError(ErrorMessages.INVALID_TOKEN, reason="missing claims")

    try:
        int(payload["sub"])
    except (ValueError, TypeError):
        raise UnauthorizedError(ErrorMessages.INVALID_TOKEN, reason="malformed subject claim")

    try:
        Role(payload["role"])
    except ValueError:
        raise UnauthorizedError(ErrorMessages.INVALID_TOKEN, reason="unknown role claim")

    return payload


def get_bearer_token(authorization: str | None) -> str:
    """Extract bearer token from Authorization header."""
    if not authorization:
        raise UnauthorizedError(ErrorMessages.NOT_AUTHENTICATED)
    if not authorization.startswith("Bearer "):
        raise UnauthorizedError(
            "Formato de Authorization inválido. Se esperaba: Bearer <token>"
        )
    return authorization.split(" ", 1)[1].strip()


def get_app_settings(request: Request) -> Settings:
    """FastAPI dependency returning the Settings resolved at startup."""
    return request.app.state.settings


def current_principal(
    authorization: str | None = Header(default=None, alias="Authorization"),
    settings: Settings = Depends(get_app_settings),
) -> Principal:
    """
    FastAPI dependency resolving the authenticated Principal.

    Usage:
        @router.get("/api/cart")
        def get_cart(principal: Principal = Depends(current_principal)):
            ...
    """
    token = get_bearer_token(authorization)
    return Principal.from_claims(verify_jwt(token, settings))
