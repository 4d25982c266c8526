"""
Users router: signup and profile.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from food_shared.config.settings import Settings
from food_shared.infrastructure.db import get_db
from food_shared.security.auth import (
    Principal,
    current_principal,
    get_app_settings,
    sign_principal_token,
)
from food_shared.utils.schemas import SignupRequest, SignupResponse, UserOutput
from food_api.services.domain import UserService
from food_api.services.projections import user_output


router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> SignupResponse:
    """
    Register a user and create their cart.

    Returns an access token for the new account.
    """
    user = UserService(db).register(body)
    token = sign_principal_token(
        Principal(id=user.id, role=user.role, email=user.email),
        settings,
    )
    return SignupResponse(access_token=token, user=user_output(user))


@router.get("/profile", response_model=UserOutput)
def get_profile(
    principal: Principal = Depends(current_principal),
    db: Session = Depends(get_db),
) -> UserOutput:
    return user_output(UserService(db).get_profile(principal.id))
