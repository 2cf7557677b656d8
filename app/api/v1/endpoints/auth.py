"""Authentication endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_claims, get_db
from app.core.exceptions import (
    BadRequestException,
    DuplicateFieldException,
    InvalidCredentialsException,
)
from app.core.security import TokenClaims, create_access_token
from app.crud import crud_user
from app.schemas.user import (
    AuthResponse,
    RegisterResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
)
def register(
    user_in: UserCreate,
    db: Session = Depends(get_db),
) -> RegisterResponse:
    """
    Register a new user.

    Args:
        user_in: Email, password, name and username (format rules enforced by the schema)
        db: Database session

    Returns:
        RegisterResponse: Created user data

    Raises:
        DuplicateFieldException: 400 if email or username is already registered
    """
    if crud_user.get_by_email(db, user_in.email):
        raise DuplicateFieldException("email")

    if crud_user.get_by_username(db, user_in.username):
        raise DuplicateFieldException("username")

    try:
        db_user = crud_user.create_user(db, user_in=user_in)
    except IntegrityError:
        # Lost a race against a concurrent registration
        raise BadRequestException("Email or username is already in use")
    logger.info(f"User registered: id={db_user.id} username={db_user.username}")

    return RegisterResponse(user=UserResponse.model_validate(db_user))


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Login user",
)
def login(
    login_in: UserLogin,
    db: Session = Depends(get_db),
) -> AuthResponse:
    """
    Login with email and password.

    Returns the user and a session token valid for 7 days.

    Raises:
        InvalidCredentialsException: 401 for an unknown email or a wrong password
    """
    user = crud_user.authenticate(db, email=login_in.email, password=login_in.password)
    if not user:
        logger.info("[AUTH] Failed login attempt")
        raise InvalidCredentialsException()

    token = create_access_token(TokenClaims.from_user(user))
    logger.info(f"[AUTH] User logged in: id={user.id}")

    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.get(
    "/me",
    response_model=TokenClaims,
    status_code=status.HTTP_200_OK,
    summary="Get current token claims",
)
def get_me(
    claims: TokenClaims = Depends(get_current_claims),
) -> TokenClaims:
    """Return the identity claims carried by the caller's token."""
    return claims


__all__ = ["router"]
