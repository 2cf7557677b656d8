"""FastAPI dependency injection functions for authentication and database access."""

import logging
from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.core.security import TokenClaims, decode_token
from app.database import SessionLocal

logger = logging.getLogger(__name__)

# Bearer token scheme; missing headers are rejected by get_current_claims
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login",
    auto_error=False,
)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_claims(
    token: Optional[str] = Depends(oauth2_scheme),
) -> TokenClaims:
    """
    Dependency to get the verified identity claims of the caller.

    Stateless: the token alone decides, no database lookup is made.

    Args:
        token: Bearer token from the Authorization header

    Returns:
        TokenClaims: Verified claims

    Raises:
        UnauthorizedException: 401 if no bearer token was sent
        InvalidTokenException: 401 if the token is invalid or expired
    """
    if not token:
        logger.info("[AUTH] Request without bearer token rejected")
        raise UnauthorizedException()

    token_preview = token[:12] + "..." if len(token) > 12 else token
    try:
        claims = decode_token(token)
    except UnauthorizedException as e:
        logger.warning(f"[AUTH] Token {token_preview} rejected: {e.detail}")
        raise

    logger.debug(f"[AUTH] Authenticated user_id={claims.user_id} admin={claims.is_admin}")
    return claims


def require_admin(
    claims: TokenClaims = Depends(get_current_claims),
) -> TokenClaims:
    """
    Dependency that lets only admin tokens through.

    Raises:
        ForbiddenException: 403 if the caller is not an admin
    """
    if not claims.is_admin:
        logger.warning(f"[AUTH] user_id={claims.user_id} denied admin access")
        raise ForbiddenException(detail="Admin privileges are required")
    return claims


__all__ = [
    "oauth2_scheme",
    "get_db",
    "get_current_claims",
    "require_admin",
]
