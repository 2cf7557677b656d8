"""Security utilities for JWT session tokens and password hashing."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from app.config import settings
from app.core.exceptions import InvalidTokenException, TokenExpiredException

logger = logging.getLogger(__name__)


# Password hashing context - supports PBKDF2 (primary) and bcrypt (legacy)
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")

# JWT settings
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = settings.ACCESS_TOKEN_EXPIRE_DAYS

# Verified against when the login email is unknown, so both failure paths cost one hash check
_DUMMY_HASH = pwd_context.hash("webnode-timing-equalizer")


class TokenClaims(BaseModel):
    """Identity claims embedded in a session token.

    Serialized with camelCase keys (``userId``, ``isAdmin``) inside the JWT.
    """

    user_id: int
    email: str
    name: str
    username: str
    is_admin: bool = False

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    @classmethod
    def from_user(cls, user: Any) -> "TokenClaims":
        return cls(
            user_id=user.id,
            email=user.email,
            name=user.name,
            username=user.username,
            is_admin=bool(user.is_admin),
        )


def get_password_hash(password: str) -> str:
    """Hash a password using PBKDF2 (primary) or bcrypt (fallback)."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a hashed password."""
    if not hashed_password:
        pwd_context.verify(plain_password, _DUMMY_HASH)
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Return False if the hash scheme is unsupported
        return False


def create_access_token(
    claims: TokenClaims, expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed session token.

    Args:
        claims: Identity claims to embed
        expires_delta: Custom expiration time. If None, uses default (7 days)

    Returns:
        Encoded JWT token

    Raises:
        ValueError: If SECRET_KEY is not configured
    """
    if not settings.SECRET_KEY:
        raise ValueError("SECRET_KEY environment variable is not set")

    to_encode: Dict[str, Any] = claims.model_dump(by_alias=True)
    to_encode["sub"] = str(claims.user_id)

    if expires_delta is None:
        expires_delta = timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> TokenClaims:
    """Decode and verify a session token.

    Args:
        token: JWT token string

    Returns:
        TokenClaims: Verified identity claims

    Raises:
        TokenExpiredException: If the token is past its expiry
        InvalidTokenException: If the signature or payload is invalid
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        raise TokenExpiredException() from e
    except JWTError as e:
        raise InvalidTokenException() from e

    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as e:
        logger.warning("[AUTH] Token payload is missing identity claims")
        raise InvalidTokenException() from e
