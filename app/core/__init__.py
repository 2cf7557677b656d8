"""Core module exports."""

from .security import (
    TokenClaims,
    create_access_token,
    decode_token,
    get_password_hash,
    verify_password,
    ALGORITHM,
    ACCESS_TOKEN_EXPIRE_DAYS,
)

__all__ = [
    "TokenClaims",
    "create_access_token",
    "decode_token",
    "get_password_hash",
    "verify_password",
    "ALGORITHM",
    "ACCESS_TOKEN_EXPIRE_DAYS",
]
