"""Custom exceptions for the Webnode API.

Every exception is an ``HTTPException`` so it can be raised from any layer
and rendered by the application's error handler as ``{"error": detail}``.
"""

from fastapi import HTTPException, status


class UnauthorizedException(HTTPException):
    """Raised when a protected endpoint is called without a bearer token."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidTokenException(UnauthorizedException):
    """Raised when a bearer token fails signature or payload verification."""

    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail=detail)


class TokenExpiredException(InvalidTokenException):
    def __init__(self, detail: str = "Token expired"):
        super().__init__(detail=detail)


class InvalidCredentialsException(UnauthorizedException):
    """Raised on login failure.

    Used for both an unknown email and a wrong password so the response
    does not reveal whether an account exists.
    """

    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(detail=detail)


class ForbiddenException(HTTPException):
    def __init__(self, detail: str = "You do not have permission to perform this action"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class AdminProtectedException(ForbiddenException):
    """Raised when an admin tries to delete another admin account."""

    def __init__(self, detail: str = "Admin users cannot be deleted"):
        super().__init__(detail=detail)


class BadRequestException(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class DuplicateFieldException(BadRequestException):
    """Raised when a unique user field (email, username) is already taken."""

    def __init__(self, field: str):
        super().__init__(detail=f"This {field} is already in use")


class SelfFollowDeniedException(BadRequestException):
    def __init__(self, detail: str = "You cannot follow yourself"):
        super().__init__(detail=detail)


class NotFoundException(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


__all__ = [
    "UnauthorizedException",
    "InvalidTokenException",
    "TokenExpiredException",
    "InvalidCredentialsException",
    "ForbiddenException",
    "AdminProtectedException",
    "BadRequestException",
    "DuplicateFieldException",
    "SelfFollowDeniedException",
    "NotFoundException",
]
