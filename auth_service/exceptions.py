"""Error taxonomy for authentication and user-record operations.

Every error carries the HTTP status it maps to and a client-safe ``detail``
message. The API layer renders them as ``{"detail": ...}`` bodies, the same
shape FastAPI uses for ``HTTPException``.
"""

from fastapi import status


class AuthError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "Bad request"
    headers: dict[str, str] | None = None

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class DuplicateEmail(AuthError):
    """Registration attempted with an email held by an active user."""

    detail = "Email already exists"


class EmailInUse(AuthError):
    """Profile update attempted to take another active user's email."""

    detail = "Email already in use"


class NotFound(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "User not found"


class InvalidCredentials(AuthError):
    """Unknown email or wrong password; deliberately indistinguishable."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid credentials"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidToken(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid token"
    headers = {"WWW-Authenticate": "Bearer"}


class TokenExpired(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Token has expired"
    headers = {"WWW-Authenticate": "Bearer"}


class Unauthenticated(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "User not authenticated"
    headers = {"WWW-Authenticate": "Bearer"}


class UpdateFailed(AuthError):
    detail = "Failed to update profile"


class PasswordTooLong(AuthError):
    """Password exceeds what the hash function can take without truncation."""

    detail = "Password must be at most 72 bytes"


class Internal(AuthError):
    """Hashing, signing or other system failure. Never exposes the cause."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"
