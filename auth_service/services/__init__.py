"""Business logic services."""

from auth_service.services.auth import AuthService
from auth_service.services.passwords import PasswordHasher
from auth_service.services.tokens import TOKEN_LIFETIME, TokenIssuer

__all__ = [
    "AuthService",
    "PasswordHasher",
    "TokenIssuer",
    "TOKEN_LIFETIME",
]
