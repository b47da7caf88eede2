"""Pydantic schemas for API requests and responses."""

from auth_service.schemas.auth import (
    AuthResponse,
    MessageResponse,
    ProfileUpdate,
    UserLogin,
    UserRegister,
    UserResponse,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "ProfileUpdate",
    "UserResponse",
    "AuthResponse",
    "MessageResponse",
]
