"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from auth_service.api.dependencies import get_auth_service, get_current_user
from auth_service.models.user import User
from auth_service.schemas.auth import (
    AuthResponse,
    MessageResponse,
    ProfileUpdate,
    UserLogin,
    UserRegister,
    UserResponse,
)
from auth_service.services.auth import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user."""
    service.register(user_data.name, user_data.email, user_data.password)
    return MessageResponse(message="User created successfully")


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    user, token = service.login(credentials.email, credentials.password)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Logout (client should discard token; it is not revoked server side)."""
    service.logout(current_user.id)
    return MessageResponse(message="Successfully logged out")


@router.get("/profile", response_model=UserResponse)
def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Get current user information."""
    return service.get_profile(current_user.id)


@router.put("/profile", response_model=UserResponse)
def update_profile(
    profile: ProfileUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Update the current user's name and email."""
    return service.update_profile(current_user.id, profile.name, profile.email)
