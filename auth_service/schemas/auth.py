"""Authentication schemas."""

from datetime import datetime
from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from auth_service.services.passwords import MAX_PASSWORD_BYTES, password_too_long


def check_email(value: str) -> str:
    """Validate email syntax but return the address exactly as sent.

    Emails are matched case-sensitively, so the normalized form from
    ``email_validator`` (lower-cased domain) is discarded.
    """
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from None
    return value


Email = Annotated[str, Field(max_length=255), AfterValidator(check_email)]


class UserRegister(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=255)
    email: Email
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("password")
    @classmethod
    def password_fits_hash(cls, value: str) -> str:
        if password_too_long(value):
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class UserLogin(BaseModel):
    """User login request."""

    email: Email
    password: str = Field(..., min_length=1, max_length=128)


class ProfileUpdate(BaseModel):
    """Profile update request."""

    name: str = Field(..., min_length=1, max_length=255)
    email: Email


class UserResponse(BaseModel):
    """User information response. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthResponse(BaseModel):
    """Login response with token and user info."""

    token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
