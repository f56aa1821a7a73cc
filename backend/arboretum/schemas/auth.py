"""Authentication-related schemas."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from arboretum.schemas.common import require_text

PASSWORD_MIN_LENGTH = 6


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=128)

    @field_validator("username", "email")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return require_text(value)


class LoginRequest(BaseModel):
    # Either the username or the email address.
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class IdentityRead(BaseModel):
    id: int
    username: str
    avatar: str | None = None
    role: str = "user"

    model_config = ConfigDict(from_attributes=True)


class AuthCheckResponse(BaseModel):
    loggedIn: bool
    user: IdentityRead | None = None
