"""Pydantic schemas for user operations."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserRead(BaseModel):
    id: int
    username: str
    email: str
    avatar: str | None = None
    role: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserWithTreeCount(UserRead):
    trees_count: int = 0


class ProfileResponse(BaseModel):
    success: bool = True
    user: UserRead


class AvatarResponse(BaseModel):
    success: bool = True
    message: str = "Avatar updated"
    avatar: str


class UserListResponse(BaseModel):
    success: bool = True
    users: list[UserWithTreeCount]
