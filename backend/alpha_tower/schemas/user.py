"""
Alpha Tower Backend — User and Session Schemas
================================================

Security Note:
    No response model declares `password`; the hash never leaves the server.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from alpha_tower.config import Settings
from alpha_tower.models.user import User

# bcrypt only reads the first 72 bytes of a secret
MAX_PASSWORD_BYTES = 72


class UserBody(BaseModel):
    """Validated body of POST /users and PUT /users/{id}."""

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class SessionBody(BaseModel):
    """Validated body of POST /sessions."""

    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    avatar: Optional[str] = None
    avatar_url: Optional[str] = Field(default=None, description="Public URL of the avatar file")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User, settings: Settings) -> "UserResponse":
        avatar_url = None
        if user.avatar:
            avatar_url = f"{settings.app_api_url.rstrip('/')}/files/{user.avatar}"
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            avatar=user.avatar,
            avatar_url=avatar_url,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class SessionResponse(BaseModel):
    user: UserResponse
    token: str
