"""
MarkNotes Backend - User and Token Schemas
==========================================

What:  Request/response models for registration and login.
Why separate from the ORM model: the hashed password never leaves the server.
"""

import uuid
from datetime import datetime

from pydantic import Field, field_validator

from marknotes.schemas.common import ApiModel


class Credentials(ApiModel):
    """Body of POST /register and POST /login."""

    username: str = Field(min_length=3, max_length=50)
    # bcrypt only looks at the first 72 bytes
    password: str = Field(min_length=8, max_length=72)

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        stripped = v.strip()
        if len(stripped) < 3:
            raise ValueError("Username must be at least 3 characters")
        return stripped


class UserResponse(ApiModel):
    id: uuid.UUID
    username: str
    created_at: datetime


class RegisterResponse(ApiModel):
    """Returned by POST /register with HTTP 201."""

    user: UserResponse
    token: str = Field(description="Bearer token for the new account")


class TokenResponse(ApiModel):
    """Returned by POST /login."""

    token: str
    token_type: str = Field(default="bearer")
