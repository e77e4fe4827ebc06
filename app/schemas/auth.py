"""Schemas for signup, login and the current-user profile."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.schemas.ai import NonEmptyStr
from app.schemas.plan import CamelModel


class SignupRequest(CamelModel):
    email: NonEmptyStr = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    name: NonEmptyStr
    password: str = Field(min_length=8)


class LoginRequest(CamelModel):
    email: NonEmptyStr
    password: str = Field(min_length=1)


class UserProfile(CamelModel):
    """User as exposed to the client; never carries the password hash."""

    id: str
    email: str
    name: str
    total_tokens_used: int = 0
    daily_tokens_used: int = 0
    created_at: datetime | None = None
